"""Physical constants and correlation coefficients for moist-air calculations.

Reference: ASHRAE Handbook-Fundamentals (2021), Chapter 1

Units follow the calculator conventions rather than strict SI:
- Temperature: °C
- Pressure: kPa
- Humidity ratio: kg_water / kg_dry_air
- Enthalpy: kJ / kg_dry_air
- Specific volume: m³ / kg_dry_air
"""

from typing import Final

# =============================================================================
# Gas Properties
# =============================================================================

#: Gas constant for dry air (J/(kg·K))
#: R_air = R_universal / M_air = 8314.462 / 28.966
GAS_CONSTANT_DRY_AIR: Final[float] = 287.055

#: Ratio of molecular weights of water vapor and dry air (dimensionless)
#: ASHRAE Handbook-Fundamentals, Chapter 1, Equation 22
MW_RATIO: Final[float] = 0.621945

# =============================================================================
# Thermal Properties
# =============================================================================

#: Specific heat of dry air at constant pressure (J/(kg·K))
C_P_DRY_AIR: Final[float] = 1006.0

#: Specific heat of water vapor at constant pressure (kJ/(kg·K))
C_P_WATER_VAPOR_KJ: Final[float] = 1.86

#: Latent heat of vaporization at 0°C (J/kg)
LATENT_HEAT_VAPORIZATION_0C: Final[float] = 2501000.0

#: Joule to kilojoule conversion
JOULE_TO_KILOJOULE: Final[float] = 0.001

# =============================================================================
# Antoine Equation (water, 1°C to 100°C)
# =============================================================================
# log10(P_mmHg) = A - B / (C + T)

ANTOINE_A: Final[float] = 8.07131
ANTOINE_B: Final[float] = 1730.63
ANTOINE_C: Final[float] = 233.426

#: Millimeters of mercury to kilopascal
MMHG_TO_KPA: Final[float] = 0.133322

# =============================================================================
# Wet-Bulb Psychrometric Approximation
# =============================================================================
# W = [(1093 - 0.556*t_wb)*W_s - 0.240*(t_db - t_wb)] / (1093 + 0.444*t_db - t_wb)
# Empirical coefficients, reproduced as-is.

WET_BULB_COEF_BASE: Final[float] = 1093.0
WET_BULB_COEF_WB: Final[float] = 0.556
WET_BULB_COEF_DEPRESSION: Final[float] = 0.240
WET_BULB_COEF_DB: Final[float] = 0.444

# =============================================================================
# Standard Atmosphere
# =============================================================================

#: Standard atmospheric pressure at sea level (kPa)
STANDARD_PRESSURE: Final[float] = 101.325

#: Standard temperature at sea level (K)
STANDARD_TEMPERATURE_K: Final[float] = 288.15

#: Tropospheric temperature lapse rate (K/m)
LAPSE_RATE: Final[float] = 0.0065

#: Exponent g*M/(R*L) of the barometric formula
PRESSURE_EXPONENT: Final[float] = 5.255

#: Offset between Celsius and Kelvin
KELVIN_OFFSET: Final[float] = 273.15

#: Absolute zero (°C)
ABSOLUTE_ZERO_C: Final[float] = -273.15

# =============================================================================
# Output Precision (decimal places)
# =============================================================================

TEMPERATURE_DECIMALS: Final[int] = 1
RELATIVE_HUMIDITY_DECIMALS: Final[int] = 1
HUMIDITY_RATIO_DECIMALS: Final[int] = 4
ENTHALPY_DECIMALS: Final[int] = 1
SPECIFIC_VOLUME_DECIMALS: Final[int] = 3
VAPOR_PRESSURE_DECIMALS: Final[int] = 2
PRESSURE_DECIMALS: Final[int] = 3


def celsius_to_kelvin(t_celsius: float) -> float:
    """Convert temperature from Celsius to Kelvin.

    Args:
        t_celsius: Temperature in degrees Celsius.

    Returns:
        Temperature in Kelvin.
    """
    return t_celsius + KELVIN_OFFSET
