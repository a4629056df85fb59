"""Closed-form psychrometric relations.

Reference: ASHRAE Handbook-Fundamentals (2021), Chapter 1

This module implements the direct (non-iterative) moist-air relations used
by the property resolver. Units:
- Temperature: C
- Pressure: kPa
- Humidity ratio: kg_water / kg_dry_air

Key equations implemented:
- Saturation pressure (Antoine equation)
- Barometric pressure from altitude (standard atmosphere)
- Humidity ratio from wet-bulb, relative humidity or dew point
- Relative humidity and dew point from humidity ratio
- Enthalpy, specific volume and vapor partial pressure of moist air

Every function is pure. Relative humidity results are clamped to [0, 100];
temperatures are never clamped.
"""

from __future__ import annotations

import math

from psychrocalc.core.errors import NumericDomainError
from psychrocalc.physics.constants import (
    ANTOINE_A,
    ANTOINE_B,
    ANTOINE_C,
    C_P_DRY_AIR,
    C_P_WATER_VAPOR_KJ,
    GAS_CONSTANT_DRY_AIR,
    JOULE_TO_KILOJOULE,
    LAPSE_RATE,
    LATENT_HEAT_VAPORIZATION_0C,
    MMHG_TO_KPA,
    MW_RATIO,
    PRESSURE_EXPONENT,
    STANDARD_PRESSURE,
    STANDARD_TEMPERATURE_K,
    WET_BULB_COEF_BASE,
    WET_BULB_COEF_DB,
    WET_BULB_COEF_DEPRESSION,
    WET_BULB_COEF_WB,
    celsius_to_kelvin,
)


def saturated_vapor_pressure(t: float) -> float:
    """Calculate saturation vapor pressure over water using the Antoine equation.

    log10(P_mmHg) = A - B / (C + T), with A=8.07131, B=1730.63, C=233.426.

    The coefficients were fitted between 1C and 100C. Outside that range the
    correlation is extrapolated without error, with reduced accuracy (for
    example over ice below 0C). The pole of the correlation is T = -233.426C.

    Args:
        t: Temperature in C.

    Returns:
        Saturation vapor pressure in kPa.

    Raises:
        NumericDomainError: If the result overflows near the pole.

    Examples:
        >>> saturated_vapor_pressure(100.0)
        101.3...
        >>> saturated_vapor_pressure(20.0)
        2.3...
    """
    try:
        log_p = ANTOINE_A - ANTOINE_B / (ANTOINE_C + t)
        return 10.0**log_p * MMHG_TO_KPA
    except (OverflowError, ZeroDivisionError) as e:
        msg = f"Temperature {t}C is too close to the pole of the Antoine equation"
        raise NumericDomainError(msg) from e


def barometric_pressure(altitude: float) -> float:
    """Calculate atmospheric pressure at altitude from the standard atmosphere.

    P = 101.325 * (1 - 0.0065*h / 288.15) ** 5.255

    The model degenerates towards zero pressure near 44 330 m. Callers are
    expected to validate altitude before calling.

    Args:
        altitude: Altitude above sea level in meters.

    Returns:
        Atmospheric pressure in kPa.

    Raises:
        NumericDomainError: If the altitude lies above the top of the model,
            where the pressure base becomes negative.

    Examples:
        >>> barometric_pressure(0.0)
        101.325
        >>> barometric_pressure(1500.0)
        84.5...
    """
    base = 1 - (LAPSE_RATE * altitude) / STANDARD_TEMPERATURE_K
    if base < 0:
        msg = f"Altitude {altitude} m is above the standard atmosphere model"
        raise NumericDomainError(msg)
    return STANDARD_PRESSURE * math.pow(base, PRESSURE_EXPONENT)


def _clamp_percent(rh: float) -> float:
    # NaN passes through unclamped.
    if rh < 0.0:
        return 0.0
    if rh > 100.0:
        return 100.0
    return rh


def _humidity_ratio_from_vapor_pressure(p_w: float, p: float) -> float:
    """W = 0.621945 * p_w / (p - p_w)."""
    if p - p_w <= 0:
        msg = f"Vapor pressure {p_w:.4g} kPa is not below total pressure {p:.4g} kPa"
        raise NumericDomainError(msg)
    return MW_RATIO * p_w / (p - p_w)


def saturation_humidity_ratio(t: float, p: float = STANDARD_PRESSURE) -> float:
    """Calculate humidity ratio of saturated air.

    Args:
        t: Temperature in C.
        p: Total atmospheric pressure in kPa.

    Returns:
        Saturation humidity ratio in kg_water/kg_dry_air.

    Raises:
        NumericDomainError: If saturation pressure reaches total pressure.
    """
    return _humidity_ratio_from_vapor_pressure(saturated_vapor_pressure(t), p)


def humidity_ratio_from_wet_bulb(
    t_db: float,
    t_wb: float,
    p: float = STANDARD_PRESSURE,
) -> float:
    """Calculate humidity ratio from dry-bulb and wet-bulb temperatures.

    Uses the empirical psychrometric approximation

        W = [(1093 - 0.556*t_wb)*W_s - 0.240*(t_db - t_wb)] / (1093 + 0.444*t_db - t_wb)

    where W_s is the saturation humidity ratio at the wet-bulb temperature.
    This is an approximation, not exact thermodynamics; its coefficients are
    reproduced exactly for output parity.

    The result is not floored and may be negative for very large wet-bulb
    depressions.

    Args:
        t_db: Dry-bulb temperature in C.
        t_wb: Wet-bulb temperature in C.
        p: Total atmospheric pressure in kPa.

    Returns:
        Humidity ratio in kg_water/kg_dry_air.

    Raises:
        NumericDomainError: If saturation pressure at wet-bulb reaches total pressure.
    """
    w_s_wb = saturation_humidity_ratio(t_wb, p)

    numerator = (
        WET_BULB_COEF_BASE - WET_BULB_COEF_WB * t_wb
    ) * w_s_wb - WET_BULB_COEF_DEPRESSION * (t_db - t_wb)
    denominator = WET_BULB_COEF_BASE + WET_BULB_COEF_DB * t_db - t_wb

    return numerator / denominator


def humidity_ratio_from_relative_humidity(
    t: float,
    rh: float,
    p: float = STANDARD_PRESSURE,
) -> float:
    """Calculate humidity ratio from temperature and relative humidity.

    ASHRAE Handbook-Fundamentals, Chapter 1, Equation 22.

    Args:
        t: Dry-bulb temperature in C.
        rh: Relative humidity as percentage (0-100).
        p: Total atmospheric pressure in kPa.

    Returns:
        Humidity ratio in kg_water/kg_dry_air.

    Examples:
        >>> humidity_ratio_from_relative_humidity(20.0, 50.0)
        0.0072...
    """
    p_w = (rh / 100.0) * saturated_vapor_pressure(t)
    return _humidity_ratio_from_vapor_pressure(p_w, p)


def humidity_ratio_from_dew_point(
    t_dp: float,
    p: float = STANDARD_PRESSURE,
) -> float:
    """Calculate humidity ratio from dew point temperature.

    Args:
        t_dp: Dew point temperature in C.
        p: Total atmospheric pressure in kPa.

    Returns:
        Humidity ratio in kg_water/kg_dry_air.
    """
    return saturation_humidity_ratio(t_dp, p)


def vapor_pressure(w: float, p: float = STANDARD_PRESSURE) -> float:
    """Calculate partial pressure of water vapor from humidity ratio.

    P_w = W * P / (0.621945 + W)

    Args:
        w: Humidity ratio in kg_water/kg_dry_air.
        p: Total atmospheric pressure in kPa.

    Returns:
        Partial pressure of water vapor in kPa.
    """
    return w * p / (MW_RATIO + w)


def relative_humidity(
    t: float,
    w: float,
    p: float = STANDARD_PRESSURE,
) -> float:
    """Calculate relative humidity from temperature and humidity ratio.

    Args:
        t: Dry-bulb temperature in C.
        w: Humidity ratio in kg_water/kg_dry_air.
        p: Total atmospheric pressure in kPa.

    Returns:
        Relative humidity as percentage, clamped to [0, 100].
    """
    p_ws = saturated_vapor_pressure(t)
    p_w = vapor_pressure(w, p)

    rh = 100.0 * p_w / p_ws

    return _clamp_percent(rh)


def relative_humidity_from_dew_point(t: float, t_dp: float) -> float:
    """Calculate relative humidity from dry-bulb and dew point temperatures.

    Args:
        t: Dry-bulb temperature in C.
        t_dp: Dew point temperature in C.

    Returns:
        Relative humidity as percentage, clamped to [0, 100].
    """
    rh = 100.0 * saturated_vapor_pressure(t_dp) / saturated_vapor_pressure(t)
    return _clamp_percent(rh)


def dew_point(w: float, p: float = STANDARD_PRESSURE) -> float:
    """Calculate dew point temperature from humidity ratio.

    Inverts the Antoine equation on the vapor partial pressure:
    T = B / (A - log10(P_w / 0.133322)) - C

    Dry air (zero vapor pressure) maps to the limit of the correlation,
    -233.426C.

    Args:
        w: Humidity ratio in kg_water/kg_dry_air.
        p: Total atmospheric pressure in kPa.

    Returns:
        Dew point temperature in C.

    Raises:
        NumericDomainError: If the humidity ratio yields a negative vapor pressure.
    """
    p_w = vapor_pressure(w, p)

    if p_w < 0:
        msg = f"Humidity ratio {w:.6g} gives negative vapor pressure {p_w:.4g} kPa"
        raise NumericDomainError(msg)
    if p_w == 0:
        return -ANTOINE_C

    log_p = math.log10(p_w / MMHG_TO_KPA)
    return ANTOINE_B / (ANTOINE_A - log_p) - ANTOINE_C


def enthalpy(t: float, w: float) -> float:
    """Calculate specific enthalpy of moist air.

    ASHRAE Handbook-Fundamentals, Chapter 1, Equation 32.

    h = 1.006*t + w*(2501 + 1.86*t), reference state dry air and liquid
    water at 0C.

    Args:
        t: Dry-bulb temperature in C.
        w: Humidity ratio in kg_water/kg_dry_air.

    Returns:
        Specific enthalpy in kJ/kg_dry_air.

    Examples:
        >>> enthalpy(20.0, 0.0074)
        38.9...
    """
    latent_kj = LATENT_HEAT_VAPORIZATION_0C * JOULE_TO_KILOJOULE
    return (C_P_DRY_AIR * JOULE_TO_KILOJOULE) * t + w * (
        latent_kj + C_P_WATER_VAPOR_KJ * t
    )


def specific_volume(
    t: float,
    w: float,
    p: float = STANDARD_PRESSURE,
) -> float:
    """Calculate specific volume of moist air per unit mass of dry air.

    v = R_air * T / (p - p_w), with the dry-air partial pressure converted
    from kPa to Pa.

    Args:
        t: Dry-bulb temperature in C.
        w: Humidity ratio in kg_water/kg_dry_air.
        p: Total atmospheric pressure in kPa.

    Returns:
        Specific volume in m3/kg_dry_air.
    """
    t_k = celsius_to_kelvin(t)
    p_dry = p - vapor_pressure(w, p)

    return GAS_CONSTANT_DRY_AIR * t_k / (p_dry * 1000)
