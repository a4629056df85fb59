"""Physics module for psychrometric calculations.

This module provides the correlations and numerical solvers:
- Saturation pressure (Antoine equation) and standard-atmosphere pressure
- Humidity ratio, relative humidity, dew point, enthalpy, specific volume
- Iterative solvers for wet-bulb and dry-bulb temperatures

Temperatures are in C, pressures in kPa, humidity ratio in kg/kg dry air.
"""

from psychrocalc.physics.constants import (
    ANTOINE_A,
    ANTOINE_B,
    ANTOINE_C,
    MW_RATIO,
    STANDARD_PRESSURE,
)
from psychrocalc.physics.psychrometrics import (
    barometric_pressure,
    dew_point,
    enthalpy,
    humidity_ratio_from_dew_point,
    humidity_ratio_from_relative_humidity,
    humidity_ratio_from_wet_bulb,
    relative_humidity,
    relative_humidity_from_dew_point,
    saturated_vapor_pressure,
    specific_volume,
    vapor_pressure,
)
from psychrocalc.physics.solvers import (
    FixedPointSolver,
    NewtonSolver,
    SolverResult,
    dry_bulb_from_wet_bulb,
    wet_bulb_from_dew_point,
    wet_bulb_from_relative_humidity,
)

__all__ = [
    # Constants
    "ANTOINE_A",
    "ANTOINE_B",
    "ANTOINE_C",
    "MW_RATIO",
    "STANDARD_PRESSURE",
    # Psychrometrics
    "saturated_vapor_pressure",
    "barometric_pressure",
    "humidity_ratio_from_wet_bulb",
    "humidity_ratio_from_relative_humidity",
    "humidity_ratio_from_dew_point",
    "relative_humidity",
    "relative_humidity_from_dew_point",
    "dew_point",
    "vapor_pressure",
    "enthalpy",
    "specific_volume",
    # Solvers
    "SolverResult",
    "FixedPointSolver",
    "NewtonSolver",
    "wet_bulb_from_relative_humidity",
    "wet_bulb_from_dew_point",
    "dry_bulb_from_wet_bulb",
]
