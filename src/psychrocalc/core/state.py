"""State types for psychrometric resolution.

This module defines the values that flow through a calculation:

- InputKind: Which pair of quantities was measured
- InputSpec: Measured pair plus altitude, as supplied by the caller
- AirState: The resolved eight-property moist-air state
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from psychrocalc.core.errors import InvalidInputKindError
from psychrocalc.physics.constants import (
    ENTHALPY_DECIMALS,
    HUMIDITY_RATIO_DECIMALS,
    PRESSURE_DECIMALS,
    RELATIVE_HUMIDITY_DECIMALS,
    SPECIFIC_VOLUME_DECIMALS,
    TEMPERATURE_DECIMALS,
    VAPOR_PRESSURE_DECIMALS,
)


class InputKind(str, Enum):
    """Supported pairs of measured quantities."""

    DBT_WBT = "dbt_wbt"
    DBT_RH = "dbt_rh"
    DBT_DPT = "dbt_dpt"
    WBT_RH = "wbt_rh"

    @classmethod
    def parse(cls, value: InputKind | str) -> InputKind:
        """Look up an input kind by its tag.

        Args:
            value: Kind or exact tag string.

        Returns:
            The matching InputKind.

        Raises:
            InvalidInputKindError: If the tag is not recognized.
        """
        if isinstance(value, InputKind):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputKindError(value) from None

    @property
    def labels(self) -> tuple[str, str]:
        """Human-readable labels for value1 and value2."""
        return _KIND_LABELS[self]


_KIND_LABELS: dict[InputKind, tuple[str, str]] = {
    InputKind.DBT_WBT: ("Dry Bulb Temperature (°C)", "Wet Bulb Temperature (°C)"),
    InputKind.DBT_RH: ("Dry Bulb Temperature (°C)", "Relative Humidity (%)"),
    InputKind.DBT_DPT: ("Dry Bulb Temperature (°C)", "Dew Point Temperature (°C)"),
    InputKind.WBT_RH: ("Wet Bulb Temperature (°C)", "Relative Humidity (%)"),
}


@dataclass(frozen=True)
class InputSpec:
    """A single calculation request.

    Attributes:
        kind: Which pair of quantities value1 and value2 hold.
        value1: First measured value (a temperature in C).
        value2: Second measured value (temperature in C or RH in %).
        altitude: Altitude in meters, determines ambient pressure.
    """

    kind: InputKind
    value1: float
    value2: float
    altitude: float = 0.0

    @classmethod
    def create(
        cls,
        kind: InputKind | str,
        value1: float,
        value2: float,
        altitude: float = 0.0,
    ) -> InputSpec:
        """Build a spec, validating the kind tag.

        Raises:
            InvalidInputKindError: If kind is not a supported tag.
        """
        return cls(
            kind=InputKind.parse(kind),
            value1=float(value1),
            value2=float(value2),
            altitude=float(altitude),
        )


def round_half_up(value: float, decimals: int) -> float:
    """Round the exact binary value of a float half away from zero.

    Matches JavaScript ``Number.prototype.toFixed`` followed by
    ``parseFloat``, which is how the calculator formats results. Python's
    built-in ``round`` rounds exact ties to even and would differ on values
    such as 0.25.

    Non-finite values are returned unchanged.

    Args:
        value: Value to round.
        decimals: Number of decimal places.

    Returns:
        Rounded value.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    rounded = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    # toFixed never produces negative zero once parsed back.
    return rounded + 0.0


@dataclass(frozen=True)
class AirState:
    """Resolved thermodynamic state of moist air.

    Attributes:
        dbt: Dry-bulb temperature in C.
        wbt: Wet-bulb temperature in C.
        rh: Relative humidity as percentage (0-100).
        dpt: Dew point temperature in C.
        humidity_ratio: Humidity ratio in kg_water/kg_dry_air (never negative).
        enthalpy: Specific enthalpy in kJ/kg_dry_air.
        specific_volume: Specific volume in m3/kg_dry_air.
        vapor_pressure: Partial pressure of water vapor in kPa.
        pressure: Atmospheric pressure used for the calculation in kPa.
        converged: False if an iterative solve did not converge or its
            result was replaced by a fallback estimate.
        warnings: Human-readable notes about solver behavior.
    """

    dbt: float
    wbt: float
    rh: float
    dpt: float
    humidity_ratio: float
    enthalpy: float
    specific_volume: float
    vapor_pressure: float
    pressure: float
    converged: bool = True
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def rounded(self) -> AirState:
        """Return a copy rounded to the calculator's output precision.

        Temperatures, RH and enthalpy 1 decimal; humidity ratio 4; specific
        volume 3; vapor pressure 2.
        """
        return AirState(
            dbt=round_half_up(self.dbt, TEMPERATURE_DECIMALS),
            wbt=round_half_up(self.wbt, TEMPERATURE_DECIMALS),
            rh=round_half_up(self.rh, RELATIVE_HUMIDITY_DECIMALS),
            dpt=round_half_up(self.dpt, TEMPERATURE_DECIMALS),
            humidity_ratio=round_half_up(self.humidity_ratio, HUMIDITY_RATIO_DECIMALS),
            enthalpy=round_half_up(self.enthalpy, ENTHALPY_DECIMALS),
            specific_volume=round_half_up(
                self.specific_volume, SPECIFIC_VOLUME_DECIMALS
            ),
            vapor_pressure=round_half_up(self.vapor_pressure, VAPOR_PRESSURE_DECIMALS),
            pressure=round_half_up(self.pressure, PRESSURE_DECIMALS),
            converged=self.converged,
            warnings=self.warnings,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for serialization."""
        data = asdict(self)
        data["warnings"] = list(self.warnings)
        return data
