"""Caller-side sanity checks for calculation inputs.

The resolver itself performs no range validation. These checks reproduce
the calculator's form validation (single calculations) and batch file
validation, and are applied before inputs reach the resolver.

Checks return messages instead of raising so that callers can report every
problem at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from psychrocalc.core.config import ValidationConfig
from psychrocalc.core.state import InputKind

_VALID_KINDS = ", ".join(k.value for k in InputKind)


@dataclass
class ValidationReport:
    """Errors and warnings collected during validation.

    Attributes:
        errors: Problems that prevent processing.
        warnings: Problems worth reporting that do not block processing.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no errors were found."""
        return not self.errors

    def extend(self, other: ValidationReport) -> None:
        """Append another report's messages to this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


def _outside(value: float, low: float, high: float) -> bool:
    return value < low or value > high


def validate_single(
    kind: InputKind | str,
    value1: float,
    value2: float,
    altitude: float,
    config: ValidationConfig | None = None,
) -> list[str]:
    """Validate inputs of an interactive single calculation.

    Args:
        kind: Input kind tag.
        value1: First measured value.
        value2: Second measured value.
        altitude: Altitude in meters.
        config: Validation limits.

    Returns:
        List of error messages (empty when valid).
    """
    cfg = config or ValidationConfig()

    if any(math.isnan(v) for v in (value1, value2, altitude)):
        return ["Please enter valid numbers for all fields."]

    try:
        kind = InputKind.parse(kind)
    except ValueError as e:
        return [str(e)]

    t_min, t_max = cfg.temperature_min, cfg.temperature_max
    t_range = f"between {t_min:g}°C and {t_max:g}°C"
    label1, label2 = (
        label.split(" (")[0].capitalize() for label in kind.labels
    )
    errors: list[str] = []

    if kind in (InputKind.DBT_WBT, InputKind.DBT_DPT) and value2 > value1:
        errors.append(
            f"{label2} cannot be greater than dry bulb temperature."
        )
    if kind in (InputKind.DBT_RH, InputKind.WBT_RH) and _outside(value2, 0, 100):
        errors.append("Relative humidity must be between 0% and 100%.")
    if _outside(value1, t_min, t_max):
        errors.append(f"{label1} must be {t_range}.")
    if kind in (InputKind.DBT_WBT, InputKind.DBT_DPT) and _outside(
        value2, t_min, t_max
    ):
        errors.append(f"{label2} must be {t_range}.")

    if _outside(altitude, cfg.altitude_min, cfg.altitude_max):
        errors.append(
            f"Altitude must be between {cfg.altitude_min:,.0f}m "
            f"and {cfg.altitude_max:,.0f}m."
        )

    return errors


def validate_row(
    row_number: int,
    kind: str | None,
    value1: float,
    value2: float,
    altitude: float,
    config: ValidationConfig | None = None,
) -> ValidationReport:
    """Validate one row of a batch input file.

    Args:
        row_number: Row number used in messages (header is row 1).
        kind: Raw input kind tag, or None if the column was empty.
        value1: First value (NaN if unparseable).
        value2: Second value (NaN if unparseable).
        altitude: Altitude in meters (NaN if unparseable).
        config: Validation limits.

    Returns:
        Report with the row's errors and warnings.
    """
    cfg = config or ValidationConfig()
    report = ValidationReport()
    prefix = f"Row {row_number}:"

    kind_ok = False
    if not kind:
        report.errors.append(f"{prefix} Missing InputType")
    elif kind not in {k.value for k in InputKind}:
        if kind.lower() in {k.value for k in InputKind}:
            report.warnings.append(
                f"{prefix} InputType '{kind}' should be lowercase. "
                f"Consider using '{kind.lower()}'."
            )
        report.errors.append(
            f"{prefix} Invalid InputType '{kind}'. Must be one of: {_VALID_KINDS}"
        )
    else:
        kind_ok = True

    if math.isnan(value1):
        report.errors.append(f"{prefix} Invalid Value1 - must be a number")
    elif value1 < cfg.absolute_zero:
        report.errors.append(
            f"{prefix} Value1 cannot be below absolute zero ({cfg.absolute_zero}°C)"
        )
    elif abs(value1) > cfg.extreme_temperature_warning:
        report.warnings.append(
            f"{prefix} Value1 ({value1:g}°C) is extremely high. Please verify."
        )

    if math.isnan(value2):
        report.errors.append(f"{prefix} Invalid Value2 - must be a number")

    if math.isnan(altitude):
        report.errors.append(f"{prefix} Invalid Altitude - must be a number")
    elif altitude < cfg.batch_altitude_min:
        report.errors.append(
            f"{prefix} Altitude cannot be below {cfg.batch_altitude_min:,.0f} meters"
        )
    elif altitude > cfg.batch_altitude_max:
        report.errors.append(
            f"{prefix} Altitude exceeds maximum supported "
            f"({cfg.batch_altitude_max:,.0f} meters)"
        )

    if kind_ok and not (math.isnan(value1) or math.isnan(value2)):
        report.extend(_validate_pair(prefix, InputKind(kind), value1, value2, cfg))

    return report


def _validate_pair(
    prefix: str,
    kind: InputKind,
    value1: float,
    value2: float,
    cfg: ValidationConfig,
) -> ValidationReport:
    report = ValidationReport()
    t_min, t_max = cfg.temperature_min, cfg.temperature_max
    t_range = f"between {t_min:g}°C and {t_max:g}°C"
    label1, label2 = (
        label.split(" (")[0].capitalize() for label in kind.labels
    )

    if kind in (InputKind.DBT_WBT, InputKind.DBT_DPT):
        if value2 > value1 + cfg.measurement_tolerance:
            report.errors.append(
                f"{prefix} {label2} ({value2:g}°C) cannot be greater than "
                f"dry bulb temperature ({value1:g}°C)"
            )
        if _outside(value1, t_min, t_max):
            report.errors.append(f"{prefix} {label1} must be {t_range}")
        if _outside(value2, t_min, t_max):
            report.errors.append(f"{prefix} {label2} must be {t_range}")
    else:
        if _outside(value2, 0, 100):
            report.errors.append(
                f"{prefix} Relative humidity must be between 0% and 100%"
            )
        if _outside(value1, t_min, t_max):
            report.errors.append(f"{prefix} {label1} must be {t_range}")
        if kind is InputKind.WBT_RH and value1 > cfg.high_wet_bulb_warning:
            report.warnings.append(
                f"{prefix} Wet bulb temperature ({value1:g}°C) is very high for "
                "RH calculation. Results may be less accurate."
            )

    return report
