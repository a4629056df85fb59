"""Pydantic configuration models for psychrometric calculations.

This module defines the configuration schema using Pydantic v2 models.
Configuration can be loaded from YAML or JSON files. Defaults reproduce
the reference calculator exactly, so an empty file is a valid config.

The configuration hierarchy:
- PsychroConfig (top-level)
  - SolverConfig
  - ValidationConfig
  - BatchConfig
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from psychrocalc.physics.constants import ABSOLUTE_ZERO_C


class SolverConfig(BaseModel):
    """Iterative solver settings.

    The wet-bulb-from-dew-point gain is negative: that solver steps against
    the humidity-ratio residual.
    """

    model_config = ConfigDict(frozen=True)

    # Fixed-point solvers (wet-bulb)
    wet_bulb_rh_gain: float = 10.0
    wet_bulb_dew_point_gain: float = -5.0
    wet_bulb_min_temp: float = Field(
        default=-50.0, description="Lower clamp for wet-bulb from DBT+RH in C"
    )
    fixed_point_tolerance: Annotated[float, Field(gt=0)] = 0.01
    fixed_point_max_iter: Annotated[int, Field(ge=1)] = 50

    # Newton-Raphson solver (dry-bulb from WBT+RH)
    newton_tolerance: Annotated[float, Field(gt=0)] = 0.001
    newton_max_iter: Annotated[int, Field(ge=1)] = 100
    newton_step: Annotated[float, Field(gt=0)] = 0.001
    newton_min_derivative: Annotated[float, Field(gt=0)] = 1e-10
    newton_seed_divisor: Annotated[float, Field(gt=0)] = 4.0
    newton_lower_offset: Annotated[float, Field(ge=0)] = 10.0
    newton_upper_offset: Annotated[float, Field(ge=0)] = 50.0

    # Fallback when the Newton result is rejected
    fallback_threshold: Annotated[float, Field(gt=0)] = 0.05
    fallback_divisor: Annotated[float, Field(gt=0)] = 3.0


class ValidationConfig(BaseModel):
    """Limits used by caller-side input validation."""

    model_config = ConfigDict(frozen=True)

    temperature_min: float = -100.0
    temperature_max: float = 100.0
    absolute_zero: float = ABSOLUTE_ZERO_C
    extreme_temperature_warning: Annotated[float, Field(gt=0)] = 1000.0
    high_wet_bulb_warning: float = 50.0
    measurement_tolerance: Annotated[float, Field(ge=0)] = 0.5

    # Interactive single calculation
    altitude_min: float = 0.0
    altitude_max: float = 10000.0

    # Batch files
    batch_altitude_min: float = -500.0
    batch_altitude_max: float = 20000.0

    @model_validator(mode="after")
    def validate_ranges(self) -> ValidationConfig:
        """Ensure every range has its minimum below its maximum."""
        pairs = [
            ("temperature", self.temperature_min, self.temperature_max),
            ("altitude", self.altitude_min, self.altitude_max),
            ("batch altitude", self.batch_altitude_min, self.batch_altitude_max),
        ]
        for name, low, high in pairs:
            if low >= high:
                msg = f"Invalid {name} range: minimum {low} must be below maximum {high}"
                raise ValueError(msg)
        return self


class BatchConfig(BaseModel):
    """Batch runner settings."""

    model_config = ConfigDict(frozen=True)

    yield_every: Annotated[
        int, Field(ge=1, description="Rows between cooperative yields")
    ] = 10
    emit_events: bool = True


class PsychroConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    solver: SolverConfig = Field(default_factory=SolverConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)


def load_config(path: str | Path) -> PsychroConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to configuration file.

    Returns:
        Validated PsychroConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If configuration is invalid.
    """
    path = Path(path)

    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return PsychroConfig.model_validate(data or {})


def save_config(config: PsychroConfig, path: str | Path) -> None:
    """Save configuration to a YAML or JSON file.

    Args:
        config: Configuration to save.
        path: Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")

    with path.open("w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def validate_config(data: dict[str, Any]) -> PsychroConfig:
    """Validate configuration data without loading from file.

    Args:
        data: Configuration dictionary.

    Returns:
        Validated PsychroConfig object.

    Raises:
        ValueError: If configuration is invalid.
    """
    return PsychroConfig.model_validate(data)
