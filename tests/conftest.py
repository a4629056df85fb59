"""Shared pytest fixtures for psychrocalc tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from psychrocalc.calculation.csv_format import generate_sample_csv
from psychrocalc.core.events import reset_event_bus
from psychrocalc.core.state import InputKind, InputSpec

# =============================================================================
# Autouse fixtures for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_global_state() -> None:
    """Reset global singletons before each test for isolation.

    This fixture runs automatically before each test to ensure the event
    bus is cleared of handlers and history.
    """
    reset_event_bus()


# =============================================================================
# Random number generator fixtures
# =============================================================================


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random generator for reproducible tests."""
    return np.random.default_rng(42)


# =============================================================================
# Input fixtures
# =============================================================================


@pytest.fixture
def sample_specs() -> list[InputSpec]:
    """The five rows of the sample input file."""
    return [
        InputSpec(InputKind.DBT_WBT, 25.0, 20.0, 0.0),
        InputSpec(InputKind.DBT_RH, 30.0, 65.0, 500.0),
        InputSpec(InputKind.DBT_DPT, 22.0, 15.0, 100.0),
        InputSpec(InputKind.WBT_RH, 18.0, 70.0, 0.0),
        InputSpec(InputKind.DBT_WBT, 35.0, 28.0, 1000.0),
    ]


@pytest.fixture
def sample_csv_path(tmp_path: Path) -> Path:
    """Sample input file written to a temporary directory."""
    path = tmp_path / "readings.csv"
    path.write_text(generate_sample_csv())
    return path
