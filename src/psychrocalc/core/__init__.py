"""Core module for psychrometric calculations.

This module provides the foundational types shared by the calculators:
- State types for inputs and resolved air states
- Exception hierarchy
- Configuration loading and validation
- Event system for batch progress and solver behavior
- Caller-side input validation
"""

from psychrocalc.core.state import AirState, InputKind, InputSpec
from psychrocalc.core.errors import (
    InvalidInputKindError,
    NumericDomainError,
    PsychroError,
)
from psychrocalc.core.config import PsychroConfig, load_config
from psychrocalc.core.events import Event, EventBus, EventType, get_event_bus
from psychrocalc.core.validation import ValidationReport, validate_row, validate_single

__all__ = [
    # State
    "AirState",
    "InputKind",
    "InputSpec",
    # Errors
    "PsychroError",
    "InvalidInputKindError",
    "NumericDomainError",
    # Configuration
    "PsychroConfig",
    "load_config",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
    # Validation
    "ValidationReport",
    "validate_single",
    "validate_row",
]
