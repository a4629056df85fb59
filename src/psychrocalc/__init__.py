"""psychrocalc - Psychrometric property calculator.

Resolve the complete moist-air state (dry-bulb, wet-bulb, relative
humidity, dew point, humidity ratio, enthalpy, specific volume and vapor
pressure) from any of four measured pairs plus altitude, one at a time or
in batches.
"""

from psychrocalc.calculation.resolver import resolve
from psychrocalc.core.state import AirState, InputKind, InputSpec

__version__ = "0.1.0"

__all__ = [
    "AirState",
    "InputKind",
    "InputSpec",
    "__version__",
    "resolve",
]
