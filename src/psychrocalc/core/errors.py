"""Exception types raised by psychrometric resolution.

Convergence problems are not exceptions: solvers always return an estimate
and the resolver reports poor convergence through ``AirState.converged``
and ``AirState.warnings``.
"""

from __future__ import annotations


class PsychroError(Exception):
    """Base class for all psychrometric calculation errors."""


class InvalidInputKindError(PsychroError, ValueError):
    """Raised when an input kind is not one of the supported pairs.

    Attributes:
        kind: The rejected input kind tag.
    """

    def __init__(self, kind: object) -> None:
        self.kind = kind
        from psychrocalc.core.state import InputKind

        valid = ", ".join(k.value for k in InputKind)
        super().__init__(f"Invalid input kind '{kind}'. Must be one of: {valid}")


class NumericDomainError(PsychroError, ArithmeticError):
    """Raised when a correlation is evaluated outside its numeric domain.

    Typical causes are a vapor pressure at or above the total pressure
    (division singularity in the humidity ratio) or an altitude above the
    top of the standard-atmosphere model.
    """
