"""Iterative solvers for psychrometric unknowns without closed-form inversion.

Three temperatures cannot be recovered analytically from the empirical
wet-bulb relation and are found numerically:

- Wet-bulb from dry-bulb and relative humidity (fixed-point iteration)
- Wet-bulb from dry-bulb and dew point (fixed-point iteration)
- Dry-bulb from wet-bulb and relative humidity (Newton-Raphson with fallback)

Each is a scalar root-finding problem "find T such that f(T) equals a
target computed independently". The numerical strategies are isolated in
``FixedPointSolver`` and ``NewtonSolver`` so they can be exchanged and
tested without the resolver.

Solvers never raise on non-convergence. They return a ``SolverResult``
whose ``converged`` and ``fallback_used`` flags describe how trustworthy
the value is.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from psychrocalc.physics.constants import STANDARD_PRESSURE
from psychrocalc.physics.psychrometrics import (
    humidity_ratio_from_dew_point,
    humidity_ratio_from_relative_humidity,
    humidity_ratio_from_wet_bulb,
)

if TYPE_CHECKING:
    from psychrocalc.core.config import SolverConfig

logger = logging.getLogger(__name__)

#: Objective function mapping a trial temperature to a humidity ratio
Objective = Callable[[float], float]


@dataclass(frozen=True)
class SolverResult:
    """Outcome of an iterative solve.

    Attributes:
        value: Solved temperature in C (or the substituted estimate).
        iterations: Number of update steps taken.
        converged: True if the residual dropped below tolerance.
        residual: Target minus objective at ``value``.
        fallback_used: True if ``value`` is a substituted approximation
            rather than the iterate.
    """

    value: float
    iterations: int
    converged: bool
    residual: float
    fallback_used: bool = False

    @property
    def reliable(self) -> bool:
        """Whether the value came from a converged iteration."""
        return self.converged and not self.fallback_used


def _clamp(x: float, low: float, high: float) -> float:
    # Upper bound wins when the bounds cross.
    if x > high:
        return high
    if x < low:
        return low
    return x


class RootSolver(ABC):
    """Strategy interface for scalar root finding."""

    @abstractmethod
    def solve(
        self,
        func: Objective,
        target: float,
        seed: float,
        bounds: tuple[float, float],
    ) -> SolverResult:
        """Find x within bounds such that func(x) is close to target.

        Args:
            func: Objective function.
            target: Value the objective should reach.
            seed: Initial guess.
            bounds: (low, high) clamp applied after every step.

        Returns:
            Solver outcome. Never raises on non-convergence.
        """


class FixedPointSolver(RootSolver):
    """Linear fixed-point update ``x <- x + gain * (target - f(x))``.

    The gain is a heuristic constant, not a derivative estimate, so there
    is no guaranteed convergence rate. A negative gain steps against the
    residual.
    """

    def __init__(self, gain: float, tolerance: float, max_iter: int) -> None:
        self.gain = gain
        self.tolerance = tolerance
        self.max_iter = max_iter

    def solve(
        self,
        func: Objective,
        target: float,
        seed: float,
        bounds: tuple[float, float],
    ) -> SolverResult:
        low, high = bounds
        x = seed

        for i in range(self.max_iter):
            residual = target - func(x)
            if abs(residual) < self.tolerance:
                return SolverResult(
                    value=x, iterations=i, converged=True, residual=residual
                )
            x = _clamp(x + self.gain * residual, low, high)

        return SolverResult(
            value=x,
            iterations=self.max_iter,
            converged=False,
            residual=target - func(x),
        )


class NewtonSolver(RootSolver):
    """Newton-Raphson with a forward-difference derivative.

    When the derivative estimate is too flat the step is replaced by a
    bisection towards ``anchor`` (the low bound when no anchor is given).
    """

    def __init__(
        self,
        tolerance: float,
        max_iter: int,
        step: float = 0.001,
        min_derivative: float = 1e-10,
    ) -> None:
        self.tolerance = tolerance
        self.max_iter = max_iter
        self.step = step
        self.min_derivative = min_derivative

    def solve(
        self,
        func: Objective,
        target: float,
        seed: float,
        bounds: tuple[float, float],
        anchor: float | None = None,
    ) -> SolverResult:
        low, high = bounds
        anchor = low if anchor is None else anchor
        x = seed

        for i in range(self.max_iter):
            current = func(x)
            error = current - target
            if abs(error) < self.tolerance:
                return SolverResult(
                    value=x, iterations=i, converged=True, residual=-error
                )

            derivative = (func(x + self.step) - current) / self.step
            if abs(derivative) > self.min_derivative:
                x = x - error / derivative
            else:
                x = (x + anchor) / 2

            # Lower bound is checked first here.
            if x < low:
                x = low
            elif x > high:
                x = high

        return SolverResult(
            value=x,
            iterations=self.max_iter,
            converged=False,
            residual=target - func(x),
        )


def _settings(config: SolverConfig | None) -> SolverConfig:
    if config is None:
        from psychrocalc.core.config import SolverConfig

        return SolverConfig()
    return config


def wet_bulb_from_relative_humidity(
    t_db: float,
    rh: float,
    p: float = STANDARD_PRESSURE,
    config: SolverConfig | None = None,
) -> SolverResult:
    """Solve wet-bulb temperature from dry-bulb and relative humidity.

    Fixed-point iteration seeded at the dry-bulb temperature, gain 10,
    clamped to [-50, t_db].

    Args:
        t_db: Dry-bulb temperature in C.
        rh: Relative humidity as percentage (0-100).
        p: Total atmospheric pressure in kPa.
        config: Solver settings (defaults reproduce the reference behavior).

    Returns:
        Solver outcome; ``value`` is the wet-bulb temperature in C.
    """
    cfg = _settings(config)
    target = humidity_ratio_from_relative_humidity(t_db, rh, p)

    solver = FixedPointSolver(
        gain=cfg.wet_bulb_rh_gain,
        tolerance=cfg.fixed_point_tolerance,
        max_iter=cfg.fixed_point_max_iter,
    )
    result = solver.solve(
        lambda t_wb: humidity_ratio_from_wet_bulb(t_db, t_wb, p),
        target,
        seed=t_db,
        bounds=(cfg.wet_bulb_min_temp, t_db),
    )
    logger.debug(
        "Wet-bulb from DBT=%.3f RH=%.3f: %.4f after %d iterations (converged=%s)",
        t_db,
        rh,
        result.value,
        result.iterations,
        result.converged,
    )
    return result


def wet_bulb_from_dew_point(
    t_db: float,
    t_dp: float,
    p: float = STANDARD_PRESSURE,
    config: SolverConfig | None = None,
) -> SolverResult:
    """Solve wet-bulb temperature from dry-bulb and dew point.

    Fixed-point iteration seeded at the midpoint of dry-bulb and dew point,
    clamped to [t_dp, t_db].

    Args:
        t_db: Dry-bulb temperature in C.
        t_dp: Dew point temperature in C.
        p: Total atmospheric pressure in kPa.
        config: Solver settings (defaults reproduce the reference behavior).

    Returns:
        Solver outcome; ``value`` is the wet-bulb temperature in C.
    """
    cfg = _settings(config)
    target = humidity_ratio_from_dew_point(t_dp, p)

    solver = FixedPointSolver(
        gain=cfg.wet_bulb_dew_point_gain,
        tolerance=cfg.fixed_point_tolerance,
        max_iter=cfg.fixed_point_max_iter,
    )
    result = solver.solve(
        lambda t_wb: humidity_ratio_from_wet_bulb(t_db, t_wb, p),
        target,
        seed=(t_db + t_dp) / 2,
        bounds=(t_dp, t_db),
    )
    logger.debug(
        "Wet-bulb from DBT=%.3f DPT=%.3f: %.4f after %d iterations (converged=%s)",
        t_db,
        t_dp,
        result.value,
        result.iterations,
        result.converged,
    )
    return result


def dry_bulb_from_wet_bulb(
    t_wb: float,
    rh: float,
    p: float = STANDARD_PRESSURE,
    config: SolverConfig | None = None,
) -> SolverResult:
    """Solve dry-bulb temperature from wet-bulb and relative humidity.

    The target humidity ratio is taken at the wet-bulb temperature and the
    relative humidity. Newton-Raphson starts from ``t_wb + (100 - rh)/4``
    with every step clamped to [t_wb - 10, t_wb + 50].

    After iterating, the relative error of the humidity ratio against the
    target is checked. Above 5% the Newton result is discarded and the
    linear estimate ``t_wb + (100 - rh)/3`` is substituted, with
    ``fallback_used`` set. That estimate is only a rough approximation.

    Args:
        t_wb: Wet-bulb temperature in C.
        rh: Relative humidity as percentage (0-100).
        p: Total atmospheric pressure in kPa.
        config: Solver settings (defaults reproduce the reference behavior).

    Returns:
        Solver outcome; ``value`` is the dry-bulb temperature in C.
    """
    cfg = _settings(config)
    target = humidity_ratio_from_relative_humidity(t_wb, rh, p)

    def objective(t_db: float) -> float:
        return humidity_ratio_from_wet_bulb(t_db, t_wb, p)

    solver = NewtonSolver(
        tolerance=cfg.newton_tolerance,
        max_iter=cfg.newton_max_iter,
        step=cfg.newton_step,
        min_derivative=cfg.newton_min_derivative,
    )
    result = solver.solve(
        objective,
        target,
        seed=t_wb + (100 - rh) / cfg.newton_seed_divisor,
        bounds=(t_wb - cfg.newton_lower_offset, t_wb + cfg.newton_upper_offset),
        anchor=t_wb,
    )

    final_error = abs(objective(result.value) - target)
    if target != 0:
        relative_error = final_error / target
    else:
        relative_error = 0.0 if final_error == 0 else math.inf

    if relative_error > cfg.fallback_threshold:
        fallback = t_wb + (100 - rh) / cfg.fallback_divisor
        logger.warning(
            "Dry-bulb solve for WBT=%.3f RH=%.3f rejected (relative error %.3g), "
            "using linear estimate %.3f",
            t_wb,
            rh,
            relative_error,
            fallback,
        )
        return SolverResult(
            value=fallback,
            iterations=result.iterations,
            converged=result.converged,
            residual=target - objective(fallback),
            fallback_used=True,
        )

    logger.debug(
        "Dry-bulb from WBT=%.3f RH=%.3f: %.4f after %d iterations (converged=%s)",
        t_wb,
        rh,
        result.value,
        result.iterations,
        result.converged,
    )
    return result
