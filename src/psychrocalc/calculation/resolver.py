"""Psychrometric property resolver.

Given one of four measured pairs plus altitude, the resolver derives the
complete moist-air state:

1. Compute ambient pressure from altitude
2. Dispatch on the input kind to obtain humidity ratio, wet-bulb,
   relative humidity and dew point (closed form or iterative)
3. Floor the humidity ratio at zero
4. Compute enthalpy, specific volume and vapor pressure from the final
   dry-bulb, humidity ratio and pressure
5. Round every property to its output precision

| Kind    | Humidity ratio from          | Remaining properties            |
|---------|------------------------------|---------------------------------|
| dbt_wbt | wet-bulb relation            | RH, dew point (direct)          |
| dbt_rh  | RH                           | wet-bulb (solver), dew point    |
| dbt_dpt | dew point                    | RH (direct), wet-bulb (solver)  |
| wbt_rh  | wet-bulb relation at solved  | dry-bulb (solver), dew point    |
|         | dry-bulb                     |                                 |

The resolver holds no mutable state; each call is independent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from psychrocalc.core.config import SolverConfig
from psychrocalc.core.events import EventType, get_event_bus
from psychrocalc.core.state import AirState, InputKind, InputSpec
from psychrocalc.physics.psychrometrics import (
    barometric_pressure,
    dew_point,
    enthalpy,
    humidity_ratio_from_dew_point,
    humidity_ratio_from_relative_humidity,
    humidity_ratio_from_wet_bulb,
    relative_humidity,
    relative_humidity_from_dew_point,
    specific_volume,
    vapor_pressure,
)
from psychrocalc.physics.solvers import (
    SolverResult,
    dry_bulb_from_wet_bulb,
    wet_bulb_from_dew_point,
    wet_bulb_from_relative_humidity,
)

logger = logging.getLogger(__name__)


def _dew_point(w: float, p: float) -> float:
    # Dew point follows the floored humidity ratio. NaN passes through.
    if w < 0:
        w = 0.0
    return dew_point(w, p)


@dataclass
class _Partial:
    """Kind-specific part of a resolution, before the uniform tail."""

    dbt: float
    wbt: float
    rh: float
    dpt: float
    w: float
    solve: SolverResult | None = None
    solved_quantity: str = ""


class PsychrometricResolver:
    """Resolve complete air states from partial measurements.

    Args:
        config: Solver settings. Defaults reproduce the reference calculator.
        emit_events: Emit a ``solver.nonconvergence`` event when an
            iterative solve is unreliable.
    """

    def __init__(
        self,
        config: SolverConfig | None = None,
        *,
        emit_events: bool = True,
    ) -> None:
        self._config = config or SolverConfig()
        self._emit_events = emit_events
        self._dispatch: dict[InputKind, Callable[[float, float, float], _Partial]] = {
            InputKind.DBT_WBT: self._from_dbt_wbt,
            InputKind.DBT_RH: self._from_dbt_rh,
            InputKind.DBT_DPT: self._from_dbt_dpt,
            InputKind.WBT_RH: self._from_wbt_rh,
        }

    @property
    def config(self) -> SolverConfig:
        """Solver settings in use."""
        return self._config

    def resolve(
        self,
        kind: InputKind | str,
        value1: float,
        value2: float,
        altitude: float = 0.0,
        *,
        round_output: bool = True,
    ) -> AirState:
        """Resolve an air state from a measured pair.

        Args:
            kind: Input kind tag (dbt_wbt, dbt_rh, dbt_dpt or wbt_rh).
            value1: First measured value.
            value2: Second measured value.
            altitude: Altitude in meters.
            round_output: Round to output precision (default). Pass False
                for full-precision values.

        Returns:
            Resolved air state.

        Raises:
            InvalidInputKindError: If kind is not supported.
            NumericDomainError: If a correlation is evaluated outside its domain.
        """
        spec = InputSpec.create(kind, value1, value2, altitude)
        return self.resolve_spec(spec, round_output=round_output)

    def resolve_spec(self, spec: InputSpec, *, round_output: bool = True) -> AirState:
        """Resolve an air state from an InputSpec.

        See ``resolve`` for details.
        """
        kind = InputKind.parse(spec.kind)
        p = barometric_pressure(spec.altitude)

        partial = self._dispatch[kind](spec.value1, spec.value2, p)

        # Humidity ratio is never negative once resolved.
        w = partial.w
        if w < 0:
            w = 0.0

        converged = True
        warnings: tuple[str, ...] = ()
        if partial.solve is not None and not partial.solve.reliable:
            converged = False
            warnings = (self._describe(partial.solve, partial.solved_quantity),)
            self._report(spec, partial.solve, warnings[0])

        state = AirState(
            dbt=partial.dbt,
            wbt=partial.wbt,
            rh=partial.rh,
            dpt=partial.dpt,
            humidity_ratio=w,
            enthalpy=enthalpy(partial.dbt, w),
            specific_volume=specific_volume(partial.dbt, w, p),
            vapor_pressure=vapor_pressure(w, p),
            pressure=p,
            converged=converged,
            warnings=warnings,
        )
        return state.rounded() if round_output else state

    # =========================================================================
    # Kind-specific paths
    # =========================================================================

    def _from_dbt_wbt(self, dbt: float, wbt: float, p: float) -> _Partial:
        w = humidity_ratio_from_wet_bulb(dbt, wbt, p)
        return _Partial(
            dbt=dbt,
            wbt=wbt,
            rh=relative_humidity(dbt, w, p),
            dpt=_dew_point(w, p),
            w=w,
        )

    def _from_dbt_rh(self, dbt: float, rh: float, p: float) -> _Partial:
        w = humidity_ratio_from_relative_humidity(dbt, rh, p)
        solve = wet_bulb_from_relative_humidity(dbt, rh, p, self._config)
        return _Partial(
            dbt=dbt,
            wbt=solve.value,
            rh=rh,
            dpt=_dew_point(w, p),
            w=w,
            solve=solve,
            solved_quantity="wet-bulb",
        )

    def _from_dbt_dpt(self, dbt: float, dpt: float, p: float) -> _Partial:
        solve = wet_bulb_from_dew_point(dbt, dpt, p, self._config)
        return _Partial(
            dbt=dbt,
            wbt=solve.value,
            rh=relative_humidity_from_dew_point(dbt, dpt),
            dpt=dpt,
            w=humidity_ratio_from_dew_point(dpt, p),
            solve=solve,
            solved_quantity="wet-bulb",
        )

    def _from_wbt_rh(self, wbt: float, rh: float, p: float) -> _Partial:
        # The measured RH is carried through unchanged.
        solve = dry_bulb_from_wet_bulb(wbt, rh, p, self._config)
        dbt = solve.value
        w = humidity_ratio_from_wet_bulb(dbt, wbt, p)
        return _Partial(
            dbt=dbt,
            wbt=wbt,
            rh=rh,
            dpt=_dew_point(w, p),
            w=w,
            solve=solve,
            solved_quantity="dry-bulb",
        )

    # =========================================================================
    # Convergence reporting
    # =========================================================================

    @staticmethod
    def _describe(solve: SolverResult, quantity: str) -> str:
        if solve.fallback_used:
            return (
                f"{quantity.capitalize()} solver result rejected; "
                f"linear estimate {solve.value:.2f}C substituted"
            )
        return (
            f"{quantity.capitalize()} solver did not converge after "
            f"{solve.iterations} iterations (residual {solve.residual:.3g})"
        )

    def _report(self, spec: InputSpec, solve: SolverResult, message: str) -> None:
        logger.debug("%s for %s", message, spec)
        if not self._emit_events:
            return
        get_event_bus().emit_simple(
            EventType.SOLVER_NONCONVERGENCE,
            source="resolver",
            message=message,
            kind=spec.kind.value,
            value1=spec.value1,
            value2=spec.value2,
            altitude=spec.altitude,
            iterations=solve.iterations,
            residual=solve.residual,
            fallback_used=solve.fallback_used,
        )


_default_resolver: PsychrometricResolver | None = None


def _get_default_resolver() -> PsychrometricResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = PsychrometricResolver()
    return _default_resolver


def resolve(
    kind: InputKind | str,
    value1: float,
    value2: float,
    altitude: float = 0.0,
    *,
    round_output: bool = True,
) -> AirState:
    """Resolve an air state with default settings.

    Examples:
        >>> state = resolve("dbt_wbt", 25.0, 20.0, 0.0)
        >>> state.pressure
        101.325
    """
    return _get_default_resolver().resolve(
        kind, value1, value2, altitude, round_output=round_output
    )


def resolve_spec(spec: InputSpec, *, round_output: bool = True) -> AirState:
    """Resolve an InputSpec with default settings."""
    return _get_default_resolver().resolve_spec(spec, round_output=round_output)
