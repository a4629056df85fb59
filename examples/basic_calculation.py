#!/usr/bin/env python3
"""Basic psychrometric calculation example.

This script demonstrates single calculations for each input kind and a
small batch run with progress and event reporting.

Run with: uv run python examples/basic_calculation.py
"""

from psychrocalc.calculation.batch import BatchRunner
from psychrocalc.calculation.csv_format import (
    generate_output_csv,
    generate_sample_csv,
    parse_csv,
)
from psychrocalc.calculation.resolver import resolve
from psychrocalc.core.events import Event, EventType, get_event_bus


def run_single_calculations() -> None:
    """Resolve one reading of each input kind."""
    print("=" * 60)
    print("SINGLE CALCULATIONS")
    print("=" * 60)

    readings = [
        ("dbt_wbt", 25.0, 20.0, 0.0),
        ("dbt_rh", 30.0, 65.0, 500.0),
        ("dbt_dpt", 22.0, 15.0, 100.0),
        ("wbt_rh", 18.0, 70.0, 0.0),
    ]

    for kind, value1, value2, altitude in readings:
        state = resolve(kind, value1, value2, altitude)
        print(f"{kind} ({value1}, {value2}) at {altitude:.0f} m:")
        print(
            f"  DBT {state.dbt}°C  WBT {state.wbt}°C  "
            f"RH {state.rh}%  DPT {state.dpt}°C"
        )
        print(
            f"  W {state.humidity_ratio} kg/kg  h {state.enthalpy} kJ/kg  "
            f"v {state.specific_volume} m³/kg  Pw {state.vapor_pressure} kPa"
        )
        for warning in state.warnings:
            print(f"  warning: {warning}")
    print()


def run_batch() -> None:
    """Process the sample CSV template."""
    print("=" * 60)
    print("BATCH RUN: sample template")
    print("=" * 60)

    def on_complete(event: Event) -> None:
        print(f"[event] {event.message}")

    get_event_bus().subscribe(EventType.BATCH_COMPLETE, on_complete)

    parsed = parse_csv(generate_sample_csv())
    result = BatchRunner().run(
        parsed.to_batch_rows(),
        on_progress=lambda fraction: print(f"  progress {fraction:.0%}"),
    )

    print()
    print(generate_output_csv(result.results))


if __name__ == "__main__":
    run_single_calculations()
    run_batch()
