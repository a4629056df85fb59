"""Resolver, batch runner and CSV data contract."""

from psychrocalc.calculation.batch import (
    BatchResult,
    BatchRow,
    BatchRunner,
    BatchStatus,
    RowError,
    RowResult,
    resolve_batch,
    resolve_batch_async,
)
from psychrocalc.calculation.csv_format import (
    generate_output_csv,
    generate_sample_csv,
    parse_csv,
    validate_csv_data,
)
from psychrocalc.calculation.resolver import PsychrometricResolver, resolve, resolve_spec

__all__ = [
    # Resolver
    "PsychrometricResolver",
    "resolve",
    "resolve_spec",
    # Batch
    "BatchResult",
    "BatchRow",
    "BatchRunner",
    "BatchStatus",
    "RowError",
    "RowResult",
    "resolve_batch",
    "resolve_batch_async",
    # CSV
    "parse_csv",
    "validate_csv_data",
    "generate_output_csv",
    "generate_sample_csv",
]
