"""Batch evaluation of many calculation requests.

The runner resolves each row independently:
1. Check the cancellation flag
2. Resolve the row, recording a row-indexed error on failure
3. Report fractional progress
4. Periodically yield to the host scheduler (async mode)

A failing row never aborts the batch. Results and errors keep input order
and are addressable by row number.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from psychrocalc.calculation.resolver import PsychrometricResolver
from psychrocalc.core.config import BatchConfig
from psychrocalc.core.errors import PsychroError
from psychrocalc.core.events import EventType, get_event_bus
from psychrocalc.core.state import AirState, InputSpec

logger = logging.getLogger(__name__)

#: Row number of the first data row (row 1 is the CSV header)
FIRST_DATA_ROW = 2

ProgressCallback = Callable[[float], None]
CancelCheck = Callable[[], bool]

#: A row given as (kind, value1, value2, altitude)
RawRow = tuple[Any, Any, Any, Any]

# Failures that are isolated to a single row
_ROW_ERRORS = (PsychroError, ArithmeticError, ValueError, TypeError)


class BatchStatus(str, Enum):
    """Batch runner states."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class BatchRow:
    """An input row with its original row number."""

    row_number: int
    spec: InputSpec | RawRow


@dataclass(frozen=True)
class RowResult:
    """A successfully resolved row."""

    row_number: int
    spec: InputSpec
    state: AirState


@dataclass(frozen=True)
class RowError:
    """A row that could not be resolved.

    Attributes:
        row_number: Original row number.
        message: Error description.
        error_type: Exception class name.
    """

    row_number: int
    message: str
    error_type: str


@dataclass
class BatchResult:
    """Outcome of a batch run.

    Attributes:
        results: Successful rows in input order.
        errors: Failed rows in input order.
        total: Number of rows submitted.
        cancelled: True if the run stopped early on request.
        elapsed: Wall time in seconds.
    """

    results: list[RowResult] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    total: int = 0
    cancelled: bool = False
    elapsed: float = 0.0

    @property
    def success_count(self) -> int:
        """Number of successfully resolved rows."""
        return len(self.results)

    @property
    def error_count(self) -> int:
        """Number of failed rows."""
        return len(self.errors)

    @property
    def processed(self) -> int:
        """Number of rows attempted."""
        return self.success_count + self.error_count

    def by_row(self, row_number: int) -> RowResult | RowError | None:
        """Look up the outcome of a row by its original number."""
        for item in (*self.results, *self.errors):
            if item.row_number == row_number:
                return item
        return None

    def summary(self) -> dict[str, Any]:
        """Summary counts for reporting."""
        return {
            "total": self.total,
            "processed": self.processed,
            "succeeded": self.success_count,
            "failed": self.error_count,
            "cancelled": self.cancelled,
            "elapsed_seconds": self.elapsed,
        }


def _to_spec(item: InputSpec | RawRow) -> InputSpec:
    if isinstance(item, InputSpec):
        return item
    kind, value1, value2, altitude = item
    return InputSpec.create(kind, value1, value2, altitude)


def _number_rows(rows: Iterable[BatchRow | InputSpec | RawRow]) -> list[BatchRow]:
    numbered = []
    for index, row in enumerate(rows):
        if isinstance(row, BatchRow):
            numbered.append(row)
        else:
            numbered.append(BatchRow(row_number=index + FIRST_DATA_ROW, spec=row))
    return numbered


class BatchRunner:
    """Resolve sequences of calculation requests with per-row isolation.

    The runner is single-threaded. ``run`` processes rows synchronously;
    ``run_async`` yields to the event loop every ``yield_every`` rows so a
    host UI stays responsive on large batches.
    """

    def __init__(
        self,
        resolver: PsychrometricResolver | None = None,
        config: BatchConfig | None = None,
    ) -> None:
        """Initialize batch runner.

        Args:
            resolver: Resolver used for every row.
            config: Batch settings.
        """
        self._config = config or BatchConfig()
        self._resolver = resolver or PsychrometricResolver(
            emit_events=self._config.emit_events
        )
        self._status = BatchStatus.IDLE
        self._event_bus = get_event_bus()

    @property
    def status(self) -> BatchStatus:
        """Current runner status."""
        return self._status

    def run(
        self,
        rows: Iterable[BatchRow | InputSpec | RawRow],
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> BatchResult:
        """Resolve all rows synchronously.

        Args:
            rows: Rows as BatchRow, InputSpec or (kind, value1, value2, altitude).
                Unnumbered rows are numbered from 2.
            on_progress: Called with the completed fraction after each row.
            should_cancel: Checked before each row; returning True stops the run.

        Returns:
            Batch outcome.
        """
        result = BatchResult()
        for _ in self._process(rows, result, on_progress, should_cancel):
            pass
        return result

    async def run_async(
        self,
        rows: Iterable[BatchRow | InputSpec | RawRow],
        on_progress: ProgressCallback | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> BatchResult:
        """Resolve all rows, yielding to the event loop periodically.

        Arguments are the same as for ``run``.
        """
        result = BatchResult()
        for index in self._process(rows, result, on_progress, should_cancel):
            if index % self._config.yield_every == 0:
                await asyncio.sleep(0)
        return result

    def _process(
        self,
        rows: Iterable[BatchRow | InputSpec | RawRow],
        result: BatchResult,
        on_progress: ProgressCallback | None,
        should_cancel: CancelCheck | None,
    ) -> Iterator[int]:
        """Process rows into result, yielding each row index when done."""
        numbered = _number_rows(rows)
        total = len(numbered)
        result.total = total

        self._status = BatchStatus.RUNNING
        self._emit(EventType.BATCH_START, f"Batch of {total} rows started", total=total)
        start_wall = time.perf_counter()

        try:
            for index, row in enumerate(numbered):
                if should_cancel is not None and should_cancel():
                    result.cancelled = True
                    break

                outcome = self._process_row(row)
                if isinstance(outcome, RowError):
                    result.errors.append(outcome)
                    self._emit(
                        EventType.BATCH_ROW_ERROR,
                        f"Row {outcome.row_number}: {outcome.message}",
                        row=outcome.row_number,
                        error=outcome.message,
                    )
                else:
                    result.results.append(outcome)

                fraction = (index + 1) / total
                if on_progress is not None:
                    on_progress(fraction)
                if (index + 1) % self._config.yield_every == 0:
                    self._emit(
                        EventType.BATCH_PROGRESS,
                        f"{index + 1}/{total} rows",
                        progress=fraction,
                    )

                yield index
        finally:
            result.elapsed = time.perf_counter() - start_wall

        if result.cancelled:
            self._status = BatchStatus.CANCELLED
            logger.info(
                "Batch cancelled after %d of %d rows", result.processed, total
            )
            self._emit(
                EventType.BATCH_CANCELLED,
                f"Batch cancelled after {result.processed} rows",
                **result.summary(),
            )
            return

        if total == 0 and on_progress is not None:
            on_progress(1.0)

        self._status = BatchStatus.COMPLETED
        logger.info(
            "Batch complete: %d rows, %d succeeded, %d failed",
            total,
            result.success_count,
            result.error_count,
        )
        self._emit(
            EventType.BATCH_COMPLETE,
            f"Batch complete: {result.success_count} succeeded, "
            f"{result.error_count} failed",
            **result.summary(),
        )

    def _process_row(self, row: BatchRow) -> RowResult | RowError:
        try:
            spec = _to_spec(row.spec)
            state = self._resolver.resolve_spec(spec)
        except _ROW_ERRORS as e:
            logger.debug("Row %d failed: %s", row.row_number, e)
            return RowError(
                row_number=row.row_number,
                message=str(e),
                error_type=type(e).__name__,
            )
        return RowResult(row_number=row.row_number, spec=spec, state=state)

    def _emit(self, event_type: EventType, message: str, **data: Any) -> None:
        if not self._config.emit_events:
            return
        self._event_bus.emit_simple(
            event_type, source="batch", message=message, **data
        )


def resolve_batch(
    rows: Sequence[BatchRow | InputSpec | RawRow],
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
    config: BatchConfig | None = None,
) -> BatchResult:
    """Resolve a batch with default resolver settings."""
    return BatchRunner(config=config).run(rows, on_progress, should_cancel)


async def resolve_batch_async(
    rows: Sequence[BatchRow | InputSpec | RawRow],
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
    config: BatchConfig | None = None,
) -> BatchResult:
    """Resolve a batch asynchronously with default resolver settings."""
    return await BatchRunner(config=config).run_async(rows, on_progress, should_cancel)
