"""CSV import/export for batch calculations.

Input files have the columns ``InputType,Value1,Value2,Altitude``. Header
matching is case-insensitive and a few alternate spellings are accepted:

| Column    | Accepted headers           |
|-----------|----------------------------|
| InputType | InputType, Input Type      |
| Value1    | Value1, Value 1            |
| Value2    | Value2, Value 2            |
| Altitude  | Altitude, Alt              |

Output files carry the row number, the inputs and the eight resolved
properties, with every value double-quoted and numbers rendered the way
the calculator prints them (``25`` rather than ``25.0``).
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Final

from psychrocalc.calculation.batch import BatchRow, RowResult
from psychrocalc.core.config import ValidationConfig
from psychrocalc.core.validation import ValidationReport, validate_row

logger = logging.getLogger(__name__)

#: Required input columns, in file order
INPUT_COLUMNS: Final[tuple[str, ...]] = ("InputType", "Value1", "Value2", "Altitude")

#: Output columns, in file order
OUTPUT_COLUMNS: Final[tuple[str, ...]] = (
    "RowNumber",
    "InputType",
    "Value1",
    "Value2",
    "Altitude",
    "DBT",
    "WBT",
    "RH",
    "DPT",
    "HumidityRatio",
    "Enthalpy",
    "SpecificVolume",
    "VaporPressure",
)

# Lowercased header -> canonical column
_HEADER_ALIASES: Final[dict[str, str]] = {
    "inputtype": "InputType",
    "input type": "InputType",
    "value1": "Value1",
    "value 1": "Value1",
    "value2": "Value2",
    "value 2": "Value2",
    "altitude": "Altitude",
    "alt": "Altitude",
}

# Longest numeric prefix accepted by JavaScript parseFloat
_NUMBER_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

#: Rows of the sample input file, as written
SAMPLE_ROWS: Final[tuple[tuple[str, str, str, str], ...]] = (
    ("dbt_wbt", "25.0", "20.0", "0"),
    ("dbt_rh", "30.0", "65.0", "500"),
    ("dbt_dpt", "22.0", "15.0", "100"),
    ("wbt_rh", "18.0", "70.0", "0"),
    ("dbt_wbt", "35.0", "28.0", "1000"),
)


@dataclass(frozen=True)
class CsvRow:
    """One data row of an input file.

    Attributes:
        row_number: Line number in the file (the header is row 1).
        input_type: Raw input kind tag, or None if the cell was empty.
        value1: First value (NaN if unparseable).
        value2: Second value (NaN if unparseable).
        altitude: Altitude in meters (NaN if unparseable).
    """

    row_number: int
    input_type: str | None
    value1: float
    value2: float
    altitude: float

    def to_batch_row(self) -> BatchRow:
        """Convert to a batch runner row."""
        return BatchRow(
            row_number=self.row_number,
            spec=(self.input_type, self.value1, self.value2, self.altitude),
        )


@dataclass
class ParsedCsv:
    """Result of parsing an input file.

    Attributes:
        headers: Header cells as written in the file.
        rows: Data rows with the expected number of fields.
        warnings: Problems found while parsing (skipped rows).
    """

    headers: list[str] = field(default_factory=list)
    rows: list[CsvRow] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def columns(self) -> dict[str, str]:
        """Canonical column name -> header as written, for recognized headers."""
        mapping: dict[str, str] = {}
        for header in self.headers:
            canonical = _HEADER_ALIASES.get(header.strip().lower())
            if canonical is not None and canonical not in mapping:
                mapping[canonical] = header
        return mapping

    @property
    def extra_columns(self) -> list[str]:
        """Headers that do not map to an input column."""
        return [h for h in self.headers if h.strip().lower() not in _HEADER_ALIASES]

    def to_batch_rows(self) -> list[BatchRow]:
        """Rows ready for the batch runner."""
        return [row.to_batch_row() for row in self.rows]


def parse_number(text: str | None) -> float:
    """Parse a number the way JavaScript ``parseFloat`` does.

    Leading whitespace is ignored and the longest numeric prefix is used,
    so ``"25C"`` parses as 25. Anything without a numeric prefix is NaN.

    Examples:
        >>> parse_number(" 12.5 kPa")
        12.5
        >>> math.isnan(parse_number("abc"))
        True
    """
    if text is None:
        return math.nan
    match = _NUMBER_PREFIX.match(text.lstrip())
    if match is None:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def parse_csv(content: str) -> ParsedCsv:
    """Parse the text of an input file.

    Blank lines are skipped. Rows whose field count differs from the
    header are skipped with a warning.

    Args:
        content: File contents.

    Returns:
        Parsed headers, rows and warnings.
    """
    parsed = ParsedCsv()
    reader = csv.reader(io.StringIO(content.strip()))

    for fields in reader:
        if not parsed.headers:
            parsed.headers = [f.strip() for f in fields]
            continue
        if not any(f.strip() for f in fields):
            continue

        row_number = reader.line_num
        if len(fields) != len(parsed.headers):
            msg = (
                f"Row {row_number}: Expected {len(parsed.headers)} columns "
                f"but found {len(fields)}. Row skipped."
            )
            logger.warning("%s", msg)
            parsed.warnings.append(msg)
            continue

        cells: dict[str, str] = {}
        for header, value in zip(parsed.headers, fields, strict=True):
            canonical = _HEADER_ALIASES.get(header.lower())
            if canonical is not None and not cells.get(canonical):
                cells[canonical] = value.strip()

        parsed.rows.append(
            CsvRow(
                row_number=row_number,
                input_type=cells.get("InputType") or None,
                value1=parse_number(cells.get("Value1")),
                value2=parse_number(cells.get("Value2")),
                altitude=parse_number(cells.get("Altitude")),
            )
        )

    logger.debug("Parsed %d rows from CSV", len(parsed.rows))
    return parsed


def validate_csv_data(
    parsed: ParsedCsv,
    config: ValidationConfig | None = None,
) -> ValidationReport:
    """Validate a parsed input file before processing.

    Args:
        parsed: Parsed file.
        config: Validation limits.

    Returns:
        Report with every error and warning found, including parse warnings.
    """
    report = ValidationReport(warnings=list(parsed.warnings))

    if not parsed.rows:
        report.errors.append("CSV file is empty or contains only headers")
        return report

    columns = parsed.columns
    for column in INPUT_COLUMNS:
        if column not in columns:
            report.errors.append(f"Missing required column: {column}")

    extra = parsed.extra_columns
    if extra:
        report.warnings.append(
            f"Extra columns found and will be ignored: {', '.join(extra)}"
        )

    for row in parsed.rows:
        report.extend(
            validate_row(
                row.row_number,
                row.input_type,
                row.value1,
                row.value2,
                row.altitude,
                config,
            )
        )

    return report


def format_number(value: float) -> str:
    """Render a number like JavaScript ``Number.prototype.toString``.

    Examples:
        >>> format_number(25.0)
        '25'
        >>> format_number(0.0109)
        '0.0109'
        >>> format_number(float("nan"))
        'NaN'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(float(value))
    magnitude = abs(value)
    if 1e-6 <= magnitude < 1e21:
        # Positional notation in this range.
        return format(Decimal(text), "f")

    mantissa, _, exponent = text.partition("e")
    return f"{mantissa}e{int(exponent):+d}"


def _quote(value: object) -> str:
    if isinstance(value, float):
        value = format_number(value)
    return f'"{value}"'


def generate_output_csv(results: Sequence[RowResult]) -> str:
    """Render resolved rows as output CSV text.

    Args:
        results: Successful rows, in output order.

    Returns:
        CSV text without a trailing newline, or an empty string when there
        are no results.
    """
    if not results:
        return ""

    lines = [",".join(OUTPUT_COLUMNS)]
    for result in results:
        spec, state = result.spec, result.state
        values: list[object] = [
            result.row_number,
            spec.kind.value,
            spec.value1,
            spec.value2,
            spec.altitude,
            state.dbt,
            state.wbt,
            state.rh,
            state.dpt,
            state.humidity_ratio,
            state.enthalpy,
            state.specific_volume,
            state.vapor_pressure,
        ]
        lines.append(",".join(_quote(v) for v in values))

    return "\n".join(lines)


def generate_sample_csv() -> str:
    """Sample input file covering every input kind."""
    lines = [",".join(INPUT_COLUMNS)]
    for row in SAMPLE_ROWS:
        lines.append(",".join(f'"{v}"' for v in row))
    return "\n".join(lines)
