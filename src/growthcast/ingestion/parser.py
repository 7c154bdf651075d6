"""Boundary parsing of `label,value` quarterly rows."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from growthcast.data.series import ObservedPoint, PointClass

logger = logging.getLogger(__name__)

MISSING_MARKERS = frozenset({"", "-", "null", "na"})
MIN_ROWS = 8


class DataInputError(ValueError):
    """Raised when raw input rows cannot be accepted. Nothing is committed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def is_missing_marker(raw: str) -> bool:
    return raw.strip().lower() in MISSING_MARKERS


def parse_value(raw: str, line_number: int | None = None) -> float | None:
    """Return the numeric value, or None for a missing marker."""

    text = raw.strip()
    if is_missing_marker(text):
        return None
    try:
        value = float(text)
    except ValueError:
        raise DataInputError(f"Invalid value: {text!r}", line_number) from None
    if not math.isfinite(value):
        raise DataInputError(f"Invalid value: {text!r}", line_number)
    if value < 0:
        raise DataInputError(f"Value cannot be negative: {text!r}", line_number)
    return value


def parse_rows(lines: Iterable[str], min_rows: int = MIN_ROWS) -> list[ObservedPoint]:
    """Parse `period,value` lines into observed points.

    Rules:
      - blank lines are ignored
      - every other line has exactly two comma-separated fields
      - value is a non-negative number or a missing marker ("", "-", "null", "na")
      - at least `min_rows` rows must remain

    Any violation rejects the whole batch with DataInputError.
    """

    points: list[ObservedPoint] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        parts = line.split(",")
        if len(parts) != 2:
            raise DataInputError(
                f"Expected 2 comma-separated fields (period,value), got {len(parts)}", line_number
            )

        period = parts[0].strip()
        value = parse_value(parts[1], line_number)
        missing = value is None
        points.append(
            ObservedPoint(
                period_label=period,
                value=value,
                is_missing=missing,
                classification=PointClass.MISSING if missing else PointClass.ORIGINAL,
            )
        )

    if len(points) < min_rows:
        raise DataInputError(f"At least {min_rows} data rows are required for fitting, got {len(points)}")

    logger.info(
        f"Parsed {len(points)} rows ({sum(p.is_missing for p in points)} missing)"
    )
    return points


def parse_text(text: str, min_rows: int = MIN_ROWS) -> list[ObservedPoint]:
    return parse_rows(text.strip().splitlines(), min_rows=min_rows)
