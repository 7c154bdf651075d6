"""Input boundary for quarterly series.

This module handles:
- Parsing raw `period,value` rows into observed points
- Recognising missing-value markers
- Rejecting malformed, negative or too-short input wholesale
"""

from .parser import DataInputError, MISSING_MARKERS, parse_rows, parse_text, parse_value  # noqa

__all__ = [
    "DataInputError",
    "MISSING_MARKERS",
    "parse_rows",
    "parse_text",
    "parse_value",
]
