from __future__ import annotations

import re

_QUARTER_RE = re.compile(r"Q(\d) (\d{4})")


def parse_quarter(label: str) -> tuple[int, int] | None:
    # Accepts labels like "Q3 2024"; returns (quarter, year).
    m = _QUARTER_RE.search(label)
    if m is None:
        return None
    return int(m.group(1)), int(m.group(2))


def generate_quarters(start: str, count: int) -> list[str]:
    """`count` consecutive quarter labels starting at `start` (inclusive)."""

    parsed = parse_quarter(start)
    if parsed is None:
        return []

    quarter, year = parsed
    out: list[str] = []
    for _ in range(count):
        out.append(f"Q{quarter} {year}")
        quarter += 1
        if quarter > 4:
            quarter = 1
            year += 1
    return out


def following_periods(last_label: str, count: int) -> list[str]:
    """Labels for the `count` periods after `last_label`.

    Non-quarter labels continue as "<last>+1", "<last>+2", ...
    """

    labels = generate_quarters(last_label, count + 1)[1:]
    if len(labels) == count:
        return labels
    return [f"{last_label}+{k}" for k in range(1, count + 1)]
