"""Built-in demo dataset: 20 quarters of cumulative account counts."""

from __future__ import annotations

SAMPLE_PERIODS: tuple[str, ...] = tuple(
    f"Q{q} {year}" for year in range(2020, 2025) for q in range(1, 5)
)

SAMPLE_VALUES: tuple[float, ...] = (
    28988, 75699, 170312, 323900, 475110, 684196, 992318, 1191417, 1331101, 1601099,
    1690404, 1833495, 2024223, 1900206, 1995234, 2186658, 2186357, 2382030, 2270589, 2235095,
)

# Q2 2022 and Q1 2023 are blanked in the demo to exercise interpolation.
DEMO_GAPS: tuple[int, ...] = (9, 12)


def sample_lines(with_gaps: bool = True) -> list[str]:
    """Sample data in the `label,value` text format accepted by the parser."""

    gaps = DEMO_GAPS if with_gaps else ()
    return [
        f"{period},-" if i in gaps else f"{period},{int(value)}"
        for i, (period, value) in enumerate(zip(SAMPLE_PERIODS, SAMPLE_VALUES))
    ]
