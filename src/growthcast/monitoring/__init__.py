from .quality import (
    QualityIssue,
    QualityLevel,
    QualityReport,
    Severity,
    analyze,
    recommend_actions,
)

__all__ = [
    "QualityIssue",
    "QualityLevel",
    "QualityReport",
    "Severity",
    "analyze",
    "recommend_actions",
]
