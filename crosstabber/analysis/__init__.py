"""Crosstab analysis: statistics, insight extraction and recommendations."""

from crosstabber.analysis.engine import (
    AnalysisError,
    InsufficientSampleError,
    NoDataError,
    analyze,
)
from crosstabber.analysis.matching import find_matching_definition, resolve_label
from crosstabber.analysis.models import (
    Analysis,
    IndexedItem,
    Insight,
    InsightType,
    Priority,
    Recommendation,
    Significance,
)

__all__ = [
    "Analysis",
    "AnalysisError",
    "IndexedItem",
    "Insight",
    "InsightType",
    "InsufficientSampleError",
    "NoDataError",
    "Priority",
    "Recommendation",
    "Significance",
    "analyze",
    "find_matching_definition",
    "resolve_label",
]
