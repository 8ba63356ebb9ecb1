"""Data structures for crosstab analysis results.

These are plain dataclasses (not Pydantic) because they're ephemeral, computed
from a crosstab on every request, and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from crosstabber.models import DataCell


class Significance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightType(str, Enum):
    """The ten fixed insight categories, in extraction order."""

    STRONG_AFFINITY = "STRONG_AFFINITY"
    MODERATE_AFFINITY = "MODERATE_AFFINITY"
    HIGH_REACH = "HIGH_REACH"
    NICHE_TARGETING = "NICHE_TARGETING"
    MARKET_VARIATION = "MARKET_VARIATION"
    TREND = "TREND"
    NEGATIVE_AFFINITY = "NEGATIVE_AFFINITY"
    MODERATE_NEGATIVE = "MODERATE_NEGATIVE"
    HIGH_CONFIDENCE = "HIGH_CONFIDENCE"
    BASELINE = "BASELINE"


@dataclass
class IndexedItem:
    """Display-ready projection of a data cell."""

    label: str  # "row name - column name - segment"
    index: int
    percentage: int
    sample: int
    segment: str | None = None


@dataclass
class MarketSpread:
    """Index spread for one datapoint across market segments."""

    datapoint: str
    spread: float
    max: float
    min: float


@dataclass
class TrendRecord:
    """Index change for one datapoint between the first and last wave."""

    datapoint: str
    change: float
    direction: str  # "increasing" or "decreasing"
    first_value: float
    last_value: float


@dataclass
class Insight:
    type: InsightType
    title: str
    description: str
    significance: Significance
    data: list[DataCell | MarketSpread | TrendRecord] = field(default_factory=list)


@dataclass
class Recommendation:
    title: str
    description: str
    priority: Priority
    market: str | None = None  # upper-cased market code


@dataclass
class Dimensions:
    rows: int
    columns: int
    total_cells: int  # rows x columns as declared, not len(data)


@dataclass
class StructureAnalysis:
    dimensions: Dimensions
    markets: list[str]
    time_periods: list[str]
    audiences: list[str]
    data_points: list[str]  # distinct datapoint ids, first-seen order


@dataclass
class Averages:
    mean_index: int
    mean_sample: int


@dataclass
class StatisticsAnalysis:
    top_indexes: list[IndexedItem] = field(default_factory=list)
    bottom_indexes: list[IndexedItem] = field(default_factory=list)
    over_indexed: list[IndexedItem] = field(default_factory=list)
    under_indexed: list[IndexedItem] = field(default_factory=list)
    statistically_significant: list[DataCell] = field(default_factory=list)
    averages: Averages | None = None  # None when no cell meets the sample floor


@dataclass
class Analysis:
    """Complete analysis of one crosstab, passed to the renderers."""

    structure: StructureAnalysis
    statistics: StatisticsAnalysis
    insights: list[Insight]
    recommendations: list[Recommendation]

    @property
    def is_directional(self) -> bool:
        """True when no cell met the sample floor."""
        return self.statistics.averages is None
