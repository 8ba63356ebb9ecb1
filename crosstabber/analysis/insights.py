"""Categorical insight extraction.

Each insight category is an ``InsightRule`` in the ordered ``INSIGHT_RULES``
registry.  Rules are independent: a cell can support several insights, and a
rule whose subset is empty emits nothing.  Eight rules are plain index /
reach / sample thresholds built by ``_threshold_rule``; market variation and
trend detection need cross-cell grouping and have their own builders.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from crosstabber.analysis.cells import CellSet, rank_by_index
from crosstabber.analysis.metrics import spread
from crosstabber.analysis.models import (
    Insight,
    InsightType,
    MarketSpread,
    Significance,
    TrendRecord,
)
from crosstabber.models import Crosstab, DataCell

logger = logging.getLogger(__name__)

MAX_SUPPORTING_CELLS = 10
MAX_SPREAD_EXAMPLES = 5
MARKET_SPREAD_THRESHOLD = 30
TREND_CHANGE_THRESHOLD = 20
HIGH_CONFIDENCE_SAMPLE = 200

UNKNOWN_SEGMENT = "unknown"

CellOrder = Callable[[Sequence[DataCell]], list[DataCell]]


@dataclass(frozen=True)
class InsightRule:
    type: InsightType
    build: Callable[[Crosstab, CellSet], Insight | None]


# ---------------------------------------------------------------------------
# Supporting-data orderings
# ---------------------------------------------------------------------------


def _by_index_desc(cells: Sequence[DataCell]) -> list[DataCell]:
    return rank_by_index(cells)


def _by_index_asc(cells: Sequence[DataCell]) -> list[DataCell]:
    return rank_by_index(cells, descending=False)


def _by_reach_desc(cells: Sequence[DataCell]) -> list[DataCell]:
    return sorted(cells, key=lambda c: c.metrics.audience_percentage, reverse=True)


def _input_order(cells: Sequence[DataCell]) -> list[DataCell]:
    return list(cells)


# ---------------------------------------------------------------------------
# Threshold rules
# ---------------------------------------------------------------------------


def _threshold_rule(
    insight_type: InsightType,
    significance: Significance,
    title: str,
    predicate: Callable[[DataCell], bool],
    describe: Callable[[int], str],
    order: CellOrder,
) -> InsightRule:
    """Build a rule that selects valid cells matching *predicate*."""

    def build(crosstab: Crosstab, cells: CellSet) -> Insight | None:
        matching = [c for c in cells.valid if predicate(c)]
        if not matching:
            return None
        return Insight(
            type=insight_type,
            title=title,
            description=describe(len(matching)),
            significance=significance,
            data=list(order(matching)[:MAX_SUPPORTING_CELLS]),
        )

    return InsightRule(type=insight_type, build=build)


STRONG_AFFINITY = _threshold_rule(
    InsightType.STRONG_AFFINITY,
    Significance.HIGH,
    "Strong Behavioral Affinities Detected",
    lambda c: c.index > 150,
    lambda n: (
        f"Found {n} behaviors with very high over-indexing (>150). "
        "These represent core characteristics of the audience."
    ),
    _by_index_desc,
)

MODERATE_AFFINITY = _threshold_rule(
    InsightType.MODERATE_AFFINITY,
    Significance.MEDIUM,
    "Moderate Over-Indexing Behaviors",
    lambda c: 120 <= c.index <= 150,
    lambda n: (
        f"Found {n} behaviors with moderate over-indexing (120-150). "
        "These represent secondary audience characteristics worth considering."
    ),
    _by_index_desc,
)

HIGH_REACH = _threshold_rule(
    InsightType.HIGH_REACH,
    Significance.HIGH,
    "High Reach Opportunities",
    lambda c: c.metrics.audience_percentage >= 50 and c.index >= 100,
    lambda n: (
        f"Found {n} behaviors with high audience penetration (>=50%) and "
        "positive indexing. These offer scale for broad campaigns."
    ),
    _by_reach_desc,
)

NICHE_TARGETING = _threshold_rule(
    InsightType.NICHE_TARGETING,
    Significance.MEDIUM,
    "Niche Targeting Opportunities",
    lambda c: c.index >= 140 and c.metrics.audience_percentage < 30,
    lambda n: (
        f"Found {n} behaviors with high over-indexing but lower reach (<30%). "
        "These are ideal for precision targeting strategies."
    ),
    _by_index_desc,
)

NEGATIVE_AFFINITY = _threshold_rule(
    InsightType.NEGATIVE_AFFINITY,
    Significance.MEDIUM,
    "Notable Negative Affinities",
    lambda c: c.index < 50,
    lambda n: (
        f"Found {n} behaviors with strong under-indexing (<50). These represent "
        "areas where the audience differs significantly from the general population."
    ),
    _by_index_asc,
)

MODERATE_NEGATIVE = _threshold_rule(
    InsightType.MODERATE_NEGATIVE,
    Significance.LOW,
    "Moderate Under-Indexing Behaviors",
    lambda c: 50 <= c.index <= 80,
    lambda n: (
        f"Found {n} behaviors with moderate under-indexing (50-80). "
        "Consider avoiding or de-prioritizing these in targeting."
    ),
    _by_index_asc,
)

HIGH_CONFIDENCE = _threshold_rule(
    InsightType.HIGH_CONFIDENCE,
    Significance.HIGH,
    "High Confidence Findings",
    lambda c: c.sample >= HIGH_CONFIDENCE_SAMPLE,
    lambda n: (
        f"Found {n} data points with large sample sizes (n>=200). "
        "These findings are statistically robust."
    ),
    _by_index_desc,
)

BASELINE = _threshold_rule(
    InsightType.BASELINE,
    Significance.LOW,
    "Baseline Behaviors (No Differentiation)",
    lambda c: 95 <= c.index <= 105,
    lambda n: (
        f"Found {n} behaviors where this audience matches the general population "
        "(index 95-105). These don't provide targeting differentiation."
    ),
    _input_order,
)


# ---------------------------------------------------------------------------
# Market variation
# ---------------------------------------------------------------------------


def analyze_market_variations(cells: Sequence[DataCell]) -> list[MarketSpread]:
    """Datapoints whose index spread across segments exceeds 30 points.

    Cells without a segment are grouped under ``"unknown"``.  Within a
    segment only the first cell for each datapoint counts.
    """
    by_market: dict[str, dict[str, DataCell]] = {}
    for cell in cells:
        group = by_market.setdefault(cell.segment or UNKNOWN_SEGMENT, {})
        group.setdefault(cell.datapoint, cell)

    if len(by_market) < 2:
        return []

    variations: list[MarketSpread] = []
    for datapoint in dict.fromkeys(c.datapoint for c in cells):
        indexes = [g[datapoint].index for g in by_market.values() if datapoint in g]
        if len(indexes) < 2:
            continue
        diff = spread(indexes)
        if diff > MARKET_SPREAD_THRESHOLD:
            variations.append(
                MarketSpread(
                    datapoint=datapoint,
                    spread=diff,
                    max=max(indexes),
                    min=min(indexes),
                )
            )
    return variations


def _build_market_variation(crosstab: Crosstab, cells: CellSet) -> Insight | None:
    if not crosstab.is_multi_market:
        return None
    variations = analyze_market_variations(cells.valid)
    if not variations:
        return None
    return Insight(
        type=InsightType.MARKET_VARIATION,
        title="Significant Cross-Market Differences",
        description=(
            f"Found {len(variations)} behaviors with >30 point variation across "
            "markets. Market-specific strategies are recommended."
        ),
        significance=Significance.HIGH,
        data=list(variations[:MAX_SPREAD_EXAMPLES]),
    )


MARKET_VARIATION = InsightRule(InsightType.MARKET_VARIATION, _build_market_variation)


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


def analyze_trends(cells: Sequence[DataCell], wave_codes: Sequence[str]) -> list[TrendRecord]:
    """Changes of more than 20 index points between the first and last wave.

    Only the first and last declared waves are compared.  Cells without a
    wave belong to the first wave.  Sorted by absolute change, largest first.
    """
    if len(wave_codes) < 2:
        return []
    first_wave, last_wave = wave_codes[0], wave_codes[-1]

    by_wave: dict[str, dict[str, DataCell]] = {}
    for cell in cells:
        group = by_wave.setdefault(cell.wave or first_wave, {})
        group.setdefault(cell.datapoint, cell)

    first = by_wave.get(first_wave)
    last = by_wave.get(last_wave)
    if not first or not last:
        return []

    trends: list[TrendRecord] = []
    for datapoint in dict.fromkeys([*first, *last]):
        if datapoint not in first or datapoint not in last:
            continue
        first_value = first[datapoint].index
        last_value = last[datapoint].index
        change = last_value - first_value
        if abs(change) > TREND_CHANGE_THRESHOLD:
            trends.append(
                TrendRecord(
                    datapoint=datapoint,
                    change=change,
                    direction="increasing" if change > 0 else "decreasing",
                    first_value=first_value,
                    last_value=last_value,
                )
            )
    return sorted(trends, key=lambda t: abs(t.change), reverse=True)


def _build_trend(crosstab: Crosstab, cells: CellSet) -> Insight | None:
    if not crosstab.is_multi_wave:
        return None
    trends = analyze_trends(cells.valid, crosstab.wave_codes)
    if not trends:
        return None
    return Insight(
        type=InsightType.TREND,
        title="Temporal Trends Identified",
        description=f"Detected {len(trends)} significant trends across time periods.",
        significance=Significance.MEDIUM,
        data=list(trends),
    )


TREND = InsightRule(InsightType.TREND, _build_trend)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

INSIGHT_RULES: list[InsightRule] = [
    STRONG_AFFINITY,
    MODERATE_AFFINITY,
    HIGH_REACH,
    NICHE_TARGETING,
    MARKET_VARIATION,
    TREND,
    NEGATIVE_AFFINITY,
    MODERATE_NEGATIVE,
    HIGH_CONFIDENCE,
    BASELINE,
]


def extract_insights(
    crosstab: Crosstab,
    cells: CellSet,
    *,
    rules: Sequence[InsightRule] = tuple(INSIGHT_RULES),
) -> list[Insight]:
    """Evaluate every rule in order and keep the ones that fired."""
    insights: list[Insight] = []
    for rule in rules:
        insight = rule.build(crosstab, cells)
        if insight is not None:
            insights.append(insight)
    logger.debug(
        "Crosstab %s: %d insights (%s)",
        crosstab.id,
        len(insights),
        ", ".join(i.type.value for i in insights),
    )
    return insights
