"""Prioritised action items derived from statistics and market breakdowns."""

from __future__ import annotations

from crosstabber.analysis.cells import CellSet, cell_label, rank_by_index
from crosstabber.analysis.metrics import percent_of, share
from crosstabber.analysis.models import Priority, Recommendation, StatisticsAnalysis
from crosstabber.models import Crosstab

TOP_LABELS = 3
LOW_SAMPLE_SHARE = 0.3


def generate_recommendations(
    crosstab: Crosstab,
    cells: CellSet,
    statistics: StatisticsAnalysis,
) -> list[Recommendation]:
    """Recommendations whose triggering condition holds; may be empty."""
    recommendations: list[Recommendation] = []

    if statistics.top_indexes:
        labels = ", ".join(i.label for i in statistics.top_indexes[:TOP_LABELS])
        recommendations.append(
            Recommendation(
                title="Leverage Top Affinities",
                description=(
                    f"Focus on the top over-indexed behaviors: {labels}. "
                    "These represent the strongest audience characteristics."
                ),
                priority=Priority.HIGH,
            )
        )

    if crosstab.is_multi_market:
        for market in crosstab.country_codes:
            recommendation = _market_recommendation(crosstab, cells, market)
            if recommendation is not None:
                recommendations.append(recommendation)

    low_sample = cells.invalid_count
    if share(low_sample, len(cells.cells)) > LOW_SAMPLE_SHARE:
        pct = percent_of(low_sample, len(cells.cells))
        recommendations.append(
            Recommendation(
                title="Sample Size Consideration",
                description=(
                    f"{pct}% of cells have sample sizes below 50. Consider these "
                    "findings as directional rather than conclusive."
                ),
                priority=Priority.LOW,
            )
        )

    return recommendations


def _market_recommendation(
    crosstab: Crosstab,
    cells: CellSet,
    market: str,
) -> Recommendation | None:
    # Cells without a segment apply to every market
    in_market = [c for c in cells.valid if c.segment == market or not c.segment]
    top = rank_by_index(in_market)[:TOP_LABELS]
    if not top:
        return None

    code = market.upper()
    labels = ", ".join(cell_label(c, crosstab) for c in top)
    return Recommendation(
        title=f"{code} Market Strategy",
        description=(
            f"In {code}, prioritize these high-index behaviors for targeting "
            f"and messaging: {labels}."
        ),
        priority=Priority.MEDIUM,
        market=code,
    )
