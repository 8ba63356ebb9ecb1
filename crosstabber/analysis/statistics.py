"""Rankings and summary statistics over statistically valid cells."""

from __future__ import annotations

import logging

from crosstabber.analysis.cells import CellSet, rank_by_index, to_indexed_item
from crosstabber.analysis.metrics import mean, round_half_up
from crosstabber.analysis.models import Averages, StatisticsAnalysis
from crosstabber.models import Crosstab

logger = logging.getLogger(__name__)

RANKED_LIST_SIZE = 10
THRESHOLD_LIST_SIZE = 20
OVER_INDEX_THRESHOLD = 120
UNDER_INDEX_THRESHOLD = 80


def calculate_statistics(crosstab: Crosstab, cells: CellSet) -> StatisticsAnalysis:
    """Top/bottom rankings, over/under-indexed subsets and averages.

    With zero valid cells every list is empty and ``averages`` is None.
    """
    ranked = cells.ranked

    top = ranked[:RANKED_LIST_SIZE]
    bottom = list(reversed(ranked[-RANKED_LIST_SIZE:])) if ranked else []

    over = [c for c in ranked if c.index >= OVER_INDEX_THRESHOLD][:THRESHOLD_LIST_SIZE]
    under = rank_by_index(
        [c for c in cells.valid if c.index <= UNDER_INDEX_THRESHOLD],
        descending=False,
    )[:THRESHOLD_LIST_SIZE]

    averages = _averages(cells)
    if averages is None:
        logger.warning(
            "Crosstab %s has no cells with sample >= 50 (%d cells); "
            "rankings are empty.",
            crosstab.id,
            len(cells.cells),
            extra={"crosstab": crosstab.id},
        )

    return StatisticsAnalysis(
        top_indexes=[to_indexed_item(c, crosstab) for c in top],
        bottom_indexes=[to_indexed_item(c, crosstab) for c in bottom],
        over_indexed=[to_indexed_item(c, crosstab) for c in over],
        under_indexed=[to_indexed_item(c, crosstab) for c in under],
        statistically_significant=list(cells.valid),
        averages=averages,
    )


def _averages(cells: CellSet) -> Averages | None:
    mean_index = mean([c.index for c in cells.valid])
    mean_sample = mean([c.sample for c in cells.valid])
    if mean_index is None or mean_sample is None:
        return None
    return Averages(
        mean_index=round_half_up(mean_index),
        mean_sample=round_half_up(mean_sample),
    )
