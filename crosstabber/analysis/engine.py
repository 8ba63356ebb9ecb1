"""Run the full analysis of one crosstab.

The valid-cell partition is computed once and shared by the statistics,
insight and recommendation stages.  All three are pure; the result depends
only on the crosstab.
"""

from __future__ import annotations

import logging
import time

from crosstabber.analysis.cells import partition_cells
from crosstabber.analysis.insights import extract_insights
from crosstabber.analysis.models import Analysis, Dimensions, StructureAnalysis
from crosstabber.analysis.recommendations import generate_recommendations
from crosstabber.analysis.statistics import calculate_statistics
from crosstabber.models import DEFAULT_BASE_NAME, Crosstab

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Base class for analysis failures."""


class NoDataError(AnalysisError):
    """The crosstab has no data cells (not fetched yet, or still processing)."""

    def __init__(self, crosstab_id: str) -> None:
        super().__init__(f"Crosstab {crosstab_id} has no data to analyze")
        self.crosstab_id = crosstab_id


class InsufficientSampleError(AnalysisError):
    """No cell meets the minimum sample; results would be directional only."""

    def __init__(self, crosstab_id: str, total_cells: int) -> None:
        super().__init__(
            f"Crosstab {crosstab_id} has no cells with sample >= 50 "
            f"({total_cells} cells); data is directional only"
        )
        self.crosstab_id = crosstab_id
        self.total_cells = total_cells


def analyze(crosstab: Crosstab, *, require_valid_sample: bool = False) -> Analysis:
    """Compute structure, statistics, insights and recommendations.

    Raises:
        NoDataError: ``crosstab.data`` is missing or empty.
        InsufficientSampleError: *require_valid_sample* is set and no cell
            has a sample of at least 50.  Without the flag such a crosstab
            analyses to empty rankings with ``averages=None``.
    """
    if not crosstab.data:
        raise NoDataError(crosstab.id)

    log_extra = {"crosstab": crosstab.id}
    cells = partition_cells(crosstab.data)
    logger.info(
        "Analyzing crosstab %s (%d cells, %d valid)",
        crosstab.id,
        len(cells.cells),
        len(cells.valid),
        extra=log_extra,
    )
    if require_valid_sample and not cells.valid:
        raise InsufficientSampleError(crosstab.id, len(cells.cells))

    t0 = time.perf_counter()
    statistics = calculate_statistics(crosstab, cells)
    _log_stage("statistics", t0, log_extra)

    t0 = time.perf_counter()
    insights = extract_insights(crosstab, cells)
    _log_stage("insights", t0, log_extra)

    t0 = time.perf_counter()
    recommendations = generate_recommendations(crosstab, cells, statistics)
    _log_stage("recommendations", t0, log_extra)

    logger.info(
        "Found %d insights and %d recommendations",
        len(insights),
        len(recommendations),
        extra=log_extra,
    )
    return Analysis(
        structure=analyze_structure(crosstab),
        statistics=statistics,
        insights=insights,
        recommendations=recommendations,
    )


def _log_stage(stage: str, started: float, extra: dict[str, str]) -> None:
    logger.debug("%s took %.1f ms", stage, (time.perf_counter() - started) * 1000, extra=extra)


def analyze_structure(crosstab: Crosstab) -> StructureAnalysis:
    data = crosstab.data or []
    audiences = [b.name for b in crosstab.bases or []] or [DEFAULT_BASE_NAME]
    return StructureAnalysis(
        dimensions=Dimensions(
            rows=len(crosstab.rows),
            columns=len(crosstab.columns),
            total_cells=len(crosstab.rows) * len(crosstab.columns),
        ),
        markets=list(crosstab.country_codes),
        time_periods=list(crosstab.wave_codes),
        audiences=audiences,
        data_points=list(dict.fromkeys(c.datapoint for c in data)),
    )
