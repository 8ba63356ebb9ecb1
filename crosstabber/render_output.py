"""Render an Analysis as markdown for chat display."""

from __future__ import annotations

import logging

from crosstabber.analysis.cells import rank_by_index
from crosstabber.analysis.matching import resolve_label
from crosstabber.analysis.metrics import round_half_up
from crosstabber.analysis.models import (
    Analysis,
    IndexedItem,
    Insight,
    Priority,
    Recommendation,
    Significance,
)
from crosstabber.models import Crosstab
from crosstabber.templates.base import TemplateAnalysis, format_template_analysis
from crosstabber.utils.markdown import (
    BOLD,
    EMPHASIS,
    FIELD,
    HEADING_1,
    HEADING_2,
    HEADING_3,
    HORIZONTAL_RULE,
    format_count,
    format_market_code,
    format_market_list,
    format_numbered_item,
)

logger = logging.getLogger(__name__)

TOP_ITEMS = 10
MARKET_TOP_ITEMS = 5

_SIGNIFICANCE_MARKERS: dict[Significance, str] = {
    Significance.HIGH: "**HIGH**",
    Significance.MEDIUM: "**MEDIUM**",
    Significance.LOW: "**LOW**",
}

# Low priority is not rendered in the chat view
_RENDERED_PRIORITIES: list[tuple[Priority, str]] = [
    (Priority.HIGH, "High Priority"),
    (Priority.MEDIUM, "Medium Priority"),
]

NO_DATA_MESSAGE = (
    "No data available for this crosstab yet. The configuration was loaded but "
    "no data points were returned; it may still be processing."
)

DIRECTIONAL_NOTE = (
    "No cells meet the minimum sample size of 50. Treat everything here as "
    "directional data only."
)


def format_analysis(crosstab: Crosstab, analysis: Analysis) -> str:
    """Full markdown rendering of the base analysis.

    Sections: header, metadata, key findings, top over-indexed behaviours,
    market breakdown (multi-market only), recommendations.
    """
    lines: list[str] = []

    lines.append(HEADING_1.format(title=f"Analysis: {crosstab.name}"))
    lines.append("")
    lines.extend(_format_metadata(crosstab, analysis))

    lines.append(HEADING_2.format(title="Key Findings"))
    lines.append("")
    if analysis.is_directional:
        lines.append(EMPHASIS.format(text=DIRECTIONAL_NOTE))
        lines.append("")
    lines.extend(_format_insights(analysis.insights))

    lines.append(HEADING_2.format(title="Top Over-Indexed Behaviors"))
    lines.append("")
    lines.extend(_format_top_indexes(analysis.statistics.top_indexes))

    if crosstab.is_multi_market:
        lines.append(HEADING_2.format(title="Market Breakdown"))
        lines.append("")
        lines.extend(_format_market_breakdown(crosstab))

    lines.append(HEADING_2.format(title="Recommendations"))
    lines.append("")
    lines.extend(_format_recommendations(analysis.recommendations))

    return "\n".join(lines)


def format_report(
    crosstab: Crosstab,
    analysis: Analysis,
    template_results: dict[str, TemplateAnalysis] | None = None,
) -> str:
    """Base analysis followed by any specialised template analyses."""
    report = format_analysis(crosstab, analysis)
    if not template_results:
        return report

    parts = [report, HORIZONTAL_RULE, "", HEADING_1.format(title="Specialized Analyses"), ""]
    for name, template_analysis in template_results.items():
        parts.append(format_template_analysis(name, template_analysis))
        parts.append(HORIZONTAL_RULE)
        parts.append("")
    logger.debug("Rendered %d template sections", len(template_results))
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _format_metadata(crosstab: Crosstab, analysis: Analysis) -> list[str]:
    # Total sample counts every cell, valid or not
    total_sample = sum(c.metrics.positive_sample for c in crosstab.data or [])
    return [
        FIELD.format(label="Time Period", value=", ".join(crosstab.wave_codes)),
        FIELD.format(label="Markets", value=format_market_list(crosstab.country_codes)),
        FIELD.format(label="Base", value=crosstab.base_name),
        FIELD.format(label="Total Sample", value=f"{format_count(total_sample)} respondents"),
        FIELD.format(label="Data Points", value=len(analysis.structure.data_points)),
        "",
        HORIZONTAL_RULE,
        "",
    ]


def _format_insights(insights: list[Insight]) -> list[str]:
    if not insights:
        return [EMPHASIS.format(text="No significant insights detected."), ""]

    lines: list[str] = []
    for insight in insights:
        marker = _SIGNIFICANCE_MARKERS[insight.significance]
        lines.append(f"{marker} {BOLD.format(text=insight.title)}")
        lines.append(insight.description)
        lines.append("")
    return lines


def _format_top_indexes(items: list[IndexedItem]) -> list[str]:
    if not items:
        return [EMPHASIS.format(text="No significant over-indexing detected."), ""]

    lines: list[str] = []
    for i, item in enumerate(items[:TOP_ITEMS], start=1):
        lines.extend(
            format_numbered_item(
                i,
                item.label,
                f"- Index: {item.index}",
                f"- {item.percentage}% of audience",
                f"- Sample: {item.sample}",
            )
        )
        lines.append("")
    return lines


def _format_market_breakdown(crosstab: Crosstab) -> list[str]:
    data = crosstab.data or []
    lines: list[str] = []
    for market in crosstab.country_codes:
        market_cells = [c for c in data if c.segment == market]
        if not market_cells:
            continue

        lines.append(HEADING_3.format(title=format_market_code(market)))
        lines.append("")
        top = rank_by_index([c for c in market_cells if c.is_valid])[:MARKET_TOP_ITEMS]
        if not top:
            lines.append(EMPHASIS.format(text="Insufficient sample size for reliable insights."))
        for i, cell in enumerate(top, start=1):
            label = resolve_label(cell.datapoint, crosstab.rows)
            lines.append(
                f"{i}. {BOLD.format(text=label)}: Index {round_half_up(cell.index)}"
            )
        lines.append("")
    return lines


def _format_recommendations(recommendations: list[Recommendation]) -> list[str]:
    if not recommendations:
        return [EMPHASIS.format(text="No specific recommendations generated."), ""]

    lines: list[str] = []
    for priority, heading in _RENDERED_PRIORITIES:
        group = [r for r in recommendations if r.priority == priority]
        if not group:
            continue
        lines.append(HEADING_3.format(title=heading))
        lines.append("")
        for i, rec in enumerate(group, start=1):
            lines.extend(format_numbered_item(i, rec.title, rec.description))
            lines.append("")
    return lines
