"""Template data structures and the template markdown renderer.

A template is a specialised re-analysis of a crosstab (audience profile,
market comparison, ...) gated by an applicability predicate.  Templates are
static data: frozen dataclasses holding two plain functions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from crosstabber.analysis.matching import resolve_label
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab, DataCell
from crosstabber.utils.markdown import BOLD, HEADING_2, HEADING_3


@dataclass
class KeyMetric:
    label: str
    value: str | int | float
    context: str | None = None
    significance: str | None = None  # "positive", "negative", "neutral"


@dataclass
class TemplateAnalysis:
    summary: str
    key_metrics: list[KeyMetric] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisTemplate:
    name: str
    description: str
    applicable_when: Callable[[Crosstab], bool]
    analyze: Callable[[Crosstab, Analysis], TemplateAnalysis]


# ---------------------------------------------------------------------------
# Helpers shared by the templates
# ---------------------------------------------------------------------------


def row_label(crosstab: Crosstab, datapoint: str) -> str:
    return resolve_label(datapoint, crosstab.rows)


def mentions_any(text: str, needles: Sequence[str]) -> bool:
    """Case-insensitive substring test against several needles."""
    lowered = text.lower()
    return any(n in lowered for n in needles)


def first_cell_for(cells: Sequence[DataCell], datapoint: str) -> DataCell | None:
    for cell in cells:
        if cell.datapoint == datapoint:
            return cell
    return None


def index_significance(avg_index: float) -> str:
    """positive above 110, negative below 90, neutral otherwise."""
    if avg_index > 110:
        return "positive"
    if avg_index < 90:
        return "negative"
    return "neutral"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_METRIC_MARKERS: dict[str | None, str] = {
    "positive": "\U0001f7e2",  # green circle
    "negative": "\U0001f534",  # red circle
}
_NEUTRAL_MARKER = "\u26aa"  # white circle


def format_template_analysis(name: str, analysis: TemplateAnalysis) -> str:
    """Markdown section for one template result."""
    lines: list[str] = [HEADING_2.format(title=name), "", analysis.summary, ""]

    if analysis.key_metrics:
        lines.append(HEADING_3.format(title="Key Metrics"))
        lines.append("")
        for metric in analysis.key_metrics:
            marker = _METRIC_MARKERS.get(metric.significance, _NEUTRAL_MARKER)
            lines.append(f"{marker} {BOLD.format(text=metric.label)}: {metric.value}")
            if metric.context:
                lines.append(f"   {metric.context}")
            lines.append("")

    if analysis.insights:
        lines.append(HEADING_3.format(title="Insights"))
        lines.append("")
        for insight in analysis.insights:
            lines.append(insight)
            lines.append("")

    if analysis.recommendations:
        lines.append(HEADING_3.format(title="Recommendations"))
        lines.append("")
        for i, rec in enumerate(analysis.recommendations, start=1):
            lines.append(f"{i}. {rec}")
            lines.append("")

    return "\n".join(lines)
