"""Horizontal-bar chart specs for the chat UI.

The chat client draws these directly, so field names follow the client's
camelCase wire format on export (see ``ChartConfig``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from crosstabber.analysis.models import Analysis, IndexedItem

DEFAULT_MAX_LABEL_LENGTH = 35
TOP_CHART_ITEMS = 10
UNDER_CHART_ITEMS = 8
# Under-indexed chart is only worth drawing with at least this many items
MIN_UNDER_INDEXED = 5


@dataclass
class ChartPoint:
    label: str
    value: int
    percentage: int
    sample: int


@dataclass
class ChartConfig:
    xAxisLabel: str = "Index"  # noqa: N815
    yAxisLabel: str = "Behavior"  # noqa: N815
    referenceValue: int = 100  # noqa: N815
    maxItems: int = TOP_CHART_ITEMS  # noqa: N815
    colorScheme: str = "blue"  # noqa: N815


@dataclass
class ChartSpec:
    id: str
    title: str
    subtitle: str
    data: list[ChartPoint] = field(default_factory=list)
    config: ChartConfig = field(default_factory=ChartConfig)
    type: str = "horizontalBar"


def truncate_label(label: str, max_length: int = DEFAULT_MAX_LABEL_LENGTH) -> str:
    """Shorten *label* to *max_length* characters, ending in ``...``."""
    if len(label) <= max_length:
        return label
    return label[: max_length - 3] + "..."


def _points(items: list[IndexedItem], limit: int, max_label_length: int) -> list[ChartPoint]:
    return [
        ChartPoint(
            label=truncate_label(item.label, max_label_length),
            value=item.index,
            percentage=item.percentage,
            sample=item.sample,
        )
        for item in items[:limit]
    ]


def build_index_charts(
    analysis: Analysis,
    crosstab_name: str,
    *,
    max_label_length: int = DEFAULT_MAX_LABEL_LENGTH,
) -> list[ChartSpec]:
    """Top-indexed chart (when there is anything ranked) plus an optional
    under-indexed chart."""
    stats = analysis.statistics
    charts: list[ChartSpec] = []

    if stats.top_indexes:
        if stats.over_indexed:
            title = "Top Over-Indexed Behaviors"
            subtitle = f"Behaviors where {crosstab_name} audience over-indexes vs. average"
        else:
            title = "Top Behaviors by Index"
            subtitle = "Top behaviors sorted by index value (100 = average)"
        charts.append(
            ChartSpec(
                id="top-indexed-chart",
                title=title,
                subtitle=subtitle,
                data=_points(stats.top_indexes, TOP_CHART_ITEMS, max_label_length),
                config=ChartConfig(maxItems=TOP_CHART_ITEMS, colorScheme="blue"),
            )
        )

    if len(stats.under_indexed) >= MIN_UNDER_INDEXED:
        charts.append(
            ChartSpec(
                id="under-indexed-chart",
                title="Notable Under-Indexed Behaviors",
                subtitle="Behaviors where this audience under-indexes vs. average",
                data=_points(stats.under_indexed, UNDER_CHART_ITEMS, max_label_length),
                config=ChartConfig(maxItems=UNDER_CHART_ITEMS, colorScheme="red"),
            )
        )

    return charts
