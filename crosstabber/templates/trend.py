"""Trend Analysis: behaviour changes across survey waves."""

from __future__ import annotations

from dataclasses import dataclass

from crosstabber.analysis.metrics import mean, round_half_up
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab
from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    first_cell_for,
    row_label,
)

MIN_CHANGE = 15
HIGH_CHANGE = 30
MEDIUM_CHANGE = 20
DIRECTION_BAND = 5


@dataclass
class WaveTrend:
    datapoint: str
    change: float
    pct_change: int
    first: float
    last: float
    direction: str  # "Growing" or "Declining"
    significance: str  # "high", "medium", "low"


def _applies(crosstab: Crosstab) -> bool:
    return crosstab.is_multi_wave


def _significance(change: float) -> str:
    if abs(change) > HIGH_CHANGE:
        return "high"
    if abs(change) > MEDIUM_CHANGE:
        return "medium"
    return "low"


def find_wave_trends(crosstab: Crosstab) -> list[WaveTrend]:
    """Datapoints moving more than 15 points between their first and last wave.

    Unlike the base TREND insight this walks every declared wave and uses the
    first and last wave in which the datapoint actually appears.  Cells
    without an explicit wave are ignored here.
    """
    data = crosstab.data or []
    by_wave = {w: [c for c in data if c.wave == w] for w in crosstab.wave_codes}

    trends: list[WaveTrend] = []
    for datapoint in dict.fromkeys(c.datapoint for c in data):
        values: list[float] = []
        for wave in crosstab.wave_codes:
            cell = first_cell_for(by_wave[wave], datapoint)
            if cell is not None:
                values.append(cell.index)
        if len(values) < 2:
            continue

        first, last = values[0], values[-1]
        change = last - first
        if abs(change) <= MIN_CHANGE:
            continue
        pct_change = round_half_up(change / first * 100) if first else 0
        trends.append(
            WaveTrend(
                datapoint=datapoint,
                change=change,
                pct_change=pct_change,
                first=first,
                last=last,
                direction="Growing" if change > 0 else "Declining",
                significance=_significance(change),
            )
        )
    return sorted(trends, key=lambda t: abs(t.change), reverse=True)


def trend_direction(avg_change: float) -> str:
    if avg_change > DIRECTION_BAND:
        return "Strengthening"
    if avg_change < -DIRECTION_BAND:
        return "Weakening"
    return "Stable"


def _describe(crosstab: Crosstab, trends: list[WaveTrend]) -> str:
    parts = []
    for t in trends:
        sign = "+" if t.change > 0 else ""
        parts.append(f"{row_label(crosstab, t.datapoint)} ({sign}{round_half_up(t.change)} pts)")
    return ", ".join(parts)


def _analyze(crosstab: Crosstab, analysis: Analysis) -> TemplateAnalysis:
    waves = crosstab.wave_codes
    if not waves:
        return TemplateAnalysis(summary="No waves to compare.")
    trends = find_wave_trends(crosstab)
    growing = [t for t in trends if t.change > 0]
    declining = [t for t in trends if t.change < 0]
    volatile = [t for t in trends if t.significance == "high"]

    avg_change = mean([t.change for t in trends]) or 0.0
    direction = trend_direction(avg_change)
    if direction == "Strengthening":
        direction_significance = "positive"
    elif direction == "Weakening":
        direction_significance = "negative"
    else:
        direction_significance = "neutral"

    if direction == "Strengthening":
        outlook = "**Opportunity**: Strengthening profile suggests growing market opportunity"
    elif direction == "Weakening":
        outlook = "**Risk**: Weakening profile may indicate category decline or audience shift"
    else:
        outlook = "**Maturity**: Stable profile suggests established, predictable audience"

    insights = [
        f"**Emerging Opportunities**: Top growing behaviors are {_describe(crosstab, growing[:3])}"
        if growing
        else "**No Growth**: No behaviors showing significant growth - audience may be maturing",
        f"**Declining Affinities**: Watch for erosion in {_describe(crosstab, declining[:3])}"
        if declining
        else "**Stable Profile**: No significant behavioral declines observed",
        f"**Volatility**: {len(volatile)} behaviors show high volatility (>30 point swings)",
        outlook,
    ]

    if growing:
        leaders = ", ".join(row_label(crosstab, t.datapoint) for t in growing[:2])
        growth_rec = (
            f"**Invest in Growth**: Double down on emerging behaviors - {leaders} "
            "showing strongest momentum"
        )
    else:
        growth_rec = "**Maintain Position**: Focus on defending current strengths rather than chasing growth"

    recommendations = [
        growth_rec,
        "**Address Declines**: Investigate causes of declining behaviors and consider whether to fight or pivot"
        if declining
        else "**Sustain Engagement**: Continue current strategies to maintain stability",
        f"**Forecast Planning**: Use {round_half_up(avg_change)} point quarterly change rate for "
        f"{'continued' if len(waves) > 2 else 'future'} projections",
        "**Monitor Closely**: High volatility requires frequent re-evaluation of strategy"
        if len(volatile) > 5
        else "**Long-term Planning**: Low volatility enables longer planning horizons",
    ]

    return TemplateAnalysis(
        summary=(
            f"Across {len(waves)} time periods, detected {len(trends)} significant behavioral "
            f"changes. Overall audience profile is {direction.lower()}."
        ),
        key_metrics=[
            KeyMetric(
                label="Trend Direction",
                value=direction,
                context=f"Average change: {round_half_up(avg_change)} index points",
                significance=direction_significance,
            ),
            KeyMetric(
                label="Growing Behaviors",
                value=len(growing),
                context=f"{sum(1 for t in growing if t.significance == 'high')} with high significance",
                significance="positive",
            ),
            KeyMetric(
                label="Declining Behaviors",
                value=len(declining),
                context=f"{sum(1 for t in declining if t.significance == 'high')} with high significance",
                significance="negative",
            ),
            KeyMetric(
                label="Time Range",
                value=f"{waves[0]} to {waves[-1]}",
                context=f"{len(waves)} waves",
            ),
        ],
        insights=insights,
        recommendations=recommendations,
    )


TREND_ANALYSIS = AnalysisTemplate(
    name="Trend Analysis",
    description="Analyze changes in behaviors over time periods",
    applicable_when=_applies,
    analyze=_analyze,
)
