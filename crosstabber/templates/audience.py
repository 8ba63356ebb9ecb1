"""Audience Profiling: demographic and behavioural profile of one audience."""

from __future__ import annotations

from crosstabber.analysis.cells import rank_by_index
from crosstabber.analysis.metrics import mean_deviation_from_baseline, round_half_up
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab
from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    mentions_any,
    row_label,
)
from crosstabber.utils.markdown import format_count, format_market_list

DEFINING_TRAIT_INDEX = 140
MAX_DEFINING_TRAITS = 8

_MEDIA_KEYS = ("q420", "media", "platform")
_PURCHASE_KEYS = ("purchase", "brand")


def _applies(crosstab: Crosstab) -> bool:
    # A single audience profiled across many attributes
    return crosstab.bases is not None and len(crosstab.bases) == 1 and len(crosstab.rows) > 5


def profile_strength(deviation: float) -> str:
    if deviation > 30:
        return "Strong"
    if deviation > 15:
        return "Moderate"
    return "Weak"


def _analyze(crosstab: Crosstab, analysis: Analysis) -> TemplateAnalysis:
    valid = analysis.statistics.statistically_significant
    media = rank_by_index([c for c in valid if mentions_any(c.datapoint, _MEDIA_KEYS)])
    purchase = [c for c in valid if mentions_any(c.datapoint, _PURCHASE_KEYS)]

    defining = rank_by_index([c for c in valid if c.index > DEFINING_TRAIT_INDEX])
    defining = defining[:MAX_DEFINING_TRAITS]

    deviation = mean_deviation_from_baseline([c.index for c in valid])
    strength = profile_strength(deviation)
    total_sample = sum(c.sample for c in valid)

    core = defining[:3]
    if core:
        names = ", ".join(row_label(crosstab, c.datapoint) for c in core)
        indexes = ", ".join(str(round_half_up(c.index)) for c in core)
        core_identity = f"**Core Identity**: The top defining traits are: {names} (indexes: {indexes})"
    else:
        core_identity = "**Core Identity**: No traits over-index above 140"

    if media:
        media_line = (
            f"**Media Consumption**: {len(media)} media behaviors analyzed, with "
            f"strongest affinity for {row_label(crosstab, media[0].datapoint)}"
        )
    else:
        media_line = "**Media Consumption**: Limited media data available"

    if purchase:
        over = sum(1 for c in purchase if c.index > 120)
        purchase_line = f"**Purchase Behavior**: Shows {over} over-indexed purchase behaviors"
    else:
        purchase_line = "**Purchase Behavior**: Insufficient purchase data"

    markets = crosstab.country_codes
    targeting = (
        "**Targeting**: Strong profile enables precise targeting; consider lookalike modeling"
        if strength == "Strong"
        else "**Targeting**: Consider broader targeting due to weaker differentiation"
    )

    return TemplateAnalysis(
        summary=(
            f"This audience shows a {strength.lower()} profile with {len(defining)} "
            f"defining characteristics that over-index significantly (>140)."
        ),
        key_metrics=[
            KeyMetric(
                label="Profile Strength",
                value=strength,
                context=f"Average deviation from baseline: {round_half_up(deviation)} points",
                significance="positive" if strength == "Strong" else "neutral",
            ),
            KeyMetric(
                label="Total Sample Size",
                value=format_count(total_sample),
                context="Respondents across all data points",
            ),
            KeyMetric(
                label="Defining Traits",
                value=len(defining),
                context="Behaviors with index >140",
                significance="positive",
            ),
        ],
        insights=[
            core_identity,
            media_line,
            purchase_line,
            f"**Market Coverage**: Data spans {len(markets)} market(s): {format_market_list(markets)}",
        ],
        recommendations=[
            "**Messaging**: Focus creative on the top 3 defining traits to ensure resonance",
            "**Channel Strategy**: Prioritize the over-indexed media platforms for efficient reach",
            targeting,
            f"**Content**: Create content that aligns with the {len(defining[:5])} top interests and behaviors",
        ],
    )


AUDIENCE_PROFILING = AnalysisTemplate(
    name="Audience Profiling",
    description="Comprehensive demographic and behavioral profile of an audience",
    applicable_when=_applies,
    analyze=_analyze,
)
