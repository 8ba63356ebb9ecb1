"""Media & Platform Analysis: media consumption and platform usage."""

from __future__ import annotations

from crosstabber.analysis.cells import rank_by_index
from crosstabber.analysis.metrics import percent_of, round_half_up
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab, DataCell
from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    mentions_any,
    row_label,
)

DOMINANT_INDEX = 130

_MEDIA_ROW_KEYS = ("social", "platform", "media")
_SOCIAL_QUESTION = "q42011"
_SOCIAL_PLATFORMS = ("facebook", "instagram", "tiktok", "twitter", "linkedin", "youtube", "snapchat")
_TRADITIONAL = ("tv", "television", "radio", "newspaper", "magazine", "print")
_DIGITAL = ("stream", "podcast", "ott", "vod", "online video")


def _applies(crosstab: Crosstab) -> bool:
    return any(
        mentions_any(r.name, _MEDIA_ROW_KEYS) or "q420" in r.id
        for r in crosstab.rows
    )


def _mean_reach(cells: list[DataCell]) -> float:
    return sum(c.metrics.audience_percentage for c in cells) / max(len(cells), 1)


def media_archetype(social: float, digital: float, traditional: float) -> str:
    if social > traditional and social > digital:
        return "Social-First"
    if digital > traditional:
        return "Digital-Native"
    return "Multi-Channel"


def _analyze(crosstab: Crosstab, analysis: Analysis) -> TemplateAnalysis:
    valid = analysis.statistics.statistically_significant
    social = rank_by_index([
        c for c in valid
        if _SOCIAL_QUESTION in c.datapoint or mentions_any(c.datapoint, _SOCIAL_PLATFORMS)
    ])
    traditional = [c for c in valid if mentions_any(c.datapoint, _TRADITIONAL)]
    digital = [c for c in valid if mentions_any(c.datapoint, _DIGITAL)]
    dominant = rank_by_index([c for c in valid if c.index > DOMINANT_INDEX])

    social_reach = _mean_reach(social)
    traditional_reach = _mean_reach(traditional)
    digital_reach = _mean_reach(digital)
    total_reach = social_reach + digital_reach + traditional_reach
    archetype = media_archetype(social_reach, digital_reach, traditional_reach)

    if dominant:
        channels = ", ".join(
            f"{row_label(crosstab, c.datapoint)} ({round_half_up(c.index)})" for c in dominant[:4]
        )
        must_have = f"**Must-Have Channels**: {channels}"
    else:
        must_have = "**Fragmented Consumption**: No single dominant platform - omnichannel approach required"

    if social:
        over = sum(1 for c in social if c.index > 120)
        social_line = (
            f"**Social Media**: {over}/{len(social)} platforms over-index. "
            f"Top: {row_label(crosstab, social[0].datapoint)}"
        )
    else:
        social_line = "**Limited Social**: Low social media engagement - consider alternative channels"

    if archetype == "Social-First":
        strategy = "**Platform Strategy**: Prioritize social-native content and influencer partnerships"
    elif archetype == "Digital-Native":
        strategy = "**Platform Strategy**: Invest in streaming, OTT, and programmatic digital"
    else:
        strategy = "**Platform Strategy**: Integrated approach across channels required for reach"

    if dominant:
        top = ", ".join(row_label(crosstab, c.datapoint) for c in dominant[:3])
        channel_priority = f"**Channel Priority**: Focus 70% of media budget on {top}"
    else:
        channel_priority = "**Channel Priority**: No dominant channel; reserve budget to test channels"

    social_ids = {c.datapoint for c in social}
    dominant_social = sum(1 for c in dominant if c.datapoint in social_ids)
    if dominant_social > 2:
        creative = (
            "**Creative Format**: Prioritize short-form, social-native content for "
            f"{dominant_social} high-index social platforms"
        )
    else:
        creative = "**Creative Format**: Long-form content may resonate better given lower social media dominance"

    return TemplateAnalysis(
        summary=(
            f"{archetype} media profile with {len(dominant)} dominant platforms. "
            f"{len(social)} social, {len(digital)} digital, {len(traditional)} traditional "
            "touchpoints analyzed."
        ),
        key_metrics=[
            KeyMetric(
                label="Media Archetype",
                value=archetype,
                context="Primary consumption pattern",
                significance="neutral",
            ),
            KeyMetric(
                label="Social Media Affinity",
                value=f"{round_half_up(social_reach)}%",
                context=f"Across {len(social)} platforms",
                significance="positive" if social_reach > 60 else "neutral",
            ),
            KeyMetric(
                label="Digital Media Affinity",
                value=f"{round_half_up(digital_reach)}%",
                context=f"Across {len(digital)} channels",
                significance="positive" if digital_reach > 50 else "neutral",
            ),
            KeyMetric(
                label="Dominant Platforms",
                value=len(dominant),
                context="With index >130",
                significance="positive",
            ),
        ],
        insights=[
            must_have,
            social_line,
            f"**Media Mix Balance**: {percent_of(social_reach + digital_reach, total_reach)}% "
            "digital vs traditional",
            strategy,
        ],
        recommendations=[
            channel_priority,
            creative,
            f"**Budget Allocation**: {percent_of(social_reach, total_reach)}% social, "
            f"{percent_of(digital_reach, total_reach)}% digital, "
            f"{percent_of(traditional_reach, total_reach)}% traditional",
            "**Diversification**: Limited dominant platforms suggest experimental budget for channel discovery"
            if len(dominant) < 3
            else "**Concentration**: Strong platform affinity enables concentrated media approach",
        ],
    )


MEDIA_CONSUMPTION = AnalysisTemplate(
    name="Media & Platform Analysis",
    description="Analyze media consumption, platform usage, and content preferences",
    applicable_when=_applies,
    analyze=_analyze,
)
