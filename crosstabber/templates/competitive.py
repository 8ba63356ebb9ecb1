"""Competitive Comparison: brands or products laid out as columns."""

from __future__ import annotations

from dataclasses import dataclass, field

from crosstabber.analysis.cells import rank_by_index
from crosstabber.analysis.matching import find_matching_definition
from crosstabber.analysis.metrics import mean, round_half_up
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab, DataCell, Definition
from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    index_significance,
    mentions_any,
)

ADVANTAGE_INDEX = 130
SHARED_STRENGTH_INDEX = 120
TOP_STRENGTHS = 5

_COMPETITIVE_ROW_KEYS = ("consider", "brand", "use")


@dataclass
class CompetitorProfile:
    competitor: Definition
    avg_index: int
    sample_size: int
    data_points: int
    top_strengths: list[DataCell] = field(default_factory=list)
    advantages: list[DataCell] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.competitor.name or self.competitor.id


def _applies(crosstab: Crosstab) -> bool:
    return len(crosstab.columns) >= 2 and any(
        mentions_any(r.name, _COMPETITIVE_ROW_KEYS) for r in crosstab.rows
    )


def build_competitor_profiles(crosstab: Crosstab) -> list[CompetitorProfile]:
    """One profile per column, with unique advantages resolved.

    Each cell belongs to the column its audience id resolves to.
    """
    data = crosstab.data or []
    cells_by_column: dict[str, list[DataCell]] = {c.id: [] for c in crosstab.columns}
    for cell in data:
        column = find_matching_definition(cell.audience, crosstab.columns)
        if column is not None:
            cells_by_column[column.id].append(cell)

    profiles: list[CompetitorProfile] = []
    for column in crosstab.columns:
        cells = cells_by_column[column.id]
        valid = [c for c in cells if c.is_valid]
        avg = mean([c.index for c in valid])
        profiles.append(
            CompetitorProfile(
                competitor=column,
                avg_index=round_half_up(avg) if avg is not None else 0,
                sample_size=sum(c.sample for c in cells),
                data_points=len(cells),
                top_strengths=rank_by_index(valid)[:TOP_STRENGTHS],
            )
        )

    for profile in profiles:
        others = [p for p in profiles if p is not profile]
        for strength in profile.top_strengths:
            shared = any(
                s.datapoint == strength.datapoint and s.index > SHARED_STRENGTH_INDEX
                for other in others
                for s in other.top_strengths
            )
            if not shared and strength.index > ADVANTAGE_INDEX:
                profile.advantages.append(strength)
    return profiles


def _analyze(crosstab: Crosstab, analysis: Analysis) -> TemplateAnalysis:
    profiles = build_competitor_profiles(crosstab)
    if not profiles:
        return TemplateAnalysis(summary="No brands or products to compare.")
    leader = max(profiles, key=lambda p: p.avg_index)
    lowest = min(p.avg_index for p in profiles)
    differentiated = sum(1 for p in profiles if p.advantages)
    total_advantages = sum(len(p.advantages) for p in profiles)

    insights = [
        f"**Market Leader**: {leader.name} shows strongest overall performance "
        f"(avg index: {leader.avg_index})"
    ]
    for p in profiles:
        positioning = (
            f"{len(p.advantages)} unique strength(s) - differentiated positioning"
            if p.advantages
            else "No unique strengths - consider repositioning"
        )
        top = round_half_up(p.top_strengths[0].index) if p.top_strengths else "N/A"
        insights.append(f"**{p.name}**: {positioning} | Top behavior: index {top}")
    insights.append(
        f"**Competitive Dynamics**: {differentiated} of {len(profiles)} competitors have clear differentiation"
    )
    insights.append(
        f"**Market Structure**: {leader.avg_index - lowest} point gap between leader and follower"
    )

    recommendations = [
        f"**If you are {leader.name}**: Defend leadership by investing in top "
        f"{len(leader.advantages)} unique strengths"
    ]
    for p in profiles:
        if p is leader:
            continue
        if p.advantages:
            recommendations.append(
                f"**If you are {p.name}**: Lean into {len(p.advantages)} unique strength(s) for differentiation"
            )
        else:
            recommendations.append(
                f"**If you are {p.name}**: Develop new positioning - current approach lacks differentiation"
            )
    if total_advantages > len(profiles) * 2:
        category = "Fragmented market with room for multiple winners in different niches"
    else:
        category = "Concentrated market - consider alliance or acquisition strategies"
    recommendations.append(f"**Category Strategy**: {category}")
    recommendations.append(
        f"**Watch List**: Monitor {leader.name}'s top behaviors for early warning of competitive threats"
    )

    return TemplateAnalysis(
        summary=(
            f"Competitive analysis of {len(profiles)} brands/products. {leader.name} leads "
            f"with average index of {leader.avg_index}."
        ),
        key_metrics=[
            KeyMetric(
                label=p.name,
                value=f"Index: {p.avg_index}",
                context=f"{p.data_points} behaviors analyzed",
                significance=index_significance(p.avg_index),
            )
            for p in profiles
        ],
        insights=insights,
        recommendations=recommendations,
    )


COMPETITIVE_COMPARISON = AnalysisTemplate(
    name="Competitive Comparison",
    description="Compare multiple brands or products within a category",
    applicable_when=_applies,
    analyze=_analyze,
)
