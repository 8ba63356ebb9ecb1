"""Market Comparison: audience characteristics across markets."""

from __future__ import annotations

from dataclasses import dataclass, field

from crosstabber.analysis.cells import rank_by_index
from crosstabber.analysis.metrics import mean, round_half_up
from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab, DataCell
from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    first_cell_for,
    index_significance,
    row_label,
)
from crosstabber.utils.markdown import format_count, format_market_code

UNIVERSAL_INDEX = 120
MARKET_SPECIFIC_INDEX = 130
TOP_BEHAVIORS = 5


@dataclass
class MarketProfile:
    market: str
    sample_size: int
    avg_index: int
    top_behaviors: list[DataCell] = field(default_factory=list)


def _applies(crosstab: Crosstab) -> bool:
    return crosstab.is_multi_market


def build_market_profiles(crosstab: Crosstab) -> dict[str, MarketProfile]:
    """Per-market sample, average index and top valid behaviours.

    Only cells whose segment equals the market code count.
    """
    data = crosstab.data or []
    profiles: dict[str, MarketProfile] = {}
    for market in crosstab.country_codes:
        cells = [c for c in data if c.segment == market]
        avg = mean([c.index for c in cells])
        profiles[market] = MarketProfile(
            market=market,
            sample_size=sum(c.sample for c in cells),
            avg_index=round_half_up(avg) if avg is not None else 0,
            top_behaviors=rank_by_index([c for c in cells if c.is_valid])[:TOP_BEHAVIORS],
        )
    return profiles


def find_universal_behaviors(crosstab: Crosstab) -> list[tuple[str, int]]:
    """Datapoints over-indexing (>120) in every market, with their mean index."""
    data = crosstab.data or []
    markets = crosstab.country_codes
    by_market = {m: [c for c in data if c.segment == m] for m in markets}

    universal: list[tuple[str, int]] = []
    for datapoint in dict.fromkeys(c.datapoint for c in data):
        indexes: list[float] = []
        for m in markets:
            cell = first_cell_for(by_market[m], datapoint)
            if cell is not None:
                indexes.append(cell.index)
        if len(indexes) == len(markets) and all(i > UNIVERSAL_INDEX for i in indexes):
            universal.append((datapoint, round_half_up(sum(indexes) / len(indexes))))
    return universal


def find_market_specific(crosstab: Crosstab) -> dict[str, list[tuple[str, float]]]:
    """Datapoints strong (>130) in exactly one market and >120 nowhere else."""
    data = crosstab.data or []
    markets = crosstab.country_codes
    by_market = {m: [c for c in data if c.segment == m] for m in markets}

    specific: dict[str, list[tuple[str, float]]] = {}
    for datapoint in dict.fromkeys(c.datapoint for c in data):
        indexes: list[tuple[str, float]] = []
        for m in markets:
            cell = first_cell_for(by_market[m], datapoint)
            indexes.append((m, cell.index if cell is not None else 0.0))

        top_market, top_index = max(indexes, key=lambda mi: mi[1])
        strong = sum(1 for _, i in indexes if i > UNIVERSAL_INDEX)
        if top_index > MARKET_SPECIFIC_INDEX and strong == 1:
            specific.setdefault(top_market, []).append((datapoint, top_index))
    return specific


def _analyze(crosstab: Crosstab, analysis: Analysis) -> TemplateAnalysis:
    markets = crosstab.country_codes
    if not markets:
        return TemplateAnalysis(summary="No markets to compare.")
    profiles = build_market_profiles(crosstab)
    universal = find_universal_behaviors(crosstab)
    specific = find_market_specific(crosstab)

    key_metrics = [
        KeyMetric(
            label=format_market_code(m),
            value=f"Index: {profiles[m].avg_index}",
            context=f"{format_count(profiles[m].sample_size)} respondents",
            significance=index_significance(profiles[m].avg_index),
        )
        for m in markets
    ]

    if universal:
        insights = [
            f"**Universal Appeal**: {len(universal)} behaviors are strong across all markets "
            "(avg index >120), indicating core audience traits that transcend geography"
        ]
    else:
        insights = ["**No Universal Traits**: Markets show distinct profiles requiring localized strategies"]

    for m in markets:
        unique = specific.get(m, [])
        top = profiles[m].top_behaviors[0] if profiles[m].top_behaviors else None
        profile_text = (
            f"{len(unique)} unique strong behaviors. " if unique
            else "Profile similar to other markets. "
        )
        top_text = f"index {round_half_up(top.index)}" if top is not None else "N/A"
        insights.append(f"**{format_market_code(m)}**: {profile_text}Top trait: {top_text}")

    insights.append(
        f"**Market Variation**: {len(specific)} of {len(markets)} markets show distinctive "
        "characteristics requiring localized approaches"
    )

    if len(universal) > 3:
        names = ", ".join(row_label(crosstab, dp) for dp, _ in universal[:3])
        recommendations = [
            f"**Global Strategy**: Lead with universal behaviors ({names}) for consistent global messaging"
        ]
    else:
        recommendations = [
            "**Localized Strategy**: Minimal overlap suggests market-specific campaigns will "
            "perform better than global approach"
        ]
    for m in markets:
        unique = specific.get(m, [])
        if len(unique) > 2:
            recommendations.append(
                f"**{format_market_code(m)} Tactics**: Emphasize the {len(unique)} "
                "market-specific behaviors for local resonance"
            )
    best = max(markets, key=lambda m: profiles[m].avg_index)
    recommendations.append(
        f"**Budget Allocation**: Consider weighting toward {format_market_code(best)} which shows "
        f"strongest overall affinity (index: {profiles[best].avg_index})"
    )

    return TemplateAnalysis(
        summary=(
            f"Cross-market analysis reveals {len(universal)} universal behaviors and "
            f"{len(specific)} markets with unique characteristics."
        ),
        key_metrics=key_metrics,
        insights=insights,
        recommendations=recommendations,
    )


MARKET_COMPARISON = AnalysisTemplate(
    name="Market Comparison",
    description="Compare audience characteristics across multiple markets",
    applicable_when=_applies,
    analyze=_analyze,
)
