"""Follow-up prompts offered to the chat user after an analysis.

Each action is a canned prompt the client can send back as the next user
message.  Which actions are offered depends on what the analysis found:
over- and under-indexing, the kinds of behaviour among the top labels, and
the presence of reach or niche insights.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from crosstabber.analysis.models import Analysis, InsightType

MAX_ACTIONS = 6
# Under-indexing has to be this broad before "what to avoid" is worth asking
MIN_UNDER_INDEXED = 3

# Slots per category when the list has to be cut down to MAX_ACTIONS
_CATEGORY_QUOTAS = (
    ("analysis", 2),
    ("drill-down", 2),
    ("visualization", 1),
    ("export", 1),
)

_SOCIAL_RE = re.compile(r"instagram|tiktok|facebook|twitter|youtube|snapchat|linkedin|social")
_MEDIA_RE = re.compile(r"video|stream|podcast|music|gaming|news|tv|watch")
_SHOPPING_RE = re.compile(r"shop|buy|purchase|brand|retail|ecommerce|amazon")
_LIFESTYLE_RE = re.compile(r"travel|fitness|health|food|fashion|beauty|wellness")


@dataclass
class SuggestedAction:
    id: str
    label: str
    description: str
    prompt: str
    icon: str  # target, compare, chart, trend, filter or export
    category: str  # analysis, drill-down, visualization or export


def build_suggested_actions(
    analysis: Analysis,
    crosstab_name: str,
    *,
    multi_market: bool,
) -> list[SuggestedAction]:
    """Pick the follow-up prompts that fit this analysis.

    Actions come out in a fixed order.  More than ``MAX_ACTIONS`` candidates
    are cut to two analysis, two drill-down, one chart and one export
    action, keeping the earliest of each.
    """
    stats = analysis.statistics
    over = bool(stats.over_indexed)
    under = bool(stats.under_indexed)
    top = bool(stats.top_indexes)
    insight_types = {i.type for i in analysis.insights}
    top_labels = " ".join(i.label.lower() for i in stats.top_indexes)

    actions: list[SuggestedAction] = []

    if over or analysis.recommendations:
        actions.append(
            SuggestedAction(
                id="marketing-strategy",
                label="Marketing Strategy",
                description="Get actionable marketing recommendations based on this data",
                prompt="Based on this analysis, what marketing strategy would you recommend?",
                icon="target",
                category="analysis",
            )
        )
    if top:
        actions.append(
            SuggestedAction(
                id="targeting-opportunities",
                label="Targeting Opportunities",
                description="Identify the best segments to target",
                prompt="What are the best targeting opportunities based on this data?",
                icon="target",
                category="drill-down",
            )
        )
    if multi_market:
        actions.append(
            SuggestedAction(
                id="compare-markets",
                label="Compare Markets",
                description="See how behaviors differ across markets",
                prompt="How do the key behaviors compare across different markets?",
                icon="compare",
                category="analysis",
            )
        )
    if over and under:
        actions.append(
            SuggestedAction(
                id="key-differentiators",
                label="Key Differentiators",
                description="Understand what makes this audience unique",
                prompt=(
                    "What are the key differentiators that make this audience unique "
                    "compared to the general population?"
                ),
                icon="compare",
                category="analysis",
            )
        )

    # Content-driven actions, keyed off the top-ranked labels
    if _SOCIAL_RE.search(top_labels):
        actions.append(
            SuggestedAction(
                id="social-strategy",
                label="Social Media Strategy",
                description="Get platform-specific recommendations",
                prompt=(
                    "Which social media platforms should I prioritize for this audience "
                    "and what content would resonate?"
                ),
                icon="chart",
                category="analysis",
            )
        )
    if _MEDIA_RE.search(top_labels):
        actions.append(
            SuggestedAction(
                id="content-strategy",
                label="Content Strategy",
                description="Get content format and theme recommendations",
                prompt="What content formats and themes would work best for this audience?",
                icon="chart",
                category="analysis",
            )
        )
    if _SHOPPING_RE.search(top_labels):
        actions.append(
            SuggestedAction(
                id="purchase-insights",
                label="Purchase Behavior",
                description="Understand shopping habits and preferences",
                prompt="What are the key purchase behaviors and brand preferences for this audience?",
                icon="trend",
                category="drill-down",
            )
        )
    if _LIFESTYLE_RE.search(top_labels):
        actions.append(
            SuggestedAction(
                id="lifestyle-insights",
                label="Lifestyle Profile",
                description="Explore lifestyle and interests in depth",
                prompt=(
                    "Give me a detailed lifestyle profile of this audience including "
                    "their interests and values"
                ),
                icon="filter",
                category="drill-down",
            )
        )

    if InsightType.HIGH_REACH in insight_types:
        actions.append(
            SuggestedAction(
                id="high-reach",
                label="High Reach Behaviors",
                description="Find behaviors with both high reach and good indexing",
                prompt="What behaviors have high reach that I could use for broad campaigns?",
                icon="chart",
                category="drill-down",
            )
        )
    if InsightType.NICHE_TARGETING in insight_types:
        actions.append(
            SuggestedAction(
                id="niche-targeting",
                label="Niche Segments",
                description="High-index, lower-reach segments for precision targeting",
                prompt="What niche targeting opportunities exist in this data?",
                icon="filter",
                category="drill-down",
            )
        )
    if len(stats.under_indexed) >= MIN_UNDER_INDEXED:
        actions.append(
            SuggestedAction(
                id="avoid-behaviors",
                label="What to Avoid",
                description="Behaviors this audience under-indexes on",
                prompt=(
                    "What behaviors does this audience under-index on? "
                    "What should I avoid in my campaigns?"
                ),
                icon="filter",
                category="drill-down",
            )
        )
    if analysis.insights:
        actions.append(
            SuggestedAction(
                id="audience-persona",
                label="Audience Persona",
                description="Get a narrative profile of this audience",
                prompt=(
                    "Create a detailed audience persona based on this data, including "
                    "demographics, interests, and behaviors"
                ),
                icon="target",
                category="analysis",
            )
        )
    if over:
        actions.append(
            SuggestedAction(
                id="campaign-ideas",
                label="Campaign Ideas",
                description="Get creative campaign concepts",
                prompt=(
                    "Based on this audience data, give me 3 creative campaign ideas "
                    "that would resonate with them"
                ),
                icon="chart",
                category="analysis",
            )
        )

    actions.append(
        SuggestedAction(
            id="show-chart",
            label="Show Chart",
            description="Visualize the top behaviors",
            prompt="Show me a chart of the top over-indexed behaviors",
            icon="chart",
            category="visualization",
        )
    )
    if top:
        actions.append(
            SuggestedAction(
                id="export-summary",
                label="Summary Report",
                description="Get a formatted summary for sharing",
                prompt=(
                    f"Create a brief executive summary of the key findings from "
                    f"{crosstab_name} that I can share with my team"
                ),
                icon="export",
                category="export",
            )
        )

    if len(actions) <= MAX_ACTIONS:
        return actions
    return _prioritise(actions)


def _prioritise(actions: list[SuggestedAction]) -> list[SuggestedAction]:
    kept: list[SuggestedAction] = []
    for category, quota in _CATEGORY_QUOTAS:
        kept.extend([a for a in actions if a.category == category][:quota])
    return kept[:MAX_ACTIONS]
