"""Template registry and selection.

Templates run after the base analysis and only add to it: a crosstab with no
applicable template still has a complete Analysis.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from crosstabber.analysis.models import Analysis
from crosstabber.models import Crosstab
from crosstabber.templates.audience import AUDIENCE_PROFILING
from crosstabber.templates.base import AnalysisTemplate, TemplateAnalysis, format_template_analysis
from crosstabber.templates.competitive import COMPETITIVE_COMPARISON
from crosstabber.templates.market import MARKET_COMPARISON
from crosstabber.templates.media import MEDIA_CONSUMPTION
from crosstabber.templates.trend import TREND_ANALYSIS

logger = logging.getLogger(__name__)

ANALYSIS_TEMPLATES: list[AnalysisTemplate] = [
    AUDIENCE_PROFILING,
    MARKET_COMPARISON,
    TREND_ANALYSIS,
    COMPETITIVE_COMPARISON,
    MEDIA_CONSUMPTION,
]


def get_template(name: str) -> AnalysisTemplate | None:
    """Return a template by name, or None if not found."""
    for t in ANALYSIS_TEMPLATES:
        if t.name == name:
            return t
    return None


class TemplateEngine:
    """Selects and applies the templates that fit a crosstab."""

    def __init__(self, templates: Sequence[AnalysisTemplate] | None = None) -> None:
        self.templates = list(ANALYSIS_TEMPLATES if templates is None else templates)

    def select_templates(self, crosstab: Crosstab) -> list[AnalysisTemplate]:
        return [t for t in self.templates if t.applicable_when(crosstab)]

    def apply_template(
        self,
        template: AnalysisTemplate,
        crosstab: Crosstab,
        analysis: Analysis,
    ) -> TemplateAnalysis:
        return template.analyze(crosstab, analysis)

    def analyze_with_templates(
        self,
        crosstab: Crosstab,
        analysis: Analysis,
    ) -> dict[str, TemplateAnalysis]:
        """Results for every applicable template, in registry order."""
        results: dict[str, TemplateAnalysis] = {}
        for template in self.select_templates(crosstab):
            logger.debug("Applying template %r to crosstab %s", template.name, crosstab.id)
            results[template.name] = self.apply_template(template, crosstab, analysis)
        return results

    def format_template_analysis(self, name: str, analysis: TemplateAnalysis) -> str:
        return format_template_analysis(name, analysis)
