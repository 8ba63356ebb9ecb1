"""Specialised analysis templates layered on top of the base analysis."""

from crosstabber.templates.base import (
    AnalysisTemplate,
    KeyMetric,
    TemplateAnalysis,
    format_template_analysis,
)
from crosstabber.templates.engine import ANALYSIS_TEMPLATES, TemplateEngine, get_template

__all__ = [
    "ANALYSIS_TEMPLATES",
    "AnalysisTemplate",
    "KeyMetric",
    "TemplateAnalysis",
    "TemplateEngine",
    "format_template_analysis",
    "get_template",
]
