"""JSON-ready dictionaries for analysis results.

The result types are plain dataclasses; pydantic's ``TypeAdapter`` handles
their serialisation (enums to values, nested ``DataCell`` models included)
without turning them into models.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter

from crosstabber.actions import SuggestedAction
from crosstabber.analysis.models import Analysis
from crosstabber.charts import ChartSpec
from crosstabber.models import Crosstab
from crosstabber.templates.base import TemplateAnalysis

_ANALYSIS = TypeAdapter(Analysis)
_CHARTS = TypeAdapter(list[ChartSpec])
_ACTIONS = TypeAdapter(list[SuggestedAction])
_TEMPLATES = TypeAdapter(dict[str, TemplateAnalysis])


def analysis_to_dict(analysis: Analysis) -> dict[str, Any]:
    return _ANALYSIS.dump_python(analysis, mode="json")


def charts_to_list(charts: list[ChartSpec]) -> list[dict[str, Any]]:
    return _CHARTS.dump_python(charts, mode="json")


def actions_to_list(actions: list[SuggestedAction]) -> list[dict[str, Any]]:
    return _ACTIONS.dump_python(actions, mode="json")


def templates_to_dict(results: dict[str, TemplateAnalysis]) -> dict[str, Any]:
    return _TEMPLATES.dump_python(results, mode="json")


def build_report(
    crosstab: Crosstab,
    analysis: Analysis,
    *,
    charts: list[ChartSpec] | None = None,
    template_results: dict[str, TemplateAnalysis] | None = None,
    actions: list[SuggestedAction] | None = None,
) -> dict[str, Any]:
    """Everything the chat client needs for one crosstab, in one payload."""
    return {
        "crosstab": {"id": crosstab.id, "name": crosstab.name},
        "analysis": analysis_to_dict(analysis),
        "visualizations": charts_to_list(charts or []),
        "templates": templates_to_dict(template_results or {}),
        "suggestedActions": actions_to_list(actions or []),
    }


def report_to_json(report: dict[str, Any], *, indent: int = 2) -> str:
    return json.dumps(report, indent=indent, ensure_ascii=False)
