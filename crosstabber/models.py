"""Pydantic models for crosstabs as delivered by the fetch layer.

These are the only models parsed from JSON.  Everything the engine derives
from them lives in ``crosstabber.analysis.models`` as plain dataclasses.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Statistical validity floor for a single cell (positive_sample)
MIN_VALID_SAMPLE = 50

# Fallback when a crosstab declares no base audience
DEFAULT_BASE_NAME = "All Internet Users"


class Definition(BaseModel):
    """A row, column or base definition (``{id, name}``)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    full_name: str | None = None


class CrosstabMetrics(BaseModel):
    """Metrics for one audience x datapoint intersection."""

    model_config = ConfigDict(extra="ignore")

    positive_sample: int = Field(default=0, ge=0)
    positive_size: float = 0.0
    audience_percentage: float = 0.0
    datapoint_percentage: float = 0.0
    audience_index: float = 100.0  # 100 = baseline


class DataCell(BaseModel):
    """One audience x datapoint observation, optionally per market and wave."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    audience: str
    datapoint: str
    segment: str | None = None
    wave: str | None = None
    metrics: CrosstabMetrics

    @property
    def index(self) -> float:
        return self.metrics.audience_index

    @property
    def sample(self) -> int:
        return self.metrics.positive_sample

    @property
    def is_valid(self) -> bool:
        """True if the cell's sample meets the fixed minimum."""
        return self.metrics.positive_sample >= MIN_VALID_SAMPLE


class Crosstab(BaseModel):
    """A saved crosstab: label vocabulary plus (optionally) its data cells.

    ``data`` is ``None`` for a definition-only fetch and may also be an empty
    list when the upstream query returned nothing.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    rows: list[Definition] = Field(default_factory=list)
    columns: list[Definition] = Field(default_factory=list)
    bases: list[Definition] | None = None
    country_codes: list[str] = Field(default_factory=list)
    wave_codes: list[str] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    data: list[DataCell] | None = None

    @model_validator(mode="before")
    @classmethod
    def _id_from_uuid(cls, values: Any) -> Any:
        # The saved-crosstab API identifies projects by uuid
        if isinstance(values, dict) and not values.get("id") and values.get("uuid"):
            values = {**values, "id": values["uuid"]}
        return values

    @property
    def base_name(self) -> str:
        if self.bases and self.bases[0].name:
            return self.bases[0].name
        return DEFAULT_BASE_NAME

    @property
    def is_multi_market(self) -> bool:
        return len(self.country_codes) >= 2

    @property
    def is_multi_wave(self) -> bool:
        return len(self.wave_codes) >= 2


def load_crosstab(path: Path) -> Crosstab:
    """Load and validate a crosstab JSON file.

    Raises ``pydantic.ValidationError`` if the file does not describe a
    crosstab.
    """
    return Crosstab.model_validate_json(path.read_text(encoding="utf-8"))
