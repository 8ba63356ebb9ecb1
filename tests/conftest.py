"""Shared test fixtures for crosstabber tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from crosstabber.models import Crosstab, CrosstabMetrics, DataCell, Definition


def build_cell(
    datapoint: str = "q1_1",
    audience: str = "c1",
    *,
    index: float = 100.0,
    sample: int = 100,
    percentage: float = 30.0,
    segment: str | None = None,
    wave: str | None = None,
) -> DataCell:
    return DataCell(
        datapoint=datapoint,
        audience=audience,
        segment=segment,
        wave=wave,
        metrics=CrosstabMetrics(
            positive_sample=sample,
            positive_size=sample * 10.0,
            audience_percentage=percentage,
            datapoint_percentage=percentage,
            audience_index=index,
        ),
    )


def build_crosstab(
    data: list[DataCell] | None,
    *,
    rows: list[tuple[str, str]] | None = None,
    columns: list[tuple[str, str]] | None = None,
    bases: list[tuple[str, str]] | None = None,
    country_codes: list[str] | None = None,
    wave_codes: list[str] | None = None,
    name: str = "Gen Z Gamers",
) -> Crosstab:
    """Crosstab from ``(id, name)`` pairs.  Rows default to one per datapoint."""
    if rows is None:
        seen = dict.fromkeys(c.datapoint for c in data or [])
        rows = [(dp, f"Behavior {dp}") for dp in seen]
    return Crosstab(
        id="ct-1",
        name=name,
        rows=[Definition(id=i, name=n) for i, n in rows],
        columns=[Definition(id=i, name=n) for i, n in (columns or [("c1", "Gamers")])],
        bases=None if bases is None else [Definition(id=i, name=n) for i, n in bases],
        country_codes=country_codes or [],
        wave_codes=wave_codes or [],
        data=data,
    )


@pytest.fixture
def make_cell() -> Callable[..., DataCell]:
    """Factory for DataCells with sensible defaults (valid, index 100)."""
    return build_cell


@pytest.fixture
def make_crosstab() -> Callable[..., Crosstab]:
    """Factory for Crosstabs; see ``build_crosstab``."""
    return build_crosstab


@pytest.fixture
def scenario_a() -> Crosstab:
    """One row, one column, one valid cell at index 150."""
    return Crosstab(
        id="ct-a",
        name="Young Adults",
        rows=[Definition(id="q1", name="Age 18-24")],
        columns=[Definition(id="c1", name="US")],
        country_codes=["us"],
        data=[
            DataCell(
                datapoint="q1_1",
                audience="c1",
                metrics=CrosstabMetrics(
                    positive_sample=100,
                    positive_size=1000,
                    audience_percentage=45,
                    datapoint_percentage=55,
                    audience_index=150,
                ),
            )
        ],
    )


@pytest.fixture
def multi_market_crosstab() -> Crosstab:
    """Two markets sharing two datapoints; gb over-indexes on q5."""
    data = [
        build_cell("q5_1", index=160, sample=120, segment="gb"),
        build_cell("q5_1", index=100, sample=110, segment="de"),
        build_cell("q6_1", index=125, sample=90, segment="gb"),
        build_cell("q6_1", index=130, sample=95, segment="de"),
    ]
    return build_crosstab(
        data,
        rows=[("q5", "Watches esports"), ("q6", "Streams music")],
        country_codes=["gb", "de"],
    )


@pytest.fixture
def crosstab_payload() -> dict[str, Any]:
    """Raw JSON as saved from the crosstab API, identified by uuid."""
    return {
        "uuid": "5f2c-77aa",
        "name": "Coffee Drinkers",
        "rows": [{"id": "q2", "name": "Drinks espresso"}, {"id": "q3", "name": "Buys online"}],
        "columns": [{"id": "aud1", "name": "Coffee Drinkers"}],
        "bases": [{"id": "base", "name": "Adults 18+"}],
        "country_codes": ["gb"],
        "wave_codes": ["2024-Q4"],
        "data": [
            {
                "datapoint": "q2_1",
                "audience": "aud1",
                "segment": "gb",
                "metrics": {
                    "positive_sample": 320,
                    "positive_size": 1_500_000,
                    "audience_percentage": 62.4,
                    "datapoint_percentage": 40.0,
                    "audience_index": 156.2,
                },
            },
            {
                "datapoint": "q3_2",
                "audience": "aud1",
                "segment": "gb",
                "metrics": {
                    "positive_sample": 30,
                    "positive_size": 90_000,
                    "audience_percentage": 12.0,
                    "datapoint_percentage": 15.0,
                    "audience_index": 70.0,
                },
            },
        ],
    }


@pytest.fixture
def crosstab_file(tmp_path: Path, crosstab_payload: dict[str, Any]) -> Path:
    path = tmp_path / "crosstab.json"
    path.write_text(json.dumps(crosstab_payload), encoding="utf-8")
    return path
