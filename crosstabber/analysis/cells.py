"""Shared, read-only partition of a crosstab's data cells.

Statistics, insights and recommendations all need the valid-cell filter and
the index ranking.  ``partition_cells`` computes both once; every consumer
reads the same ``CellSet``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from crosstabber.analysis.matching import resolve_label
from crosstabber.analysis.metrics import round_half_up
from crosstabber.analysis.models import IndexedItem
from crosstabber.models import Crosstab, DataCell


@dataclass(frozen=True)
class CellSet:
    cells: tuple[DataCell, ...]  # every cell, input order
    valid: tuple[DataCell, ...]  # sample >= 50, input order
    ranked: tuple[DataCell, ...]  # valid, index descending (stable)

    @property
    def invalid_count(self) -> int:
        return len(self.cells) - len(self.valid)


def partition_cells(data: Sequence[DataCell]) -> CellSet:
    valid = tuple(c for c in data if c.is_valid)
    ranked = tuple(sorted(valid, key=lambda c: c.index, reverse=True))
    return CellSet(cells=tuple(data), valid=valid, ranked=ranked)


def rank_by_index(cells: Sequence[DataCell], *, descending: bool = True) -> list[DataCell]:
    """Stable sort by audience index."""
    return sorted(cells, key=lambda c: c.index, reverse=descending)


def cell_label(cell: DataCell, crosstab: Crosstab) -> str:
    """``row name - column name - segment``, skipping empty parts."""
    parts = [
        resolve_label(cell.datapoint, crosstab.rows),
        resolve_label(cell.audience, crosstab.columns),
        cell.segment,
    ]
    return " - ".join(p for p in parts if p)


def to_indexed_item(cell: DataCell, crosstab: Crosstab) -> IndexedItem:
    return IndexedItem(
        label=cell_label(cell, crosstab),
        index=round_half_up(cell.metrics.audience_index),
        percentage=round_half_up(cell.metrics.audience_percentage),
        sample=cell.metrics.positive_sample,
        segment=cell.segment,
    )
