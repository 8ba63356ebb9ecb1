"""Tests for crosstabber.analysis.statistics and the shared cell partition."""

from __future__ import annotations

from crosstabber.analysis.cells import cell_label, partition_cells, to_indexed_item
from crosstabber.analysis.statistics import calculate_statistics

# ---------------------------------------------------------------------------
# Cell partition
# ---------------------------------------------------------------------------


class TestPartitionCells:
    def test_valid_filter(self, make_cell) -> None:
        """Samples of 50 and above are valid; 49 is not."""
        cells = partition_cells([make_cell(sample=49), make_cell(sample=50), make_cell(sample=500)])
        assert len(cells.cells) == 3
        assert len(cells.valid) == 2
        assert cells.invalid_count == 1

    def test_ranked_descending_and_stable(self, make_cell) -> None:
        """Cells with equal indexes keep their input order."""
        a = make_cell("a_1", index=120)
        b = make_cell("b_1", index=180)
        c = make_cell("c_1", index=120)
        cells = partition_cells([a, b, c])
        assert [x.datapoint for x in cells.ranked] == ["b_1", "a_1", "c_1"]


class TestCellLabel:
    def test_joins_row_column_and_segment(self, make_cell, make_crosstab) -> None:
        crosstab = make_crosstab([], rows=[("q1", "Age 18-24")], columns=[("c1", "US")])
        cell = make_cell("q1_1", "c1", segment="us")
        assert cell_label(cell, crosstab) == "Age 18-24 - US - us"

    def test_raw_ids_when_unmatched(self, make_cell, make_crosstab) -> None:
        crosstab = make_crosstab([], rows=[("q1", "Age")], columns=[("c1", "US")])
        cell = make_cell("q99_1", "zz")
        assert cell_label(cell, crosstab) == "q99_1 - zz"

    def test_indexed_item_rounds(self, make_cell, make_crosstab) -> None:
        crosstab = make_crosstab([], rows=[("q1", "Age")])
        item = to_indexed_item(make_cell("q1_1", index=150.5, percentage=44.5, sample=321), crosstab)
        assert item.index == 151
        assert item.percentage == 45
        assert item.sample == 321


# ---------------------------------------------------------------------------
# calculate_statistics
# ---------------------------------------------------------------------------


class TestCalculateStatistics:
    def _stats(self, make_crosstab, data):
        crosstab = make_crosstab(data)
        return calculate_statistics(crosstab, partition_cells(data))

    def test_top_and_bottom_sizes(self, make_cell, make_crosstab) -> None:
        data = [make_cell(f"q{i}_1", index=50 + i * 10) for i in range(15)]
        stats = self._stats(make_crosstab, data)
        assert len(stats.top_indexes) == 10
        assert len(stats.bottom_indexes) == 10
        assert stats.top_indexes[0].index == 190
        assert stats.bottom_indexes[0].index == 50

    def test_top_excludes_invalid_cells(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q1_1", index=400, sample=10), make_cell("q2_1", index=130)]
        stats = self._stats(make_crosstab, data)
        assert [i.index for i in stats.top_indexes] == [130]

    def test_over_threshold_is_inclusive(self, make_cell, make_crosstab) -> None:
        """120 over-indexes, 119.9 does not."""
        data = [make_cell("q1_1", index=120), make_cell("q2_1", index=119.9)]
        stats = self._stats(make_crosstab, data)
        assert [i.index for i in stats.over_indexed] == [120]

    def test_under_threshold_is_inclusive_and_ascending(self, make_cell, make_crosstab) -> None:
        """80 under-indexes, 80.1 does not; the lowest index comes first."""
        data = [make_cell("q1_1", index=80), make_cell("q2_1", index=40), make_cell("q3_1", index=80.1)]
        stats = self._stats(make_crosstab, data)
        assert [i.index for i in stats.under_indexed] == [40, 80]

    def test_threshold_lists_capped_at_twenty(self, make_cell, make_crosstab) -> None:
        data = [make_cell(f"q{i}_1", index=200 + i) for i in range(25)]
        stats = self._stats(make_crosstab, data)
        assert len(stats.over_indexed) == 20

    def test_averages(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q1_1", index=100, sample=100), make_cell("q2_1", index=151, sample=201)]
        stats = self._stats(make_crosstab, data)
        assert stats.averages is not None
        assert stats.averages.mean_index == 126  # 125.5 rounds up
        assert stats.averages.mean_sample == 151  # 150.5 rounds up

    def test_no_valid_cells(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q1_1", index=180, sample=10)]
        stats = self._stats(make_crosstab, data)
        assert stats.top_indexes == []
        assert stats.bottom_indexes == []
        assert stats.statistically_significant == []
        assert stats.averages is None

    def test_statistically_significant_keeps_input_order(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q1_1", index=90), make_cell("q2_1", index=190)]
        stats = self._stats(make_crosstab, data)
        assert [c.datapoint for c in stats.statistically_significant] == ["q1_1", "q2_1"]
