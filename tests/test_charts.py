"""Tests for crosstabber.charts: chart specs for the chat UI."""

from __future__ import annotations

from crosstabber.analysis import analyze
from crosstabber.charts import build_index_charts, truncate_label


class TestTruncateLabel:
    def test_short_label_untouched(self) -> None:
        assert truncate_label("Gaming") == "Gaming"

    def test_exact_length_untouched(self) -> None:
        label = "x" * 35
        assert truncate_label(label) == label

    def test_long_label_truncated(self) -> None:
        result = truncate_label("y" * 40)
        assert len(result) == 35
        assert result.endswith("...")

    def test_custom_length(self) -> None:
        assert truncate_label("abcdefghij", 8) == "abcde..."


class TestBuildIndexCharts:
    def test_over_indexed_title(self, scenario_a) -> None:
        charts = build_index_charts(analyze(scenario_a), "Young Adults")
        assert len(charts) == 1
        chart = charts[0]
        assert chart.id == "top-indexed-chart"
        assert chart.type == "horizontalBar"
        assert chart.title == "Top Over-Indexed Behaviors"
        assert chart.subtitle == "Behaviors where Young Adults audience over-indexes vs. average"
        assert chart.data[0].value == 150
        assert chart.config.referenceValue == 100
        assert chart.config.colorScheme == "blue"

    def test_title_without_over_indexing(self, make_cell, make_crosstab) -> None:
        charts = build_index_charts(analyze(make_crosstab([make_cell(index=110)])), "X")
        assert charts[0].title == "Top Behaviors by Index"
        assert charts[0].subtitle == "Top behaviors sorted by index value (100 = average)"

    def test_no_charts_without_valid_cells(self, make_cell, make_crosstab) -> None:
        assert build_index_charts(analyze(make_crosstab([make_cell(sample=10)])), "X") == []

    def test_top_chart_capped_at_ten(self, make_cell, make_crosstab) -> None:
        data = [make_cell(f"q{i}_1", index=130 + i) for i in range(14)]
        charts = build_index_charts(analyze(make_crosstab(data)), "X")
        assert len(charts[0].data) == 10

    def test_under_indexed_chart_needs_five_items(self, make_cell, make_crosstab) -> None:
        four = [make_cell(f"q{i}_1", index=40 + i) for i in range(4)]
        assert len(build_index_charts(analyze(make_crosstab(four)), "X")) == 1

        nine = [make_cell(f"q{i}_1", index=40 + i) for i in range(9)]
        charts = build_index_charts(analyze(make_crosstab(nine)), "X")
        under = charts[1]
        assert under.id == "under-indexed-chart"
        assert under.config.colorScheme == "red"
        assert under.config.maxItems == 8
        assert len(under.data) == 8
        assert under.data[0].value == 40

    def test_labels_truncated(self, make_cell, make_crosstab) -> None:
        crosstab = make_crosstab(
            [make_cell("q1_1", index=150)],
            rows=[("q1", "Regularly watches live-streamed esports tournaments")],
        )
        charts = build_index_charts(analyze(crosstab), "X", max_label_length=20)
        assert charts[0].data[0].label == "Regularly watches..."
