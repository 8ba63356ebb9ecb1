"""Tests for crosstabber.analysis.insights: the ten insight rules."""

from __future__ import annotations

import pytest

from crosstabber.analysis.cells import partition_cells
from crosstabber.analysis.insights import (
    INSIGHT_RULES,
    analyze_market_variations,
    analyze_trends,
    extract_insights,
)
from crosstabber.analysis.models import InsightType, Significance


def _insights(crosstab):
    return extract_insights(crosstab, partition_cells(crosstab.data or []))


def _types(crosstab) -> list[InsightType]:
    return [i.type for i in _insights(crosstab)]


def _by_type(crosstab, insight_type: InsightType):
    return next(i for i in _insights(crosstab) if i.type == insight_type)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_rule_order(self) -> None:
        assert [r.type for r in INSIGHT_RULES] == [
            InsightType.STRONG_AFFINITY,
            InsightType.MODERATE_AFFINITY,
            InsightType.HIGH_REACH,
            InsightType.NICHE_TARGETING,
            InsightType.MARKET_VARIATION,
            InsightType.TREND,
            InsightType.NEGATIVE_AFFINITY,
            InsightType.MODERATE_NEGATIVE,
            InsightType.HIGH_CONFIDENCE,
            InsightType.BASELINE,
        ]

    def test_custom_rule_subset(self, make_cell, make_crosstab) -> None:
        crosstab = make_crosstab([make_cell(index=200, sample=300)])
        insights = extract_insights(
            crosstab, partition_cells(crosstab.data), rules=INSIGHT_RULES[:1]
        )
        assert [i.type for i in insights] == [InsightType.STRONG_AFFINITY]


# ---------------------------------------------------------------------------
# Threshold rules
# ---------------------------------------------------------------------------


class TestThresholdRules:
    def test_index_150_is_moderate_not_strong(self, make_cell, make_crosstab) -> None:
        """The strong band is exclusive at 150; moderate is 120 to 150 inclusive."""
        types = _types(make_crosstab([make_cell(index=150)]))
        assert InsightType.MODERATE_AFFINITY in types
        assert InsightType.STRONG_AFFINITY not in types

    def test_index_just_above_150_is_strong(self, make_cell, make_crosstab) -> None:
        types = _types(make_crosstab([make_cell(index=150.1)]))
        assert InsightType.STRONG_AFFINITY in types
        assert InsightType.MODERATE_AFFINITY not in types

    def test_one_cell_supports_several_insights(self, make_cell, make_crosstab) -> None:
        """Index 160, reach 20%, sample 250: strong, niche and high confidence."""
        types = _types(make_crosstab([make_cell(index=160, percentage=20, sample=250)]))
        assert types == [
            InsightType.STRONG_AFFINITY,
            InsightType.NICHE_TARGETING,
            InsightType.HIGH_CONFIDENCE,
        ]

    def test_high_reach_requires_both_conditions(self, make_cell, make_crosstab) -> None:
        """Reach of at least 50% only counts at index 100 or more."""
        assert InsightType.HIGH_REACH in _types(make_crosstab([make_cell(index=100, percentage=50)]))
        assert InsightType.HIGH_REACH not in _types(make_crosstab([make_cell(index=99, percentage=80)]))
        assert InsightType.HIGH_REACH not in _types(make_crosstab([make_cell(index=130, percentage=49)]))

    def test_negative_boundaries(self, make_cell, make_crosstab) -> None:
        """Index 50 falls in the moderate band, not the strong negative one."""
        assert InsightType.NEGATIVE_AFFINITY in _types(make_crosstab([make_cell(index=49.9)]))
        types = _types(make_crosstab([make_cell(index=50)]))
        assert InsightType.NEGATIVE_AFFINITY not in types
        assert InsightType.MODERATE_NEGATIVE in types

    def test_baseline_band(self, make_cell, make_crosstab) -> None:
        assert InsightType.BASELINE in _types(make_crosstab([make_cell(index=95)]))
        assert InsightType.BASELINE in _types(make_crosstab([make_cell(index=105)]))
        assert InsightType.BASELINE not in _types(make_crosstab([make_cell(index=105.1)]))

    def test_high_confidence_boundary(self, make_cell, make_crosstab) -> None:
        """A sample of exactly 200 is high confidence."""
        assert InsightType.HIGH_CONFIDENCE in _types(make_crosstab([make_cell(sample=200)]))
        assert InsightType.HIGH_CONFIDENCE not in _types(make_crosstab([make_cell(sample=199)]))

    def test_description_counts_all_matches(self, make_cell, make_crosstab) -> None:
        """The count covers every match even though only ten are attached."""
        data = [make_cell(f"q{i}_1", index=200 + i) for i in range(12)]
        insight = _by_type(make_crosstab(data), InsightType.STRONG_AFFINITY)
        assert insight.description.startswith("Found 12 behaviors")
        assert len(insight.data) == 10
        assert insight.significance == Significance.HIGH

    def test_strong_data_sorted_by_index(self, make_cell, make_crosstab) -> None:
        data = [make_cell("a_1", index=160), make_cell("b_1", index=210), make_cell("c_1", index=180)]
        insight = _by_type(make_crosstab(data), InsightType.STRONG_AFFINITY)
        assert [c.index for c in insight.data] == [210, 180, 160]

    def test_negative_data_sorted_ascending(self, make_cell, make_crosstab) -> None:
        data = [make_cell("a_1", index=40), make_cell("b_1", index=10), make_cell("c_1", index=30)]
        insight = _by_type(make_crosstab(data), InsightType.NEGATIVE_AFFINITY)
        assert [c.index for c in insight.data] == [10, 30, 40]

    def test_high_reach_sorted_by_reach(self, make_cell, make_crosstab) -> None:
        data = [make_cell("a_1", index=110, percentage=55), make_cell("b_1", index=105, percentage=90)]
        insight = _by_type(make_crosstab(data), InsightType.HIGH_REACH)
        assert [c.datapoint for c in insight.data] == ["b_1", "a_1"]

    def test_invalid_cells_never_support_insights(self, make_cell, make_crosstab) -> None:
        """A sample of 49 is excluded however extreme the index."""
        assert _types(make_crosstab([make_cell(index=300, sample=49)])) == []

    def test_no_insights_in_dead_zone(self, make_cell, make_crosstab) -> None:
        """Index 110 with modest reach and sample fires nothing."""
        assert _types(make_crosstab([make_cell(index=110, percentage=20, sample=100)])) == []


# ---------------------------------------------------------------------------
# Market variation
# ---------------------------------------------------------------------------


class TestMarketVariation:
    def test_two_market_spread(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q5_1", index=160, segment="gb"), make_cell("q5_1", index=100, segment="de")]
        crosstab = make_crosstab(data, country_codes=["gb", "de"])
        insights = [i for i in _insights(crosstab) if i.type == InsightType.MARKET_VARIATION]
        assert len(insights) == 1
        record = insights[0].data[0]
        assert record.spread == pytest.approx(60)
        assert record.max == pytest.approx(160)
        assert record.min == pytest.approx(100)

    def test_spread_of_exactly_30_ignored(self, make_cell) -> None:
        """The spread has to exceed 30 points; 130 against 100 is not enough."""
        data = [make_cell("q5_1", index=130, segment="gb"), make_cell("q5_1", index=100, segment="de")]
        assert analyze_market_variations(data) == []

    def test_single_market_crosstab_skipped(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q5_1", index=160, segment="gb"), make_cell("q5_1", index=100, segment="de")]
        crosstab = make_crosstab(data, country_codes=["gb"])
        assert InsightType.MARKET_VARIATION not in _types(crosstab)

    def test_missing_segment_grouped_as_unknown(self, make_cell) -> None:
        """A cell without a segment forms its own market group."""
        data = [make_cell("q5_1", index=170), make_cell("q5_1", index=100, segment="de")]
        variations = analyze_market_variations(data)
        assert len(variations) == 1
        assert variations[0].spread == pytest.approx(70)

    def test_first_cell_per_market_counts(self, make_cell) -> None:
        """The second gb cell at 200 is ignored, leaving a 10 point spread."""
        data = [
            make_cell("q5_1", index=100, segment="gb"),
            make_cell("q5_1", index=200, segment="gb"),
            make_cell("q5_1", index=110, segment="de"),
        ]
        assert analyze_market_variations(data) == []

    def test_examples_capped_at_five(self, make_cell, make_crosstab) -> None:
        data = []
        for i in range(7):
            data.append(make_cell(f"q{i}_1", index=180, segment="gb"))
            data.append(make_cell(f"q{i}_1", index=100, segment="de"))
        insight = _by_type(make_crosstab(data, country_codes=["gb", "de"]), InsightType.MARKET_VARIATION)
        assert insight.description.startswith("Found 7 behaviors")
        assert len(insight.data) == 5


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


class TestTrends:
    WAVES = ["2024-Q1", "2024-Q2", "2024-Q4"]

    def test_increasing_trend(self, make_cell) -> None:
        data = [make_cell("q1_1", index=80, wave="2024-Q1"), make_cell("q1_1", index=130, wave="2024-Q4")]
        trends = analyze_trends(data, self.WAVES)
        assert len(trends) == 1
        assert trends[0].direction == "increasing"
        assert trends[0].change == pytest.approx(50)

    def test_change_of_20_ignored(self, make_cell) -> None:
        """Changes of 20 points or less are noise."""
        data = [make_cell("q1_1", index=100, wave="2024-Q1"), make_cell("q1_1", index=120, wave="2024-Q4")]
        assert analyze_trends(data, self.WAVES) == []

    def test_only_first_and_last_wave_compared(self, make_cell) -> None:
        """A jump in a middle wave is not a trend when the last wave has no cell."""
        data = [make_cell("q1_1", index=100, wave="2024-Q1"), make_cell("q1_1", index=190, wave="2024-Q2")]
        assert analyze_trends(data, self.WAVES) == []

    def test_missing_wave_counts_as_first(self, make_cell) -> None:
        """A cell without a wave is compared as if it belonged to the first wave."""
        data = [make_cell("q1_1", index=150), make_cell("q1_1", index=100, wave="2024-Q4")]
        trends = analyze_trends(data, self.WAVES)
        assert [t.direction for t in trends] == ["decreasing"]

    def test_sorted_by_absolute_change(self, make_cell) -> None:
        data = [
            make_cell("a_1", index=100, wave="2024-Q1"),
            make_cell("b_1", index=100, wave="2024-Q1"),
            make_cell("a_1", index=125, wave="2024-Q4"),
            make_cell("b_1", index=40, wave="2024-Q4"),
        ]
        trends = analyze_trends(data, self.WAVES)
        assert [t.datapoint for t in trends] == ["b_1", "a_1"]

    def test_single_wave_crosstab_skipped(self, make_cell, make_crosstab) -> None:
        data = [make_cell("q1_1", index=80, wave="2024-Q1"), make_cell("q1_1", index=130, wave="2024-Q4")]
        crosstab = make_crosstab(data, wave_codes=["2024-Q4"])
        assert InsightType.TREND not in _types(crosstab)
