"""Tests for chart normalization."""

from __future__ import annotations

import pytest

from tickerboard.domain.snapshot import EarningsPoint, SeriesPoint
from tickerboard.services.normalizer import normalize_earnings, normalize_series


class TestNormalizeSeriesPointList:
    """The [{date, value}] shape."""

    def test_maps_points_in_order(self, points_payload):
        assert normalize_series(points_payload) == [
            SeriesPoint(label="2021", value=10.5),
            SeriesPoint(label="2022", value=12.0),
            SeriesPoint(label="2023", value=0.0),
        ]

    def test_year_used_when_no_date(self):
        payload = [{"date": "2020", "value": 1}, {"year": 2021, "value": 2}]
        assert [p.label for p in normalize_series(payload)] == ["2020", "2021"]

    def test_first_item_must_carry_a_date(self):
        """Without date/d on the first item the list is not recognized."""
        assert normalize_series([{"value": 1}, {"date": "2020", "value": 2}]) == []

    def test_missing_value_coerces_to_zero(self):
        assert normalize_series([{"d": "2020"}])[0].value == 0.0


class TestNormalizeSeriesCategories:
    """The {categories, series[0].data} shape."""

    def test_zips_first_series(self, categories_payload):
        points = normalize_series(categories_payload)
        assert [p.label for p in points] == ["2019", "2020", "2021", "2022", "2023"]
        assert [p.value for p in points] == [1.1e9, 1.3e9, 1.5e9, 0.0, 2.0e9]

    @pytest.mark.parametrize(
        "categories, data",
        [
            (["a", "b", "c"], [1, 2]),
            (["a"], [1, 2, 3]),
            ([], [1]),
            ([2019, 2020], [None, "x"]),
        ],
    )
    def test_length_is_shorter_list(self, categories, data):
        points = normalize_series({"categories": categories, "series": [{"data": data}]})
        assert len(points) == min(len(categories), len(data))
        for i, point in enumerate(points):
            assert point.label == str(categories[i])
            expected = data[i] if isinstance(data[i], (int, float)) else 0.0
            assert point.value == expected

    def test_series_without_data_is_empty(self):
        assert normalize_series({"categories": ["a"], "series": [{}]}) == []

    def test_empty_series_list_not_recognized(self):
        assert normalize_series({"categories": ["a"], "series": []}) == []


class TestNormalizeSeriesUnknown:
    """Anything else never raises."""

    @pytest.mark.parametrize(
        "raw",
        [None, {}, [], "text", 42, {"data": [1, 2]}, [1, 2, 3], [None], {"categories": "abc", "series": [{}]}],
    )
    def test_unknown_shapes_give_empty(self, raw):
        assert normalize_series(raw) == []

    def test_point_list_checked_before_categories(self):
        """A list is never read as the categories shape."""
        assert normalize_series([{"date": "x", "value": 3}])[0].value == 3.0


class TestNormalizeEarnings:
    """Tests for normalize_earnings."""

    def test_sorted_chronologically_day_first(self, earnings_payload):
        """DD/MM/YYYY is parsed day-first, not month-first."""
        points = normalize_earnings(earnings_payload)
        assert [p.label for p in points] == ["20/12/2022", "15/01/2023", "01/03/2023"]
        assert points[0] == EarningsPoint(label="20/12/2022", value=0.12, kind="Rendimento")

    def test_payment_date_fallback(self):
        raw = {"assetEarningsModels": [{"pd": "10/05/2024", "v": 1, "et": "JCP"}]}
        assert normalize_earnings(raw)[0].label == "10/05/2024"

    def test_malformed_dates_sort_first(self):
        raw = {
            "assetEarningsModels": [
                {"ed": "05/02/2021", "v": 1},
                {"ed": "2021-13-45", "v": 2},
                {"v": 3},
            ]
        }
        assert [p.value for p in normalize_earnings(raw)] == [2.0, 3.0, 1.0]

    def test_ties_keep_upstream_order(self):
        raw = {
            "assetEarningsModels": [
                {"ed": "01/06/2023", "v": 1, "et": "Dividendo"},
                {"ed": "01/06/2023", "v": 2, "et": "JCP"},
                {"ed": "01/01/2023", "v": 3, "et": "Dividendo"},
            ]
        }
        assert [p.kind for p in normalize_earnings(raw)] == ["Dividendo", "Dividendo", "JCP"]
        assert [p.value for p in normalize_earnings(raw)] == [3.0, 1.0, 2.0]

    def test_non_numeric_value_coerces_to_zero(self):
        raw = {"assetEarningsModels": [{"ed": "01/01/2023", "v": "abc", "et": None}]}
        assert normalize_earnings(raw) == [EarningsPoint(label="01/01/2023", value=0.0, kind="")]

    @pytest.mark.parametrize(
        "raw",
        [None, [], {}, {"assetEarningsModels": None}, {"assetEarningsModels": []}, {"other": [1]}],
    )
    def test_missing_container_gives_empty(self, raw):
        assert normalize_earnings(raw) == []
