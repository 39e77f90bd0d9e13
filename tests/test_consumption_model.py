"""Single-window consumption analysis tests"""

import pytest

from conftest import movements
from models.consumption_model import analyze_window, calculate_confidence, calculate_trend
from models.forecast_types import Confidence, Trend


class TestAnalyzeWindow:

    def test_empty_window_short_circuits_to_low(self):
        result = analyze_window([], 30)
        assert result.average == 0
        assert result.total_consumption == 0
        assert result.movement_count == 0
        assert result.trend == Trend.STABLE
        assert result.confidence == Confidence.LOW

    def test_average_spreads_total_over_window_days(self):
        result = analyze_window(movements([10, 20, 30]), 7)
        assert result.total_consumption == 60
        assert result.average == pytest.approx(60 / 7)
        assert result.movement_count == 3
        assert result.window_days == 7

    def test_to_dict_shape(self):
        data = analyze_window(movements([5, 5]), 14).to_dict()
        assert data == {
            "average": pytest.approx(10 / 14),
            "totalConsumption": 10,
            "movementCount": 2,
            "trend": "stable",
            "confidence": "very_low",
            "periodDays": 14,
        }


class TestTrend:

    @pytest.mark.parametrize("quantities, expected", [
        ([10], Trend.STABLE),
        ([10, 10, 15, 15], Trend.INCREASING),
        ([20, 20, 10, 10], Trend.DECREASING),
        ([10, 12], Trend.STABLE),  # ratio exactly 1.2
        ([10, 8], Trend.STABLE),  # ratio exactly 0.8
        ([10, 13], Trend.INCREASING),
        ([10, 7], Trend.DECREASING),
        ([10, 10, 20], Trend.INCREASING),  # odd count: second half is the larger one
    ])
    def test_half_split_ratio(self, quantities, expected):
        assert calculate_trend(movements(quantities)) == expected

    def test_no_movements_is_stable(self):
        assert calculate_trend([]) == Trend.STABLE


class TestConfidence:

    def test_general_function_returns_none_without_data(self):
        assert calculate_confidence([], 30) == Confidence.NONE

    @pytest.mark.parametrize("count, window, expected", [
        (1, 7, Confidence.VERY_LOW),
        (2, 60, Confidence.VERY_LOW),
        (3, 7, Confidence.LOW),
        (6, 30, Confidence.LOW),
        (7, 7, Confidence.MEDIUM),
        (13, 60, Confidence.MEDIUM),
        (14, 14, Confidence.MEDIUM),
        (14, 30, Confidence.HIGH),
        (40, 60, Confidence.HIGH),
    ])
    def test_buckets_by_movement_count(self, count, window, expected):
        assert calculate_confidence(movements([1] * count), window) == expected

    @pytest.mark.parametrize("window", [7, 14, 30, 60])
    def test_monotonic_in_movement_count(self, window):
        scores = [
            calculate_confidence(movements([1] * n), window).score
            for n in range(1, 25)
        ]
        assert scores == sorted(scores)

    def test_total_order(self):
        ordered = [Confidence.NONE, Confidence.VERY_LOW, Confidence.LOW, Confidence.MEDIUM, Confidence.HIGH]
        assert sorted(reversed(ordered)) == ordered
        assert Confidence.LOW > Confidence.VERY_LOW
        assert not Confidence.VERY_LOW > Confidence.VERY_LOW

    @pytest.mark.parametrize("score, expected", [
        (3.5, Confidence.HIGH),
        (3.49, Confidence.MEDIUM),
        (2.5, Confidence.MEDIUM),
        (1.5, Confidence.LOW),
        (0.5, Confidence.VERY_LOW),
        (0.49, Confidence.NONE),
    ])
    def test_from_score_buckets(self, score, expected):
        assert Confidence.from_score(score) == expected
