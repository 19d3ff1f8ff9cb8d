"""Tests for coordinate rounding (app.utils.geo)."""
import math

import pytest

from app.utils.geo import round_coordinate, rounded_position


class TestRoundCoordinate:

    @pytest.mark.parametrize("value,expected", [
        (36.8508, 36.9),
        (-76.2859, -76.3),
        (21.3069, 21.3),
        (-157.8583, -157.9),
        (0.04, 0.0),
        (90.0, 90.0),
        (-180.0, -180.0),
    ])
    def test_nearest_tenth(self, value, expected):
        assert round_coordinate(value) == expected

    def test_halves_round_away_from_zero(self):
        assert round_coordinate(0.25) == 0.3
        assert round_coordinate(-0.25) == -0.3
        assert round_coordinate(12.75) == 12.8

    def test_negative_zero_normalized(self):
        result = round_coordinate(-0.04)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    @pytest.mark.parametrize("value", [None, float("nan"), float("inf"), float("-inf")])
    def test_missing_or_non_finite_returns_none(self, value):
        assert round_coordinate(value) is None

    def test_non_numeric_returns_none(self):
        assert round_coordinate("north") is None
        assert round_coordinate(True) is None

    @pytest.mark.parametrize("value", [36.8508, -76.2859, 0.05, -0.05, 179.96, 12.345])
    def test_idempotent(self, value):
        once = round_coordinate(value)
        assert round_coordinate(once) == once

    def test_one_decimal_text_form(self):
        assert repr(round_coordinate(-76.0)) == "-76.0"
        assert repr(round_coordinate(36.8508)) == "36.9"


class TestRoundedPosition:

    def test_pair(self):
        assert rounded_position(36.8508, -76.2859) == (36.9, -76.3)

    def test_either_side_missing(self):
        assert rounded_position(None, -76.2) == (None, None)
        assert rounded_position(36.8, None) == (None, None)
        assert rounded_position(float("nan"), 10.0) == (None, None)
