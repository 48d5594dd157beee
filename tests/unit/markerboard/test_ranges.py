"""
Tests for reference-range arithmetic and lenient number parsing.
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from markerboard.domain.models import HealthStatus
from markerboard.domain.ranges import (
    clamp,
    classify_status,
    distance_to_range,
    is_within_range,
    parse_number,
    safe_float,
)

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


class TestClassifyStatus:
    def test_bounds_are_inclusive(self) -> None:
        assert classify_status(70, 70, 100) == HealthStatus.NORMAL
        assert classify_status(100, 70, 100) == HealthStatus.NORMAL

    def test_below_and_above(self) -> None:
        assert classify_status(69.9, 70, 100) == HealthStatus.LOW
        assert classify_status(100.1, 70, 100) == HealthStatus.HIGH

    @pytest.mark.parametrize(
        "value, min_ref, max_ref",
        [
            (math.nan, 70, 100),
            (math.inf, 70, 100),
            (-math.inf, 70, 100),
            (50, math.nan, 100),
            (150, 70, math.inf),
        ],
    )
    def test_non_finite_input_is_normal(self, value: float, min_ref: float, max_ref: float) -> None:
        assert classify_status(value, min_ref, max_ref) == HealthStatus.NORMAL

    @given(value=finite, low=finite, width=st.floats(min_value=0, max_value=1e6))
    def test_normal_iff_within_range(self, value: float, low: float, width: float) -> None:
        """Property: status is normal exactly when the value lies inside the range."""
        high = low + width
        status = classify_status(value, low, high)

        assert (status == HealthStatus.NORMAL) == is_within_range(value, low, high)
        if status == HealthStatus.LOW:
            assert value < low
        if status == HealthStatus.HIGH:
            assert value > high


class TestDistanceAndClamp:
    def test_distance_is_zero_inside(self) -> None:
        assert distance_to_range(85, 70, 100) == 0.0

    def test_distance_outside(self) -> None:
        assert distance_to_range(120, 70, 100) == 20
        assert distance_to_range(60, 70, 100) == 10

    @given(value=finite, low=finite, width=st.floats(min_value=0, max_value=1e6))
    def test_distance_never_negative(self, value: float, low: float, width: float) -> None:
        assert distance_to_range(value, low, low + width) >= 0

    def test_clamp(self) -> None:
        assert clamp(5, 0, 1) == 1
        assert clamp(-5, 0, 1) == 0
        assert clamp(0.5, 0, 1) == 0.5


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (5, 5.0),
            (5.4, 5.4),
            ("5.4", 5.4),
            ("5,4", 5.4),
            (" 12 ", 12.0),
            ("5.4 mmol/L", 5.4),
            ("-3", -3.0),
            (".5", 0.5),
        ],
    )
    def test_parses_lenient_input(self, raw: object, expected: float) -> None:
        assert parse_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "raw", [None, "", "abc", "n/a", math.nan, math.inf, "1e999", True, False, 10**400]
    )
    def test_unparseable_is_none(self, raw: object) -> None:
        assert parse_number(raw) is None

    def test_safe_float_defaults_to_zero(self) -> None:
        assert safe_float(None) == 0.0
        assert safe_float("garbage") == 0.0
        assert safe_float(-(10**400)) == 0.0
        assert safe_float("7,5") == 7.5
