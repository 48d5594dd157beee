"""
Tests for the Result type used at the storage boundary.
"""

import dataclasses

import pytest

from markerboard.services.result import Result


class TestResult:
    """Mapped-row outcomes: a model or the reason it was rejected."""

    def test_ok_holds_the_model(self) -> None:
        result: Result[str, Exception] = Result.ok("hb")

        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "hb"

    def test_err_holds_the_reason(self) -> None:
        result: Result[str, ValueError] = Result.err(ValueError("bad row"))

        assert result.is_err()
        assert str(result.unwrap_err()) == "bad row"
        with pytest.raises(ValueError, match="bad row"):
            result.unwrap()

    def test_unwrap_err_on_ok_raises(self) -> None:
        with pytest.raises(ValueError, match="no error on an ok result"):
            Result.ok(1).unwrap_err()

    @pytest.mark.parametrize("kwargs", [{}, {"value": 1, "error": ValueError()}])
    def test_needs_exactly_one_side(self, kwargs: dict) -> None:
        with pytest.raises(ValueError, match="exactly one of value or error"):
            Result(**kwargs)

    def test_is_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Result.ok(1).value = 2  # type: ignore[misc]
