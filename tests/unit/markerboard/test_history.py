"""
Tests for the marker history builder.

The builder owns measurement ordering, so these tests pin down "latest"
and the tie-breaking rules regardless of how rows arrive.
"""

from datetime import UTC, datetime

from hypothesis import given
from hypothesis import strategies as st

from markerboard.domain.models import HealthStatus, MarkerDefinition, MarkerNote, Measurement
from markerboard.services.history import (
    build_marker_histories,
    build_marker_history,
    chronological,
    latest_first,
)


def _marker(marker_id: str = "ldl", min_ref: float = 70, max_ref: float = 100) -> MarkerDefinition:
    return MarkerDefinition(
        id=marker_id,
        name=marker_id.upper(),
        min_ref=min_ref,
        max_ref=max_ref,
        display_min=0,
        display_max=200,
    )


def _reading(reading_id: str, value: float, day: int, marker_id: str = "ldl") -> Measurement:
    return Measurement(
        id=reading_id, marker_id=marker_id, value=value, date=datetime(2024, 1, day, tzinfo=UTC)
    )


class TestOrdering:
    def test_latest_first_and_chronological_are_mirrors(self) -> None:
        readings = [_reading("b", 1, 5), _reading("a", 2, 1), _reading("c", 3, 9)]

        assert [m.id for m in latest_first(readings)] == ["c", "b", "a"]
        assert [m.id for m in chronological(readings)] == ["a", "b", "c"]

    def test_same_date_ties_break_on_id(self) -> None:
        readings = [_reading("a", 1, 5), _reading("b", 2, 5)]

        assert [m.id for m in latest_first(readings)] == ["b", "a"]
        assert [m.id for m in latest_first(reversed(readings))] == ["b", "a"]

    def test_time_of_day_orders_before_id(self) -> None:
        morning = Measurement(
            id="b", marker_id="ldl", value=1, date=datetime(2024, 1, 5, 8, tzinfo=UTC)
        )
        evening = Measurement(
            id="a", marker_id="ldl", value=2, date=datetime(2024, 1, 5, 20, tzinfo=UTC)
        )

        assert [m.id for m in latest_first([morning, evening])] == ["a", "b"]


class TestBuildMarkerHistory:
    def test_no_readings_means_no_history(self) -> None:
        assert build_marker_history(_marker(), []) is None

    def test_latest_reading_drives_status(self) -> None:
        history = build_marker_history(
            _marker(), [_reading("1", 120, 1), _reading("2", 90, 10), _reading("3", 60, 5)]
        )

        assert history is not None
        assert history.latest_measurement.id == "2"
        assert history.status == HealthStatus.NORMAL
        assert [m.id for m in history.measurements] == ["2", "3", "1"]

    def test_notes_newest_first(self) -> None:
        notes = [
            MarkerNote(id="n1", marker_id="ldl", note="old", date="2024-01-01"),
            MarkerNote(id="n2", marker_id="ldl", note="new", date="2024-02-01"),
        ]
        history = build_marker_history(_marker(), [_reading("1", 80, 1)], notes)

        assert history is not None
        assert [n.id for n in history.notes] == ["n2", "n1"]

    def test_history_can_be_rebuilt_from_a_history(self) -> None:
        history = build_marker_history(_marker(), [_reading("1", 80, 1)])
        assert history is not None

        rebuilt = build_marker_history(history, [_reading("2", 130, 2)])

        assert rebuilt is not None
        assert rebuilt.status == HealthStatus.HIGH
        assert len(rebuilt.measurements) == 1


class TestBuildMarkerHistories:
    def test_untracked_markers_are_dropped(self) -> None:
        markers = [_marker("ldl"), _marker("hdl", 1, 2)]
        histories = build_marker_histories(markers, [_reading("1", 80, 1, "ldl")])

        assert [h.id for h in histories] == ["ldl"]

    def test_follows_catalog_order(self) -> None:
        markers = [_marker("b"), _marker("a")]
        readings = [_reading("1", 80, 1, "a"), _reading("2", 80, 1, "b")]

        assert [h.id for h in build_marker_histories(markers, readings)] == ["b", "a"]

    def test_readings_for_unknown_markers_are_ignored(self) -> None:
        histories = build_marker_histories([_marker()], [_reading("1", 80, 1, "ghost")])
        assert histories == []

    @given(
        values=st.lists(
            st.tuples(st.integers(min_value=1, max_value=28), st.floats(0, 300)),
            min_size=1,
            max_size=12,
        ),
        seed=st.randoms(use_true_random=False),
    )
    def test_input_order_does_not_matter(self, values: list[tuple[int, float]], seed) -> None:
        """Property: shuffling the rows never changes the built history."""
        readings = [_reading(str(i), v, day) for i, (day, v) in enumerate(values)]
        shuffled = list(readings)
        seed.shuffle(shuffled)

        original = build_marker_histories([_marker()], readings)
        reshuffled = build_marker_histories([_marker()], shuffled)

        assert original == reshuffled
        latest = original[0].latest_measurement
        assert all(latest.date >= m.date for m in readings)
