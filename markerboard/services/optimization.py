"""
Optimization event detection.

An optimization event is a reading outside the reference range directly
followed by one inside it. A marker that oscillates yields one event per
recovery.
"""

from collections.abc import Iterable

from markerboard.domain.models import (
    HealthStatus,
    MarkerDefinition,
    MarkerHistory,
    Measurement,
    OptimizationEvent,
)
from markerboard.domain.ranges import classify_status
from markerboard.services.history import chronological


def detect_optimization_events(
    marker: MarkerDefinition, measurements: Iterable[Measurement]
) -> list[OptimizationEvent]:
    """Scan one marker's readings in chronological order for recoveries.

    The input order does not matter; readings are sorted here.
    """
    ordered = chronological(measurements)
    events: list[OptimizationEvent] = []

    for prev, curr in zip(ordered, ordered[1:]):
        prev_status = classify_status(prev.value, marker.min_ref, marker.max_ref)
        curr_status = classify_status(curr.value, marker.min_ref, marker.max_ref)

        if prev_status != HealthStatus.NORMAL and curr_status == HealthStatus.NORMAL:
            events.append(
                OptimizationEvent(
                    marker_id=marker.id,
                    marker_name=marker.name,
                    unit=marker.unit,
                    bad_date=prev.date,
                    bad_value=prev.value,
                    bad_status=prev_status,
                    good_date=curr.date,
                    good_value=curr.value,
                )
            )

    return events


def collect_optimization_events(histories: Iterable[MarkerHistory]) -> list[OptimizationEvent]:
    """Pool events across markers, most recent recovery first."""
    events = [
        event
        for history in histories
        for event in detect_optimization_events(history, history.measurements)
    ]
    # Stable three-key ordering: good date desc, then marker id, then bad date desc
    events.sort(key=lambda e: e.bad_date, reverse=True)
    events.sort(key=lambda e: e.marker_id)
    events.sort(key=lambda e: e.good_date, reverse=True)
    return events
