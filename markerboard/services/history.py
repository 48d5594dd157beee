"""
Marker history builder.

Joins the marker catalog with the user's readings and notes. This module is
the single owner of measurement ordering: ``latest_first`` and
``chronological`` are the only sort orders the rest of the engine uses, so
every component agrees on which reading is "latest" and how ties break.
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import TypeVar

from markerboard.domain.models import MarkerDefinition, MarkerHistory, MarkerNote, Measurement
from markerboard.domain.ranges import classify_status

RecordT = TypeVar("RecordT", Measurement, MarkerNote)


def _order_key(item: Measurement | MarkerNote) -> tuple:
    # Full timestamp, then id for identical timestamps, so input order never leaks
    return (item.date, item.id)


def latest_first(measurements: Iterable[Measurement]) -> list[Measurement]:
    return sorted(measurements, key=_order_key, reverse=True)


def chronological(measurements: Iterable[Measurement]) -> list[Measurement]:
    return sorted(measurements, key=_order_key)


def newest_notes_first(notes: Iterable[MarkerNote]) -> list[MarkerNote]:
    return sorted(notes, key=_order_key, reverse=True)


def group_by_marker(records: Iterable[RecordT]) -> dict[str, list[RecordT]]:
    grouped: dict[str, list[RecordT]] = defaultdict(list)
    for record in records:
        grouped[record.marker_id].append(record)
    return grouped


def build_marker_history(
    marker: MarkerDefinition,
    measurements: Iterable[Measurement],
    notes: Iterable[MarkerNote] = (),
) -> MarkerHistory | None:
    """Build one marker's history, or ``None`` when it has no readings."""
    ordered = latest_first(measurements)
    if not ordered:
        return None

    latest = ordered[0]
    return MarkerHistory(
        **marker.model_dump(include=set(MarkerDefinition.model_fields)),
        measurements=tuple(ordered),
        notes=tuple(newest_notes_first(notes)),
        latest_measurement=latest,
        status=classify_status(latest.value, marker.min_ref, marker.max_ref),
    )


def build_marker_histories(
    markers: Iterable[MarkerDefinition],
    measurements: Iterable[Measurement],
    notes: Iterable[MarkerNote] = (),
) -> list[MarkerHistory]:
    """
    Project catalog + readings + notes into per-marker histories.

    Markers without readings are left out entirely: they are known but
    untracked and must not show up in any aggregate. Output follows catalog
    order, and every entry has a ``latest_measurement``.
    """
    readings_by_marker = group_by_marker(measurements)
    notes_by_marker = group_by_marker(notes)

    histories: list[MarkerHistory] = []
    for marker in markers:
        history = build_marker_history(
            marker,
            readings_by_marker.get(marker.id, ()),
            notes_by_marker.get(marker.id, ()),
        )
        if history is not None:
            histories.append(history)
    return histories
