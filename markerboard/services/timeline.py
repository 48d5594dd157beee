"""
Cross-marker activity: the global timeline and the actionable todo list.
"""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from markerboard.domain.models import (
    ActionableTodo,
    MarkerDefinition,
    MarkerHistory,
    MarkerNote,
    Measurement,
    Plan,
    TimelineEvent,
    Todo,
)
from markerboard.domain.ranges import classify_status
from markerboard.services.tags import parse_tagged_text

_KIND_ORDER = {"measurement": 0, "note": 1}
_NO_DUE_DATE = datetime.min.replace(tzinfo=UTC)


def build_timeline(
    markers: Iterable[MarkerDefinition],
    measurements: Iterable[Measurement],
    notes: Iterable[MarkerNote] = (),
) -> list[TimelineEvent]:
    """
    Merge readings and notes of all markers, newest first.

    Rows pointing at markers missing from the catalog are skipped.
    """
    catalog = {m.id: m for m in markers}
    events: list[TimelineEvent] = []

    for reading in measurements:
        marker = catalog.get(reading.marker_id)
        if marker is None:
            continue
        events.append(
            TimelineEvent(
                kind="measurement",
                id=reading.id,
                date=reading.date,
                marker_id=marker.id,
                marker_name=marker.name,
                unit=marker.unit,
                value=reading.value,
                note=reading.note,
                status=classify_status(reading.value, marker.min_ref, marker.max_ref),
            )
        )

    for note in notes:
        marker = catalog.get(note.marker_id)
        if marker is None:
            continue
        tagged = parse_tagged_text(note.note)
        events.append(
            TimelineEvent(
                kind="note",
                id=note.id,
                date=note.date,
                marker_id=marker.id,
                marker_name=marker.name,
                note=tagged.body,
                tags=tagged.tags,
            )
        )

    events.sort(key=lambda e: (_KIND_ORDER[e.kind], e.id))
    events.sort(key=lambda e: e.date, reverse=True)
    return events


def _todo_marker_ids(todo: Todo, marker_by_measurement: dict[str, str]) -> tuple[str, ...]:
    ids = list(todo.marker_ids)
    if todo.measurement_id and todo.measurement_id in marker_by_measurement:
        ids.append(marker_by_measurement[todo.measurement_id])
    return tuple(dict.fromkeys(ids))


def _linked_to_plan(
    todo: Todo, marker_ids: tuple[str, ...], plan: Plan, plan_markers: set[str]
) -> bool:
    return todo.plan_id == plan.id or bool(plan_markers.intersection(marker_ids))


def actionable_todos(
    todos: Iterable[Todo],
    histories: Sequence[MarkerHistory],
    plan: Plan | None = None,
) -> list[ActionableTodo]:
    """
    Open todos enriched with the names of the markers they concern.

    With a plan, only todos linked to it (directly or via one of its linked
    markers) are kept. Sorted by due date, undated last, then creation time.
    """
    names = {h.id: h.name for h in histories}
    marker_by_measurement = {m.id: h.id for h in histories for m in h.measurements}
    plan_markers = set(plan.linked_marker_ids) if plan else set()

    result: list[ActionableTodo] = []
    for todo in todos:
        if todo.done:
            continue

        marker_ids = _todo_marker_ids(todo, marker_by_measurement)
        if plan is not None and not _linked_to_plan(todo, marker_ids, plan, plan_markers):
            continue

        result.append(
            ActionableTodo(
                todo=todo,
                marker_ids=marker_ids,
                marker_names=tuple(names[i] for i in marker_ids if i in names),
            )
        )

    result.sort(key=lambda a: (a.todo.created_at, a.todo.id))
    result.sort(key=lambda a: (a.todo.due_date is None, a.todo.due_date or _NO_DUE_DATE))
    return result
