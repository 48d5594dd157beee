"""
Persisted-row mapping for the backing store.

Rows arrive as plain dicts with the store's snake_case columns:

- ``blood_markers``: shared catalog
- ``measurements`` (``measured_at``), ``marker_notes`` (``created_at``)
- ``measurement_todos`` (``is_done``, ``measurement_id``, ``journal_id``)
- ``journal_entries`` with ``journal_entry_markers`` and ``journal_goals``

Numeric columns may come back as strings, sometimes with a decimal comma.
Every mapper returns a ``Result`` so one malformed row is skipped and logged
instead of failing the whole load.
"""

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

import structlog
from pydantic import ValidationError

from markerboard.domain.models import (
    DashboardSnapshot,
    Goal,
    MarkerDefinition,
    MarkerGoalBand,
    MarkerNote,
    Measurement,
    Plan,
    Todo,
)
from markerboard.domain.ranges import parse_number, safe_float
from markerboard.services.result import Result

logger = structlog.get_logger(__name__)

Row = Mapping[str, Any]
ModelT = TypeVar("ModelT")

# Expected mapping failures; anything else is a bug and propagates
_ROW_ERRORS = (KeyError, TypeError, ValueError, ValidationError)


def _required_number(row: Row, column: str) -> float:
    value = parse_number(row[column])
    if value is None:
        raise ValueError(f"column {column!r} is not numeric: {row[column]!r}")
    return value


def _id(value: Any) -> str:
    if value is None or value == "":
        raise ValueError("missing id")
    return str(value)


def _goal_band(row: Row) -> MarkerGoalBand | None:
    # Optional; a half-filled or unreadable band is treated as no band
    target_min = parse_number(row.get("target_min"))
    target_max = parse_number(row.get("target_max"))
    if target_min is None or target_max is None:
        return None
    return MarkerGoalBand(target_min=target_min, target_max=target_max)


def marker_from_row(row: Row) -> Result[MarkerDefinition]:
    """
    Map a catalog row. Unparseable reference bounds become 0; missing
    display bounds are derived from the reference range (half the lower
    bound, one and a half times the upper bound). The optional goal band comes
    from ``target_min`` and ``target_max``.
    """
    try:
        min_ref = safe_float(row.get("min_ref"))
        max_ref = safe_float(row.get("max_ref"))

        display_min = parse_number(row.get("display_min"))
        if display_min is None:
            display_min = min_ref * 0.5 if min_ref != 0 else max_ref * 0.5
        display_max = parse_number(row.get("display_max"))
        if display_max is None:
            display_max = max_ref * 1.5 if max_ref != 0 else (min_ref * 1.5 or 1.0)

        name = str(row["name"])
        return Result.ok(
            MarkerDefinition(
                id=_id(row.get("id")),
                name=name,
                short_name=row.get("short_name") or name[:3],
                unit=row.get("unit") or "",
                min_ref=min_ref,
                max_ref=max_ref,
                display_min=display_min,
                display_max=display_max,
                category=row.get("category") or "",
                description=row.get("description") or None,
                goal=_goal_band(row),
            )
        )
    except _ROW_ERRORS as e:
        return Result.err(e)


def measurement_from_row(row: Row) -> Result[Measurement]:
    try:
        return Result.ok(
            Measurement(
                id=_id(row.get("id")),
                marker_id=_id(row.get("marker_id")),
                value=_required_number(row, "value"),
                date=row["measured_at"],
                note=row.get("note"),
            )
        )
    except _ROW_ERRORS as e:
        return Result.err(e)


def note_from_row(row: Row) -> Result[MarkerNote]:
    try:
        return Result.ok(
            MarkerNote(
                id=_id(row.get("id")),
                marker_id=_id(row.get("marker_id")),
                note=row.get("note") or "",
                date=row["created_at"],
            )
        )
    except _ROW_ERRORS as e:
        return Result.err(e)


def todo_from_row(row: Row) -> Result[Todo]:
    try:
        marker_ids = row.get("marker_ids") or ([row["marker_id"]] if row.get("marker_id") else [])
        fields: dict[str, Any] = {
            "id": _id(row.get("id")),
            "task": row.get("task") or "",
            "done": bool(row.get("is_done", row.get("done", False))),
            "due_date": row.get("due_date"),
            "marker_ids": tuple(str(m) for m in marker_ids),
            "plan_id": row.get("journal_id") or row.get("plan_id"),
            "measurement_id": row.get("measurement_id"),
        }
        if row.get("created_at"):
            fields["created_at"] = row["created_at"]
        return Result.ok(Todo(**fields))
    except _ROW_ERRORS as e:
        return Result.err(e)


def goal_from_row(row: Row) -> Result[Goal]:
    try:
        upper = row.get("target_value_upper")
        return Result.ok(
            Goal(
                marker_id=_id(row.get("marker_id")),
                direction=row["direction"],
                target_value=_required_number(row, "target_value"),
                target_value_upper=parse_number(upper) if upper is not None else None,
            )
        )
    except _ROW_ERRORS as e:
        return Result.err(e)


def plan_from_row(
    row: Row, linked_marker_ids: Iterable[str] = (), goals: Iterable[Goal] = ()
) -> Result[Plan]:
    try:
        fields: dict[str, Any] = {
            "id": _id(row.get("id")),
            "title": row.get("title") or "",
            "content": row.get("content") or "",
            "start_date": row.get("start_date") or None,
            "target_date": row.get("target_date") or None,
            "linked_marker_ids": tuple(dict.fromkeys(linked_marker_ids)),
            "goals": tuple(goals),
        }
        for column in ("created_at", "updated_at"):
            if row.get(column):
                fields[column] = row[column]
        return Result.ok(Plan(**fields))
    except _ROW_ERRORS as e:
        return Result.err(e)


def _collect(
    table: str, rows: Iterable[Row], mapper: Callable[[Row], Result[ModelT]]
) -> list[ModelT]:
    mapped: list[ModelT] = []
    for row in rows:
        result = mapper(row)
        if result.is_ok():
            mapped.append(result.unwrap())
        else:
            logger.warning(
                "row_skipped", table=table, row_id=row.get("id"), error=str(result.unwrap_err())
            )
    return mapped


def plans_from_rows(
    entry_rows: Iterable[Row],
    marker_link_rows: Iterable[Row] = (),
    goal_rows: Iterable[Row] = (),
) -> list[Plan]:
    """Assemble plans from the entry, linked-marker and goal tables."""
    links: dict[str, list[str]] = defaultdict(list)
    for link in marker_link_rows:
        if link.get("journal_id") and link.get("marker_id"):
            links[str(link["journal_id"])].append(str(link["marker_id"]))

    goals_by_plan: dict[str, list[Goal]] = defaultdict(list)
    for row in goal_rows:
        result = goal_from_row(row)
        if result.is_err() or not row.get("journal_id"):
            logger.warning(
                "row_skipped",
                table="journal_goals",
                row_id=row.get("id"),
                error=str(result.unwrap_err()) if result.is_err() else "missing journal_id",
            )
            continue
        goals_by_plan[str(row["journal_id"])].append(result.unwrap())

    def _plan(row: Row) -> Result[Plan]:
        plan_id = str(row.get("id"))
        goals = goals_by_plan.get(plan_id, [])
        # Goals link their marker to the plan as well
        marker_ids = [*links.get(plan_id, []), *(g.marker_id for g in goals)]
        return plan_from_row(row, marker_ids, goals)

    return _collect("journal_entries", entry_rows, _plan)


def load_snapshot(
    marker_rows: Iterable[Row],
    measurement_rows: Iterable[Row],
    note_rows: Iterable[Row] = (),
    todo_rows: Iterable[Row] = (),
    plan_rows: Iterable[Row] = (),
    plan_marker_rows: Iterable[Row] = (),
    goal_rows: Iterable[Row] = (),
) -> DashboardSnapshot:
    """Map one user's fetched rows into an engine snapshot, skipping bad rows."""
    snapshot = DashboardSnapshot(
        markers=tuple(_collect("blood_markers", marker_rows, marker_from_row)),
        measurements=tuple(_collect("measurements", measurement_rows, measurement_from_row)),
        notes=tuple(_collect("marker_notes", note_rows, note_from_row)),
        todos=tuple(_collect("measurement_todos", todo_rows, todo_from_row)),
        plans=tuple(plans_from_rows(plan_rows, plan_marker_rows, goal_rows)),
    )
    logger.info(
        "snapshot_loaded",
        markers=len(snapshot.markers),
        measurements=len(snapshot.measurements),
        notes=len(snapshot.notes),
        todos=len(snapshot.todos),
        plans=len(snapshot.plans),
    )
    return snapshot
