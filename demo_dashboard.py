"""
End-to-end walkthrough of the dashboard engine on the bundled sample data.

This script shows:
1. Configuration loading and validation
2. Loading storage rows (including malformed ones) into a snapshot
3. Building the dashboard view: score, attention list, grouped markers
4. Plan goals, actionable todos and the activity timeline

Run with: uv run python demo_dashboard.py
"""

from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.storage.rows import load_snapshot
from markerboard.config import get_config, print_config_summary, validate_config
from markerboard.domain.catalog import DEFAULT_MARKERS, SAMPLE_MEASUREMENTS
from markerboard.domain.focus_areas import focus_area_meta
from markerboard.domain.models import DashboardView, HealthStatus, StatusFilter
from markerboard.observability import configure_logging
from markerboard.services import DashboardEngine, days_left

console = Console()

STATUS_STYLES = {
    HealthStatus.LOW: "yellow",
    HealthStatus.NORMAL: "green",
    HealthStatus.HIGH: "red",
}


def sample_rows() -> dict[str, list[dict]]:
    """Rows shaped like the backing store returns them, with a few bad apples."""
    now = datetime.now(UTC)
    marker_rows = [
        {**m.model_dump(exclude={"goal"}), "min_ref": str(m.min_ref).replace(".", ",")}
        for m in DEFAULT_MARKERS
    ]
    measurement_rows = [
        {
            "id": m.id,
            "marker_id": m.marker_id,
            "value": m.value,
            "measured_at": m.date.isoformat(),
            "note": m.note,
        }
        for m in SAMPLE_MEASUREMENTS
    ]
    # Optimal band tighter than the reference range
    marker_rows[0].update(target_min=140, target_max=160)
    # Unreadable value: skipped with a row_skipped warning
    measurement_rows.append(
        {"id": "bad-1", "marker_id": "hb", "value": "n/a", "measured_at": "2024-03-01"}
    )
    # Ferritin dipped and recovered: produces an optimization event
    measurement_rows.append(
        {"id": "10", "marker_id": "ferritin", "value": "22,5", "measured_at": "2022-11-02"}
    )

    return {
        "marker_rows": marker_rows,
        "measurement_rows": measurement_rows,
        "note_rows": [
            {
                "id": "n1",
                "marker_id": "hb",
                "note": "#training #altitude\nTwo weeks at altitude before the draw.",
                "created_at": "2024-02-15T08:00:00+00:00",
            }
        ],
        "todo_rows": [
            {
                "id": "t1",
                "task": "Retest hemoglobin in 6 weeks",
                "is_done": False,
                "measurement_id": "4",
                "due_date": (now + timedelta(weeks=6)).isoformat(),
                "journal_id": "p1",
            },
            {"id": "t2", "task": "Book doctor visit", "is_done": True, "marker_ids": ["ts"]},
        ],
        "plan_rows": [
            {
                "id": "p1",
                "title": "Spring protocol",
                "start_date": (now - timedelta(days=30)).isoformat(),
                "target_date": (now + timedelta(days=60)).isoformat(),
                "updated_at": now.isoformat(),
            }
        ],
        "plan_marker_rows": [{"journal_id": "p1", "marker_id": "hb"}],
        "goal_rows": [
            {
                "id": "g1",
                "journal_id": "p1",
                "marker_id": "ts",
                "direction": "higher",
                "target_value": "15",
            },
            {
                "id": "g2",
                "journal_id": "p1",
                "marker_id": "hb",
                "direction": "range",
                "target_value": 140,
                "target_value_upper": 165,
            },
            # Inverted range: rejected and logged
            {
                "id": "g3",
                "journal_id": "p1",
                "marker_id": "evf",
                "direction": "range",
                "target_value": 0.5,
                "target_value_upper": 0.4,
            },
        ],
    }


def show_configuration() -> bool:
    console.print(Panel("🔧 Configuration", style="blue"))
    try:
        validate_config()
        print_config_summary()
        return True
    except Exception as e:
        console.print(f"❌ Configuration failed: {e}", style="red")
        return False


def show_overview(view: DashboardView) -> None:
    console.print(Panel("🩸 Dashboard Overview", style="blue"))

    summary = Table(title="Summary")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="white")
    summary.add_row("Health Score", str(view.health_score))
    summary.add_row("Tracked Markers", str(view.summary.total))
    summary.add_row("Normal", str(view.summary.normal))
    summary.add_row("Needs Attention", str(view.summary.attention))
    last = view.summary.last_measured_at
    summary.add_row("Last Measured", last.date().isoformat() if last else "-")
    console.print(summary)

    for group in view.groups:
        table = Table(title=f"{group.category} ({group.attention_count} need attention)")
        table.add_column("Marker", style="cyan")
        table.add_column("Latest", style="white")
        table.add_column("Range", style="magenta")
        table.add_column("Status")
        table.add_column("Trend", style="yellow")
        table.add_column("Focus", style="blue")

        for marker in group.markers:
            trend = view.trends.get(marker.id)
            goal_hit = view.goal_band_hits.get(marker.id)
            goal = "" if goal_hit is None else (" 🎯" if goal_hit else " (off goal)")
            table.add_row(
                marker.name,
                f"{marker.latest_measurement.value:g} {marker.unit}",
                f"{marker.min_ref:g}-{marker.max_ref:g}",
                f"[{STATUS_STYLES[marker.status]}]{marker.status.value.upper()}[/]{goal}",
                f"{trend.delta:+g} ({trend.direction.value})" if trend else "-",
                " ".join(focus_area_meta(a).emoji for a in view.focus_areas[marker.id]),
            )
        console.print(table)

    if view.optimization_events:
        console.print("\n🏆 Optimization events:", style="green")
        for event in view.optimization_events:
            console.print(
                f"  {event.marker_name}: {event.bad_value:g} ({event.bad_status.value}) "
                f"on {event.bad_date.date()} -> {event.good_value:g} on {event.good_date.date()}"
            )


def show_plan(view: DashboardView) -> None:
    console.print(Panel("🎯 Active Plan", style="blue"))
    plan = view.active_plan
    if plan is None:
        console.print("No plans yet", style="yellow")
        return

    console.print(f"{plan.title} ({days_left(plan)} days left)")
    for progress in view.goal_progress:
        goal = progress.goal
        console.print(
            f"  {goal.marker_id} {goal.direction.value} {goal.target_value:g}: "
            f"{progress.progress:.0%} ({progress.state.value})",
            style="green" if progress.achieved else "yellow",
        )

    console.print("\n📝 Open todos:")
    for item in view.actionable_todos:
        due = item.todo.due_date.date().isoformat() if item.todo.due_date else "no due date"
        markers = ", ".join(item.marker_names) or "no markers"
        console.print(f"  - {item.todo.task}: {markers} ({due})")


def show_timeline(view: DashboardView, limit: int = 8) -> None:
    console.print(Panel("🕒 Recent Activity", style="blue"))
    table = Table()
    table.add_column("Date", style="cyan")
    table.add_column("Marker", style="magenta")
    table.add_column("Entry", style="white")

    for event in view.timeline[:limit]:
        if event.kind == "measurement":
            entry = f"{event.value:g} {event.unit} ({event.status.value if event.status else '-'})"
        else:
            tags = " ".join(f"#{t}" for t in event.tags)
            entry = f"📝 {tags} {event.note or ''}".strip()
        table.add_row(event.date.date().isoformat(), event.marker_name, entry)
    console.print(table)


def run_demo() -> None:
    console.print(Panel("🧪 Markerboard - Dashboard Demo", style="bold blue"))

    if not show_configuration():
        return
    configure_logging()

    snapshot = load_snapshot(**sample_rows())
    engine = DashboardEngine(get_config())

    view = engine.build(snapshot)
    show_overview(view)
    show_plan(view)
    show_timeline(view)

    attention_only = engine.build(snapshot, status_filter=StatusFilter.ATTENTION)
    console.print(
        f"\n⚠️  Attention filter: {sum(len(g.markers) for g in attention_only.groups)} markers "
        f"in {len(attention_only.groups)} group(s)",
        style="yellow",
    )


if __name__ == "__main__":
    try:
        run_demo()
    except KeyboardInterrupt:
        console.print("\n👋 Demo stopped by user", style="yellow")
