"""
Dashboard orchestration.

Runs the whole derived-data pipeline over one user's snapshot:
1. Build marker histories (latest-first readings, status)
2. Trends, sparklines, focus areas and optimization events per marker
3. Score, attention list and header summary
4. Filter/sort/group for the marker list
5. Active plan goals, actionable todos and the activity timeline

Every call recomputes from the snapshot; nothing is cached between calls, so
the caller only has to rebuild after each mutation and drop the old view.
"""

import time

import structlog

from markerboard.config import AppConfig, get_config
from markerboard.domain.focus_areas import focus_areas_for
from markerboard.domain.models import (
    DashboardSnapshot,
    DashboardView,
    GroupOrder,
    SortMode,
    StatusFilter,
)
from markerboard.services.charting import sparkline_points
from markerboard.services.goals import evaluate_plan_goals, select_active_plan
from markerboard.services.history import build_marker_histories
from markerboard.services.optimization import collect_optimization_events
from markerboard.services.presenter import present
from markerboard.services.scoring import (
    attention_by_category,
    attention_list,
    health_score,
    summarize,
)
from markerboard.services.timeline import actionable_todos, build_timeline
from markerboard.services.trends import trend_for, within_goal_band

logger = structlog.get_logger(__name__)


class DashboardEngine:
    """
    Stateless facade over the scoring engine.

    Holds configuration only. ``build`` is a pure function of the snapshot
    and the list options.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self.logger = logger.bind(component="dashboard_engine")

    def build(
        self,
        snapshot: DashboardSnapshot,
        query: str | None = None,
        status_filter: StatusFilter | str = StatusFilter.ALL,
        sort_mode: SortMode | str | None = None,
        group_order: GroupOrder | str | None = None,
    ) -> DashboardView:
        """Derive the complete dashboard view model from a snapshot."""
        start_time = time.perf_counter()
        presentation = self.config.presentation

        histories = build_marker_histories(snapshot.markers, snapshot.measurements, snapshot.notes)

        trends = {}
        goal_band_hits = {}
        for history in histories:
            trend = trend_for(history)
            if trend is not None:
                trends[history.id] = trend
            hit = within_goal_band(history)
            if hit is not None:
                goal_band_hits[history.id] = hit

        sparklines = {
            h.id: tuple(sparkline_points(h, presentation.sparkline_points)) for h in histories
        }
        focus_areas = {h.id: focus_areas_for(h.name, h.category) for h in histories}
        events = collect_optimization_events(histories)

        groups = present(
            histories,
            query=query,
            status_filter=status_filter,
            sort_mode=sort_mode or presentation.default_sort_mode,
            group_order=group_order or presentation.default_group_order,
            uncategorized_label=presentation.uncategorized_label,
        )

        active_plan = select_active_plan(snapshot.plans)
        goal_progress = evaluate_plan_goals(active_plan, histories) if active_plan else []

        view = DashboardView(
            histories=tuple(histories),
            trends=trends,
            sparklines=sparklines,
            goal_band_hits=goal_band_hits,
            focus_areas=focus_areas,
            summary=summarize(histories, snapshot.measurements),
            health_score=health_score(histories, self.config.scoring),
            attention=tuple(attention_list(histories)),
            optimization_events=tuple(events),
            attention_by_category=tuple(
                attention_by_category(histories, presentation.uncategorized_label)
            ),
            groups=tuple(groups),
            active_plan=active_plan,
            goal_progress=tuple(goal_progress),
            actionable_todos=tuple(actionable_todos(snapshot.todos, histories)),
            timeline=tuple(
                build_timeline(snapshot.markers, snapshot.measurements, snapshot.notes)
            ),
        )

        self.logger.info(
            "dashboard_built",
            tracked_markers=len(histories),
            untracked_markers=len(snapshot.markers) - len(histories),
            attention=len(view.attention),
            health_score=view.health_score,
            optimization_events=len(events),
            groups=len(groups),
            duration_seconds=round(time.perf_counter() - start_time, 4),
        )
        return view
