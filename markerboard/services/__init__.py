"""
Core services for the application.

This package contains the derived-data engine: history building, trends,
optimization events, goal progress, scoring and list presentation, plus the
``DashboardEngine`` that runs them together.
"""

from .charting import history_chart_domain, sparkline_points
from .dashboard import DashboardEngine
from .goals import days_left, evaluate_goal, evaluate_plan_goals, select_active_plan
from .history import build_marker_histories, chronological, latest_first
from .optimization import collect_optimization_events, detect_optimization_events
from .presenter import filter_and_sort, group_by_category, present, sort_histories, urgency_rank
from .result import Result
from .scoring import attention_by_category, attention_list, health_score, summarize
from .tags import build_tagged_text, parse_tagged_text
from .timeline import actionable_todos, build_timeline
from .trends import compute_trend, trend_for, within_goal_band

__all__ = [
    "DashboardEngine",
    "Result",
    "actionable_todos",
    "attention_by_category",
    "attention_list",
    "build_marker_histories",
    "build_tagged_text",
    "build_timeline",
    "chronological",
    "collect_optimization_events",
    "compute_trend",
    "days_left",
    "detect_optimization_events",
    "evaluate_goal",
    "evaluate_plan_goals",
    "filter_and_sort",
    "group_by_category",
    "health_score",
    "history_chart_domain",
    "latest_first",
    "parse_tagged_text",
    "present",
    "select_active_plan",
    "sort_histories",
    "sparkline_points",
    "summarize",
    "trend_for",
    "urgency_rank",
    "within_goal_band",
]
