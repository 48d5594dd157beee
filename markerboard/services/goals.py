"""
Goal progress and plan helpers.

Goals arrive already validated (a range goal always has lower < upper), so
the evaluator trusts them. A goal whose marker has no readings is simply
"in progress" with zero progress.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from markerboard.domain.models import (
    Goal,
    GoalDirection,
    GoalProgress,
    GoalState,
    MarkerHistory,
    Plan,
)
from markerboard.domain.ranges import clamp

# Placeholder for unmet lower/range goals: there is no baseline reading to
# measure progress from, so the midpoint is shown
UNMET_GOAL_MIDPOINT = 0.5


def _in_progress(goal: Goal, value: float | None, progress: float) -> GoalProgress:
    return GoalProgress(
        goal=goal,
        achieved=False,
        progress=progress,
        state=GoalState.IN_PROGRESS,
        current_value=value,
    )


def evaluate_goal(goal: Goal, latest_value: float | None) -> GoalProgress:
    """Score a goal against the marker's latest value.

    Achieved goals always report ``progress == 1.0``.
    """
    if latest_value is None or not math.isfinite(latest_value):
        return _in_progress(goal, None, 0.0)

    value = latest_value
    target = goal.target_value

    if goal.direction == GoalDirection.HIGHER:
        achieved = value >= target
        unmet_progress = clamp(value / target, 0.0, 1.0) if target > 0 else 0.0
    elif goal.direction == GoalDirection.LOWER:
        achieved = value <= target
        unmet_progress = UNMET_GOAL_MIDPOINT
    else:
        upper = goal.target_value_upper
        achieved = upper is not None and target <= value <= upper
        unmet_progress = UNMET_GOAL_MIDPOINT

    if achieved:
        return GoalProgress(
            goal=goal,
            achieved=True,
            progress=1.0,
            state=GoalState.ACHIEVED,
            current_value=value,
        )
    return _in_progress(goal, value, unmet_progress)


def evaluate_plan_goals(plan: Plan, histories: Iterable[MarkerHistory]) -> list[GoalProgress]:
    """Evaluate every goal of a plan, in the plan's goal order."""
    latest_values = {h.id: h.latest_measurement.value for h in histories}
    return [evaluate_goal(goal, latest_values.get(goal.marker_id)) for goal in plan.goals]


def select_active_plan(plans: Sequence[Plan], now: datetime | None = None) -> Plan | None:
    """
    Pick the plan the dashboard treats as active.

    The most recently updated plan that is still open (no target date, or a
    target date not yet passed). When every plan has expired, the most
    recently updated one is returned.
    """
    if not plans:
        return None

    now = now or datetime.now(UTC)
    by_recency = sorted(plans, key=lambda p: (p.updated_at, p.id), reverse=True)

    for plan in by_recency:
        if plan.target_date is None or plan.target_date >= now:
            return plan
    return by_recency[0]


def days_left(plan: Plan, now: datetime | None = None) -> int | None:
    """Whole days until the plan's target date, rounded up. Negative once passed."""
    if plan.target_date is None:
        return None

    now = now or datetime.now(UTC)
    return math.ceil((plan.target_date - now) / timedelta(days=1))
