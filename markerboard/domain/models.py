"""
Domain models for biomarker tracking.

These models represent the core business concepts and are framework-agnostic.
Source records (markers, measurements, notes, plans, todos) arrive already
scoped to one user; derived records (histories, events, progress) are rebuilt
from them on every read and never persisted.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def _to_utc_datetime(value: Any) -> Any:
    """Accept ISO strings, dates and datetimes; naive values are taken as UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, BeforeValidator(_to_utc_datetime)]


class HealthStatus(str, Enum):
    """Classification of a value against its reference range."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class FocusAreaId(str, Enum):
    """Organ-system tags a marker can be grouped under."""

    CARDIOVASCULAR = "cardiovascular"
    METABOLIC = "metabolic"
    LIVER = "liver"
    KIDNEY = "kidney"
    THYROID = "thyroid"
    INFLAMMATION = "inflammation"
    BLOOD = "blood"
    HORMONES = "hormones"
    MICRONUTRIENTS = "micronutrients"
    ELECTROLYTES = "electrolytes"
    OTHER = "other"


class TrendDirection(str, Enum):
    """Movement of the latest value relative to the reference range."""

    IMPROVING = "improving"
    WORSENING = "worsening"
    NEUTRAL = "neutral"


class GoalDirection(str, Enum):
    HIGHER = "higher"
    LOWER = "lower"
    RANGE = "range"


class GoalState(str, Enum):
    ACHIEVED = "achieved"
    IN_PROGRESS = "in_progress"


class StatusFilter(str, Enum):
    ALL = "all"
    ATTENTION = "attention"
    NORMAL = "normal"


class SortMode(str, Enum):
    ATTENTION_FIRST = "attention-first"
    RECENT = "recent"
    ALPHABETICAL = "alphabetical"


class GroupOrder(str, Enum):
    """How category groups are ordered relative to each other."""

    FIRST_SEEN = "first-seen"
    NAME = "name"
    ATTENTION = "attention"


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


class MarkerGoalBand(BaseModel):
    """Optional optimal band inside the reference range."""

    model_config = ConfigDict(frozen=True)

    target_min: float
    target_max: float


class MarkerDefinition(BaseModel):
    """Catalog entry for a biomarker. Shared across users."""

    model_config = ConfigDict(frozen=True)  # Catalog rows are read-only here

    id: str
    name: str
    short_name: str = ""
    unit: str = ""
    min_ref: float
    max_ref: float
    display_min: float = Field(description="Chart axis lower bound, unrelated to min_ref")
    display_max: float = Field(description="Chart axis upper bound, unrelated to max_ref")
    category: str = ""
    description: str | None = None
    goal: MarkerGoalBand | None = None


class Measurement(BaseModel):
    """A single lab reading for one marker."""

    model_config = ConfigDict(frozen=True)

    id: str
    marker_id: str
    value: float
    date: Timestamp
    note: str | None = None


class MarkerNote(BaseModel):
    """Free-text annotation attached to a marker rather than a reading."""

    model_config = ConfigDict(frozen=True)

    id: str
    marker_id: str
    note: str
    date: Timestamp


class Goal(BaseModel):
    """Target for a marker's future value, owned by a plan."""

    model_config = ConfigDict(frozen=True)

    marker_id: str
    direction: GoalDirection
    target_value: float
    target_value_upper: float | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_upper_for_one_sided(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("direction") != GoalDirection.RANGE:
            return {**data, "target_value_upper": None}
        return data

    @model_validator(mode="after")
    def range_bounds_ordered(self) -> "Goal":
        if self.direction == GoalDirection.RANGE:
            if self.target_value_upper is None:
                raise ValueError("range goal requires target_value_upper")
            if self.target_value >= self.target_value_upper:
                raise ValueError("range goal requires target_value < target_value_upper")
        return self


class Plan(BaseModel):
    """User-authored journal entry with linked markers and goals."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    content: str = Field(default="", description="Rich-text body, opaque to the engine")
    start_date: Timestamp | None = None
    target_date: Timestamp | None = None
    linked_marker_ids: tuple[str, ...] = ()
    goals: tuple[Goal, ...] = ()
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def target_not_before_start(self) -> "Plan":
        if self.start_date and self.target_date and self.target_date < self.start_date:
            raise ValueError("target_date cannot be before start_date")
        return self


class Todo(BaseModel):
    """Actionable task, optionally tied to markers, a measurement or a plan."""

    model_config = ConfigDict(frozen=True)

    id: str
    task: str
    done: bool = False
    due_date: Timestamp | None = None
    marker_ids: tuple[str, ...] = ()
    plan_id: str | None = None
    measurement_id: str | None = None
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------


class MarkerHistory(MarkerDefinition):
    """A tracked marker joined with its readings and notes (latest first)."""

    measurements: tuple[Measurement, ...]
    notes: tuple[MarkerNote, ...] = ()
    latest_measurement: Measurement
    status: HealthStatus


class Trend(BaseModel):
    """Change between the two most recent readings of a marker."""

    model_config = ConfigDict(frozen=True)

    delta: float
    latest: Measurement
    previous: Measurement
    direction: TrendDirection
    latest_distance: float = Field(ge=0.0)
    previous_distance: float = Field(ge=0.0)


class OptimizationEvent(BaseModel):
    """Out-of-range reading followed directly by an in-range one."""

    model_config = ConfigDict(frozen=True)

    marker_id: str
    marker_name: str
    unit: str
    bad_date: datetime
    bad_value: float
    bad_status: HealthStatus
    good_date: datetime
    good_value: float


class GoalProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: Goal
    achieved: bool
    progress: float = Field(ge=0.0, le=1.0)
    state: GoalState
    current_value: float | None = None


class DashboardSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    normal: int = Field(ge=0)
    attention: int = Field(ge=0)
    last_measured_at: datetime | None = None


class CategoryGroup(BaseModel):
    """Markers sharing a display category, in presentation order."""

    model_config = ConfigDict(frozen=True)

    category: str
    markers: tuple[MarkerHistory, ...]
    attention_count: int = Field(ge=0)


class TimelineEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["measurement", "note"]
    id: str
    date: datetime
    marker_id: str
    marker_name: str
    unit: str = ""
    value: float | None = None
    note: str | None = None
    tags: tuple[str, ...] = ()
    status: HealthStatus | None = None


class ActionableTodo(BaseModel):
    model_config = ConfigDict(frozen=True)

    todo: Todo
    marker_ids: tuple[str, ...] = ()
    marker_names: tuple[str, ...] = ()


class ChartDomain(BaseModel):
    """Axis bounds for a marker history chart."""

    model_config = ConfigDict(frozen=True)

    y_min: float
    y_max: float
    x_min: datetime
    x_max: datetime


class SparklinePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    measurement_id: str
    date: datetime
    value: float
    clamped_value: float
    status: HealthStatus
    has_note: bool = False


class TaggedText(BaseModel):
    model_config = ConfigDict(frozen=True)

    tags: tuple[str, ...] = ()
    body: str = ""


class DashboardSnapshot(BaseModel):
    """Everything the engine needs for one user, fetched by the caller."""

    model_config = ConfigDict(frozen=True)

    markers: tuple[MarkerDefinition, ...] = ()
    measurements: tuple[Measurement, ...] = ()
    notes: tuple[MarkerNote, ...] = ()
    plans: tuple[Plan, ...] = ()
    todos: tuple[Todo, ...] = ()


class DashboardView(BaseModel):
    """Complete derived view model for one dashboard render."""

    model_config = ConfigDict(frozen=True)

    histories: tuple[MarkerHistory, ...]
    trends: dict[str, Trend]
    sparklines: dict[str, tuple[SparklinePoint, ...]] = Field(default_factory=dict)
    goal_band_hits: dict[str, bool] = Field(default_factory=dict)
    focus_areas: dict[str, tuple[FocusAreaId, ...]]
    summary: DashboardSummary
    health_score: int = Field(ge=0, le=100)
    attention: tuple[MarkerHistory, ...]
    optimization_events: tuple[OptimizationEvent, ...]
    attention_by_category: tuple[tuple[str, int], ...]
    groups: tuple[CategoryGroup, ...]
    active_plan: Plan | None = None
    goal_progress: tuple[GoalProgress, ...] = ()
    actionable_todos: tuple[ActionableTodo, ...] = ()
    timeline: tuple[TimelineEvent, ...] = ()
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
