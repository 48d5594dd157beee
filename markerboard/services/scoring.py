"""
Aggregate scoring across all tracked markers.

Low and high markers earn partial credit rather than zero: they are tracked
but off, not failing.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from markerboard.config import ScoringConfig
from markerboard.domain.models import DashboardSummary, HealthStatus, MarkerHistory, Measurement
from markerboard.services.presenter import category_of, collation_key


def health_score(histories: Sequence[MarkerHistory], config: ScoringConfig | None = None) -> int:
    """
    Integer score in ``[0, 100]``.

    All-normal -> 100, all-abnormal -> 50 with default points, no markers -> 0.
    Halves round up.
    """
    config = config or ScoringConfig()
    count = len(histories)
    if count == 0:
        return 0

    total = sum(
        config.normal_points if h.status == HealthStatus.NORMAL else config.abnormal_points
        for h in histories
    )
    return (2 * total + count) // (2 * count)


def attention_list(histories: Iterable[MarkerHistory]) -> list[MarkerHistory]:
    return [h for h in histories if h.status != HealthStatus.NORMAL]


def summarize(
    histories: Sequence[MarkerHistory], measurements: Iterable[Measurement] = ()
) -> DashboardSummary:
    """Counts for the header plus the most recent reading date overall."""
    normal = sum(1 for h in histories if h.status == HealthStatus.NORMAL)
    last_measured_at = max((m.date for m in measurements), default=None)
    return DashboardSummary(
        total=len(histories),
        normal=normal,
        attention=len(histories) - normal,
        last_measured_at=last_measured_at,
    )


def attention_by_category(
    histories: Iterable[MarkerHistory], uncategorized_label: str = "Other"
) -> list[tuple[str, int]]:
    """Attention markers counted per category, busiest category first."""
    counts = Counter(category_of(h, uncategorized_label) for h in attention_list(histories))
    return sorted(counts.items(), key=lambda item: (-item[1], collation_key(item[0]), item[0]))
