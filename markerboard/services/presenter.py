"""
Filtering, sorting and category grouping for the marker list.

Every ordering here is total: comparisons fall through to the marker id, so
the same input always renders in the same order regardless of how the rows
were fetched.
"""

import unicodedata
from collections.abc import Iterable, Sequence

from markerboard.domain.models import (
    CategoryGroup,
    GroupOrder,
    HealthStatus,
    MarkerHistory,
    SortMode,
    StatusFilter,
)

# Lower is more urgent. "unknown" deliberately sits between the warning
# bucket and "normal".
URGENCY_RANKS: dict[str, int] = {
    "critical": 0,
    "very-high": 0,
    "very-low": 0,
    "high": 1,
    "low": 1,
    "borderline": 2,
    "warning": 2,
    "normal": 4,
}
UNKNOWN_URGENCY = 3

# Swedish alphabet: å, ä, ö sort after z (æ/ø as their Swedish equivalents)
_SWEDISH_TAIL = {
    "å": "\ue000",
    "ä": "\ue001",
    "æ": "\ue001",
    "ö": "\ue002",
    "ø": "\ue002",
    "ü": "y",
}


def urgency_rank(status: HealthStatus | str | None) -> int:
    key = (status.value if isinstance(status, HealthStatus) else status or "").lower()
    return URGENCY_RANKS.get(key, UNKNOWN_URGENCY)


def collation_key(text: str) -> tuple[str, str]:
    """Sort key approximating Swedish locale collation.

    Case-insensitive; accents other than å/ä/ö fold to their base letter.
    The second element keeps distinct spellings apart deterministically.
    """
    folded = unicodedata.normalize("NFC", text).casefold()
    primary = []
    for ch in folded:
        if ch in _SWEDISH_TAIL:
            primary.append(_SWEDISH_TAIL[ch])
            continue
        base = unicodedata.normalize("NFD", ch)[0]
        primary.append(base)
    return "".join(primary), folded


def category_of(history: MarkerHistory, uncategorized_label: str = "Other") -> str:
    return history.category.strip() or uncategorized_label


def matches_query(history: MarkerHistory, query: str | None) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    haystack = f"{history.name} {history.short_name} {history.category} {history.unit}".lower()
    return needle in haystack


def matches_status(history: MarkerHistory, status_filter: StatusFilter | str) -> bool:
    status_filter = StatusFilter(status_filter)
    if status_filter == StatusFilter.ATTENTION:
        return history.status != HealthStatus.NORMAL
    if status_filter == StatusFilter.NORMAL:
        return history.status == HealthStatus.NORMAL
    return True


def sort_histories(
    histories: Iterable[MarkerHistory], sort_mode: SortMode | str = SortMode.ATTENTION_FIRST
) -> list[MarkerHistory]:
    """Sort with the given mode. Stable passes run from least to most significant key."""
    sort_mode = SortMode(sort_mode)
    ordered = sorted(histories, key=lambda h: (collation_key(h.name), h.id))

    if sort_mode == SortMode.ALPHABETICAL:
        return ordered

    ordered.sort(key=lambda h: h.latest_measurement.date, reverse=True)
    if sort_mode == SortMode.ATTENTION_FIRST:
        ordered.sort(key=lambda h: urgency_rank(h.status))
    return ordered


def filter_and_sort(
    histories: Iterable[MarkerHistory],
    query: str | None = None,
    status_filter: StatusFilter | str = StatusFilter.ALL,
    sort_mode: SortMode | str = SortMode.ATTENTION_FIRST,
) -> list[MarkerHistory]:
    selected = [
        h for h in histories if matches_query(h, query) and matches_status(h, status_filter)
    ]
    return sort_histories(selected, sort_mode)


def group_by_category(
    histories: Sequence[MarkerHistory],
    group_order: GroupOrder | str = GroupOrder.ATTENTION,
    uncategorized_label: str = "Other",
) -> list[CategoryGroup]:
    """
    Bucket already-sorted histories by category.

    Each marker lands in exactly one group and keeps its position relative
    to the other markers of that group.
    """
    group_order = GroupOrder(group_order)

    buckets: dict[str, list[MarkerHistory]] = {}
    for history in histories:
        buckets.setdefault(category_of(history, uncategorized_label), []).append(history)

    groups = [
        CategoryGroup(
            category=category,
            markers=tuple(members),
            attention_count=sum(1 for m in members if m.status != HealthStatus.NORMAL),
        )
        for category, members in buckets.items()
    ]

    if group_order == GroupOrder.NAME:
        groups.sort(key=lambda g: collation_key(g.category))
    elif group_order == GroupOrder.ATTENTION:
        groups.sort(key=lambda g: (-g.attention_count, collation_key(g.category)))
    return groups


def present(
    histories: Iterable[MarkerHistory],
    query: str | None = None,
    status_filter: StatusFilter | str = StatusFilter.ALL,
    sort_mode: SortMode | str = SortMode.ATTENTION_FIRST,
    group_order: GroupOrder | str = GroupOrder.ATTENTION,
    uncategorized_label: str = "Other",
) -> list[CategoryGroup]:
    """Filter, sort and group histories for the dashboard list."""
    ordered = filter_and_sort(histories, query, status_filter, sort_mode)
    return group_by_category(ordered, group_order, uncategorized_label)
