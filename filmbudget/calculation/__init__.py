"""Mini README: Budget calculation rules.

The package exposes pure functions that turn a project snapshot into
derived totals: per-position sums, the category summary, booked hotel
nights and the planned-versus-actual comparison. Snapshots are plain
immutable dataclasses so callers can build them from database rows, API
payloads or test fixtures alike.
"""

from .engine import (
    CategorySummary,
    ComparisonRow,
    CostComparison,
    PER_DIEM_LABEL,
    PER_DIEM_ROW_TYPE,
    PositionSnapshot,
    PositionType,
    ProjectSnapshot,
    TYPE_LABELS,
    compare,
    cost_of,
    cost_without_per_diem,
    hotel_nights,
    per_diem_of,
    position_sums,
    resolve_days_on_set,
    summarize,
)

__all__ = [
    "CategorySummary",
    "ComparisonRow",
    "CostComparison",
    "PER_DIEM_LABEL",
    "PER_DIEM_ROW_TYPE",
    "PositionSnapshot",
    "PositionType",
    "ProjectSnapshot",
    "TYPE_LABELS",
    "compare",
    "cost_of",
    "cost_without_per_diem",
    "hotel_nights",
    "per_diem_of",
    "position_sums",
    "resolve_days_on_set",
    "summarize",
]
