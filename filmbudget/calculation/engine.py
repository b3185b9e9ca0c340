"""Mini README: Cost calculation engine for film production budgets.

Structure:
    * PositionType - closed enumeration of the five cost categories.
    * PositionSnapshot / ProjectSnapshot - immutable inputs for one calculation.
    * CategorySummary, ComparisonRow, CostComparison - derived results.
    * resolve_days_on_set, cost_of, cost_without_per_diem, per_diem_of,
      position_sums, summarize, hotel_nights, compare - the calculation rules.

Every rule is a pure function over a snapshot: nothing here touches the
database, logs, or mutates its arguments, so the web layer can recompute the
whole view after each edit. Missing numeric fields count as zero instead of
raising. Category handling dispatches over the closed ``PositionType`` enum
without a fallback branch, which keeps the per-position sum and the category
breakdown in agreement for every position that can be constructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class PositionType(str, Enum):
    """Enumerate the supported position categories."""

    CREW = "crew"
    DARSTELLER = "darsteller"
    LEIHE = "leihe"
    LOCATION = "location"
    SONSTIGES = "sonstiges"

    @classmethod
    def from_str(cls, value: object) -> "PositionType":
        """Coerce arbitrary casing into a valid position type."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().lower()
            return cls(normalised)
        except ValueError as error:
            raise ValueError(f"Unsupported position type: {value}") from error

    @property
    def is_personnel(self) -> bool:
        """Crew and cast share the day-rate formula."""

        return self in (PositionType.CREW, PositionType.DARSTELLER)

    @property
    def label(self) -> str:
        return TYPE_LABELS[self]


TYPE_LABELS: Dict[PositionType, str] = {
    PositionType.CREW: "Crew",
    PositionType.DARSTELLER: "Darsteller",
    PositionType.LEIHE: "Leihe",
    PositionType.LOCATION: "Location",
    PositionType.SONSTIGES: "Sonstiges",
}

SIMPLE_TYPES = (PositionType.LEIHE, PositionType.LOCATION, PositionType.SONSTIGES)

PER_DIEM_ROW_TYPE = "verpflegung"
PER_DIEM_LABEL = "Verpflegung"


def _amount(value: object) -> float:
    """Treat missing monetary values as zero."""

    if value is None:
        return 0.0
    return float(value)


def _count(value: object) -> int:
    if value is None:
        return 0
    return int(value)


def _optional_amount(value: object) -> Optional[float]:
    return None if value is None else float(value)


def _optional_count(value: object) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """One cost line item as seen by the calculation rules."""

    position_id: str
    position_type: PositionType
    name: str = ""
    daily_rate: float = 0.0
    flat_fee: float = 0.0
    travel_costs: float = 0.0
    hotel_nights: int = 0
    days_on_set: Optional[int] = None
    costs: float = 0.0
    actual_costs: Optional[float] = None
    active: bool = True
    color: Optional[str] = None
    sort_order: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position_type", PositionType.from_str(self.position_type))

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "PositionSnapshot":
        """Build a snapshot from a stored or serialised position record.

        Absent or ``None`` numeric fields become zero, except ``days_on_set``
        and ``actual_costs`` whose absence is meaningful. Unknown position
        types raise ``ValueError``; this includes the ``"position"`` default
        written by older databases, which must be migrated to one of the
        five categories before they can be calculated.
        """

        return cls(
            position_id=str(record.get("id", "")),
            position_type=PositionType.from_str(record.get("type")),
            name=record.get("name") or "",
            daily_rate=_amount(record.get("daily_rate")),
            flat_fee=_amount(record.get("flat_fee")),
            travel_costs=_amount(record.get("travel_costs")),
            hotel_nights=_count(record.get("hotel_nights")),
            days_on_set=_optional_count(record.get("days_on_set")),
            costs=_amount(record.get("costs")),
            actual_costs=_optional_amount(record.get("actual_costs")),
            active=bool(record.get("active", True)),
            color=record.get("color"),
            sort_order=_count(record.get("sort_order")),
        )


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    """Project configuration together with its ordered positions."""

    project_id: str
    name: str = ""
    shooting_days: int = 1
    include_hotel: bool = False
    hotel_cost_per_night: float = 0.0
    per_diem: float = 0.0
    actual_per_diem: float = 0.0
    archived: bool = False
    positions: Tuple[PositionSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "ProjectSnapshot":
        """Build a snapshot from a project record carrying a ``positions`` list.

        Raises ``ValueError`` if any position carries an unknown type.
        """

        shooting_days = record.get("shooting_days")
        return cls(
            project_id=str(record.get("id", "")),
            name=record.get("name") or "",
            shooting_days=1 if shooting_days is None else int(shooting_days),
            include_hotel=bool(record.get("include_hotel", False)),
            hotel_cost_per_night=_amount(record.get("hotel_cost_per_night")),
            per_diem=_amount(record.get("per_diem")),
            actual_per_diem=_amount(record.get("actual_per_diem")),
            archived=bool(record.get("archived", False)),
            positions=tuple(
                PositionSnapshot.from_mapping(position)
                for position in record.get("positions") or ()
            ),
        )

    @property
    def active_positions(self) -> List[PositionSnapshot]:
        return [position for position in self.positions if position.active]


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Planned cost split into display categories."""

    crew: float = 0.0
    darsteller: float = 0.0
    hotel: float = 0.0
    travel: float = 0.0
    leihe: float = 0.0
    location: float = 0.0
    sonstiges: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.crew
            + self.darsteller
            + self.hotel
            + self.travel
            + self.leihe
            + self.location
            + self.sonstiges
        )

    def as_dict(self) -> Dict[str, float]:
        """Export the buckets and the grand total for JSON responses."""

        return {
            "crew": self.crew,
            "darsteller": self.darsteller,
            "hotel": self.hotel,
            "travel": self.travel,
            "leihe": self.leihe,
            "location": self.location,
            "sonstiges": self.sonstiges,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    """Planned versus actual cost for one position or the per-diem pool."""

    position_id: Optional[str]
    row_type: str
    name: str
    calculated: float
    actual: float
    difference: float

    @property
    def is_per_diem(self) -> bool:
        return self.row_type == PER_DIEM_ROW_TYPE

    def as_dict(self) -> Dict[str, object]:
        return {
            "position_id": self.position_id,
            "type": self.row_type,
            "name": self.name,
            "calculated": self.calculated,
            "actual": self.actual,
            "difference": self.difference,
        }


@dataclass(frozen=True, slots=True)
class CostComparison:
    """Rows and totals of the planned-versus-actual view."""

    rows: Tuple[ComparisonRow, ...]
    total_per_diem: float
    total_calculated: float
    total_actual: float

    @property
    def difference(self) -> float:
        return self.total_calculated - self.total_actual

    def as_dict(self) -> Dict[str, object]:
        return {
            "rows": [row.as_dict() for row in self.rows],
            "total_per_diem": self.total_per_diem,
            "total_calculated": self.total_calculated,
            "total_actual": self.total_actual,
            "difference": self.difference,
        }


@dataclass(frozen=True, slots=True)
class _PersonnelCost:
    """Additive terms of a crew or cast position."""

    fee: float
    hotel: float
    travel: float
    per_diem: float


def resolve_days_on_set(days_on_set: Optional[int], shooting_days: Optional[int]) -> int:
    """Return the position override when present, otherwise the project default."""

    if days_on_set is not None:
        return int(days_on_set)
    if shooting_days is None:
        return 1
    return int(shooting_days)


def _personnel_cost(position: PositionSnapshot, project: ProjectSnapshot) -> _PersonnelCost:
    days = resolve_days_on_set(position.days_on_set, project.shooting_days)
    return _PersonnelCost(
        fee=_amount(position.daily_rate) * days + _amount(position.flat_fee),
        hotel=_count(position.hotel_nights) * _amount(project.hotel_cost_per_night),
        travel=_amount(position.travel_costs),
        per_diem=_amount(project.per_diem) * days,
    )


def _unhandled(position_type: PositionType) -> AssertionError:
    return AssertionError(f"Unhandled position type {position_type!r}")


def cost_of(position: PositionSnapshot, project: Optional[ProjectSnapshot]) -> float:
    """Planned total of a single position, zero when inactive or without a project."""

    if project is None or not position.active:
        return 0.0
    position_type = position.position_type
    if position_type.is_personnel:
        terms = _personnel_cost(position, project)
        return terms.fee + terms.hotel + terms.travel + terms.per_diem
    if position_type in SIMPLE_TYPES:
        return _amount(position.costs)
    raise _unhandled(position_type)


def per_diem_of(position: PositionSnapshot, project: Optional[ProjectSnapshot]) -> float:
    """Per-diem share of an active crew or cast position."""

    if project is None or not position.active:
        return 0.0
    position_type = position.position_type
    if position_type.is_personnel:
        return _personnel_cost(position, project).per_diem
    if position_type in SIMPLE_TYPES:
        return 0.0
    raise _unhandled(position_type)


def cost_without_per_diem(position: PositionSnapshot, project: Optional[ProjectSnapshot]) -> float:
    """Planned cost with the per-diem share removed, as listed in the comparison."""

    if project is None or not position.active:
        return 0.0
    position_type = position.position_type
    if position_type.is_personnel:
        terms = _personnel_cost(position, project)
        return terms.fee + terms.hotel + terms.travel
    if position_type in SIMPLE_TYPES:
        return _amount(position.costs)
    raise _unhandled(position_type)


def position_sums(project: Optional[ProjectSnapshot]) -> Dict[str, float]:
    """Map every position id, in order, to its planned total."""

    if project is None:
        return {}
    return {position.position_id: cost_of(position, project) for position in project.positions}


def summarize(project: Optional[ProjectSnapshot]) -> CategorySummary:
    """Break the active positions' planned cost down by category."""

    if project is None:
        return CategorySummary()

    buckets = {
        "crew": 0.0,
        "darsteller": 0.0,
        "hotel": 0.0,
        "travel": 0.0,
        "leihe": 0.0,
        "location": 0.0,
        "sonstiges": 0.0,
    }
    for position in project.active_positions:
        position_type = position.position_type
        if position_type.is_personnel:
            terms = _personnel_cost(position, project)
            # Hotel and travel are reported in their own buckets.
            buckets[position_type.value] += terms.fee + terms.per_diem
            buckets["hotel"] += terms.hotel
            buckets["travel"] += terms.travel
        elif position_type in SIMPLE_TYPES:
            buckets[position_type.value] += _amount(position.costs)
        else:
            raise _unhandled(position_type)
    return CategorySummary(**buckets)


def hotel_nights(project: Optional[ProjectSnapshot]) -> int:
    """Count the hotel nights booked for active crew and cast."""

    if project is None:
        return 0
    return sum(
        _count(position.hotel_nights)
        for position in project.active_positions
        if position.position_type.is_personnel
    )


def compare(project: Optional[ProjectSnapshot]) -> CostComparison:
    """Compare the plan with the recorded actual costs.

    Per diem is planned per person but paid out as one pool, so each row
    lists its position without the per-diem share and a single synthetic
    row carries the pooled amount against ``actual_per_diem``. The
    calculated grand total therefore matches ``summarize(project).total``.
    """

    if project is None:
        return CostComparison(rows=(), total_per_diem=0.0, total_calculated=0.0, total_actual=0.0)

    rows: List[ComparisonRow] = []
    total_per_diem = 0.0
    for position in project.active_positions:
        total_per_diem += per_diem_of(position, project)
        calculated = cost_without_per_diem(position, project)
        actual = _amount(position.actual_costs)
        rows.append(
            ComparisonRow(
                position_id=position.position_id,
                row_type=position.position_type.value,
                name=position.name,
                calculated=calculated,
                actual=actual,
                difference=calculated - actual,
            )
        )

    total_calculated = sum(row.calculated for row in rows) + total_per_diem
    actual_per_diem = _amount(project.actual_per_diem)
    total_actual = actual_per_diem + sum(row.actual for row in rows)

    if total_per_diem > 0:
        rows.append(
            ComparisonRow(
                position_id=None,
                row_type=PER_DIEM_ROW_TYPE,
                name=PER_DIEM_LABEL,
                calculated=total_per_diem,
                actual=actual_per_diem,
                difference=total_per_diem - actual_per_diem,
            )
        )

    return CostComparison(
        rows=tuple(rows),
        total_per_diem=total_per_diem,
        total_calculated=total_calculated,
        total_actual=total_actual,
    )
