"""Mini README: Persistence gateway for budget projects and positions.

Structure:
    * BudgetGateway - CRUD operations over the SQLite store.
    * coerce_project_changes / coerce_position_changes - validate partial updates.

The gateway returns plain dictionaries shaped like the JSON the web layer
sends to clients, and hands out immutable ``ProjectSnapshot`` objects for
the calculation engine. Updates are partial: only the supplied keys are
written, an explicit ``None`` clears nullable fields. Every mutation of a
project or of one of its positions refreshes the project's ``updated_at``.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from ..calculation import PositionType, ProjectSnapshot, compare, summarize
from ..logging_utils import get_logger
from .database import session_scope
from .models import PositionRecord, ProjectRecord

LOGGER = get_logger(__name__)

DEFAULT_PROJECT_NAME = "Neues Projekt"

# SQLite INTEGER is a signed 64-bit value.
_INTEGER_RANGE = (-(2**63), 2**63 - 1)


def _non_negative_amount(key: str, value: object) -> float:
    if value is None:
        return 0.0
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"Field '{key}' must be a finite number.")
    if amount < 0:
        raise ValueError(f"Field '{key}' must not be negative.")
    return amount


def _optional_amount(key: str, value: object) -> Optional[float]:
    if value is None:
        return None
    return _non_negative_amount(key, value)


def _integer(key: str, value: object) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(f"Field '{key}' requires an integer value.")
    number = int(value)
    if number != float(value):
        raise ValueError(f"Field '{key}' requires an integer value.")
    if not _INTEGER_RANGE[0] <= number <= _INTEGER_RANGE[1]:
        raise ValueError(f"Field '{key}' is out of range.")
    return number


def _count(key: str, value: object, *, minimum: int) -> int:
    number = _integer(key, value)
    if number < minimum:
        raise ValueError(f"Field '{key}' must be at least {minimum}.")
    return number


def _flag(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Field '{key}' requires a boolean value.")
    return value


def _text(key: str, value: object) -> str:
    if value is None:
        raise ValueError(f"Field '{key}' requires a text value.")
    return str(value)


def _optional_text(key: str, value: object) -> Optional[str]:
    return None if value is None else str(value)


_PROJECT_COERCERS: Dict[str, Callable[[str, object], object]] = {
    "name": _text,
    "shooting_days": lambda key, value: _count(key, value, minimum=1),
    "include_hotel": _flag,
    "hotel_cost_per_night": _non_negative_amount,
    "per_diem": _non_negative_amount,
    "actual_per_diem": _non_negative_amount,
    "archived": _flag,
}

_POSITION_COERCERS: Dict[str, Callable[[str, object], object]] = {
    "name": _text,
    "daily_rate": _non_negative_amount,
    "flat_fee": _non_negative_amount,
    "hotel_nights": lambda key, value: 0 if value is None else _count(key, value, minimum=0),
    "travel_costs": _non_negative_amount,
    "days_on_set": lambda key, value: None if value is None else _count(key, value, minimum=1),
    "costs": _non_negative_amount,
    "color": _optional_text,
    "active": _flag,
    "actual_costs": _optional_amount,
    "sort_order": _integer,
}


def _coerce(changes: Mapping[str, object], coercers: Mapping[str, Callable[[str, object], object]]) -> Dict[str, object]:
    coerced: Dict[str, object] = {}
    for key, value in changes.items():
        coercer = coercers.get(key)
        if coercer is None:
            raise ValueError(f"Update of field '{key}' is not supported.")
        try:
            coerced[key] = coercer(key, value)
        except (TypeError, OverflowError) as error:
            raise ValueError(f"Invalid value for field '{key}': {value!r}") from error
    return coerced


def coerce_project_changes(changes: Mapping[str, object]) -> Dict[str, object]:
    """Validate a partial project update, raising ``ValueError`` on bad input."""

    return _coerce(changes, _PROJECT_COERCERS)


def coerce_position_changes(changes: Mapping[str, object]) -> Dict[str, object]:
    """Validate a partial position update, raising ``ValueError`` on bad input."""

    return _coerce(changes, _POSITION_COERCERS)


class BudgetGateway:
    """Store projects and positions, and produce snapshots for calculation."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        default_project_name: str = DEFAULT_PROJECT_NAME,
    ) -> None:
        self._session_factory = session_factory
        self._default_project_name = default_project_name

    # -- helpers -----------------------------------------------------------------

    @staticmethod
    def _load_project(session: Session, project_id: str) -> ProjectRecord:
        project = session.get(ProjectRecord, project_id)
        if project is None:
            raise KeyError(f"Project {project_id} not found")
        return project

    @staticmethod
    def _load_position(session: Session, position_id: str) -> PositionRecord:
        position = session.get(PositionRecord, position_id)
        if position is None:
            raise KeyError(f"Position {position_id} not found")
        return position

    @staticmethod
    def _ordered_positions(session: Session, project_id: str) -> List[PositionRecord]:
        statement = (
            select(PositionRecord)
            .where(PositionRecord.project_id == project_id)
            .order_by(PositionRecord.sort_order, PositionRecord.created_at)
        )
        return list(session.scalars(statement))

    def _project_payload(self, session: Session, project: ProjectRecord) -> Dict[str, Any]:
        payload = project.as_dict()
        payload["positions"] = [
            position.as_dict() for position in self._ordered_positions(session, project.id)
        ]
        return payload

    def _ensure_finite_totals(self, session: Session, project: ProjectRecord) -> None:
        """Reject changes whose derived totals overflow the float range."""

        snapshot = ProjectSnapshot.from_mapping(self._project_payload(session, project))
        comparison = compare(snapshot)
        totals = (summarize(snapshot).total, comparison.total_calculated, comparison.total_actual)
        if not all(math.isfinite(total) for total in totals):
            raise ValueError(f"Amounts of project {project.id} are too large to calculate.")

    # -- projects ----------------------------------------------------------------

    def list_projects(self, *, archived: bool = False) -> List[Dict[str, Any]]:
        """Return projects with the given archive flag, most recently changed first."""

        with session_scope(self._session_factory) as session:
            statement = (
                select(ProjectRecord)
                .where(ProjectRecord.archived == archived)
                .order_by(ProjectRecord.updated_at.desc(), ProjectRecord.created_at.desc())
            )
            projects = [project.as_dict() for project in session.scalars(statement)]
        LOGGER.debug("Listed %s projects (archived=%s)", len(projects), archived)
        return projects

    def get_project(self, project_id: str) -> Dict[str, Any]:
        """Return a project with its positions in display order."""

        with session_scope(self._session_factory) as session:
            project = self._load_project(session, project_id)
            return self._project_payload(session, project)

    def create_project(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Create a project with default settings and no positions."""

        with session_scope(self._session_factory) as session:
            project = ProjectRecord(name=name or self._default_project_name)
            session.add(project)
            session.flush()
            payload = project.as_dict()
            payload["positions"] = []
        LOGGER.info("Created project %s (%s)", payload["id"], payload["name"])
        return payload

    def update_project(self, project_id: str, changes: Mapping[str, object]) -> Dict[str, Any]:
        """Apply a partial update and return the project with its positions."""

        coerced = coerce_project_changes(changes)
        with session_scope(self._session_factory) as session:
            project = self._load_project(session, project_id)
            for key, value in coerced.items():
                setattr(project, key, value)
            project.touch()
            session.flush()
            self._ensure_finite_totals(session, project)
            payload = self._project_payload(session, project)
        LOGGER.info("Updated project %s fields=%s", project_id, sorted(coerced))
        return payload

    def delete_project(self, project_id: str) -> None:
        """Delete a project together with all of its positions."""

        with session_scope(self._session_factory) as session:
            project = self._load_project(session, project_id)
            session.delete(project)
        LOGGER.info("Deleted project %s", project_id)

    # -- positions ---------------------------------------------------------------

    def add_position(self, project_id: str, position_type: object) -> Dict[str, Any]:
        """Append a new, empty position of the given type to a project."""

        kind = PositionType.from_str(position_type)
        with session_scope(self._session_factory) as session:
            project = self._load_project(session, project_id)
            highest = session.scalar(
                select(func.max(PositionRecord.sort_order)).where(
                    PositionRecord.project_id == project_id
                )
            )
            position = PositionRecord(
                project_id=project.id,
                type=kind.value,
                sort_order=(highest or 0) + 1,
            )
            session.add(position)
            project.touch()
            session.flush()
            payload = position.as_dict()
        LOGGER.info("Added %s position %s to project %s", kind.value, payload["id"], project_id)
        return payload

    def update_position(self, position_id: str, changes: Mapping[str, object]) -> Dict[str, Any]:
        """Apply a partial update to a position and touch its project."""

        coerced = coerce_position_changes(changes)
        with session_scope(self._session_factory) as session:
            position = self._load_position(session, position_id)
            for key, value in coerced.items():
                setattr(position, key, value)
            project = self._load_project(session, position.project_id)
            project.touch()
            session.flush()
            self._ensure_finite_totals(session, project)
            payload = position.as_dict()
        LOGGER.debug("Updated position %s fields=%s", position_id, sorted(coerced))
        return payload

    def delete_position(self, position_id: str) -> None:
        with session_scope(self._session_factory) as session:
            position = self._load_position(session, position_id)
            self._load_project(session, position.project_id).touch()
            session.delete(position)
        LOGGER.info("Deleted position %s", position_id)

    def reorder_positions(self, project_id: str, position_ids: Iterable[str]) -> None:
        """Assign ``sort_order`` from the order of the given identifiers."""

        ordered_ids = list(position_ids)
        with session_scope(self._session_factory) as session:
            project = self._load_project(session, project_id)
            owned = {
                position.id: position for position in self._ordered_positions(session, project_id)
            }
            unknown = [position_id for position_id in ordered_ids if position_id not in owned]
            if unknown:
                raise KeyError(f"Positions {unknown} do not belong to project {project_id}")
            for index, position_id in enumerate(ordered_ids):
                owned[position_id].sort_order = index
            project.touch()
        LOGGER.info("Reordered %s positions of project %s", len(ordered_ids), project_id)

    # -- calculation input -------------------------------------------------------

    def snapshot(self, project_id: str) -> ProjectSnapshot:
        """Return an immutable view of the project for the calculation engine."""

        return ProjectSnapshot.from_mapping(self.get_project(project_id))
