"""Mini README: SQLite persistence for budget projects.

Exposes the ``BudgetGateway`` used by the web interface and the CLI, plus
``create_gateway`` which wires engine, schema and session factory for a
database file in one call.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .database import get_engine, get_session_factory, init_db, session_scope
from .gateway import BudgetGateway, coerce_position_changes, coerce_project_changes
from .models import Base, PositionRecord, ProjectRecord


def create_gateway(db_path: Optional[Path] = None, *, default_project_name: Optional[str] = None) -> BudgetGateway:
    """Open (and if needed initialise) the database and return a gateway."""

    engine = get_engine(db_path)
    init_db(engine)
    factory = get_session_factory(engine)
    if default_project_name:
        return BudgetGateway(factory, default_project_name=default_project_name)
    return BudgetGateway(factory)


__all__ = [
    "Base",
    "BudgetGateway",
    "PositionRecord",
    "ProjectRecord",
    "coerce_position_changes",
    "coerce_project_changes",
    "create_gateway",
    "get_engine",
    "get_session_factory",
    "init_db",
    "session_scope",
]
