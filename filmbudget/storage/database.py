"""Mini README: Engine and session helpers for the SQLite budget store.

Structure:
    * get_engine - SQLite engine with foreign keys enforced.
    * get_session_factory - sessionmaker bound to an engine.
    * session_scope - context manager committing on success, rolling back on error.
    * init_db - create missing tables.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..configuration import get_settings
from ..logging_utils import get_logger
from .models import Base

LOGGER = get_logger(__name__)


def get_engine(db_path: Optional[Path] = None, echo: bool = False) -> Engine:
    """Create an engine for the configured (or given) SQLite file."""

    path = Path(db_path) if db_path is not None else get_settings().database_path
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{path}",
        echo=echo,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    LOGGER.debug("Created database engine for %s", path)
    return engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    if engine is None:
        engine = get_engine()
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on errors."""

    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""

    Base.metadata.create_all(bind=engine)
    LOGGER.info("Database schema ready (%s)", engine.url)
