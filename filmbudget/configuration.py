"""Mini README: Centralised configuration for the budget desk.

Structure:
    * FilmbudgetSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the CLI and the web layer.

Usage:
    Export ``FILMBUDGET_DATABASE_PATH`` or ``FILMBUDGET_INTERFACE_PORT`` (or
    place them in ``.env``) to point the service at another database file or
    port. Validation happens once per process thanks to the cache.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class FilmbudgetSettings(BaseSettings):
    """Runtime configuration for the budget desk."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    database_path: Path = Field(
        Path("data/budget.db"),
        description="SQLite file holding projects and their cost positions.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the API service to bind to.",
    )
    interface_port: int = Field(
        12000,
        description="Port the API service exposes.",
        ge=1,
        le=65535,
    )
    default_project_name: str = Field(
        "Neues Projekt",
        description="Name given to projects created without an explicit name.",
    )

    class Config:
        env_prefix = "FILMBUDGET_"
        env_file = ".env"
        case_sensitive = False

    @validator("database_path", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Expand user directories and make sure the parent directory exists."""

        path = Path(value).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache()
def get_settings() -> FilmbudgetSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FilmbudgetSettings()
