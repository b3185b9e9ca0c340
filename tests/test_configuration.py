"""Mini README: Tests for environment driven settings and log levels."""

from __future__ import annotations

import logging

from filmbudget.configuration import FilmbudgetSettings, get_settings
from filmbudget.logging_utils import LOG_LEVEL_VARIABLE, resolve_level


def test_settings_read_prefixed_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("FILMBUDGET_INTERFACE_PORT", "12500")
    monkeypatch.setenv("FILMBUDGET_DATABASE_PATH", str(tmp_path / "nested" / "budget.db"))
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.interface_port == 12500
        assert settings.database_path == (tmp_path / "nested" / "budget.db").resolve()
        assert settings.database_path.parent.is_dir()
    finally:
        get_settings.cache_clear()


def test_settings_defaults() -> None:
    settings = FilmbudgetSettings(_env_file=None)

    assert settings.interface_port == 12000
    assert settings.default_project_name == "Neues Projekt"


def test_resolve_level_accepts_names_and_numbers(monkeypatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_VARIABLE, "debug")

    assert resolve_level(None) == logging.DEBUG
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level("15") == 15
    assert resolve_level("chatty") == logging.INFO
