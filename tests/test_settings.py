"""Tests for settings loading."""

import pytest

from dirconverge import ConvergenceEngine, InMemoryFilesystem
from dirconverge.settings import get_settings, reload_settings


@pytest.fixture
def restore_settings(monkeypatch):
    yield
    monkeypatch.undo()
    reload_settings()


def test_defaults(monkeypatch, restore_settings):
    """Test default settings."""
    monkeypatch.delenv("DC_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DC_DRY_RUN", raising=False)

    settings = reload_settings()

    assert settings.log_level == "INFO"
    assert settings.dry_run is False


def test_environment_overrides(monkeypatch, restore_settings):
    """Test DC_ environment variables override defaults."""
    monkeypatch.setenv("DC_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DC_DRY_RUN", "true")

    settings = reload_settings()

    assert settings.log_level == "DEBUG"
    assert settings.dry_run is True
    assert get_settings() is settings


def test_engine_uses_dry_run_setting(monkeypatch, restore_settings):
    """Test the engine falls back to the dry_run setting."""
    monkeypatch.setenv("DC_DRY_RUN", "1")
    reload_settings()

    assert ConvergenceEngine(filesystem=InMemoryFilesystem()).dry_run is True
    assert ConvergenceEngine(filesystem=InMemoryFilesystem(), dry_run=False).dry_run is False


def test_env_file_in_working_directory(monkeypatch, tmp_path, restore_settings):
    """Test .env in the current working directory is read."""
    monkeypatch.delenv("DC_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("DC_LOG_LEVEL=WARNING\n", encoding="utf-8")

    assert reload_settings().log_level == "WARNING"
