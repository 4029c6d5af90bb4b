"""Tests for environment-driven settings."""

import logging
from pathlib import Path

import pytest

from taskboard.config import Settings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TASKBOARD_DATA_DIR",
        "TASKBOARD_HOST",
        "TASKBOARD_PORT",
        "PORT",
        "TASKBOARD_CORS_ORIGINS",
        "TASKBOARD_CLIENT_DIST",
        "TASKBOARD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings(dotenv=False)
    assert settings == Settings()
    assert settings.tasks_file == Path("data") / "tasks.json"
    assert settings.port == 3000
    assert settings.cors_origins == ["*"]


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKBOARD_PORT", "8080")
    monkeypatch.setenv("TASKBOARD_CORS_ORIGINS", "http://localhost:5173, http://localhost:3000")
    monkeypatch.setenv("TASKBOARD_LOG_LEVEL", "debug")

    settings = load_settings(dotenv=False)
    assert settings.tasks_file == tmp_path / "tasks.json"
    assert settings.port == 8080
    assert settings.cors_origins == ["http://localhost:5173", "http://localhost:3000"]
    assert settings.log_level == logging.DEBUG


def test_port_fallbacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4000")
    assert load_settings(dotenv=False).port == 4000

    monkeypatch.setenv("TASKBOARD_PORT", "not-a-number")
    assert load_settings(dotenv=False).port == 3000


def test_dotenv_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("TASKBOARD_HOST=0.0.0.0\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    # load_dotenv writes os.environ; record the variable so it is removed afterwards
    monkeypatch.setenv("TASKBOARD_HOST", "")
    monkeypatch.delenv("TASKBOARD_HOST")

    assert load_settings().host == "0.0.0.0"
