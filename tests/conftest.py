"""Pytest fixtures for the Task Manager API tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.config import Settings
from taskboard.main import create_app
from taskboard.service import TaskService
from taskboard.store import TaskFileStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test data directory."""
    return Settings(data_dir=tmp_path / "data", client_dist=None)


@pytest.fixture
def store(settings: Settings) -> TaskFileStore:
    """A store over an empty per-test data file."""
    return TaskFileStore(settings.tasks_file)


@pytest.fixture
def service(store: TaskFileStore) -> TaskService:
    """A service wired to the per-test store."""
    return TaskService(store)


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Create a test client for the API."""
    return TestClient(create_app(settings))
