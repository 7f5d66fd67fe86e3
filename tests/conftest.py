"""Pytest configuration and fixtures for whimsy tests"""
import tempfile
from pathlib import Path
import pytest
from whimsy.data import SqliteData
from whimsy.events import EventBus
from whimsy.generator import NameGenerator
from whimsy.provider import Provider


class CountingGenerator(NameGenerator):
    """NameGenerator that records every generation call"""

    def __init__(self):
        self.calls = []

    def for_snapshot(self, snapshot):
        self.calls.append(snapshot)
        return super().for_snapshot(snapshot)

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_global_config(temp_dir, monkeypatch):
    """Keep tests away from the real ~/.whimsy.yaml"""
    path = temp_dir / "global.yaml"
    monkeypatch.setattr("whimsy.config.GLOBAL_CONFIG_PATH", path)
    monkeypatch.delenv("WHIMSY_LOG_LEVEL", raising=False)
    return path


@pytest.fixture
def test_db(temp_dir):
    """Provide a test database"""
    db_path = temp_dir / "test.db"
    data = SqliteData(db_path=str(db_path))
    yield data
    data.close()


@pytest.fixture
def counting_generator():
    return CountingGenerator()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def provider(test_db, event_bus, counting_generator):
    """Provider over the test database with its own bus and a counting generator"""
    return Provider(test_db, bus=event_bus, generator=counting_generator)


@pytest.fixture
def whimsy_project(temp_dir):
    """Provide a temporary project directory with .whimsy structure"""
    project = temp_dir / "project"
    whimsy_dir = project / ".whimsy"
    whimsy_dir.mkdir(parents=True)
    (whimsy_dir / "config").write_text("")

    data = SqliteData(db_path=str(whimsy_dir / "whimsy.db"))
    data.close()

    yield project
