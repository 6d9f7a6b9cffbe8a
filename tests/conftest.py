import itertools

import pytest

from lingodeck.application.app_data import AppDataStore
from lingodeck.infrastructure.adapters.kv_store import MemoryKeyValueStore


class FakeClock:
    """Deterministic epoch-ms clock."""

    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def tick(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def app_data(memory_store, clock, ids):
    return AppDataStore(memory_store, clock=clock, id_factory=ids, builtin_lessons=[])


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and any LINGODECK_* settings from the developer machine
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "LINGODECK_DATA_DIR",
        "LINGODECK_TARGET_LANGUAGE",
        "LINGODECK_MERGE_POLICY",
        "LINGODECK_STORE_NAMESPACE",
        "LINGODECK_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
