import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sitemap_checker.status_store import StatusRecord, StatusStore  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeValidator:
    """Stands in for URLValidator: records calls and in-flight concurrency, no network."""

    def __init__(self, store: StatusStore, statuses=None, work_seconds: float = 0.0):
        import threading
        self.store = store
        self.statuses = statuses or {}
        self.work_seconds = work_seconds
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def validate(self, url):
        import time
        with self._lock:
            self.calls.append(url)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.work_seconds:
                time.sleep(self.work_seconds)
            record = StatusRecord(url=url, status=self.statuses.get(url, 200))
            self.store.record_response(record)
            return record
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def no_sleep():
    return lambda seconds: None


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def validator_factory():
    """Returns (factory, holder); holder['validator'] is the FakeValidator built by the pool."""
    def make(statuses=None, work_seconds=0.0):
        holder = {}

        def factory(store):
            holder["validator"] = FakeValidator(store, statuses, work_seconds)
            return holder["validator"]

        return factory, holder

    return make
