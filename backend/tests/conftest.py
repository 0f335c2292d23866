import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from hydromon.models import SensorReading  # noqa: E402


class DummyResult:
    def __init__(self, value=None):
        self.value = value

    def scalars(self):
        return self

    def first(self):
        if isinstance(self.value, list):
            return self.value[0] if self.value else None
        return self.value

    def all(self):
        if self.value is None:
            return []
        return self.value if isinstance(self.value, list) else [self.value]

    def scalar_one_or_none(self):
        return self.first()

    def scalar_one(self):
        return self.value


class DummySession:
    """Stand-in for AsyncSession; ``results`` are handed out in order per execute()."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.queries = []
        self.added = []
        self.commits = 0
        self.rolled_back = False
        self._next_id = 1

    async def execute(self, query):
        self.queries.append(query)
        if self.results:
            return self.results.pop(0)
        return DummyResult()

    def add(self, obj):
        self.added.append(obj)

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rolled_back = True

    async def refresh(self, obj, attribute_names=None):
        if hasattr(obj, "id") and getattr(obj, "id", None) is None:
            obj.id = self._next_id
            self._next_id += 1


def make_reading(id=1, temperature=26.7, ph=7.0, tds_level=500.0, timestamp=None):
    ts = timestamp or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    return SensorReading(
        id=id,
        timestamp=ts,
        temperature=temperature,
        ph=ph,
        tds_level=tds_level,
        created_at=ts,
    )


@pytest.fixture
def session():
    return DummySession()
