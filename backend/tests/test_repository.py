import asyncio

import pytest

from conftest import DummyResult, DummySession, make_reading
from hydromon import repository
from hydromon.models import AlertSettings, SystemStatus


def test_add_reading_stores_floats_and_timestamp(session):
    row = asyncio.run(repository.add_reading(session, temperature=26.7, ph=7, tds_level=500))

    assert session.added == [row]
    assert session.commits == 1
    assert row.id == 1
    assert row.ph == 7.0 and isinstance(row.ph, float)
    assert row.timestamp.tzinfo is not None


def test_get_or_create_status_inserts_default_row(session):
    status = asyncio.run(repository.get_or_create_status(session))

    assert status.id == "system-1"
    assert status.connection_status == "disconnected"
    assert status.data_points == 0
    assert status.uptime == "0d 0h 0m"
    assert session.added == [status]


def test_get_or_create_status_returns_existing_row():
    existing = SystemStatus(id="system-1", connection_status="connected", data_points=3)
    session = DummySession([DummyResult(existing)])

    status = asyncio.run(repository.get_or_create_status(session))

    assert status is existing
    assert session.added == []
    assert session.commits == 0


def test_mark_status_updates_existing_row():
    existing = SystemStatus(id="system-1", connection_status="disconnected", data_points=0)
    session = DummySession([DummyResult(existing)])

    status = asyncio.run(repository.mark_status(session, "connected", data_points=42))

    assert status is existing
    assert status.connection_status == "connected"
    assert status.data_points == 42
    assert status.last_update is not None
    assert session.commits == 1


def test_mark_status_creates_missing_row(session):
    status = asyncio.run(repository.mark_status(session, "error"))

    assert session.added == [status]
    assert status.connection_status == "error"
    assert status.data_points == 0


def test_mark_status_rejects_unknown_state(session):
    with pytest.raises(ValueError):
        asyncio.run(repository.mark_status(session, "sleeping"))


def test_count_readings():
    session = DummySession([DummyResult(7)])
    assert asyncio.run(repository.count_readings(session)) == 7


def test_list_readings_returns_rows():
    rows = [make_reading(2), make_reading(1)]
    session = DummySession([DummyResult(rows)])

    assert asyncio.run(repository.list_readings(session, 2)) == rows


def test_update_alert_settings_only_touches_given_toggles():
    existing = AlertSettings(id="settings-1", temperature_alerts=True, ph_alerts=True, tds_level_alerts=False)
    session = DummySession([DummyResult(existing)])

    updated = asyncio.run(
        repository.update_alert_settings(session, {"tds_level_alerts": True, "ph_alerts": None, "bogus": 1})
    )

    assert updated.tds_level_alerts is True
    assert updated.ph_alerts is True
    assert updated.temperature_alerts is True
    assert not hasattr(updated, "bogus")
