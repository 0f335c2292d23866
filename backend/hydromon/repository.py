"""Queries against the three monitoring tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import SETTINGS_ID, STATUS_ID
from .models import CONNECTION_STATES, AlertSettings, SensorReading, SystemStatus

ALERT_TOGGLES = ("temperature_alerts", "ph_alerts", "tds_level_alerts")


def _now() -> datetime:
    return datetime.now(timezone.utc)


# -------------------- readings --------------------

async def add_reading(
    db: AsyncSession,
    *,
    temperature: float,
    ph: float,
    tds_level: float,
    timestamp: datetime | None = None,
) -> SensorReading:
    row = SensorReading(
        temperature=float(temperature),
        ph=float(ph),
        tds_level=float(tds_level),
        timestamp=timestamp or _now(),
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def list_readings(db: AsyncSession, limit: int = 50) -> list[SensorReading]:
    stmt = select(SensorReading).order_by(desc(SensorReading.timestamp)).limit(limit)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def latest_reading(db: AsyncSession) -> SensorReading | None:
    stmt = select(SensorReading).order_by(desc(SensorReading.timestamp)).limit(1)
    res = await db.execute(stmt)
    return res.scalars().first()


async def readings_between(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    *,
    descending: bool = False,
    limit: int | None = None,
) -> list[SensorReading]:
    order = desc if descending else asc
    stmt = (
        select(SensorReading)
        .where(SensorReading.timestamp >= start, SensorReading.timestamp <= end)
        .order_by(order(SensorReading.timestamp))
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def count_readings(db: AsyncSession) -> int:
    res = await db.execute(select(func.count()).select_from(SensorReading))
    return int(res.scalar_one() or 0)


# -------------------- system status --------------------

def _default_status() -> SystemStatus:
    return SystemStatus(
        id=STATUS_ID,
        connection_status="disconnected",
        last_update=_now(),
        data_points=0,
        cpu_usage=0,
        memory_usage=0,
        storage_usage=0,
        uptime="0d 0h 0m",
    )


async def _get_status(db: AsyncSession) -> SystemStatus | None:
    res = await db.execute(select(SystemStatus).where(SystemStatus.id == STATUS_ID).limit(1))
    return res.scalar_one_or_none()


async def get_or_create_status(db: AsyncSession) -> SystemStatus:
    status = await _get_status(db)
    if status is None:
        status = _default_status()
        db.add(status)
        await db.commit()
        await db.refresh(status)
    return status


async def mark_status(
    db: AsyncSession,
    connection_status: str,
    *,
    data_points: int | None = None,
) -> SystemStatus:
    """Upsert the single connection-status record."""

    if connection_status not in CONNECTION_STATES:
        raise ValueError(f"unknown connection status {connection_status!r}")

    status = await _get_status(db)
    if status is None:
        status = _default_status()
        db.add(status)
    status.connection_status = connection_status
    status.last_update = _now()
    if data_points is not None:
        status.data_points = data_points
    await db.commit()
    return status


# -------------------- alert settings --------------------

async def _get_settings(db: AsyncSession) -> AlertSettings | None:
    res = await db.execute(select(AlertSettings).where(AlertSettings.id == SETTINGS_ID).limit(1))
    return res.scalar_one_or_none()


async def get_or_create_alert_settings(db: AsyncSession) -> AlertSettings:
    settings = await _get_settings(db)
    if settings is None:
        settings = AlertSettings(
            id=SETTINGS_ID,
            temperature_alerts=True,
            ph_alerts=True,
            tds_level_alerts=False,
        )
        db.add(settings)
        await db.commit()
        await db.refresh(settings)
    return settings


async def update_alert_settings(db: AsyncSession, changes: Mapping[str, Any]) -> AlertSettings:
    settings = await get_or_create_alert_settings(db)
    for key in ALERT_TOGGLES:
        if changes.get(key) is not None:
            setattr(settings, key, bool(changes[key]))
    await db.commit()
    await db.refresh(settings)
    return settings
