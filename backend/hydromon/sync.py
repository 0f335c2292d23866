"""Pull the latest device reading from Antares and store it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .alerting import OptimalityAlert, evaluate_reading
from .antares.client import AntaresClient, AntaresError
from .antares.decoder import DecodeFailure, DecodeResult
from .config import AntaresSettings
from .models import SensorReading

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """No reading is available this cycle (platform or decode failure)."""

    def __init__(self, message: str, *, failure: DecodeFailure | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.failure = failure
        self.cause = cause


@dataclass
class SyncOutcome:
    reading: SensorReading
    result: DecodeResult
    alerts: list[OptimalityAlert] = field(default_factory=list)


async def _fetch(settings: AntaresSettings, client: httpx.AsyncClient | None) -> DecodeResult | DecodeFailure:
    async with AntaresClient(settings, client=client) as antares:
        return await antares.fetch_latest()


async def sync_latest(
    db: AsyncSession,
    settings: AntaresSettings,
    *,
    client: httpx.AsyncClient | None = None,
) -> SyncOutcome:
    """Fetch, decode and persist one reading, updating the connection status.

    Raises :class:`SyncError` when the platform cannot be read or the payload
    does not decode; the status record is set to ``error`` first.
    """

    try:
        outcome = await _fetch(settings, client)
    except AntaresError as exc:
        logger.error("Failed to fetch data from Antares: %s", exc)
        await repository.mark_status(db, "error")
        raise SyncError("Failed to fetch data from Antares API", cause=exc) from exc

    if isinstance(outcome, DecodeFailure):
        logger.error("Unable to decode Antares content: %s (%s)", outcome.reason.value, outcome.detail)
        await repository.mark_status(db, "error")
        raise SyncError("Failed to decode data from Antares API", failure=outcome)

    logger.debug("Decoded sensor data via %s: %s", outcome.source, outcome.diagnostics)
    for warning in outcome.warnings:
        logger.warning("%s", warning.message)

    decoded = outcome.reading
    reading = await repository.add_reading(
        db,
        temperature=decoded.temperature,
        ph=decoded.ph,
        tds_level=decoded.tds_level,
    )
    total = await repository.count_readings(db)
    await repository.mark_status(db, "connected", data_points=total)

    settings_row = await repository.get_or_create_alert_settings(db)
    alerts = evaluate_reading(reading, settings_row)
    for alert in alerts:
        logger.info("Alert: %s", alert.message)

    logger.info("Sync successful, reading created: %s", reading.id)
    return SyncOutcome(reading=reading, result=outcome, alerts=alerts)
