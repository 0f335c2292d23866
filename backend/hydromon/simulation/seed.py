"""Seed the monitoring tables with a status row, default alert settings and a day of readings."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from hydromon.config import SETTINGS_ID, STATUS_ID
from hydromon.db import AsyncSessionLocal, engine
from hydromon.models import AlertSettings, SensorReading, SystemStatus
from hydromon.simulation.generator import SensorDataGenerator

logger = logging.getLogger(__name__)

BATCH_SIZE = 50


def batched(rows: list[dict], size: int = BATCH_SIZE) -> list[list[dict]]:
    return [rows[i:i + size] for i in range(0, len(rows), size)]


async def seed(db: AsyncSession, *, hours: int = 24, period_minutes: int = 10, seed: int | None = None) -> int:
    now = datetime.now(timezone.utc)

    await db.execute(
        pg_insert(SystemStatus)
        .values(
            id=STATUS_ID,
            connection_status="connected",
            last_update=now,
            data_points=0,
            cpu_usage=23,
            memory_usage=30,
            storage_usage=26,
            uptime="0d 0h 0m",
        )
        .on_conflict_do_nothing(index_elements=["id"])
    )
    logger.info("System status seeded")

    await db.execute(
        pg_insert(AlertSettings)
        .values(id=SETTINGS_ID, temperature_alerts=True, ph_alerts=True, tds_level_alerts=False)
        .on_conflict_do_nothing(index_elements=["id"])
    )
    logger.info("Alert settings seeded")

    rows = SensorDataGenerator(seed=seed).window(now, hours=hours, period_minutes=period_minutes)
    inserted = 0
    for batch in batched(rows):
        await db.execute(insert(SensorReading).values(batch))
        inserted += len(batch)
        logger.info("Inserted %d/%d readings", inserted, len(rows))

    await db.commit()
    return inserted


async def _main(args: argparse.Namespace) -> None:
    async with AsyncSessionLocal() as session:
        n = await seed(session, hours=args.hours, period_minutes=args.period, seed=args.seed)
    await engine.dispose()
    logger.info("Database seeding completed: %d readings over the last %dh", n, args.hours)


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Seed the hydroponic monitoring database")
    p.add_argument("--hours", type=positive_int, default=24)
    p.add_argument("--period", type=positive_int, default=10, help="minutes between readings")
    p.add_argument("--seed", type=int, default=None, help="random seed (default: today's date)")
    return p


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    asyncio.run(_main(build_parser().parse_args()))


if __name__ == "__main__":
    main()
