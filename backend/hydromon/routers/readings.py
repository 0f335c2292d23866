from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Iterable, Literal, Optional
import csv
from io import StringIO

from .. import repository
from ..db import get_db
from ..models import SensorReading
from ..schemas import ReadingCreate, ReadingOut

EXPORT_LIMIT = 1000


def _parse_iso_datetime(value: str | None, field_name: str) -> datetime | None:
    if not value:
        return None
    try:
        normalized = value.strip()
        if not normalized:
            return None
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}. Use ISO-8601 format.") from exc


router = APIRouter(prefix="/api", tags=["readings"])


@router.get("/sensor-readings", response_model=list[ReadingOut])
async def list_readings(
    limit: int = Query(50, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    rows = await repository.list_readings(db, limit)
    return [ReadingOut.model_validate(r) for r in rows]


@router.post("/sensor-readings", response_model=ReadingOut, status_code=status.HTTP_201_CREATED)
async def create_reading(payload: ReadingCreate, db: AsyncSession = Depends(get_db)):
    row = await repository.add_reading(
        db,
        temperature=payload.temperature,
        ph=payload.ph,
        tds_level=payload.tds_level,
    )
    return ReadingOut.model_validate(row)


@router.get("/sensor-readings/latest", response_model=Optional[ReadingOut])
async def latest_reading(db: AsyncSession = Depends(get_db)):
    row = await repository.latest_reading(db)
    return ReadingOut.model_validate(row) if row else None


@router.get("/sensor-readings/range", response_model=list[ReadingOut])
async def readings_in_range(
    start_time: str | None = None,
    end_time: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    start_dt = _parse_iso_datetime(start_time, "start_time")
    end_dt = _parse_iso_datetime(end_time, "end_time")
    if start_dt is None or end_dt is None:
        raise HTTPException(status_code=400, detail="start_time and end_time are required")

    rows = await repository.readings_between(db, start_dt, end_dt)
    return [ReadingOut.model_validate(r) for r in rows]


def _render_csv(rows: Iterable[SensorReading]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["timestamp", "temperature", "ph", "tdsLevel"])
    for r in rows:
        writer.writerow([r.timestamp.isoformat(), r.temperature, r.ph, r.tds_level])
    buffer.seek(0)
    return buffer.getvalue()


@router.get("/export-data")
async def export_data(
    format: Literal["json", "csv"] = "json",
    start_time: str | None = None,
    end_time: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    start_dt = _parse_iso_datetime(start_time, "start_time")
    end_dt = _parse_iso_datetime(end_time, "end_time")

    if start_dt and end_dt:
        rows = await repository.readings_between(db, start_dt, end_dt, descending=True)
    else:
        rows = await repository.list_readings(db, EXPORT_LIMIT)

    if format == "csv":
        response = StreamingResponse(iter([_render_csv(rows)]), media_type="text/csv")
        response.headers["Content-Disposition"] = "attachment; filename=sensor-data.csv"
        return response

    body = jsonable_encoder([ReadingOut.model_validate(r) for r in rows])
    return JSONResponse(
        body,
        headers={"Content-Disposition": "attachment; filename=sensor-data.json"},
    )
