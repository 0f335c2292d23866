from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .. import repository
from ..alerting import get_metric_unit, iter_ranges
from ..db import get_db
from ..schemas import AlertSettingsOut, AlertSettingsUpdate


router = APIRouter(prefix="/api", tags=["alerts"])


@router.get("/alert-settings", response_model=AlertSettingsOut)
async def get_alert_settings(db: AsyncSession = Depends(get_db)):
    row = await repository.get_or_create_alert_settings(db)
    return AlertSettingsOut.model_validate(row)


@router.put("/alert-settings", response_model=AlertSettingsOut)
async def put_alert_settings(payload: AlertSettingsUpdate, db: AsyncSession = Depends(get_db)):
    row = await repository.update_alert_settings(db, payload.model_dump(exclude_none=True))
    return AlertSettingsOut.model_validate(row)


@router.get("/optimal-ranges")
def optimal_ranges():
    return {
        metric: {"low": cfg["low"], "high": cfg["high"], "unit": get_metric_unit(metric)}
        for metric, cfg in iter_ranges()
    }
