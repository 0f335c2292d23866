import logging
import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import repository
from .. import sync as sync_service
from ..config import AntaresSettings, cron_secret, get_antares_settings
from ..db import get_db
from ..schemas import ReadingOut, SyncOut

router = APIRouter(prefix="/api", tags=["sync"])

logger = logging.getLogger(__name__)


async def _mark_error(db: AsyncSession) -> None:
    try:
        await db.rollback()
        await repository.mark_status(db, "error")
    except Exception:
        logger.exception("Failed to update system status")


async def _run_sync(db: AsyncSession, settings: AntaresSettings, triggered_by: str) -> SyncOut:
    logger.info("Syncing data from Antares (triggered by %s)", triggered_by)
    try:
        outcome = await sync_service.sync_latest(db, settings)
    except sync_service.SyncError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error syncing with Antares")
        await _mark_error(db)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sync with Antares API: {exc}",
        ) from exc

    return SyncOut(
        reading=ReadingOut.model_validate(outcome.reading),
        source=outcome.result.source,
        uncalibrated=outcome.result.uncalibrated,
        warnings=[
            {"field": w.field, "value": w.value, "low": w.low, "high": w.high, "message": w.message}
            for w in outcome.result.warnings
        ],
        alerts=[a.as_dict() for a in outcome.alerts],
        triggered_by=triggered_by,
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/sync-antares", response_model=SyncOut)
async def sync_antares(
    db: AsyncSession = Depends(get_db),
    settings: AntaresSettings = Depends(get_antares_settings),
):
    return await _run_sync(db, settings, "manual")


def require_cron_token(authorization: str | None = Header(None)) -> None:
    expected = cron_secret()
    token = (authorization or "").removeprefix("Bearer ").strip()
    if not expected or not token or not secrets.compare_digest(token, expected):
        logger.error("Unauthorized cron attempt at %s", datetime.now(timezone.utc).isoformat())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing authorization token",
        )


@router.post("/cron/sync-antares", response_model=SyncOut, dependencies=[Depends(require_cron_token)])
async def cron_sync_antares(
    db: AsyncSession = Depends(get_db),
    settings: AntaresSettings = Depends(get_antares_settings),
):
    return await _run_sync(db, settings, "cron")
