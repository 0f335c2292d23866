from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .. import repository
from ..db import get_db
from ..schemas import SystemStatusOut


router = APIRouter(prefix="/api", tags=["status"])


@router.get("/system-status", response_model=SystemStatusOut)
async def system_status(db: AsyncSession = Depends(get_db)):
    row = await repository.get_or_create_status(db)
    return SystemStatusOut.model_validate(row)
