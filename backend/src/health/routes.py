import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.dependencies import get_db
from shared.responses import ApiResponse, CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


class HealthStatus(CamelModel):
    status: str
    database: str
    timestamp: datetime


@router.get("", response_model=ApiResponse[HealthStatus], response_model_exclude_none=True)
async def health_check(db: AsyncSession = Depends(get_db)):
    now = datetime.now(timezone.utc)
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        body = ApiResponse[HealthStatus](
            success=False,
            message="Database unavailable",
            data=HealthStatus(status="degraded", database="unavailable", timestamp=now),
        )
        return JSONResponse(
            status_code=503,
            content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    return ApiResponse[HealthStatus](
        success=True,
        message="OK",
        data=HealthStatus(status="ok", database="ok", timestamp=now),
    )
