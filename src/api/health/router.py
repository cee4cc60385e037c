"""Health check endpoints for monitoring."""

from dataclasses import asdict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.api.core.dependencies import AsyncSessionDep
from src.modules.health.service import HealthService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def liveness_check():
    """Process is up; does not touch dependencies."""
    return {"status": "ok"}


@router.get("/database")
async def database_health_check(db: AsyncSessionDep):
    result = await HealthService(db).check_database_health()
    status_code = (
        status.HTTP_200_OK
        if result.status == "healthy"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=asdict(result))
