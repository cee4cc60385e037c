from dataclasses import dataclass
from typing import Literal

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.core.base import BaseService


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    service: str
    status: Literal["healthy", "unhealthy"]
    connected: bool
    error: str | None = None


class HealthService(BaseService):
    async def check_database_health(self) -> HealthCheckResult:
        try:
            await self.db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self.logger.error(f"Database health check failed: {e}")
            return HealthCheckResult(
                service="database", status="unhealthy", connected=False, error=str(e)
            )
        return HealthCheckResult(service="database", status="healthy", connected=True)
