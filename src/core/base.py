from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.utils.logger import get_logger


class BaseService:
    """Base service class with database dependency injection."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)

    async def _commit_write(self, statement, operation: str):
        """Execute a single write statement in its own transaction.

        Database errors roll the session back and surface as a persistence
        failure so webhook callers answer 5xx and the provider retries.
        """
        try:
            result = await self.db.execute(statement)
            await self.db.commit()
            return result
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(
                "Membership write failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PlanSyncException(
                MessageCode.PERSISTENCE_FAILURE,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"operation": operation},
            ) from e
