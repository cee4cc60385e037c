"""Membership state store: the only writer of member rows."""

from datetime import datetime, timezone

from fastapi import status
from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import Member, PlanTier


class MembershipStateStore(BaseService):
    """Idempotent single-row mutations of the ``members`` table.

    Every operation is one statement keyed by user id or subscription id, so
    concurrent deliveries rely on the database's per-row atomicity and
    converge to whichever write lands last.
    """

    def _insert(self):
        # ON CONFLICT support is dialect specific
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(Member)
        return postgresql.insert(Member)

    @staticmethod
    def _new_member_values(user_id: str, plan: PlanTier) -> dict:
        return {
            "id": user_id,
            "type": "user",
            "plan": plan.value,
            "is_on_trial": False,
            "words_today": 0,
            "words_this_month": 0,
            "words_total": 0,
            "tokens_today": 0,
            "tokens_this_month": 0,
            "tokens_total": 0,
        }

    async def get(self, user_id: str) -> Member | None:
        stmt = (
            select(Member)
            .where(Member.id == user_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error("Member lookup failed", user_id=user_id, error=str(e))
            raise PlanSyncException(
                MessageCode.PERSISTENCE_FAILURE,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"operation": "get"},
            ) from e
        return result.scalar_one_or_none()

    async def ensure_exists(self, user_id: str) -> None:
        """Insert a free member unless a row for ``user_id`` already exists."""
        stmt = (
            self._insert()
            .values(**self._new_member_values(user_id, PlanTier.FREE))
            .on_conflict_do_nothing(index_elements=["id"])
        )
        result = await self._commit_write(stmt, "ensure_exists")
        if result.rowcount:
            self.logger.info("Created member", user_id=user_id)

    async def promote(self, user_id: str, subscription_id: str | None = None) -> None:
        # A promotion may be the first event ever seen for a paying member
        await self.ensure_exists(user_id)

        values: dict = {"plan": PlanTier.PRO.value, "is_on_trial": False}
        if subscription_id:
            values["subscription_id"] = subscription_id

        stmt = update(Member).where(Member.id == user_id).values(**values)
        await self._commit_write(stmt, "promote")
        self.logger.info(
            "Promoted member to pro",
            user_id=user_id,
            subscription_id=subscription_id,
        )

    async def create_pro(
        self, user_id: str, subscription_id: str | None = None
    ) -> None:
        """Insert a member directly on the pro plan.

        If the row appeared since the caller checked, it is upgraded in place;
        this never downgrades anything.
        """
        values = self._new_member_values(user_id, PlanTier.PRO)
        upgrade: dict = {
            "plan": PlanTier.PRO.value,
            "is_on_trial": False,
            "updated_at": datetime.now(timezone.utc),
        }
        if subscription_id:
            values["subscription_id"] = subscription_id
            upgrade["subscription_id"] = subscription_id

        stmt = (
            self._insert()
            .values(**values)
            .on_conflict_do_update(index_elements=["id"], set_=upgrade)
        )
        await self._commit_write(stmt, "create_pro")
        self.logger.info(
            "Created member as pro", user_id=user_id, subscription_id=subscription_id
        )

    async def demote_by_subscription(self, subscription_id: str) -> int:
        """Move whoever holds ``subscription_id`` back to free.

        Returns the number of rows changed; zero is not an error.
        """
        stmt = (
            update(Member)
            .where(Member.subscription_id == subscription_id)
            .values(plan=PlanTier.FREE.value, is_on_trial=False, subscription_id=None)
        )
        result = await self._commit_write(stmt, "demote_by_subscription")
        self._log_demotion(result.rowcount, subscription_id=subscription_id)
        return result.rowcount

    async def demote_by_user(self, user_id: str) -> int:
        stmt = (
            update(Member)
            .where(Member.id == user_id)
            .values(plan=PlanTier.FREE.value, is_on_trial=False, subscription_id=None)
        )
        result = await self._commit_write(stmt, "demote_by_user")
        self._log_demotion(result.rowcount, user_id=user_id)
        return result.rowcount

    def _log_demotion(self, rowcount: int, **key) -> None:
        if rowcount:
            self.logger.info("Demoted member to free", rows=rowcount, **key)
        else:
            self.logger.info("No member matched demotion", **key)
