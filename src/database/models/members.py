"""Member model and plan enum."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class PlanTier(str, Enum):
    FREE = "free"
    PRO = "pro"


class Member(Base):
    __tablename__ = "members"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, comment="Supabase Auth User ID"
    )
    type: Mapped[str] = mapped_column(String, nullable=False, default="user")
    plan: Mapped[PlanTier] = mapped_column(
        String, nullable=False, default=PlanTier.FREE.value
    )
    is_on_trial: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Looked up on demotion; uniqueness is not enforced at the schema level
    subscription_id: Mapped[str | None] = mapped_column(
        String, nullable=True, index=True
    )

    # Usage counters belong to the metering service; only initialized here
    words_today: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    words_this_month: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    words_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tokens_today: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tokens_this_month: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tokens_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
