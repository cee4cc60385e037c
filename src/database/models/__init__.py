"""Database models for the membership billing sync API."""

from .base import Base
from .members import Member, PlanTier

__all__ = [
    "Base",
    "PlanTier",
    "Member",
]
