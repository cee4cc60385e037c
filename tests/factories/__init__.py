"""Test factories for membership models."""

from .base import AsyncSQLAlchemyModelFactory
from .members import MemberFactory

__all__ = [
    "AsyncSQLAlchemyModelFactory",
    "MemberFactory",
]
