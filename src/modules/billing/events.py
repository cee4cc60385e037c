"""Normalized billing events produced by provider extractors."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Promote:
    user_id: str
    subscription_id: str | None = None


@dataclass(frozen=True)
class Demote:
    subscription_id: str | None = None
    user_id: str | None = None

    def __post_init__(self):
        if not self.subscription_id and not self.user_id:
            raise ValueError("Demote requires a subscription id or a user id")


@dataclass(frozen=True)
class Ignore:
    reason: str


NormalizedEvent = Promote | Demote | Ignore
