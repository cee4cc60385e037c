"""Applies normalized billing events to membership state."""

from src.modules.billing.events import Demote, Ignore, NormalizedEvent, Promote
from src.modules.member.service import MembershipStateStore
from src.utils.logger import get_logger

logger = get_logger(__name__)


class MembershipEventRouter:
    """Decides promote, demote or ignore and calls the store.

    Holds no state besides the injected store. Events are applied in arrival
    order with no sequencing, so the last applied event wins.
    """

    def __init__(self, store: MembershipStateStore):
        self.store = store

    async def route(self, event: NormalizedEvent) -> None:
        if isinstance(event, Promote):
            await self.store.promote(event.user_id, event.subscription_id)
        elif isinstance(event, Demote):
            await self._demote(event)
        elif isinstance(event, Ignore):
            logger.debug("Ignoring billing event", reason=event.reason)
        else:
            raise TypeError(f"Unknown billing event {event!r}")

    async def _demote(self, event: Demote) -> None:
        # The subscription holder is authoritative; the event may carry no user
        # id, or a user who has since moved to a different subscription
        if event.subscription_id:
            await self.store.demote_by_subscription(event.subscription_id)
        elif event.user_id:
            await self.store.demote_by_user(event.user_id)
