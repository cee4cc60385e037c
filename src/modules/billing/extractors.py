"""Provider payload adapters that produce normalized billing events."""

from abc import ABC, abstractmethod
from typing import Any

from src.modules.billing.constants import (
    ACTIVE_SUBSCRIPTION_STATUS,
    DEMOTING_SUBSCRIPTION_STATUSES,
    PADDLE_ADJUSTMENT_EVENTS,
    PADDLE_SUBSCRIPTION_ACTIVE_EVENTS,
    PADDLE_SUBSCRIPTION_TERMINAL_EVENTS,
    PADDLE_SUBSCRIPTION_UPDATED_EVENT,
    PADDLE_TRANSACTION_EVENTS,
    PADDLE_TRANSACTION_SUCCEEDED_STATUSES,
    POLAR_CHECKOUT_EVENTS,
    POLAR_CHECKOUT_SUCCEEDED_STATUSES,
    POLAR_ORDER_EVENTS,
    POLAR_ORDER_SUCCEEDED_STATUSES,
    POLAR_REFUND_EVENTS,
    POLAR_SUBSCRIPTION_ACTIVE_EVENTS,
    POLAR_SUBSCRIPTION_CANCELED_EVENT,
    POLAR_SUBSCRIPTION_LIFECYCLE_EVENTS,
    POLAR_SUBSCRIPTION_TERMINAL_EVENTS,
    BillingProvider,
)
from src.modules.billing.events import Demote, Ignore, NormalizedEvent, Promote
from src.utils.logger import get_logger

logger = get_logger(__name__)

USER_ID_KEYS = ("userId", "user_id", "supabase_user_id")
EXTERNAL_ID_KEYS = ("externalId", "external_id")


class MalformedPayloadError(ValueError):
    """The verified body is not a usable event envelope."""


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def first_text(source: dict, *keys: str) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def resolve_user_id(data: dict) -> str | None:
    """Find the acting user id in an event ``data`` object or an order.

    Locations are tried in order and the first non-empty value wins:
    ``metadata``, ``customerMetadata``, ``customer.metadata`` and finally
    ``customer.externalId``.
    """
    customer = _mapping(data.get("customer"))
    customer_metadata = data.get("customerMetadata") or data.get("customer_metadata")

    return (
        first_text(_mapping(data.get("metadata")), *USER_ID_KEYS)
        or first_text(_mapping(customer_metadata), *USER_ID_KEYS)
        or first_text(_mapping(customer.get("metadata")), *USER_ID_KEYS)
        or first_text(customer, *EXTERNAL_ID_KEYS)
    )


class EventExtractor(ABC):
    """Maps one provider's verified payload to a ``NormalizedEvent``."""

    provider: BillingProvider
    event_type_field = "type"

    def parse(self, payload: Any) -> tuple[str, dict]:
        """Return ``(event_type, data)`` or raise ``MalformedPayloadError``."""
        if not isinstance(payload, dict):
            raise MalformedPayloadError("Payload must be a JSON object")

        event_type = payload.get(self.event_type_field)
        if not isinstance(event_type, str) or not event_type:
            raise MalformedPayloadError(f"Missing '{self.event_type_field}' field")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise MalformedPayloadError("Missing 'data' object")

        return event_type, data

    def extract(self, payload: Any) -> NormalizedEvent:
        event_type, data = self.parse(payload)
        event = self._extract(event_type, data)
        logger.info(
            "Normalized billing event",
            provider=self.provider.value,
            event_type=event_type,
            kind=type(event).__name__,
            reason=getattr(event, "reason", None),
        )
        return event

    def resolve_user_id(self, data: dict) -> str | None:
        return resolve_user_id(data)

    @abstractmethod
    def _extract(self, event_type: str, data: dict) -> NormalizedEvent: ...

    def _unresolved(self, event_type: str, data: dict) -> Ignore:
        # Never retried into success, so the delivery is acknowledged
        logger.warning(
            "No user id found in billing event",
            provider=self.provider.value,
            event_type=event_type,
            object_id=data.get("id"),
        )
        return Ignore(reason="unresolved user id")

    def _promote(
        self, event_type: str, data: dict, subscription_id: str | None
    ) -> NormalizedEvent:
        user_id = self.resolve_user_id(data)
        if not user_id:
            return self._unresolved(event_type, data)
        return Promote(user_id=user_id, subscription_id=subscription_id)

    def _promote_if_succeeded(
        self,
        event_type: str,
        data: dict,
        succeeded_statuses: frozenset[str],
    ) -> NormalizedEvent:
        status = first_text(data, "status")
        if status not in succeeded_statuses:
            return Ignore(reason=f"payment status {status!r}")
        return self._promote(
            event_type, data, first_text(data, "subscription_id", "subscriptionId")
        )

    def _demote(
        self, event_type: str, data: dict, subscription_id: str | None
    ) -> NormalizedEvent:
        user_id = self.resolve_user_id(data)
        if not subscription_id and not user_id:
            return self._unresolved(event_type, data)
        return Demote(subscription_id=subscription_id, user_id=user_id)


class PolarEventExtractor(EventExtractor):
    provider = BillingProvider.POLAR

    def _extract(self, event_type: str, data: dict) -> NormalizedEvent:
        if event_type in POLAR_CHECKOUT_EVENTS:
            return self._promote_if_succeeded(
                event_type, data, POLAR_CHECKOUT_SUCCEEDED_STATUSES
            )

        if event_type in POLAR_ORDER_EVENTS:
            return self._promote_if_succeeded(
                event_type, data, POLAR_ORDER_SUCCEEDED_STATUSES
            )

        subscription_id = first_text(data, "id")

        if event_type in POLAR_SUBSCRIPTION_ACTIVE_EVENTS:
            return self._promote(event_type, data, subscription_id)

        if event_type == POLAR_SUBSCRIPTION_CANCELED_EVENT:
            cancel_at_period_end = data.get(
                "cancelAtPeriodEnd", data.get("cancel_at_period_end")
            )
            still_active = data.get("status") == ACTIVE_SUBSCRIPTION_STATUS
            if still_active and cancel_at_period_end is True:
                # Paid access continues until subscription.revoked
                return Ignore(reason="cancellation scheduled at period end")
            return self._demote(event_type, data, subscription_id)

        if event_type in POLAR_SUBSCRIPTION_TERMINAL_EVENTS:
            return self._demote(event_type, data, subscription_id)

        if event_type in POLAR_SUBSCRIPTION_LIFECYCLE_EVENTS:
            status = first_text(data, "status")
            if status in DEMOTING_SUBSCRIPTION_STATUSES:
                return self._demote(event_type, data, subscription_id)
            return Ignore(reason=f"subscription status {status!r}")

        if event_type in POLAR_REFUND_EVENTS:
            return self._demote(
                event_type, data, first_text(data, "subscription_id", "subscriptionId")
            )

        return Ignore(reason="unhandled event type")


class PaddleEventExtractor(EventExtractor):
    provider = BillingProvider.PADDLE
    event_type_field = "event_type"

    def resolve_user_id(self, data: dict) -> str | None:
        custom_data = _mapping(data.get("custom_data"))
        return first_text(custom_data, *USER_ID_KEYS) or resolve_user_id(data)

    def _extract(self, event_type: str, data: dict) -> NormalizedEvent:
        if event_type in PADDLE_TRANSACTION_EVENTS:
            return self._promote_if_succeeded(
                event_type, data, PADDLE_TRANSACTION_SUCCEEDED_STATUSES
            )

        subscription_id = first_text(data, "id")

        if event_type in PADDLE_SUBSCRIPTION_ACTIVE_EVENTS:
            return self._promote(event_type, data, subscription_id)

        if event_type in PADDLE_SUBSCRIPTION_TERMINAL_EVENTS:
            return self._demote(event_type, data, subscription_id)

        if event_type == PADDLE_SUBSCRIPTION_UPDATED_EVENT:
            status = first_text(data, "status")
            if status in DEMOTING_SUBSCRIPTION_STATUSES:
                return self._demote(event_type, data, subscription_id)
            scheduled_change = _mapping(data.get("scheduled_change"))
            cancel_scheduled = scheduled_change.get("action") == "cancel"
            if status == ACTIVE_SUBSCRIPTION_STATUS and cancel_scheduled:
                return Ignore(reason="cancellation scheduled at period end")
            return Ignore(reason=f"subscription status {status!r}")

        if event_type in PADDLE_ADJUSTMENT_EVENTS:
            if data.get("action") == "refund" and data.get("status") == "approved":
                return self._demote(
                    event_type, data, first_text(data, "subscription_id")
                )
            return Ignore(reason="adjustment is not an approved refund")

        return Ignore(reason="unhandled event type")


EXTRACTORS: dict[BillingProvider, EventExtractor] = {
    BillingProvider.POLAR: PolarEventExtractor(),
    BillingProvider.PADDLE: PaddleEventExtractor(),
}
