"""Billing provider event names and status values."""

from enum import Enum


class BillingProvider(str, Enum):
    POLAR = "polar"
    PADDLE = "paddle"


# Subscription states that end paid access
DEMOTING_SUBSCRIPTION_STATUSES = frozenset(
    {"past_due", "canceled", "revoked", "incomplete", "incomplete_expired"}
)

ACTIVE_SUBSCRIPTION_STATUS = "active"

# Standard webhooks secret prefixes, stripped before decoding
WEBHOOK_SECRET_PREFIXES = ("whsec_", "polar_whs_")
WEBHOOK_SIGNATURE_VERSION = "v1"

# Polar
POLAR_CHECKOUT_EVENTS = frozenset({"checkout.updated"})
POLAR_CHECKOUT_SUCCEEDED_STATUSES = frozenset({"succeeded"})
POLAR_ORDER_EVENTS = frozenset({"order.created", "order.paid"})
POLAR_ORDER_SUCCEEDED_STATUSES = frozenset({"paid", "succeeded"})
POLAR_SUBSCRIPTION_ACTIVE_EVENTS = frozenset(
    {"subscription.active", "subscription.uncanceled"}
)
POLAR_SUBSCRIPTION_CANCELED_EVENT = "subscription.canceled"
POLAR_SUBSCRIPTION_TERMINAL_EVENTS = frozenset({"subscription.revoked"})
POLAR_SUBSCRIPTION_LIFECYCLE_EVENTS = frozenset(
    {"subscription.updated", "subscription.past_due"}
)
POLAR_REFUND_EVENTS = frozenset({"order.refunded", "refund.created"})

# Paddle
PADDLE_TRANSACTION_EVENTS = frozenset({"transaction.completed"})
PADDLE_TRANSACTION_SUCCEEDED_STATUSES = frozenset({"completed", "paid"})
PADDLE_SUBSCRIPTION_ACTIVE_EVENTS = frozenset(
    {"subscription.activated", "subscription.resumed"}
)
PADDLE_SUBSCRIPTION_TERMINAL_EVENTS = frozenset(
    {"subscription.canceled", "subscription.past_due"}
)
PADDLE_SUBSCRIPTION_UPDATED_EVENT = "subscription.updated"
PADDLE_ADJUSTMENT_EVENTS = frozenset({"adjustment.created", "adjustment.updated"})

# Reconciliation treats only these order states as proof of payment
RECONCILABLE_ORDER_STATUSES = frozenset({"paid", "succeeded"})
