"""Provider payload normalization tests."""

import pytest

from src.modules.billing.events import Demote, Ignore, Promote
from src.modules.billing.extractors import (
    MalformedPayloadError,
    PaddleEventExtractor,
    PolarEventExtractor,
    resolve_user_id,
)
from tests.utils.webhooks import paddle_event, polar_event

USER_ID = "2b7e0d4c-9a61-4e0b-8b7f-1f2e3d4c5b6a"


class TestResolveUserId:
    def test_metadata_wins(self):
        data = {
            "metadata": {"userId": "from-metadata"},
            "customerMetadata": {"userId": "from-customer-metadata"},
            "customer": {"externalId": "from-external-id"},
        }

        assert resolve_user_id(data) == "from-metadata"

    def test_customer_metadata_before_nested_customer(self):
        data = {
            "customerMetadata": {"user_id": "from-customer-metadata"},
            "customer": {
                "metadata": {"userId": "from-nested"},
                "externalId": "from-external-id",
            },
        }

        assert resolve_user_id(data) == "from-customer-metadata"

    def test_snake_case_customer_metadata(self):
        data = {"customer_metadata": {"supabase_user_id": USER_ID}}

        assert resolve_user_id(data) == USER_ID

    def test_nested_customer_metadata_before_external_id(self):
        data = {
            "customer": {
                "metadata": {"supabase_user_id": "from-nested"},
                "external_id": "from-external-id",
            }
        }

        assert resolve_user_id(data) == "from-nested"

    def test_external_id_is_last_resort(self):
        data = {"customer": {"externalId": USER_ID}}

        assert resolve_user_id(data) == USER_ID

    def test_key_order_within_a_location(self):
        data = {"metadata": {"supabase_user_id": "third", "user_id": "second"}}

        assert resolve_user_id(data) == "second"

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_empty_or_non_text_values_are_skipped(self, value):
        data = {"metadata": {"userId": value}, "customer": {"externalId": USER_ID}}

        assert resolve_user_id(data) == USER_ID

    def test_nothing_found(self):
        assert resolve_user_id({"metadata": "not-a-dict", "customer": None}) is None


class TestEnvelopeParsing:
    @pytest.fixture
    def extractor(self):
        return PolarEventExtractor()

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "order.paid",
            {"data": {}},
            {"type": "", "data": {}},
            {"type": 7, "data": {}},
            {"type": "order.paid"},
            {"type": "order.paid", "data": []},
        ],
    )
    def test_malformed_envelopes(self, extractor, payload):
        with pytest.raises(MalformedPayloadError):
            extractor.extract(payload)

    def test_paddle_requires_event_type(self):
        payload = {"type": "transaction.completed", "data": {}}

        with pytest.raises(MalformedPayloadError):
            PaddleEventExtractor().extract(payload)


class TestPolarEventExtractor:
    @pytest.fixture
    def extractor(self):
        return PolarEventExtractor()

    def test_succeeded_checkout_promotes(self, extractor):
        event = extractor.extract(
            polar_event(
                "checkout.updated",
                id="chk_1",
                status="succeeded",
                metadata={"userId": USER_ID},
                subscription_id="sub_1",
            )
        )

        assert event == Promote(user_id=USER_ID, subscription_id="sub_1")

    @pytest.mark.parametrize("status", ["open", "confirmed", "failed", None])
    def test_unfinished_checkout_is_ignored(self, extractor, status):
        event = extractor.extract(
            polar_event(
                "checkout.updated", status=status, metadata={"userId": USER_ID}
            )
        )

        assert isinstance(event, Ignore)

    @pytest.mark.parametrize("event_type", ["order.created", "order.paid"])
    @pytest.mark.parametrize("status", ["paid", "succeeded"])
    def test_paid_order_promotes(self, extractor, event_type, status):
        event = extractor.extract(
            polar_event(
                event_type,
                id="ord_1",
                status=status,
                subscriptionId="sub_9",
                customer={"externalId": USER_ID},
            )
        )

        assert event == Promote(user_id=USER_ID, subscription_id="sub_9")

    def test_pending_order_is_ignored(self, extractor):
        event = extractor.extract(
            polar_event("order.created", status="pending", metadata={"userId": USER_ID})
        )

        assert isinstance(event, Ignore)

    def test_one_time_order_promotes_without_subscription(self, extractor):
        event = extractor.extract(
            polar_event("order.paid", status="paid", metadata={"userId": USER_ID})
        )

        assert event == Promote(user_id=USER_ID, subscription_id=None)

    @pytest.mark.parametrize(
        "event_type", ["subscription.active", "subscription.uncanceled"]
    )
    def test_active_subscription_promotes(self, extractor, event_type):
        event = extractor.extract(
            polar_event(
                event_type, id="sub_1", status="active", metadata={"userId": USER_ID}
            )
        )

        assert event == Promote(user_id=USER_ID, subscription_id="sub_1")

    def test_cancel_at_period_end_is_ignored(self, extractor):
        event = extractor.extract(
            polar_event(
                "subscription.canceled",
                id="sub_1",
                status="active",
                cancelAtPeriodEnd=True,
                metadata={"userId": USER_ID},
            )
        )

        assert event == Ignore(reason="cancellation scheduled at period end")

    def test_immediate_cancellation_demotes(self, extractor):
        event = extractor.extract(
            polar_event(
                "subscription.canceled",
                id="sub_1",
                status="canceled",
                cancel_at_period_end=False,
                metadata={"userId": USER_ID},
            )
        )

        assert event == Demote(subscription_id="sub_1", user_id=USER_ID)

    def test_revocation_demotes_by_subscription(self, extractor):
        event = extractor.extract(
            polar_event("subscription.revoked", id="sub_1", status="canceled")
        )

        assert event == Demote(subscription_id="sub_1", user_id=None)

    @pytest.mark.parametrize(
        "status", ["past_due", "canceled", "revoked", "incomplete_expired"]
    )
    def test_lapsed_subscription_update_demotes(self, extractor, status):
        event = extractor.extract(
            polar_event("subscription.updated", id="sub_1", status=status)
        )

        assert event == Demote(subscription_id="sub_1")

    def test_active_subscription_update_is_ignored(self, extractor):
        event = extractor.extract(
            polar_event(
                "subscription.updated",
                id="sub_1",
                status="active",
                metadata={"userId": USER_ID},
            )
        )

        assert isinstance(event, Ignore)

    def test_past_due_event_demotes(self, extractor):
        event = extractor.extract(
            polar_event("subscription.past_due", id="sub_1", status="past_due")
        )

        assert event == Demote(subscription_id="sub_1")

    @pytest.mark.parametrize("event_type", ["order.refunded", "refund.created"])
    def test_refund_demotes(self, extractor, event_type):
        event = extractor.extract(
            polar_event(
                event_type,
                id="ord_1",
                subscription_id="sub_1",
                metadata={"userId": USER_ID},
            )
        )

        assert event == Demote(subscription_id="sub_1", user_id=USER_ID)

    def test_refund_of_one_time_order_demotes_by_user(self, extractor):
        event = extractor.extract(
            polar_event("order.refunded", id="ord_1", metadata={"userId": USER_ID})
        )

        assert event == Demote(subscription_id=None, user_id=USER_ID)

    def test_unresolved_user_is_ignored(self, extractor):
        event = extractor.extract(
            polar_event("order.paid", id="ord_1", status="paid", metadata={})
        )

        assert event == Ignore(reason="unresolved user id")

    def test_demotion_without_any_key_is_ignored(self, extractor):
        event = extractor.extract(polar_event("order.refunded"))

        assert event == Ignore(reason="unresolved user id")

    @pytest.mark.parametrize(
        "event_type", ["customer.created", "benefit.granted", "product.updated"]
    )
    def test_unhandled_types_are_ignored(self, extractor, event_type):
        event = extractor.extract(polar_event(event_type, id="x"))

        assert event == Ignore(reason="unhandled event type")


class TestPaddleEventExtractor:
    @pytest.fixture
    def extractor(self):
        return PaddleEventExtractor()

    @pytest.mark.parametrize("status", ["completed", "paid"])
    def test_completed_transaction_promotes(self, extractor, status):
        event = extractor.extract(
            paddle_event(
                "transaction.completed",
                id="txn_1",
                status=status,
                subscription_id="sub_01h",
                custom_data={"userId": USER_ID},
            )
        )

        assert event == Promote(user_id=USER_ID, subscription_id="sub_01h")

    def test_custom_data_wins_over_metadata(self, extractor):
        event = extractor.extract(
            paddle_event(
                "subscription.activated",
                id="sub_01h",
                custom_data={"user_id": "from-custom-data"},
                metadata={"userId": "from-metadata"},
            )
        )

        assert event == Promote(user_id="from-custom-data", subscription_id="sub_01h")

    def test_falls_back_to_shared_locations(self, extractor):
        event = extractor.extract(
            paddle_event(
                "subscription.resumed",
                id="sub_01h",
                custom_data=None,
                customer={"external_id": USER_ID},
            )
        )

        assert event == Promote(user_id=USER_ID, subscription_id="sub_01h")

    @pytest.mark.parametrize(
        "event_type", ["subscription.canceled", "subscription.past_due"]
    )
    def test_terminal_subscription_events_demote(self, extractor, event_type):
        event = extractor.extract(paddle_event(event_type, id="sub_01h"))

        assert event == Demote(subscription_id="sub_01h")

    def test_update_with_scheduled_cancel_is_ignored(self, extractor):
        event = extractor.extract(
            paddle_event(
                "subscription.updated",
                id="sub_01h",
                status="active",
                scheduled_change={"action": "cancel"},
            )
        )

        assert event == Ignore(reason="cancellation scheduled at period end")

    def test_update_to_past_due_demotes(self, extractor):
        event = extractor.extract(
            paddle_event("subscription.updated", id="sub_01h", status="past_due")
        )

        assert event == Demote(subscription_id="sub_01h")

    def test_approved_refund_demotes(self, extractor):
        event = extractor.extract(
            paddle_event(
                "adjustment.created",
                id="adj_1",
                action="refund",
                status="approved",
                subscription_id="sub_01h",
            )
        )

        assert event == Demote(subscription_id="sub_01h")

    @pytest.mark.parametrize(
        "action,status",
        [("refund", "pending_approval"), ("credit", "approved"), ("refund", None)],
    )
    def test_other_adjustments_are_ignored(self, extractor, action, status):
        event = extractor.extract(
            paddle_event(
                "adjustment.updated",
                action=action,
                status=status,
                subscription_id="sub_01h",
            )
        )

        assert isinstance(event, Ignore)


class TestNonTextStatus:
    """Statuses of any JSON type other than a string count as absent."""

    @pytest.mark.parametrize("status", [{"x": 1}, ["paid"], 1, True])
    def test_polar_order_is_ignored(self, status):
        event = PolarEventExtractor().extract(
            polar_event("order.paid", status=status, metadata={"userId": USER_ID})
        )

        assert event == Ignore(reason="payment status None")

    @pytest.mark.parametrize("status", [{"x": 1}, ["past_due"]])
    def test_polar_subscription_update_is_ignored(self, status):
        event = PolarEventExtractor().extract(
            polar_event("subscription.updated", id="sub_1", status=status)
        )

        assert event == Ignore(reason="subscription status None")

    def test_polar_cancellation_with_object_status_demotes(self):
        event = PolarEventExtractor().extract(
            polar_event(
                "subscription.canceled",
                id="sub_1",
                status={"value": "active"},
                cancelAtPeriodEnd=True,
            )
        )

        assert event == Demote(subscription_id="sub_1")

    @pytest.mark.parametrize(
        "event_type", ["transaction.completed", "subscription.updated"]
    )
    def test_paddle_events_are_ignored(self, event_type):
        event = PaddleEventExtractor().extract(
            paddle_event(
                event_type,
                id="sub_01h",
                status=["completed"],
                custom_data={"userId": USER_ID},
            )
        )

        assert isinstance(event, Ignore)
