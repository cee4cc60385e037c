"""Repairs missed promotions by scanning provider order history."""

from dataclasses import dataclass, field

from src.api.core.exceptions.base import PlanSyncException
from src.database.models import PlanTier
from src.modules.billing.constants import RECONCILABLE_ORDER_STATUSES
from src.modules.billing.extractors import resolve_user_id
from src.modules.billing.infrastructure.polar_client import PolarOrdersClient
from src.modules.member.service import MembershipStateStore
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100


@dataclass
class ReconciliationReport:
    total_orders: int = 0
    total_reconciled: int = 0
    reconciled_user_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_reconciled(self, user_id: str) -> None:
        self.total_reconciled += 1
        self.reconciled_user_ids.append(user_id)


class ReconciliationJob:
    """Promotes every member with a paid order who is not on the pro plan.

    Only ever promotes: a missing order is no proof of cancellation, so
    demotions are left to webhooks. Running it again after success changes
    nothing and reports no reconciled users.
    """

    def __init__(
        self,
        store: MembershipStateStore,
        orders_client: PolarOrdersClient,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.store = store
        self.orders_client = orders_client
        self.page_size = page_size

    async def reconcile(self) -> ReconciliationReport:
        """Scan every page of orders and repair membership rows.

        Raises ``OrderListingError`` when a page cannot be fetched; per-order
        problems are collected in the report instead.
        """
        report = ReconciliationReport()
        page = 1

        while True:
            order_page = await self.orders_client.list_orders(page, self.page_size)
            if not order_page.items:
                break

            for order in order_page.items:
                report.total_orders += 1
                await self._reconcile_order(order, report)

            # Also stops when the provider reports zero pages
            if page >= order_page.max_page:
                break
            page += 1

        logger.info(
            "Reconciliation complete",
            total_orders=report.total_orders,
            total_reconciled=report.total_reconciled,
            errors=len(report.errors),
        )
        return report

    async def _reconcile_order(self, order: dict, report: ReconciliationReport) -> None:
        order_id = order.get("id", "<unknown>")

        status = order.get("status")
        if status is not None and not isinstance(status, str):
            report.errors.append(f"Order {order_id}: unreadable status {status!r}")
            return
        if status is not None and status not in RECONCILABLE_ORDER_STATUSES:
            logger.debug("Skipping unpaid order", order_id=order_id, status=status)
            return

        user_id = resolve_user_id(order)
        if not user_id:
            report.errors.append(f"Order {order_id}: no user id in metadata")
            return

        subscription_id = order.get("subscription_id")
        if not isinstance(subscription_id, str) or not subscription_id:
            subscription_id = None

        try:
            member = await self.store.get(user_id)
            if member is None:
                await self.store.create_pro(user_id, subscription_id)
            elif member.plan != PlanTier.PRO:
                await self.store.promote(user_id, subscription_id)
            else:
                return
        except PlanSyncException as e:
            report.errors.append(
                f"Order {order_id}: failed to reconcile member {user_id}: {e.message}"
            )
            return

        logger.info("Reconciled member", user_id=user_id, order_id=order_id)
        report.record_reconciled(user_id)
