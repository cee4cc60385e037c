"""Client-initiated payment verification."""

from fastapi import status

from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.modules.billing.constants import PADDLE_TRANSACTION_SUCCEEDED_STATUSES
from src.modules.billing.extractors import PaddleEventExtractor, first_text
from src.modules.billing.infrastructure.paddle_client import PaddleTransactionsClient
from src.modules.member.service import MembershipStateStore
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PaddleTransactionVerifier:
    """Promotes the caller right after checkout, ahead of the webhook.

    The transaction is fetched from Paddle rather than trusted from the
    client. A transaction carrying a different user id in its custom data is
    refused; one carrying none is credited to the caller.
    """

    def __init__(
        self, store: MembershipStateStore, transactions_client: PaddleTransactionsClient
    ):
        self.store = store
        self.transactions_client = transactions_client
        self.extractor = PaddleEventExtractor()

    async def verify(self, user_id: str, transaction_id: str) -> None:
        """Raises ``TransactionLookupError`` when Paddle cannot be reached."""
        transaction = await self.transactions_client.get_transaction(transaction_id)

        transaction_status = first_text(transaction, "status")
        if transaction_status not in PADDLE_TRANSACTION_SUCCEEDED_STATUSES:
            logger.info(
                "Transaction not completed",
                transaction_id=transaction_id,
                status=transaction_status,
            )
            raise PlanSyncException(
                MessageCode.PAYMENT_NOT_COMPLETED,
                status.HTTP_400_BAD_REQUEST,
                {"status": transaction_status},
            )

        owner_id = self.extractor.resolve_user_id(transaction)
        if owner_id and owner_id != user_id:
            logger.warning(
                "Transaction belongs to another user",
                transaction_id=transaction_id,
                user_id=user_id,
            )
            raise PlanSyncException(
                MessageCode.FORBIDDEN,
                status.HTTP_403_FORBIDDEN,
                {"description": "Transaction does not belong to the caller"},
            )

        await self.store.promote(user_id, first_text(transaction, "subscription_id"))
        logger.info(
            "Verified Paddle transaction",
            user_id=user_id,
            transaction_id=transaction_id,
        )
