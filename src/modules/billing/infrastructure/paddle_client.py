"""Client for the Paddle Billing transactions API."""

from typing import Any

from src.modules.billing.infrastructure.http_client import (
    BillingAPIClient,
    BillingAPIError,
)
from src.utils.settings.paddle import PaddleSettings


class TransactionLookupError(BillingAPIError):
    """A transaction could not be fetched from Paddle."""


class PaddleTransactionsClient(BillingAPIClient):
    provider = "Paddle"
    error_class = TransactionLookupError

    def __init__(self, api_key: str, settings: PaddleSettings | None = None):
        settings = settings or PaddleSettings()
        super().__init__(api_key, settings.PADDLE_API_BASE, settings.PADDLE_API_TIMEOUT)

    async def get_transaction(self, transaction_id: str) -> dict[str, Any]:
        """Return the transaction entity (the response's ``data`` object)."""
        body = await self._get_json(f"/transactions/{transaction_id}")
        transaction = body.get("data")
        if not isinstance(transaction, dict):
            raise TransactionLookupError("Paddle API response has no transaction data")
        return transaction
