"""Client for the Polar order listing API."""

from dataclasses import dataclass, field
from typing import Any

from src.modules.billing.infrastructure.http_client import (
    BillingAPIClient,
    BillingAPIError,
)
from src.utils.settings.polar import PolarSettings


class OrderListingError(BillingAPIError):
    """The order listing could not be fetched."""


@dataclass
class OrderPage:
    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    max_page: int = 0


class PolarOrdersClient(BillingAPIClient):
    """Fetches pages of orders, newest first."""

    provider = "Polar"
    error_class = OrderListingError

    def __init__(self, access_token: str, settings: PolarSettings | None = None):
        settings = settings or PolarSettings()
        super().__init__(
            access_token, settings.POLAR_API_BASE, settings.POLAR_API_TIMEOUT
        )

    async def list_orders(self, page: int, limit: int) -> OrderPage:
        data = await self._get_json(
            "/v1/orders",
            params={"page": page, "limit": limit, "sorting": "-created_at"},
        )
        return self._parse_page(data)

    def _parse_page(self, data: dict[str, Any]) -> OrderPage:
        pagination = data.get("pagination")
        if not isinstance(pagination, dict):
            pagination = {}
        items = data.get("items")
        if not isinstance(items, list):
            items = []
        try:
            return OrderPage(
                items=[item for item in items if isinstance(item, dict)],
                total_count=int(pagination.get("total_count") or 0),
                max_page=int(pagination.get("max_page") or 0),
            )
        except (TypeError, ValueError) as e:
            raise OrderListingError(f"Polar API returned bad pagination: {e}") from e
