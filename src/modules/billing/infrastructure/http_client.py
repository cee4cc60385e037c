"""Shared aiohttp plumbing for billing provider REST APIs."""

import asyncio
from typing import Any

import aiohttp

from src.utils.logger import get_logger

logger = get_logger(__name__)


class BillingAPIError(RuntimeError):
    """A provider API call failed or returned an unusable body."""


class BillingAPIClient:
    """Authenticated JSON GETs against one provider API."""

    provider = "billing"
    error_class: type[BillingAPIError] = BillingAPIError

    def __init__(self, access_token: str, base_url: str, timeout: int):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Authorization": f"Bearer {access_token}"}

    async def _get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """GET ``path`` and return the decoded JSON object.

        Every failure (HTTP status, transport, timeout, undecodable or
        non-object body) is raised as ``error_class``.
        """
        url = f"{self.base_url}{path}"
        async with aiohttp.ClientSession(headers=self.headers) as session:
            try:
                async with session.get(
                    url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status >= 400:
                        body = await response.text()
                        logger.error(
                            f"{self.provider} API request failed",
                            status=response.status,
                            body=body[:500],
                            path=path,
                        )
                        raise self.error_class(
                            f"{self.provider} API error: {response.status}"
                        )
                    data = await response.json()
            except aiohttp.ClientError as e:
                logger.error(f"{self.provider} API request failed: {e}", path=path)
                raise self.error_class(f"{self.provider} API unavailable: {e}") from e
            except asyncio.TimeoutError as e:
                logger.error(
                    f"{self.provider} API request timed out",
                    path=path,
                    timeout=self.timeout,
                )
                raise self.error_class(
                    f"{self.provider} API timed out after {self.timeout}s"
                ) from e
            except ValueError as e:
                logger.error(
                    f"{self.provider} API returned invalid JSON: {e}", path=path
                )
                raise self.error_class(
                    f"{self.provider} API returned invalid JSON"
                ) from e

        if not isinstance(data, dict):
            raise self.error_class(f"{self.provider} API returned a non-object body")
        return data
