"""Billing provider webhook endpoints."""

import orjson
from fastapi import APIRouter, Request, status

from src.api.core.dependencies import EventRouterDep
from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.modules.billing.constants import BillingProvider
from src.modules.billing.extractors import EXTRACTORS, MalformedPayloadError
from src.modules.billing.routing import MembershipEventRouter
from src.modules.billing.signatures import (
    PaddleSignatureVerifier,
    SignatureVerifier,
    StandardWebhookVerifier,
)
from src.utils.logger import get_logger
from src.utils.settings.app import AppSettings
from src.utils.settings.paddle import PaddleSettings
from src.utils.settings.polar import PolarSettings

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def handle_delivery(
    request: Request,
    provider: BillingProvider,
    secret: str,
    verifier: SignatureVerifier,
    event_router: MembershipEventRouter,
) -> dict:
    """Verify, parse, normalize and apply one webhook delivery.

    Ignored events are still acknowledged so the provider stops retrying;
    persistence failures propagate as 5xx so it retries later.
    """
    if not secret:
        logger.error("Webhook secret not configured", provider=provider.value)
        raise PlanSyncException(
            MessageCode.WEBHOOK_SECRET_NOT_CONFIGURED,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = await request.body()

    if len(payload) > AppSettings().MAX_WEBHOOK_PAYLOAD_SIZE:
        raise PlanSyncException(
            MessageCode.PAYLOAD_TOO_LARGE,
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )

    if not verifier.verify(payload, request.headers, secret):
        logger.warning("Webhook signature rejected", provider=provider.value)
        raise PlanSyncException(
            MessageCode.WEBHOOK_SIGNATURE_INVALID,
            status.HTTP_401_UNAUTHORIZED,
        )

    try:
        body = orjson.loads(payload)
    except orjson.JSONDecodeError:
        raise PlanSyncException(
            MessageCode.MALFORMED_PAYLOAD,
            status.HTTP_400_BAD_REQUEST,
            {"description": "Body is not valid JSON"},
        )

    try:
        event = EXTRACTORS[provider].extract(body)
    except MalformedPayloadError as e:
        raise PlanSyncException(
            MessageCode.MALFORMED_PAYLOAD,
            status.HTTP_400_BAD_REQUEST,
            {"description": str(e)},
        )

    await event_router.route(event)
    return {"received": True}


@router.post("/polar")
async def polar_webhook(request: Request, event_router: EventRouterDep):
    """Handle Polar webhooks signed with the Standard Webhooks scheme."""
    return await handle_delivery(
        request,
        BillingProvider.POLAR,
        PolarSettings().POLAR_WEBHOOK_SECRET,
        StandardWebhookVerifier(AppSettings().WEBHOOK_TOLERANCE_SECONDS),
        event_router,
    )


@router.post("/paddle")
async def paddle_webhook(request: Request, event_router: EventRouterDep):
    """Handle Paddle Billing webhooks."""
    return await handle_delivery(
        request,
        BillingProvider.PADDLE,
        PaddleSettings().PADDLE_WEBHOOK_SECRET,
        PaddleSignatureVerifier(AppSettings().WEBHOOK_TOLERANCE_SECONDS),
        event_router,
    )
