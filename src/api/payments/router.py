"""Client-initiated payment verification endpoints."""

from fastapi import APIRouter, status

from src.api.core.dependencies import (
    CurrentUserAuthDep,
    MembershipStoreDep,
    TransactionVerifierDep,
)
from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import APIResponse, MessageCode
from src.api.member.schemas import MemberModel, MemberResponse
from src.api.payments.schemas import PaddleVerifyRequest
from src.modules.billing.infrastructure.paddle_client import TransactionLookupError

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("/paddle/verify", response_model=MemberResponse)
async def verify_paddle_transaction(
    body: PaddleVerifyRequest,
    current_user: CurrentUserAuthDep,
    verifier: TransactionVerifierDep,
    store: MembershipStoreDep,
) -> MemberResponse:
    """Check a completed Paddle transaction and promote the caller to pro."""
    try:
        await verifier.verify(current_user.user_id, body.transaction_id)
    except TransactionLookupError as e:
        raise PlanSyncException(
            MessageCode.EXTERNAL_SERVICE_ERROR,
            status.HTTP_502_BAD_GATEWAY,
            {"description": str(e)},
        )

    member = await store.get(current_user.user_id)
    return APIResponse.success(
        message_code=MessageCode.PAYMENT_VERIFIED,
        data=MemberModel.model_validate(member),
    )
