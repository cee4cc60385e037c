"""Client-facing member endpoints."""

from fastapi import APIRouter

from src.api.core.dependencies import CurrentUserAuthDep, MembershipStoreDep
from src.api.core.messages import APIResponse, MessageCode
from src.api.member.schemas import MemberModel, MemberResponse

router = APIRouter(prefix="/member", tags=["member"])


@router.get("", response_model=MemberResponse)
async def get_member(
    current_user: CurrentUserAuthDep,
    store: MembershipStoreDep,
) -> MemberResponse:
    """Get the caller's membership row, or null when none exists yet."""
    member = await store.get(current_user.user_id)
    if member is None:
        return APIResponse.success(message_code=MessageCode.MEMBER_NOT_FOUND)
    return APIResponse.success(data=MemberModel.model_validate(member))


@router.post("/init", response_model=MemberResponse)
async def init_member(
    current_user: CurrentUserAuthDep,
    store: MembershipStoreDep,
) -> MemberResponse:
    """Create the caller's free membership if it does not exist yet.

    Never overwrites an existing row, so a paying member stays on pro.
    """
    await store.ensure_exists(current_user.user_id)
    member = await store.get(current_user.user_id)
    return APIResponse.success(
        message_code=MessageCode.MEMBER_INITIALIZED,
        data=MemberModel.model_validate(member),
    )
