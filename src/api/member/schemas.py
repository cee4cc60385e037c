from datetime import datetime

from pydantic import BaseModel

from src.api.core.messages import APIResponse
from src.database.models import PlanTier


class MemberModel(BaseModel):
    id: str
    type: str
    plan: PlanTier
    is_on_trial: bool
    subscription_id: str | None = None
    words_today: int
    words_this_month: int
    words_total: int
    tokens_today: int
    tokens_this_month: int
    tokens_total: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


MemberResponse = APIResponse[MemberModel]
