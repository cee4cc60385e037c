from pydantic import BaseModel

from src.api.core.messages import APIResponse


class ReconciliationReportModel(BaseModel):
    """Outcome of one reconciliation run."""

    total_orders: int
    total_reconciled: int
    reconciled_user_ids: list[str]
    errors: list[str]

    model_config = {"from_attributes": True}


ReconciliationResponse = APIResponse[ReconciliationReportModel]
