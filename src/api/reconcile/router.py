"""Operator entry point for order history reconciliation."""

from fastapi import APIRouter, status

from src.api.core.dependencies import AdminUserDep, ReconciliationJobDep
from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import APIResponse, MessageCode
from src.api.reconcile.schemas import (
    ReconciliationReportModel,
    ReconciliationResponse,
)
from src.modules.billing.infrastructure.polar_client import OrderListingError

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("/reconcile", response_model=ReconciliationResponse)
async def reconcile_orders(
    current_user: AdminUserDep,
    job: ReconciliationJobDep,
) -> ReconciliationResponse:
    """Promote members whose paid orders were missed by webhook delivery."""
    try:
        report = await job.reconcile()
    except OrderListingError as e:
        raise PlanSyncException(
            MessageCode.EXTERNAL_SERVICE_ERROR,
            status.HTTP_502_BAD_GATEWAY,
            {"description": str(e)},
        )

    return APIResponse.success(
        message_code=MessageCode.RECONCILIATION_COMPLETED,
        data=ReconciliationReportModel.model_validate(report),
    )
