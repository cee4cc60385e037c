from fastapi import APIRouter

from src.api.health.router import router as health_router
from src.api.member.router import router as member_router
from src.api.payments.router import router as payments_router
from src.api.reconcile.router import router as reconcile_router
from src.api.webhooks.router import router as webhooks_router

# V1 API router
v1_router = APIRouter(prefix="/v1")

v1_router.include_router(member_router)
v1_router.include_router(reconcile_router)
v1_router.include_router(payments_router)

# Main API router
api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(webhooks_router)
api_router.include_router(v1_router)
