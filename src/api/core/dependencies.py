from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.core.context import AuthenticatedUserContext
from src.modules.billing.infrastructure.paddle_client import PaddleTransactionsClient
from src.modules.billing.infrastructure.polar_client import PolarOrdersClient
from src.modules.billing.reconciliation import ReconciliationJob
from src.modules.billing.routing import MembershipEventRouter
from src.modules.billing.verification import PaddleTransactionVerifier
from src.modules.member.service import MembershipStateStore
from src.utils.logger import get_logger
from src.utils.settings.app import AppSettings
from src.utils.settings.paddle import PaddleSettings
from src.utils.settings.polar import PolarSettings

logger = get_logger(__name__)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_current_user_authenticated(request: Request) -> AuthenticatedUserContext:
    """Identity set by the auth middleware."""
    auth = getattr(request.state, "auth", None)
    if not auth:
        raise PlanSyncException(MessageCode.AUTH_REQUIRED, status.HTTP_401_UNAUTHORIZED)
    return auth


async def get_current_admin_user(
    request: Request,
    current_user: Annotated[
        AuthenticatedUserContext, Depends(get_current_user_authenticated)
    ],
) -> AuthenticatedUserContext:
    """Restrict to ``ADMIN_USER_IDS`` when that list is configured."""
    admin_ids = AppSettings().ADMIN_USER_IDS
    if admin_ids and current_user.user_id not in admin_ids:
        logger.warning(
            "Unauthorized admin access attempt",
            user_id=current_user.user_id,
            endpoint=request.url.path,
        )
        raise PlanSyncException(
            MessageCode.FORBIDDEN,
            status.HTTP_403_FORBIDDEN,
            {"description": "Admin access required"},
        )

    logger.info(
        "Admin access granted",
        user_id=current_user.user_id,
        endpoint=request.url.path,
    )
    return current_user


async def get_membership_store(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> MembershipStateStore:
    return MembershipStateStore(db)


async def get_event_router(
    store: Annotated[MembershipStateStore, Depends(get_membership_store)],
) -> MembershipEventRouter:
    return MembershipEventRouter(store)


async def get_orders_client() -> PolarOrdersClient:
    """Build the order listing client, failing if no access token is set."""
    settings = PolarSettings()
    if not settings.POLAR_ACCESS_TOKEN:
        raise PlanSyncException(
            MessageCode.CONFIGURATION_ERROR,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"description": "POLAR_ACCESS_TOKEN is not configured"},
        )
    return PolarOrdersClient(settings.POLAR_ACCESS_TOKEN, settings)


async def get_reconciliation_job(
    # Must stay ahead of orders_client
    _admin: Annotated[AuthenticatedUserContext, Depends(get_current_admin_user)],
    store: Annotated[MembershipStateStore, Depends(get_membership_store)],
    orders_client: Annotated[PolarOrdersClient, Depends(get_orders_client)],
) -> ReconciliationJob:
    return ReconciliationJob(
        store, orders_client, page_size=PolarSettings().POLAR_ORDERS_PAGE_SIZE
    )


async def get_paddle_transactions_client() -> PaddleTransactionsClient:
    settings = PaddleSettings()
    if not settings.PADDLE_API_KEY:
        raise PlanSyncException(
            MessageCode.CONFIGURATION_ERROR,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"description": "PADDLE_API_KEY is not configured"},
        )
    return PaddleTransactionsClient(settings.PADDLE_API_KEY, settings)


async def get_transaction_verifier(
    store: Annotated[MembershipStateStore, Depends(get_membership_store)],
    transactions_client: Annotated[
        PaddleTransactionsClient, Depends(get_paddle_transactions_client)
    ],
) -> PaddleTransactionVerifier:
    return PaddleTransactionVerifier(store, transactions_client)


AsyncSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
MembershipStoreDep = Annotated[MembershipStateStore, Depends(get_membership_store)]
EventRouterDep = Annotated[MembershipEventRouter, Depends(get_event_router)]
ReconciliationJobDep = Annotated[ReconciliationJob, Depends(get_reconciliation_job)]
TransactionVerifierDep = Annotated[
    PaddleTransactionVerifier, Depends(get_transaction_verifier)
]

CurrentUserAuthDep = Annotated[
    AuthenticatedUserContext, Depends(get_current_user_authenticated)
]
AdminUserDep = Annotated[AuthenticatedUserContext, Depends(get_current_admin_user)]
