import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.api.core.constants import SKIP_AUTH_PATHS
from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.modules.user.auth_handlers import handle_jwt_auth
from src.utils.path_helpers import path_matches

logger = structlog.get_logger(__name__)


async def auth_middleware(request: Request, call_next):
    """Authenticate every non-public request with a Supabase bearer token.

    Webhook endpoints are public here; they authenticate the payload signature
    instead. The verified identity is stored on ``request.state.auth``.
    """
    request.state.auth = None

    if request.method == "OPTIONS" or path_matches(request.url.path, SKIP_AUTH_PATHS):
        logger.debug("Skipping auth for path", path=request.url.path)
        return await call_next(request)

    try:
        authorization = request.headers.get("Authorization", "")
        if not authorization:
            raise PlanSyncException(
                MessageCode.AUTH_REQUIRED,
                status.HTTP_401_UNAUTHORIZED,
                {"description": "Missing Authorization header"},
            )

        auth_parts = authorization.split(" ")
        if len(auth_parts) != 2 or auth_parts[0].lower() != "bearer":
            raise PlanSyncException(
                MessageCode.INVALID_TOKEN,
                status.HTTP_401_UNAUTHORIZED,
                {"description": "Authorization header must be 'Bearer <token>'"},
            )

        request.state.auth = handle_jwt_auth(auth_parts[1])
    except PlanSyncException as e:
        logger.debug(
            "Authentication rejected",
            path=request.url.path,
            message_code=e.message_code,
            status_code=e.status_code,
        )
        return JSONResponse(status_code=e.status_code, content=e.to_response_dict())

    structlog.contextvars.bind_contextvars(user_id=request.state.auth.user_id)
    return await call_next(request)
