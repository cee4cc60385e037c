"""Bearer token authentication for client and operator endpoints."""

from fastapi import status
from jose import JWTError, jwt

from src.api.core.constants import JWT_ALGORITHM, JWT_AUDIENCE
from src.api.core.exceptions.base import PlanSyncException
from src.api.core.messages import MessageCode
from src.core.context import AuthenticatedUserContext
from src.utils.settings.auth import AuthSettings
from src.utils.logger import get_logger

logger = get_logger(__name__)


def handle_jwt_auth(token: str) -> AuthenticatedUserContext:
    secret = AuthSettings().SUPABASE_JWT_SECRET
    if not secret:
        raise PlanSyncException(
            MessageCode.CONFIGURATION_ERROR,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"description": "SUPABASE_JWT_SECRET is not configured"},
        )

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {e}")
        raise PlanSyncException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Invalid or expired authentication token"},
        )

    if payload.get("role") == "anon" or not payload.get("sub"):
        raise PlanSyncException(
            MessageCode.UNAUTHORIZED,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Anonymous access not permitted"},
        )

    return AuthenticatedUserContext(user_id=payload["sub"], email=payload.get("email"))
