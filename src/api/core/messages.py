"""Centralized message codes and default messages for API responses."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Success codes
    SUCCESS = "SUCCESS"

    # Authentication & Authorization
    AUTH_REQUIRED = "AUTH_REQUIRED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Webhooks
    WEBHOOK_SIGNATURE_INVALID = "WEBHOOK_SIGNATURE_INVALID"
    WEBHOOK_SECRET_NOT_CONFIGURED = "WEBHOOK_SECRET_NOT_CONFIGURED"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # Membership
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    MEMBER_INITIALIZED = "MEMBER_INITIALIZED"
    RECONCILIATION_COMPLETED = "RECONCILIATION_COMPLETED"
    PAYMENT_VERIFIED = "PAYMENT_VERIFIED"
    PAYMENT_NOT_COMPLETED = "PAYMENT_NOT_COMPLETED"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Service errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"


DEFAULT_MESSAGES = {
    MessageCode.SUCCESS: "Operation completed successfully",
    MessageCode.AUTH_REQUIRED: "Authentication required",
    MessageCode.UNAUTHORIZED: "Authentication required",
    MessageCode.FORBIDDEN: "Access denied",
    MessageCode.INVALID_TOKEN: "Invalid authentication token",
    MessageCode.WEBHOOK_SIGNATURE_INVALID: "Invalid signature",
    MessageCode.WEBHOOK_SECRET_NOT_CONFIGURED: "Webhook secret not configured",
    MessageCode.MALFORMED_PAYLOAD: "Malformed webhook payload",
    MessageCode.PAYLOAD_TOO_LARGE: "Payload too large",
    MessageCode.MEMBER_NOT_FOUND: "Member not found",
    MessageCode.MEMBER_INITIALIZED: "Member initialized",
    MessageCode.RECONCILIATION_COMPLETED: "Reconciliation complete",
    MessageCode.PAYMENT_VERIFIED: "Payment verified",
    MessageCode.PAYMENT_NOT_COMPLETED: "Transaction not completed",
    MessageCode.INVALID_INPUT: "Invalid input provided",
    MessageCode.CONFIGURATION_ERROR: "Service not configured",
    MessageCode.EXTERNAL_SERVICE_ERROR: "External service error",
    MessageCode.PERSISTENCE_FAILURE: "Failed to persist membership state",
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.BAD_REQUEST: "Bad request",
    MessageCode.NOT_FOUND: "Resource not found",
    MessageCode.METHOD_NOT_ALLOWED: "Method not allowed",
}

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Base API response model with consistent structure and proper typing."""

    message_code: MessageCode
    message: str
    data: T | None = None

    @classmethod
    def success(
        cls,
        message_code: MessageCode = MessageCode.SUCCESS,
        message: str | None = None,
        data: T | None = None,
    ) -> "APIResponse[T]":
        """Create a success response."""
        return cls(
            message_code=message_code,
            message=message or DEFAULT_MESSAGES.get(message_code, "Success"),
            data=data,
        )


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
