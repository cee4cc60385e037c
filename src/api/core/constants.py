# JWT Configuration
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"

# Standard webhook headers (Polar)
WEBHOOK_ID_HEADER = "webhook-id"
WEBHOOK_TIMESTAMP_HEADER = "webhook-timestamp"
WEBHOOK_SIGNATURE_HEADER = "webhook-signature"

# Paddle webhook header
PADDLE_SIGNATURE_HEADER = "paddle-signature"

# Authentication endpoints configuration
SKIP_AUTH_PATHS = {
    "/openapi.json",
    "/docs",
    "/redoc",
    "/health",
    "/health/database",
    "/webhooks/polar",
    "/webhooks/paddle",
}
