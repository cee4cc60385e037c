from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DEBUG: bool = False
    ENVIRONMENT: str = "DEV"
    API_VERSION: str = "0.0.1"
    CORS_ORIGINS: list[str] = [
        "http://localhost:1420",
        "http://localhost:3000",
    ]

    # Users allowed to trigger reconciliation; empty means any authenticated user
    ADMIN_USER_IDS: list[str] = []

    # Replay window for webhook timestamps, 0 disables the check
    WEBHOOK_TOLERANCE_SECONDS: int = 0

    MAX_WEBHOOK_PAYLOAD_SIZE: int = 1024 * 1024  # 1MB

    def validate_prod(self) -> None:
        """Sanity checks for production environment."""
        if self.ENVIRONMENT.upper() == "PROD":
            if not self.CORS_ORIGINS:
                raise ValueError("CORS_ORIGINS must be set in production")
