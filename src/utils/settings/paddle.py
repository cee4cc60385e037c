"""Paddle settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

PADDLE_API_BASES = {
    "production": "https://api.paddle.com",
    "sandbox": "https://sandbox-api.paddle.com",
}


class PaddleSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PADDLE_WEBHOOK_SECRET: str = ""
    PADDLE_API_KEY: str = ""
    # Anything other than "production" talks to the sandbox
    PADDLE_ENVIRONMENT: str = "sandbox"
    PADDLE_API_TIMEOUT: int = 30

    @property
    def PADDLE_API_BASE(self) -> str:
        environment = self.PADDLE_ENVIRONMENT.lower()
        return PADDLE_API_BASES.get(environment, PADDLE_API_BASES["sandbox"])
