"""Polar settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class PolarSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    POLAR_WEBHOOK_SECRET: str = ""
    POLAR_ACCESS_TOKEN: str = ""
    POLAR_API_BASE: str = "https://api.polar.sh"
    POLAR_ORDERS_PAGE_SIZE: int = 100
    POLAR_API_TIMEOUT: int = 30
