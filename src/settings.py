"""
Configuration management for the fee estimator.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from fees.source import DEFAULT_FEE_API_URL, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FESTIVUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    fee_api_url: str = DEFAULT_FEE_API_URL
    request_timeout: float = DEFAULT_TIMEOUT

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
