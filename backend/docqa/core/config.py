from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # OpenAI
    openai_api_key: str | None = None
    openai_model: str = "gpt-3.5-turbo-instruct"
    openai_timeout: float = 600.0
    openai_max_retries: int = 2

    # Generation
    completion_max_tokens: int = 500
    completion_temperature: float = 0.7

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024

    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"


settings = Settings()


def get_settings() -> Settings:
    return settings
