"""Application settings using Pydantic BaseSettings."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_async_database_url(url: str | None = None) -> str:
    """Get database URL converted for asyncpg driver."""
    if url is None:
        url = os.environ.get("DATABASE_URL", "")
    # Convert postgres:// to postgresql+asyncpg:// for SQLAlchemy async
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg doesn't support sslmode, it uses ssl parameter
    if "sslmode=" in url:
        url = re.sub(r'[?&]sslmode=[^&]*', '', url)
        url = url.rstrip('?&')
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Postgres (optional; analysis caching is disabled without it)
    database_url: str = ""

    # LLM (Gemini) used for conversation analysis
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    analysis_temperature: float = 0.3
    analysis_max_output_tokens: int = 2048

    # OpenAI ChatKit
    openai_api_key: str = ""
    chatkit_workflow_id: str = ""
    chatkit_api_base: str = "https://api.openai.com/v1/chatkit"
    demo_user_id: str = "demo-user"

    # Voice agent API (Hamsa)
    voice_agent_api_url: str = "https://api.hamsa.ai"
    voice_agent_api_key: str = ""
    voice_agent_project_id: str | None = None

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
