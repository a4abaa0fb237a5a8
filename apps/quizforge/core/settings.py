from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "quizforge.db"


class Settings(BaseSettings):
    """Unified application settings for QuizForge.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/quizforge/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="QuizForge API", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    # Logging
    log_level: str | None = Field(default=None, alias="QUIZFORGE_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")

    # --- Model completion (OpenAI-compatible) ---
    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(
        default="https://api.openai.com/v1", alias="OPENAI_BASE_URL"
    )
    openai_organization: Optional[str] = Field(default=None, alias="OPENAI_ORG")
    llm_model: str = Field(default="gpt-4o-mini", alias="QUIZFORGE_LLM_MODEL")
    llm_temperature: float = Field(default=0.7, alias="QUIZFORGE_LLM_TEMPERATURE")
    llm_max_tokens: int = Field(default=2000, alias="QUIZFORGE_LLM_MAX_TOKENS", ge=256, le=16000)
    llm_timeout_seconds: float = Field(default=60.0, alias="QUIZFORGE_LLM_TIMEOUT_SECONDS", gt=0)
    llm_max_retries: int = Field(default=1, alias="QUIZFORGE_LLM_MAX_RETRIES", ge=0, le=5)

    # --- Retrieval grounding ---
    rag_enabled: bool = Field(default=True, alias="RAG_ENABLED")
    wikipedia_enabled: bool = Field(default=True, alias="RAG_WIKIPEDIA_ENABLED")
    stackoverflow_enabled: bool = Field(default=True, alias="RAG_STACKOVERFLOW_ENABLED")
    google_search_enabled: bool = Field(default=True, alias="RAG_GOOGLE_SEARCH_ENABLED")
    retrieval_max_items: int = Field(default=3, alias="RAG_MAX_ITEMS", ge=1, le=10)
    retrieval_max_content_length: int = Field(
        default=2000, alias="RAG_MAX_CONTENT_LENGTH", ge=100, le=20000
    )
    retrieval_timeout_seconds: float = Field(default=10.0, alias="RAG_TIMEOUT_SECONDS", gt=0)
    retrieval_max_retries: int = Field(default=1, alias="RAG_MAX_RETRIES", ge=0, le=5)

    # Google Custom Search (web fallback)
    google_search_api_key: SecretStr | None = Field(default=None, alias="GOOGLE_SEARCH_API_KEY")
    google_search_cx: str | None = Field(default=None, alias="GOOGLE_SEARCH_CX")

    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; QuizForgeBot/1.0)",
        alias="USER_AGENT",
    )

    # Database
    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_DB_PATH}",
        alias="DATABASE_URL",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Convenience singleton for modules expecting a module-level "settings"
settings = get_settings()
