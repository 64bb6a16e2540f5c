"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "studynotes-ai"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"  # comma-separated

    # ── Supabase ─────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_KEY: str  # anon/public key
    SUPABASE_SERVICE_KEY: str = ""  # service_role key (bypasses RLS, rows are scoped by user_id in code)

    # ── Identity (Supabase access tokens) ────────────────
    SUPABASE_JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # ── LLM (Provider-Agnostic) ──────────────────────────
    LLM_PROVIDER: str = "openai"  # openai | gemini | groq
    LLM_MODEL: str = "google/gemini-2.5-flash"
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://ai.gateway.lovable.dev/v1"  # OpenAI-compatible gateway, openai provider only
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT: int = 60  # seconds per backend call

    # ── Uploads ──────────────────────────────────────────
    MAX_UPLOAD_MB: int = 20

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
