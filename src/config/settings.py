"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_JWT_SECRET: str

    # Auth
    AUTH_AUTO_CONFIRM_EMAIL: bool = False
    SITE_URL: str = "http://localhost:3000"

    # LLM
    LLM_PROVIDER: Literal["openai", "groq"] = "openai"
    OPENAI_API_KEY: str = ""
    GROQ_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT: float = 30.0
    OPENAI_MAX_RETRIES: int = 1
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_TOKENS: int = 1000
    OPENAI_SYSTEM_PROMPT: str = ""
    CHAT_CONTEXT_MESSAGES: int = 50

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def email_redirect_url(self) -> str:
        return f"{self.SITE_URL.rstrip('/')}/auth/confirm"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
