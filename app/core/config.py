"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export OPENAI_API_KEY=sk-...
        export BASE_URL=https://generator.example.com
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "Obrix Labs Generator API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # PORT / BASE_URL: public URLs of generated sites are built from BASE_URL
    PORT: int = 8080
    BASE_URL: str = "http://localhost:8080"

    # ALLOWED_ORIGINS: comma separated list, "*" allows any origin
    ALLOWED_ORIGINS: str = "*"

    # ---------------------------------------------------------------------------
    # STORAGE
    # ---------------------------------------------------------------------------
    SITES_DIR: str = "sites"
    UPLOADS_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024  # 5 MB

    # ---------------------------------------------------------------------------
    # AI/LLM PROVIDER SETTINGS
    # ---------------------------------------------------------------------------
    # GENERATION_PROVIDER: which hosted model writes the landing page
    GENERATION_PROVIDER: str = "openai"

    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    OPENAI_MODEL: str = "gpt-4.1-mini"
    ANTHROPIC_MODEL: str = "claude-sonnet-4-5"
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # ---------------------------------------------------------------------------
    # GENERATION LOOP
    # ---------------------------------------------------------------------------
    # MAX_RETRIES: revision attempts after the first one (R in R+1 total calls)
    MAX_RETRIES: int = 2
    GENERATION_TEMPERATURE: float = 0.7
    GENERATION_MAX_TOKENS: int = 8000

    # Deadline for a single provider call, in seconds
    GENERATION_TIMEOUT_SECONDS: float = 90.0

    # ON_EXHAUSTION: "fail" surfaces an error, "fallback" serves a local page
    ON_EXHAUSTION: str = "fail"

    # ---------------------------------------------------------------------------
    # REMOTE PUBLISH (SFTP / cPanel)
    # ---------------------------------------------------------------------------
    PUBLISH_METHOD: str = "none"
    PUBLISH_HOST: str = ""
    PUBLISH_PORT: int = 0  # 0 = protocol default (22 for sftp, 2083 for cpanel)
    PUBLISH_USER: str = ""
    PUBLISH_PASSWORD: str = ""
    PUBLISH_TOKEN: str = ""
    PUBLISH_TARGET_DIR: str = "public_html/sites"
    PUBLISH_BASE_URL: str = ""
    PUBLISH_TIMEOUT_SECONDS: float = 30.0

    @field_validator("GENERATION_PROVIDER")
    @classmethod
    def _check_provider(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("openai", "anthropic", "gemini"):
            raise ValueError(f"Unsupported GENERATION_PROVIDER: {value}")
        return value

    @field_validator("ON_EXHAUSTION")
    @classmethod
    def _check_on_exhaustion(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("fail", "fallback"):
            raise ValueError("ON_EXHAUSTION must be 'fail' or 'fallback'")
        return value

    @field_validator("PUBLISH_METHOD")
    @classmethod
    def _check_publish_method(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("none", "sftp", "cpanel"):
            raise ValueError("PUBLISH_METHOD must be 'none', 'sftp' or 'cpanel'")
        return value

    @field_validator("MAX_RETRIES")
    @classmethod
    def _check_max_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("MAX_RETRIES must be >= 0")
        return value

    @property
    def allowed_origins(self) -> List[str]:
        """ALLOWED_ORIGINS split into a list for CORSMiddleware."""
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def public_base_url(self) -> str:
        return self.BASE_URL.rstrip("/")


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from app.core.config import settings
settings = Settings()
