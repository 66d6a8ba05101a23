"""
RootNote Backend — Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the Alembic environment and the
       `run()` entry point.
When:  Loaded once at module import time; validated before the app starts.

Environment variables (case-insensitive):
    API_HOST       Listen address for the HTTP server     (default 0.0.0.0)
    API_PORT       Listen port for the HTTP server        (default 3333)
    DATABASE_URL   Async SQLAlchemy URL of the plant DB   (default ./rootnote.db)
    CORS_ORIGINS   Comma-separated allowed origins        (default *)
    LOG_LEVEL      Root logging level                     (default INFO)
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a default suitable for running the API locally next to
    the web client's dev server, which proxies `/api` to port 3333.
    """

    # ── Server ────────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0", description="Host the API listens on")
    api_port: int = Field(default=3333, ge=1, le=65535, description="Port the API listens on")

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///<path>  (three slashes = relative path)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rootnote.db",
        description="Async SQLAlchemy connection URL for the plant table",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # "*" reflects any origin, matching the web client's dev setup
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list for the middleware."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    # DEBUG also echoes every SQL statement issued by the store.
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # API_PORT and api_port both work
        "extra": "ignore",
    }


# Singleton instance; create_app() accepts an override for tests
settings = Settings()
