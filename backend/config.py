"""
Configuration management for the Article backend.

Loads settings from .env via pydantic-settings.
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/articles.db"
    database_echo: bool = False

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"

    # ── Persistence ─────────────────────────────────────────────────
    # Upper bound callers may put on a single save round-trip.
    save_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def is_memory_database(self) -> bool:
        """True for any SQLite URL (sync or async driver) without a file path."""
        url = make_url(self.database_url)
        return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")

    @property
    def sql_echo(self) -> bool:
        """SQL statement echo: explicit flag, or always on in development."""
        return self.database_echo or self.environment == "development"

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        In production an in-memory store or SQL echo is a hard error,
        anywhere else it only logs a warning.
        """
        problems = []
        if self.is_memory_database:
            problems.append("DATABASE_URL points at an in-memory database (data is lost on exit)")
        if self.database_echo:
            problems.append("DATABASE_ECHO=true (SQL statements are logged)")

        if self.environment == "production":
            if problems:
                raise ValueError("; ".join(problems))
            logger.info("✅ Production settings validated")
        else:
            for p in problems:
                logger.warning(f"⚠️  {p}")


# Global settings instance
settings = Settings()
