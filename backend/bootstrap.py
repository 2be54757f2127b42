"""
Startup and shutdown for the Article backend.

startup(): configure logging, validate settings, create tables.
shutdown(): dispose the engine.
"""
import logging
import os

from config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


async def startup() -> None:
    configure_logging()

    settings.validate_production_settings()

    # Ensure data/ directory exists for SQLite
    if settings.database_url.startswith("sqlite:///./data/"):
        os.makedirs("data", exist_ok=True)

    from database import init_db
    await init_db()
    logger.info("Database initialized")


async def shutdown() -> None:
    from database import dispose_db
    await dispose_db()
    logger.info("Shutting down")
