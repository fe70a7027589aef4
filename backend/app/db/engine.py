"""SQLAlchemy engine configuration."""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url

from backend.app.core.logging import EVENT_DB_INITIALIZED, log_event
from backend.app.core.settings import settings

logger = logging.getLogger(__name__)


def get_safe_db_url() -> str:
    """Return the configured database URL with any password masked."""
    return make_url(settings.database_url).render_as_string(hide_password=True)


_connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=not settings.is_sqlite,
    connect_args=_connect_args,  # check_same_thread is required for SQLite
)

log_event(logger, "info", EVENT_DB_INITIALIZED, url=get_safe_db_url())


class DatabaseInitError(Exception):
    """Raised when the database cannot be initialized."""


def init_db() -> None:
    """Verify the database is reachable by executing a simple query.

    Raises :class:`DatabaseInitError` with actionable guidance on failure.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("db_init_verified: url=%s", get_safe_db_url())
    except Exception as exc:
        msg = (
            f"Cannot open database at '{get_safe_db_url()}': {exc}. "
            f"Check APP_DB_PATH / APP_DATABASE_URL."
        )
        logger.error("db_init_failed: %s", msg)
        raise DatabaseInitError(msg) from exc
