"""Structured logging baseline and event taxonomy.

Event taxonomy::

    app_start: application process starting
    config_loaded: settings resolved successfully
    db_initialized: engine created, DB URL resolved
    db_migration_started: alembic upgrade beginning
    db_migration_succeeded: alembic upgrade completed
    db_migration_failed: alembic upgrade error (with traceback)
    db_read_failed: service lookup/list error
    db_write_failed: service create/update/delete error
    post_created: post inserted
    post_updated: post fields changed
    post_deleted: post removed
    post_request_rejected: request refused before reaching the service

Rules:
    - Never log credentials (database URLs may carry passwords).
    - Log post IDs and content *lengths*, not raw titles or bodies.

Usage::

    from backend.app.core.logging import log_event
    log_event(logger, "error", "db_write_failed",
              operation="update", error_category="internal")
"""

import logging
import sys

# Canonical event names for grep-ability and observability.
EVENT_APP_START = "app_start"
EVENT_CONFIG_LOADED = "config_loaded"
EVENT_DB_INITIALIZED = "db_initialized"
EVENT_DB_MIGRATION_STARTED = "db_migration_started"
EVENT_DB_MIGRATION_SUCCEEDED = "db_migration_succeeded"
EVENT_DB_MIGRATION_FAILED = "db_migration_failed"
EVENT_DB_READ_FAILED = "db_read_failed"
EVENT_DB_WRITE_FAILED = "db_write_failed"
EVENT_POST_CREATED = "post_created"
EVENT_POST_UPDATED = "post_updated"
EVENT_POST_DELETED = "post_deleted"
EVENT_POST_REQUEST_REJECTED = "post_request_rejected"


_HANDLER_ATTR = "_posts_api"


def setup_logging(level: int = logging.INFO) -> None:
    """Attach the posts API stdout handler to the root logger.

    Called at import of ``backend.app.main`` and again after each Alembic
    upgrade, since ``fileConfig()`` in ``alembic/env.py`` drops foreign
    handlers.  The handler is tagged so repeat calls do not duplicate it.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in root.handlers:
        if getattr(h, _HANDLER_ATTR, False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    level: str,
    event_name: str,
    **kwargs: object,
) -> None:
    """Emit a structured log line with consistent ``event_name: key=value`` format.

    Parameters
    ----------
    logger:
        The logger instance (provides the component via ``logger.name``).
    level:
        Log level name: ``"info"``, ``"warning"``, ``"error"``, or ``"exception"``.
    event_name:
        Canonical event name (e.g. ``"db_write_failed"``).
    **kwargs:
        Arbitrary key-value pairs appended as ``key=value``.
    """
    parts = " ".join(f"{k}={v}" for k, v in kwargs.items())
    message = f"{event_name}: {parts}" if parts else event_name
    log_fn = getattr(logger, level, logger.info)
    log_fn(message)
