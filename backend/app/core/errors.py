"""Error taxonomy for the posts controller.

Every failure leaving the controller is one of four kinds:
- ``bad_format``: the post id does not satisfy the storage key format
- ``bad_input``: an update request carries no recognized field
- ``not_found``: well-formed id, no matching post
- ``internal``: anything else; keeps the upstream message

The kinds are independent of FastAPI.  The HTTP layer maps them to
status codes (see ``backend.app.main``).
"""

import logging
from enum import StrEnum

from sqlalchemy.exc import DataError

from backend.app.core.logging import (
    EVENT_DB_READ_FAILED,
    EVENT_DB_WRITE_FAILED,
    log_event,
)
from backend.app.services.post_service import InvalidPostIdError, PostNotFoundError

logger = logging.getLogger(__name__)

MSG_BAD_FORMAT = "Formato inválido do ID."
MSG_BAD_INPUT = "Nenhum dado a ser atualizado. Confira as propriedades informadas."
MSG_NOT_FOUND = "Post não encontrado."
MSG_UNEXPECTED = "Ocorreu um erro inesperado. Tente novamente."


class PostErrorKind(StrEnum):
    """Closed set of externally observable failure categories."""

    bad_format = "bad_format"
    bad_input = "bad_input"
    not_found = "not_found"
    internal = "internal"


class PostsError(Exception):
    """Base class for classified controller failures."""

    kind: PostErrorKind = PostErrorKind.internal
    default_message: str = MSG_UNEXPECTED

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadFormatError(PostsError):
    kind = PostErrorKind.bad_format
    default_message = MSG_BAD_FORMAT


class BadInputError(PostsError):
    kind = PostErrorKind.bad_input
    default_message = MSG_BAD_INPUT


class NotFoundError(PostsError):
    kind = PostErrorKind.not_found
    default_message = MSG_NOT_FOUND


class InternalError(PostsError):
    kind = PostErrorKind.internal


def is_format_violation(exc: BaseException) -> bool:
    """Return True if *exc* signals an id the storage layer cannot key on.

    ``DataError`` covers databases with a native UUID column rejecting
    the literal (e.g. PostgreSQL ``invalid input syntax for type uuid``).
    """
    return isinstance(exc, (InvalidPostIdError, DataError))


def internal_failure(
    exc: Exception,
    *,
    operation: str,
    write: bool = False,
    correlation_id: str | None = None,
) -> InternalError:
    """Log *exc* and wrap it as ``internal``, keeping the original message."""
    if isinstance(exc, InternalError):
        return exc
    log_event(
        logger, "error", EVENT_DB_WRITE_FAILED if write else EVENT_DB_READ_FAILED,
        operation=operation,
        error_category=PostErrorKind.internal,
        correlation_id=correlation_id or "N/A",
        detail=f"{type(exc).__name__}: {exc}",
    )
    return InternalError(str(exc) or type(exc).__name__)


def classify_lookup_failure(
    exc: Exception,
    *,
    operation: str,
    correlation_id: str | None = None,
) -> PostsError:
    """Classify a failed ``find_one``: format violation first, else internal."""
    if is_format_violation(exc):
        return BadFormatError()
    return internal_failure(
        exc, operation=operation, correlation_id=correlation_id,
    )


def classify_write_failure(
    exc: Exception,
    *,
    operation: str,
    correlation_id: str | None = None,
) -> PostsError:
    """Classify a failed update/delete issued after the post was found.

    A row deleted between lookup and write still reads as ``not_found``.
    """
    if isinstance(exc, PostNotFoundError):
        return NotFoundError()
    return internal_failure(
        exc, operation=operation, write=True, correlation_id=correlation_id,
    )


def normalize_unknown_error(
    exc: Exception,
    *,
    operation: str,
    correlation_id: str | None = None,
) -> InternalError:
    """Normalize an exception that escaped every handler into a safe message."""
    log_event(
        logger, "exception", "unknown_error",
        operation=operation,
        error_category="unknown",
        correlation_id=correlation_id or "N/A",
        detail=f"{type(exc).__name__}: {exc}",
    )
    return InternalError(MSG_UNEXPECTED)
