"""Request validation and error translation for the posts resource.

The controller sits between the HTTP routes and a :class:`PostServiceProtocol`
implementation.  It validates request shape, delegates to the service,
and turns every failure into one of the kinds in
:mod:`backend.app.core.errors`.  It holds no state beyond the service
reference passed to the constructor.
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol

from backend.app.core.errors import (
    BadInputError,
    NotFoundError,
    PostErrorKind,
    PostsError,
    classify_lookup_failure,
    classify_write_failure,
    internal_failure,
)
from backend.app.core.logging import EVENT_POST_REQUEST_REJECTED, log_event
from backend.app.models.posts import Post, PostCreate, PostUpdate

logger = logging.getLogger(__name__)

MSG_CREATED = "Post criado com sucesso!"
MSG_UPDATED = "Post atualizado com sucesso!"
MSG_REMOVED = "Post excluído com sucesso!"


class PostServiceProtocol(Protocol):
    """Persistence operations the controller depends on."""

    def find_all(self) -> list[Post]: ...

    def filter(self, term: str) -> list[Post]: ...

    def find_one(self, post_id: str) -> Post | None: ...

    def create(self, payload: PostCreate) -> object: ...

    def update(self, post_id: str, payload: PostUpdate) -> object: ...

    def remove(self, post_id: str) -> None: ...


def _new_correlation_id() -> str:
    return str(uuid.uuid4())


class PostsController:
    """Validates post requests and classifies service failures."""

    def __init__(self, service: PostServiceProtocol) -> None:
        self._service = service

    def find_all(self) -> list[Post]:
        try:
            return self._service.find_all()
        except Exception as exc:
            raise internal_failure(
                exc, operation="find_all", correlation_id=_new_correlation_id(),
            ) from exc

    def find_all_admin(self) -> list[Post]:
        """Admin listing; privilege checks happen before this is reached."""
        try:
            return self._service.find_all()
        except Exception as exc:
            raise internal_failure(
                exc, operation="find_all_admin", correlation_id=_new_correlation_id(),
            ) from exc

    def filter(self, term: str) -> list[Post]:
        try:
            return self._service.filter(term)
        except Exception as exc:
            raise internal_failure(
                exc, operation="filter", correlation_id=_new_correlation_id(),
            ) from exc

    def find_one(self, post_id: str) -> Post | None:
        """Return the post, or ``None`` when no post has *post_id*.

        Raises:
            BadFormatError: *post_id* is not a valid storage key.
            InternalError: Any other service failure.
        """
        return self._lookup(post_id, operation="find_one")

    def create(self, payload: PostCreate) -> str:
        try:
            self._service.create(payload)
        except Exception as exc:
            raise internal_failure(
                exc, operation="create", write=True,
                correlation_id=_new_correlation_id(),
            ) from exc
        return MSG_CREATED

    def update(self, post_id: str, payload: PostUpdate) -> str:
        """Update a post after checking payload shape, then existence.

        The payload check runs first and never touches the service.
        """
        if not payload.recognized_fields():
            log_event(
                logger, "info", EVENT_POST_REQUEST_REJECTED,
                operation="update", id=post_id, reason="empty_payload",
            )
            raise BadInputError()

        self._require_existing(post_id, operation="update")
        try:
            self._service.update(post_id, payload)
        except Exception as exc:
            raise classify_write_failure(
                exc, operation="update", correlation_id=_new_correlation_id(),
            ) from exc
        return MSG_UPDATED

    def remove(self, post_id: str) -> str:
        self._require_existing(post_id, operation="remove")
        try:
            self._service.remove(post_id)
        except Exception as exc:
            raise classify_write_failure(
                exc, operation="remove", correlation_id=_new_correlation_id(),
            ) from exc
        return MSG_REMOVED

    def _lookup(self, post_id: str, *, operation: str) -> Post | None:
        try:
            return self._service.find_one(post_id)
        except Exception as exc:
            error = classify_lookup_failure(
                exc, operation=operation, correlation_id=_new_correlation_id(),
            )
            self._log_rejection(error, operation=operation, post_id=post_id)
            raise error from exc

    def _require_existing(self, post_id: str, *, operation: str) -> Post:
        post = self._lookup(post_id, operation=operation)
        if post is None:
            error = NotFoundError()
            self._log_rejection(error, operation=operation, post_id=post_id)
            raise error
        return post

    @staticmethod
    def _log_rejection(error: PostsError, *, operation: str, post_id: str) -> None:
        if error.kind is not PostErrorKind.internal:
            log_event(
                logger, "info", EVENT_POST_REQUEST_REJECTED,
                operation=operation, id=post_id, reason=error.kind,
            )
