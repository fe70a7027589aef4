"""SQLAlchemy-backed persistence service for posts.

All methods operate on the ``Session`` handed to the constructor so that
the request scope (one session per request) stays under the caller's
control.  Lookups return ``None`` for a missing row instead of raising;
the controller decides what an absent post means for each operation.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.logging import (
    EVENT_POST_CREATED,
    EVENT_POST_DELETED,
    EVENT_POST_UPDATED,
    log_event,
)
from backend.app.models.post_record import PostRecord
from backend.app.models.posts import Post, PostCreate, PostUpdate

logger = logging.getLogger(__name__)


class InvalidPostIdError(Exception):
    """Raised when a post id does not match the storage key format (UUID)."""


class PostNotFoundError(Exception):
    """Raised when a write targets a post that no longer exists."""


def _normalize_id(post_id: str) -> str:
    """Return the canonical UUID text for *post_id*.

    Raises:
        InvalidPostIdError: If *post_id* is not a UUID.
    """
    try:
        return str(uuid.UUID(str(post_id)))
    except (ValueError, TypeError) as exc:
        raise InvalidPostIdError(f"invalid post id: {post_id!r}") from exc


def _row_to_post(row: PostRecord) -> Post:
    return Post.model_validate(row)


class PostService:
    """Persistence access for posts."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_all(self) -> list[Post]:
        """Return every post, newest first."""
        rows = (
            self._db.query(PostRecord)
            .order_by(PostRecord.created_at.desc(), PostRecord.id)
            .all()
        )
        return [_row_to_post(r) for r in rows]

    def filter(self, term: str) -> list[Post]:
        """Return posts whose title or content contains *term* (case-insensitive).

        An empty term matches every post.
        """
        query = self._db.query(PostRecord)
        if term:
            # autoescape keeps % and _ in the term literal
            query = query.filter(
                or_(
                    PostRecord.title.icontains(term, autoescape=True),
                    PostRecord.content.icontains(term, autoescape=True),
                )
            )
        rows = query.order_by(PostRecord.created_at.desc(), PostRecord.id).all()
        return [_row_to_post(r) for r in rows]

    def find_one(self, post_id: str) -> Post | None:
        """Fetch a single post, or ``None`` if it does not exist.

        Raises:
            InvalidPostIdError: If *post_id* is not a UUID.
        """
        row = self._db.get(PostRecord, _normalize_id(post_id))
        if row is None:
            return None
        return _row_to_post(row)

    def create(self, payload: PostCreate) -> Post:
        """Insert a new post, generating an id when the payload has none.

        Raises:
            InvalidPostIdError: If ``payload.id`` is given but is not a UUID.
        """
        post_id = _normalize_id(payload.id) if payload.id else str(uuid.uuid4())
        row = PostRecord(
            id=post_id,
            title=payload.title,
            content=payload.content,
            user_id=payload.user_id,
            created_at=datetime.now(UTC),
        )
        self._db.add(row)
        self._commit()
        log_event(
            logger, "info", EVENT_POST_CREATED,
            id=post_id,
            user_id=payload.user_id,
            content_len=len(payload.content),
        )
        return _row_to_post(row)

    def update(self, post_id: str, payload: PostUpdate) -> Post:
        """Apply the recognized fields of *payload* to an existing post.

        Raises:
            InvalidPostIdError: If *post_id* is not a UUID.
            PostNotFoundError: If the post does not exist.
        """
        row = self._get_required(post_id)
        changes = payload.recognized_fields()
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = datetime.now(UTC)
        self._commit()
        log_event(
            logger, "info", EVENT_POST_UPDATED,
            id=row.id,
            fields=",".join(sorted(changes)),
        )
        return _row_to_post(row)

    def remove(self, post_id: str) -> None:
        """Delete a post.

        Raises:
            InvalidPostIdError: If *post_id* is not a UUID.
            PostNotFoundError: If the post does not exist.
        """
        row = self._get_required(post_id)
        self._db.delete(row)
        self._commit()
        log_event(logger, "info", EVENT_POST_DELETED, id=row.id)

    def _get_required(self, post_id: str) -> PostRecord:
        normalized = _normalize_id(post_id)
        row = self._db.get(PostRecord, normalized)
        if row is None:
            raise PostNotFoundError(f"Post not found: id={normalized}")
        return row

    def _commit(self) -> None:
        try:
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            raise
