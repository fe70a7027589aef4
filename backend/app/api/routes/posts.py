"""CRUD endpoints for posts.

Routes only build the controller and shape responses; validation and
error classification live in :class:`PostsController`.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.db.session import get_db
from backend.app.models.posts import MessageResponse, Post, PostCreate, PostUpdate
from backend.app.services.post_service import PostService
from backend.app.services.posts_controller import PostsController

router = APIRouter(prefix="/api/v1/posts")


def get_posts_controller(db: Session = Depends(get_db)) -> PostsController:
    """Build a controller bound to the request's session."""
    return PostsController(PostService(db))


@router.get("", response_model=list[Post])
def list_posts(controller: PostsController = Depends(get_posts_controller)) -> list[Post]:
    """Return all posts."""
    return controller.find_all()


@router.get("/admin", response_model=list[Post])
def list_posts_admin(
    controller: PostsController = Depends(get_posts_controller),
) -> list[Post]:
    """Return all posts for the admin view."""
    return controller.find_all_admin()


@router.get("/filter", response_model=list[Post])
def filter_posts(
    search: str = Query(default=""),
    controller: PostsController = Depends(get_posts_controller),
) -> list[Post]:
    """Return posts whose title or content contains ``search``."""
    return controller.filter(search)


@router.get("/{post_id}", response_model=Post)
def get_post(
    post_id: str, controller: PostsController = Depends(get_posts_controller),
) -> Post:
    """Return a single post by ID."""
    post = controller.find_one(post_id)
    if post is None:
        raise NotFoundError()
    return post


@router.post("", response_model=MessageResponse, status_code=201)
def create_post(
    payload: PostCreate, controller: PostsController = Depends(get_posts_controller),
) -> MessageResponse:
    """Create a new post."""
    return MessageResponse(message=controller.create(payload))


@router.patch("/{post_id}", response_model=MessageResponse)
def update_post(
    post_id: str,
    payload: PostUpdate,
    controller: PostsController = Depends(get_posts_controller),
) -> MessageResponse:
    """Update the title and/or content of a post."""
    return MessageResponse(message=controller.update(post_id, payload))


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str, controller: PostsController = Depends(get_posts_controller),
) -> MessageResponse:
    """Delete a post."""
    return MessageResponse(message=controller.remove(post_id))
