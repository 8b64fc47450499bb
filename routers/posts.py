# routers/posts.py

from fastapi import APIRouter, Depends
from typing import List

from core.result import unwrap_or_raise
from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.post import CommentCreate, CommentRead, PinUpdate, PostCreate, PostRead
from services import comment_service, post_service

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)


@router.get("/", response_model=List[PostRead])
def list_posts(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Community feed: pinned posts first, newest first."""
    return post_service.list_posts(store)


@router.post("/", response_model=PostRead, status_code=201)
def create_post(
    payload: PostCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(post_service.create_post(store, current_user, payload))


@router.get("/{post_id}", response_model=PostRead)
def get_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return post_service.get_post(store, post_id)


@router.post("/{post_id}/pin", response_model=PostRead)
def pin_post(
    post_id: str,
    payload: PinUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Pin or unpin a post (admin only)."""
    return unwrap_or_raise(
        post_service.set_pinned(store, current_user, post_id, payload.is_pinned)
    )


@router.get("/{post_id}/comments", response_model=List[CommentRead])
def list_post_comments(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return comment_service.list_comments(store, "post", post_id)


@router.post("/{post_id}/comments", response_model=CommentRead, status_code=201)
def add_post_comment(
    post_id: str,
    payload: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(
        comment_service.add_comment(store, current_user, "post", post_id, payload.content)
    )
