# services/post_service.py

from datetime import datetime
from typing import List, Optional

from core.errors import ValidationError
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import POSTS, EntityStore, Order
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.post import PostCreate, PostRead


POST_SELECT = (
    "*, "
    "author:profiles!posts_author_id_fkey(id, full_name, flat_number, role), "
    "post_comments(count)"
)


def _to_read(row: dict) -> PostRead:
    # PostgREST returns the aggregate as [{"count": n}]
    counts = row.get("post_comments") or []
    comment_count = counts[0].get("count", 0) if counts else 0
    return validate_row(PostRead, row, comment_count=comment_count)


def list_posts(store: EntityStore) -> List[PostRead]:
    """Pinned posts first; newest first inside each group."""
    rows = store.query(
        POSTS,
        order=[Order("is_pinned", descending=True), Order("created_at", descending=True)],
        select=POST_SELECT,
    )
    return [_to_read(r) for r in rows]


def get_post(store: EntityStore, post_id: str) -> PostRead:
    return _to_read(store.get(POSTS, post_id, select=POST_SELECT))


def create_post(store: EntityStore, actor: CurrentUser, payload: PostCreate) -> Result:
    allowed = check_permission(actor, "posts:write", "create posts")
    if not allowed.ok:
        return allowed

    title = (payload.title or "").strip()
    content = (payload.content or "").strip()
    if not title:
        return Err(ValidationError("title is required"))
    if not content:
        return Err(ValidationError("content is required"))

    row = store.insert(
        POSTS,
        {
            "author_id": actor.id,
            "title": title,
            "content": content,
            "post_type": payload.post_type,
            "is_pinned": False,
        },
    )
    logger.info(f"Post {row.get('id')} ({payload.post_type}) created by {actor.id}")
    return Ok(_to_read(row))


def set_pinned(
    store: EntityStore,
    actor: CurrentUser,
    post_id: str,
    is_pinned: bool,
    now: Optional[datetime] = None,
) -> Result:
    allowed = check_permission(actor, "posts:pin", "pin posts")
    if not allowed.ok:
        return allowed

    store.get(POSTS, post_id)
    updated = store.update(
        POSTS,
        post_id,
        {"is_pinned": bool(is_pinned), "updated_at": now or utcnow()},
    )
    logger.info(f"Post {post_id} {'pinned' if is_pinned else 'unpinned'} by {actor.id}")
    return Ok(_to_read(updated))
