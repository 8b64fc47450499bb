# services/comment_service.py

from typing import List

from core.errors import ValidationError
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import ISSUE_COMMENTS, ISSUES, POST_COMMENTS, POSTS, EntityStore, Order, eq
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.post import CommentRead


# parent kind -> (parent collection, comment collection, foreign key, author fk)
THREADS = {
    "post": (POSTS, POST_COMMENTS, "post_id", "post_comments_author_id_fkey"),
    "issue": (ISSUES, ISSUE_COMMENTS, "issue_id", "issue_comments_author_id_fkey"),
}


def _select(author_fk: str) -> str:
    return f"*, author:profiles!{author_fk}(id, full_name, flat_number, role)"


def list_comments(store: EntityStore, parent: str, parent_id: str) -> List[CommentRead]:
    """Oldest first, so a thread reads top to bottom."""
    parent_table, table, fk, author_fk = THREADS[parent]
    store.get(parent_table, parent_id)

    rows = store.query(
        table,
        [eq(fk, parent_id)],
        [Order("created_at")],
        select=_select(author_fk),
    )
    return [validate_row(CommentRead, r) for r in rows]


def add_comment(
    store: EntityStore,
    actor: CurrentUser,
    parent: str,
    parent_id: str,
    content: str,
) -> Result:
    allowed = check_permission(actor, "comments:write", "comment")
    if not allowed.ok:
        return allowed

    text = (content or "").strip()
    if not text:
        return Err(ValidationError("content is required"))

    parent_table, table, fk, _ = THREADS[parent]
    store.get(parent_table, parent_id)

    row = store.insert(table, {fk: parent_id, "author_id": actor.id, "content": text})
    logger.info(f"{actor.id} commented on {parent} {parent_id}")
    return Ok(validate_row(CommentRead, row))
