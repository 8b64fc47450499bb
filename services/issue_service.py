# services/issue_service.py

from datetime import datetime
from typing import List, Optional

from core.errors import InvalidTransitionError, ValidationError
from core.lifecycle import (
    ISSUE,
    allowed_transitions,
    authorize_transition,
    effective_priority,
    is_terminal,
    parse_status,
    sort_issues,
)
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import ISSUES, PROFILES, EntityStore, Order, eq
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.enums import IssueCategory, IssuePriority, IssueStatus
from models.issue import IssueCreate, IssueRead


ISSUE_SELECT = (
    "*, "
    "reporter:profiles!issues_reported_by_fkey(id, full_name, flat_number), "
    "assignee:profiles!issues_assigned_to_fkey(id, full_name, role)"
)


def _to_read(row: dict, actor: CurrentUser) -> IssueRead:
    return validate_row(
        IssueRead,
        row,
        effective_priority=effective_priority(row),
        allowed_actions=allowed_transitions(ISSUE, row, actor),
    )


# ============================================================
# Reads
# ============================================================
def list_issues(
    store: EntityStore,
    actor: CurrentUser,
    status: Optional[IssueStatus] = None,
    category: Optional[IssueCategory] = None,
) -> List[IssueRead]:
    """
    Every role sees the whole issue board.
    Ordering: SOS issues first (newest first), then the rest newest first.
    Only status and category are filterable.
    """
    filters = []
    if status:
        filters.append(eq("status", status))
    if category:
        filters.append(eq("category", category))

    rows = store.query(
        ISSUES,
        filters,
        [Order("is_sos", descending=True), Order("created_at", descending=True)],
        select=ISSUE_SELECT,
    )
    return [_to_read(r, actor) for r in sort_issues(rows)]


def get_issue(store: EntityStore, actor: CurrentUser, issue_id: str) -> IssueRead:
    return _to_read(store.get(ISSUES, issue_id, select=ISSUE_SELECT), actor)


# ============================================================
# Create (any authenticated actor)
# ============================================================
def create_issue(store: EntityStore, actor: CurrentUser, payload: IssueCreate) -> Result:
    allowed = check_permission(actor, "issues:create", "report issues")
    if not allowed.ok:
        return allowed

    title = (payload.title or "").strip()
    description = (payload.description or "").strip()
    if not title:
        return Err(ValidationError("title is required"))
    if not description:
        return Err(ValidationError("description is required"))

    # SOS at creation always means high priority
    priority = IssuePriority.high if payload.is_sos else payload.priority

    row = store.insert(
        ISSUES,
        {
            "reported_by": actor.id,
            "category": payload.category,
            "title": title,
            "description": description,
            "status": IssueStatus.open.value,
            "priority": priority,
            "is_sos": payload.is_sos,
        },
    )

    if payload.is_sos:
        logger.warning(f"SOS issue {row.get('id')} raised by {actor.id}: {title}")
    else:
        logger.info(f"Issue {row.get('id')} reported by {actor.id}")
    return Ok(_to_read(row, actor))


# ============================================================
# Admin actions
# ============================================================
def transition_issue(
    store: EntityStore,
    actor: CurrentUser,
    issue_id: str,
    requested,
    now: Optional[datetime] = None,
) -> Result:
    row = store.get(ISSUES, issue_id)

    decision = authorize_transition(ISSUE, row, requested, actor)
    if not decision.ok:
        return decision

    target = parse_status(ISSUE, requested).value
    updated = store.update(
        ISSUES,
        issue_id,
        {"status": target.value, "updated_at": now or utcnow()},
    )
    logger.info(f"Issue {issue_id} moved {row.get('status')} -> {target.value} by {actor.id}")
    return Ok(_to_read(updated, actor))


def _guard_admin_edit(row: dict, actor: CurrentUser, action: str) -> Result:
    # A resolved issue is frozen, whoever asks
    if is_terminal(ISSUE, row.get("status")):
        return Err(InvalidTransitionError(f"Issue {row.get('id')} is resolved; cannot {action}"))
    return check_permission(actor, "issues:manage", action)


def set_sos(
    store: EntityStore,
    actor: CurrentUser,
    issue_id: str,
    is_sos: bool,
    now: Optional[datetime] = None,
) -> Result:
    """Toggle the SOS flag. Stored priority is left untouched."""
    row = store.get(ISSUES, issue_id)

    guard = _guard_admin_edit(row, actor, "change the SOS flag")
    if not guard.ok:
        return guard

    updated = store.update(
        ISSUES,
        issue_id,
        {"is_sos": bool(is_sos), "updated_at": now or utcnow()},
    )
    logger.info(f"Issue {issue_id} SOS set to {bool(is_sos)} by {actor.id}")
    return Ok(_to_read(updated, actor))


def assign_issue(
    store: EntityStore,
    actor: CurrentUser,
    issue_id: str,
    assignee_id: Optional[str],
    now: Optional[datetime] = None,
) -> Result:
    row = store.get(ISSUES, issue_id)

    guard = _guard_admin_edit(row, actor, "reassign it")
    if not guard.ok:
        return guard

    if assignee_id:
        store.get(PROFILES, assignee_id)

    updated = store.update(
        ISSUES,
        issue_id,
        {"assigned_to": assignee_id or None, "updated_at": now or utcnow()},
    )
    logger.info(f"Issue {issue_id} assigned to {assignee_id or 'nobody'} by {actor.id}")
    return Ok(_to_read(updated, actor))
