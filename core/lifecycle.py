# core/lifecycle.py

"""
Lifecycle engine for the three workflow entities (visitor, payment, issue).

STATE MACHINES:
    visitor:  pending -> approved | rejected,  approved -> checked_out
    payment:  pending -> paid -> verified
    issue:    open -> in_progress | resolved,  in_progress -> resolved

RULES:
1. A (entity, from, to) pair missing from TRANSITIONS is an invalid transition,
   whoever asks. This covers no-ops, skips, reversals and terminal states.
2. The actor's role must be listed on the rule.
3. When the rule names an owner column, that column must equal the actor id.

The engine never caches rows; callers pass the freshly fetched row in.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from core.errors import AuthorizationError, InvalidTransitionError, ValidationError
from core.result import Err, Ok, Result
from core.time_utils import parse_timestamp
from models.enums import (
    IssuePriority,
    IssueStatus,
    PaymentStatus,
    Role,
    VisitorStatus,
)


VISITOR = "visitor"
PAYMENT = "payment"
ISSUE = "issue"

STATUS_ENUMS = {
    VISITOR: VisitorStatus,
    PAYMENT: PaymentStatus,
    ISSUE: IssueStatus,
}


@dataclass(frozen=True)
class TransitionRule:
    roles: FrozenSet[Role]
    owner_field: Optional[str] = None


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _rule(*roles: Role, owner_field: Optional[str] = None) -> TransitionRule:
    return TransitionRule(frozenset(roles), owner_field)


# ============================================
# TRANSITION TABLE
# ============================================
TRANSITIONS: Dict[Tuple[str, str, str], TransitionRule] = {

    # =====================================================
    # VISITOR: the host resident decides, the gate checks out
    # =====================================================
    (VISITOR, "pending", "approved"): _rule(Role.resident, owner_field="resident_id"),
    (VISITOR, "pending", "rejected"): _rule(Role.resident, owner_field="resident_id"),
    (VISITOR, "approved", "checked_out"): _rule(Role.security, Role.admin),

    # =====================================================
    # PAYMENT: resident pays, admin verifies
    # =====================================================
    (PAYMENT, "pending", "paid"): _rule(Role.resident, owner_field="resident_id"),
    (PAYMENT, "paid", "verified"): _rule(Role.admin),

    # =====================================================
    # ISSUE: admin only
    # =====================================================
    (ISSUE, "open", "in_progress"): _rule(Role.admin),
    (ISSUE, "open", "resolved"): _rule(Role.admin),
    (ISSUE, "in_progress", "resolved"): _rule(Role.admin),
}


TERMINAL_STATES = {
    VISITOR: {VisitorStatus.rejected.value, VisitorStatus.checked_out.value},
    PAYMENT: {PaymentStatus.verified.value},
    ISSUE: {IssueStatus.resolved.value},
}


# -----------------------------------------------------
# Status helpers
# -----------------------------------------------------
def parse_status(entity: str, value: Any) -> Result:
    """Coerce a raw status into the entity's enum, or a ValidationError."""
    enum_cls = STATUS_ENUMS[entity]
    try:
        return Ok(enum_cls(str(value)))
    except ValueError:
        return Err(
            ValidationError(
                f"Invalid {entity} status '{value}'. Must be one of: {', '.join(enum_cls.list())}"
            )
        )


def is_terminal(entity: str, status: Any) -> bool:
    return str(status) in TERMINAL_STATES[entity]


# -----------------------------------------------------
# Authorization
# -----------------------------------------------------
def authorize_transition(entity: str, row: Dict[str, Any], requested: Any, actor) -> Result:
    """
    Decide whether ``actor`` may move ``row`` to ``requested``.

    Returns Ok(TransitionRule) or Err(InvalidTransitionError | AuthorizationError
    | ValidationError). Nothing is written here.
    """
    parsed = parse_status(entity, requested)
    if not parsed.ok:
        return parsed

    current = str(row.get("status"))
    target = parsed.value.value

    rule = TRANSITIONS.get((entity, current, target))
    if rule is None:
        return Err(
            InvalidTransitionError(
                f"Cannot move {entity} {row.get('id')} from '{current}' to '{target}'"
            )
        )

    role = str(actor.role)
    if Role(role) not in rule.roles:
        allowed = ", ".join(sorted(r.value for r in rule.roles))
        return Err(
            AuthorizationError(
                f"Role '{role}' may not move {entity} from '{current}' to '{target}' (requires {allowed})"
            )
        )

    if rule.owner_field and row.get(rule.owner_field) != actor.id:
        return Err(
            AuthorizationError(f"Only the owning resident may move this {entity} to '{target}'")
        )

    return Ok(rule)


def allowed_transitions(entity: str, row: Dict[str, Any], actor) -> List[str]:
    """Target statuses the actor may request right now, in table order."""
    current = str(row.get("status"))
    return [
        to
        for (ent, frm, to) in TRANSITIONS
        if ent == entity and frm == current and authorize_transition(entity, row, to, actor).ok
    ]


# -----------------------------------------------------
# Derived predicates
# -----------------------------------------------------
def is_overdue(payment: Dict[str, Any], now: datetime) -> bool:
    """True iff the payment is still pending and its due date has passed."""
    if str(payment.get("status")) != PaymentStatus.pending.value:
        return False
    due = parse_timestamp(payment.get("due_date"))
    return due is not None and due < now


def effective_priority(issue: Dict[str, Any]) -> str:
    """SOS issues count as high priority whatever was stored."""
    if issue.get("is_sos"):
        return IssuePriority.high.value
    return str(issue.get("priority") or IssuePriority.medium.value)


def sort_issues(issues: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """SOS issues first, newest first; then every other issue, newest first."""
    by_recency = sorted(
        issues,
        key=lambda i: parse_timestamp(i.get("created_at")) or _EPOCH,
        reverse=True,
    )
    return [i for i in by_recency if i.get("is_sos")] + [i for i in by_recency if not i.get("is_sos")]
