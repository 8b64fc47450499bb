# services/visitor_service.py

from datetime import datetime
from typing import List, Optional

from core.errors import AuthorizationError, ValidationError
from core.lifecycle import VISITOR, allowed_transitions, authorize_transition, parse_status
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import PROFILES, VISITORS, EntityStore, Order, eq
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.enums import Role, VisitorStatus
from models.visitor import VisitorCreate, VisitorRead


VISITOR_SELECT = "*, resident:profiles!visitors_resident_id_fkey(id, full_name, flat_number, role)"


# ============================================================
# Helpers
# ============================================================
def _to_read(row: dict, actor: CurrentUser) -> VisitorRead:
    return validate_row(
        VisitorRead,
        row,
        allowed_actions=allowed_transitions(VISITOR, row, actor),
    )


def _can_view(row: dict, actor: CurrentUser) -> bool:
    # Residents only ever see visitors addressed to them
    if actor.role == Role.resident:
        return row.get("resident_id") == actor.id
    return True


# ============================================================
# Reads
# ============================================================
def list_visitors(
    store: EntityStore,
    actor: CurrentUser,
    status: Optional[VisitorStatus] = None,
) -> List[VisitorRead]:
    filters = []
    if actor.role == Role.resident:
        filters.append(eq("resident_id", actor.id))
    if status:
        filters.append(eq("status", status))

    rows = store.query(
        VISITORS,
        filters,
        [Order("created_at", descending=True)],
        select=VISITOR_SELECT,
    )
    return [_to_read(r, actor) for r in rows]


def get_visitor(store: EntityStore, actor: CurrentUser, visitor_id: str) -> Result:
    row = store.get(VISITORS, visitor_id, select=VISITOR_SELECT)
    if not _can_view(row, actor):
        return Err(AuthorizationError("You can only view visitors for your own flat"))
    return Ok(_to_read(row, actor))


# ============================================================
# Create (gate staff)
# ============================================================
def create_visitor(
    store: EntityStore,
    actor: CurrentUser,
    payload: VisitorCreate,
    now: Optional[datetime] = None,
) -> Result:
    """
    Log a visitor at the gate. Status always starts as pending.

    When a host resident is named, the profile must exist and its flat
    number is used unless one was typed in.
    """
    allowed = check_permission(actor, "visitors:create", "log visitors")
    if not allowed.ok:
        return allowed

    name = (payload.visitor_name or "").strip()
    phone = (payload.visitor_phone or "").strip()
    if not name:
        return Err(ValidationError("visitor_name is required"))
    if not phone:
        return Err(ValidationError("visitor_phone is required"))

    flat_number = (payload.flat_number or "").strip() or None

    if payload.resident_id:
        resident = store.get(PROFILES, payload.resident_id)
        if resident.get("role") != Role.resident.value:
            return Err(ValidationError(f"Profile {payload.resident_id} is not a resident"))
        flat_number = flat_number or resident.get("flat_number")

    if not flat_number:
        return Err(ValidationError("flat_number is required when no resident is selected"))

    now = now or utcnow()
    row = store.insert(
        VISITORS,
        {
            "visitor_name": name,
            "visitor_phone": phone,
            "flat_number": flat_number,
            "resident_id": payload.resident_id,
            "purpose": payload.purpose,
            "status": VisitorStatus.pending.value,
            "check_in_time": payload.check_in_time or now,
            "added_by": actor.id,
        },
    )

    logger.info(f"{actor.role} {actor.id} logged visitor {row.get('id')} for flat {flat_number}")
    return Ok(_to_read(row, actor))


# ============================================================
# Transitions
# ============================================================
def transition_visitor(
    store: EntityStore,
    actor: CurrentUser,
    visitor_id: str,
    requested,
    now: Optional[datetime] = None,
) -> Result:
    """
    Move a visitor to ``requested``. checked_out also stamps
    check_out_time in the same update.
    """
    row = store.get(VISITORS, visitor_id)

    decision = authorize_transition(VISITOR, row, requested, actor)
    if not decision.ok:
        logger.info(f"Visitor {visitor_id} transition refused for {actor.id}: {decision.error}")
        return decision

    target = parse_status(VISITOR, requested).value
    changes = {"status": target.value}
    if target == VisitorStatus.checked_out:
        changes["check_out_time"] = now or utcnow()

    updated = store.update(VISITORS, visitor_id, changes)
    logger.info(f"Visitor {visitor_id} moved {row.get('status')} -> {target.value} by {actor.id}")
    return Ok(_to_read(updated, actor))


def approve(store: EntityStore, actor: CurrentUser, visitor_id: str) -> Result:
    return transition_visitor(store, actor, visitor_id, VisitorStatus.approved)


def reject(store: EntityStore, actor: CurrentUser, visitor_id: str) -> Result:
    return transition_visitor(store, actor, visitor_id, VisitorStatus.rejected)


def checkout(
    store: EntityStore,
    actor: CurrentUser,
    visitor_id: str,
    now: Optional[datetime] = None,
) -> Result:
    return transition_visitor(store, actor, visitor_id, VisitorStatus.checked_out, now=now)
