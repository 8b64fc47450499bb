# services/profile_service.py

from datetime import datetime
from typing import Optional

from core.errors import ValidationError
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import PROFILES, EntityStore, Order, eq
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.enums import Role
from models.profile import ProfileRead, ProfileUpdate, SignupRequest


def get_profile(store: EntityStore, actor: CurrentUser) -> ProfileRead:
    return validate_row(ProfileRead, store.get(PROFILES, actor.id))


def update_profile(
    store: EntityStore,
    actor: CurrentUser,
    payload: ProfileUpdate,
    now: Optional[datetime] = None,
) -> Result:
    """
    Owner edits name, phone and flat. Name and flat cannot be blanked;
    an empty phone clears it.
    """
    changes = {}

    if payload.full_name is not None:
        if not payload.full_name.strip():
            return Err(ValidationError("full_name cannot be empty"))
        changes["full_name"] = payload.full_name.strip()

    if payload.flat_number is not None:
        if not payload.flat_number.strip():
            return Err(ValidationError("flat_number cannot be empty"))
        changes["flat_number"] = payload.flat_number.strip()

    if payload.phone is not None:
        changes["phone"] = payload.phone.strip() or None

    if not changes:
        return Ok(get_profile(store, actor))

    changes["updated_at"] = now or utcnow()
    row = store.update(PROFILES, actor.id, changes)
    logger.info(f"User {actor.id} updated their profile")
    return Ok(validate_row(ProfileRead, row))


def list_residents(store: EntityStore, actor: CurrentUser) -> Result:
    """Resident directory used by the visitor and dues forms."""
    allowed = check_permission(actor, "profiles:list", "list residents")
    if not allowed.ok:
        return allowed

    rows = store.query(PROFILES, [eq("role", Role.resident)], [Order("flat_number")])
    return Ok([validate_row(ProfileRead, r) for r in rows])


def create_profile(store: EntityStore, user_id: str, payload: SignupRequest) -> ProfileRead:
    """Profile row created right after the Supabase Auth user at signup."""
    row = store.insert(
        PROFILES,
        {
            "id": user_id,
            "email": payload.email.lower(),
            "full_name": payload.full_name,
            "flat_number": payload.flat_number,
            "phone": payload.phone,
            "role": payload.role,
        },
    )
    logger.info(f"Profile created for {user_id} ({payload.role})")
    return validate_row(ProfileRead, row)
