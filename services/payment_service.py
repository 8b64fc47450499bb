# services/payment_service.py

"""
Maintenance dues.

    pending -> paid       resident who owns the due, with a transaction reference
    paid    -> verified   admin

The society never moves money; ``transaction_id`` is whatever reference the
resident got from their bank / UPI app.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from core.errors import AuthorizationError, ValidationError
from core.lifecycle import PAYMENT, allowed_transitions, authorize_transition, is_overdue
from core.logging_config import logger
from core.permission_helpers import check_permission
from core.result import Err, Ok, Result
from core.store import PAYMENTS, PROFILES, EntityStore, Order, eq
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.common import validate_row
from models.enums import PaymentStatus, Role
from models.payment import PaymentCreate, PaymentRead, PaymentSummary


PAYMENT_SELECT = "*, resident:profiles!payments_resident_id_fkey(id, full_name, flat_number, role)"


# ============================================================
# Helpers
# ============================================================
def _to_read(row: dict, actor: CurrentUser, now: datetime) -> PaymentRead:
    return validate_row(
        PaymentRead,
        row,
        is_overdue=is_overdue(row, now),
        allowed_actions=allowed_transitions(PAYMENT, row, actor),
    )


def _amount(value) -> Decimal:
    return Decimal(str(value))


# ============================================================
# Reads
# ============================================================
def list_payments(
    store: EntityStore,
    actor: CurrentUser,
    now: Optional[datetime] = None,
) -> List[PaymentRead]:
    """
    Residents see their own dues. Admin and security see every resident's
    dues; security only reads them and has no payment transitions.
    """
    now = now or utcnow()
    filters = []
    if actor.role == Role.resident:
        filters.append(eq("resident_id", actor.id))

    rows = store.query(
        PAYMENTS,
        filters,
        [Order("due_date", descending=True)],
        select=PAYMENT_SELECT,
    )
    return [_to_read(r, actor, now) for r in rows]


def get_payment(
    store: EntityStore,
    actor: CurrentUser,
    payment_id: str,
    now: Optional[datetime] = None,
) -> Result:
    row = store.get(PAYMENTS, payment_id, select=PAYMENT_SELECT)
    if actor.role == Role.resident and row.get("resident_id") != actor.id:
        return Err(AuthorizationError("You can only view your own dues"))
    return Ok(_to_read(row, actor, now or utcnow()))


def payment_summary(
    store: EntityStore,
    actor: CurrentUser,
    now: Optional[datetime] = None,
) -> PaymentSummary:
    """Outstanding total for the actor's own pending dues."""
    now = now or utcnow()
    rows = store.query(
        PAYMENTS,
        [eq("resident_id", actor.id), eq("status", PaymentStatus.pending)],
    )
    return PaymentSummary(
        outstanding_total=sum((_amount(r["amount"]) for r in rows), Decimal("0")),
        pending_count=len(rows),
        overdue_count=sum(1 for r in rows if is_overdue(r, now)),
    )


# ============================================================
# Create (admin)
# ============================================================
def create_payments(
    store: EntityStore,
    actor: CurrentUser,
    payload: PaymentCreate,
    now: Optional[datetime] = None,
) -> Result:
    """
    Create a due for one resident, or for every resident at once.

    The batch goes out as a single multi-row insert, so either every
    resident gets a row or none does.
    """
    allowed = check_permission(actor, "payments:create", "create dues")
    if not allowed.ok:
        return allowed

    try:
        amount = _amount(payload.amount)
    except (InvalidOperation, ValueError):
        return Err(ValidationError("amount must be a number"))
    if amount < 0:
        return Err(ValidationError("amount must not be negative"))

    description = (payload.description or "").strip()
    if not description:
        return Err(ValidationError("description is required"))

    base = {
        "amount": amount,
        "description": description,
        "due_date": payload.due_date,
        "status": PaymentStatus.pending.value,
    }

    if payload.apply_to_all:
        residents = store.query(
            PROFILES,
            [eq("role", Role.resident)],
            [Order("flat_number")],
        )
        if not residents:
            return Err(ValidationError("There are no residents to bill"))

        rows = store.insert(PAYMENTS, [{**base, "resident_id": r["id"]} for r in residents])
        logger.info(f"Admin {actor.id} created {len(rows)} dues: {description}")
    else:
        if not payload.resident_id:
            return Err(ValidationError("resident_id is required unless apply_to_all is set"))
        store.get(PROFILES, payload.resident_id)

        rows = [store.insert(PAYMENTS, {**base, "resident_id": payload.resident_id})]
        logger.info(f"Admin {actor.id} created due {rows[0].get('id')} for {payload.resident_id}")

    now = now or utcnow()
    return Ok([_to_read(r, actor, now) for r in rows])


# ============================================================
# Transitions
# ============================================================
def mark_paid(
    store: EntityStore,
    actor: CurrentUser,
    payment_id: str,
    transaction_id: Optional[str],
    now: Optional[datetime] = None,
) -> Result:
    reference = (transaction_id or "").strip()
    if not reference:
        return Err(ValidationError("A transaction reference is required"))

    row = store.get(PAYMENTS, payment_id)
    decision = authorize_transition(PAYMENT, row, PaymentStatus.paid, actor)
    if not decision.ok:
        return decision

    now = now or utcnow()
    updated = store.update(
        PAYMENTS,
        payment_id,
        {
            "status": PaymentStatus.paid.value,
            "transaction_id": reference,
            "paid_at": now,
        },
    )
    logger.info(f"Payment {payment_id} marked paid by {actor.id} (ref {reference})")
    return Ok(_to_read(updated, actor, now))


def verify_payment(
    store: EntityStore,
    actor: CurrentUser,
    payment_id: str,
    now: Optional[datetime] = None,
) -> Result:
    row = store.get(PAYMENTS, payment_id)
    decision = authorize_transition(PAYMENT, row, PaymentStatus.verified, actor)
    if not decision.ok:
        return decision

    now = now or utcnow()
    updated = store.update(
        PAYMENTS,
        payment_id,
        {
            "status": PaymentStatus.verified.value,
            "verified_by": actor.id,
            "verified_at": now,
        },
    )
    logger.info(f"Payment {payment_id} verified by admin {actor.id}")
    return Ok(_to_read(updated, actor, now))
