# routers/payments.py

from fastapi import APIRouter, Depends
from typing import List

from core.result import unwrap_or_raise
from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.payment import MarkPaidRequest, PaymentCreate, PaymentRead, PaymentSummary
from services import payment_service

router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
)


@router.get("/", response_model=List[PaymentRead])
def list_payments(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Dues ordered by due date (latest first). Each row carries is_overdue."""
    return payment_service.list_payments(store, current_user)


@router.get("/summary", response_model=PaymentSummary)
def get_summary(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Outstanding total of the caller's own pending dues."""
    return payment_service.payment_summary(store, current_user)


@router.post("/", response_model=List[PaymentRead], status_code=201)
def create_payments(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """
    Create maintenance dues (admin only).

    - `resident_id`: one due for that resident
    - `apply_to_all=true`: one due per resident, all or nothing
    """
    return unwrap_or_raise(payment_service.create_payments(store, current_user, payload))


@router.get("/{payment_id}", response_model=PaymentRead)
def get_payment(
    payment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(payment_service.get_payment(store, current_user, payment_id))


@router.post("/{payment_id}/pay", response_model=PaymentRead)
def mark_paid(
    payment_id: str,
    payload: MarkPaidRequest,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(
        payment_service.mark_paid(store, current_user, payment_id, payload.transaction_id)
    )


@router.post("/{payment_id}/verify", response_model=PaymentRead)
def verify_payment(
    payment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(payment_service.verify_payment(store, current_user, payment_id))
