# routers/visitors.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.result import unwrap_or_raise
from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.enums import VisitorStatus
from models.visitor import VisitorCreate, VisitorRead
from services import visitor_service

router = APIRouter(
    prefix="/visitors",
    tags=["Visitors"],
)


@router.get("/", response_model=List[VisitorRead])
def list_visitors(
    status: Optional[VisitorStatus] = Query(None, description="Filter by status"),
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """
    List visitors, newest first.

    - Residents: only visitors addressed to them
    - Security / Admin: every visitor
    """
    return visitor_service.list_visitors(store, current_user, status)


@router.post("/", response_model=VisitorRead, status_code=201)
def create_visitor(
    payload: VisitorCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Log a visitor at the gate (security / admin)."""
    return unwrap_or_raise(visitor_service.create_visitor(store, current_user, payload))


@router.get("/{visitor_id}", response_model=VisitorRead)
def get_visitor(
    visitor_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(visitor_service.get_visitor(store, current_user, visitor_id))


# -----------------------------------------------------
# Transitions
# -----------------------------------------------------
@router.post("/{visitor_id}/approve", response_model=VisitorRead)
def approve_visitor(
    visitor_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Host resident lets the visitor in."""
    return unwrap_or_raise(visitor_service.approve(store, current_user, visitor_id))


@router.post("/{visitor_id}/reject", response_model=VisitorRead)
def reject_visitor(
    visitor_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(visitor_service.reject(store, current_user, visitor_id))


@router.post("/{visitor_id}/checkout", response_model=VisitorRead)
def checkout_visitor(
    visitor_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Security / admin records the visitor leaving."""
    return unwrap_or_raise(visitor_service.checkout(store, current_user, visitor_id))
