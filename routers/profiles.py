# routers/profiles.py

from fastapi import APIRouter, Depends
from typing import List

from core.result import unwrap_or_raise
from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.profile import ProfileRead, ProfileUpdate
from services import profile_service

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
)


@router.get("/me", response_model=ProfileRead)
def read_my_profile(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return profile_service.get_profile(store, current_user)


@router.patch("/me", response_model=ProfileRead)
def update_my_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Update full_name, phone and flat_number. Role changes are not self-service."""
    return unwrap_or_raise(profile_service.update_profile(store, current_user, payload))


@router.get("/residents", response_model=List[ProfileRead])
def list_residents(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Resident directory ordered by flat (admin / security)."""
    return unwrap_or_raise(profile_service.list_residents(store, current_user))
