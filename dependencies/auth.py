from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from core.errors import NotFoundError, StoreError
from core.logging_config import logger
from core.store import PROFILES, EntityStore
from core.supabase_client import get_supabase_client
from dependencies.store import get_store
from models.enums import Role


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (Identity Context)
# ============================================================
class CurrentUser(BaseModel):
    """
    The authenticated actor. Built once per request and passed
    explicitly into every service call.
    """
    id: str
    email: str
    role: Role

    full_name: Optional[str] = None
    flat_number: Optional[str] = None
    phone: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase: validates JWT + loads profile row)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    store: EntityStore = Depends(get_store),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized

    auth_user = auth_resp.user

    # ---------------------------------------------------------
    # Role and flat come from the profiles row, not user metadata
    # ---------------------------------------------------------
    try:
        profile = store.get(PROFILES, auth_user.id)
    except NotFoundError:
        logger.warning(f"Authenticated user {auth_user.id} has no profile")
        raise HTTPException(403, "No profile found for this account")
    except StoreError as e:
        raise HTTPException(502, str(e))

    return build_current_user(profile, fallback_email=auth_user.email)


def build_current_user(profile: dict, fallback_email: Optional[str] = None) -> CurrentUser:
    role = profile.get("role") or Role.resident.value
    if role not in Role.list():
        role = Role.resident.value

    return CurrentUser(
        id=profile["id"],
        email=profile.get("email") or fallback_email or "",
        role=role,
        full_name=profile.get("full_name"),
        flat_number=profile.get("flat_number"),
        phone=profile.get("phone"),
    )
