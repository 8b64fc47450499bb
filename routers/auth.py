from fastapi import APIRouter, HTTPException, Depends, Request

from core.config import settings
from core.errors import extract_supabase_error
from core.logging_config import logger
from core.rate_limiter import require_rate_limit
from core.store import EntityStore
from core.supabase_client import get_anon_client, get_supabase_client
from dependencies.store import get_store
from models.profile import LoginRequest, ProfileRead, SignupRequest, TokenResponse
from services import profile_service


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate user")
def login(payload: LoginRequest, request: Request):

    email = payload.email.strip().lower()

    require_rate_limit(
        request,
        identifier=f"login:{email}",
        max_requests=settings.LOGIN_RATE_LIMIT,
        window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS,
    )

    client = get_anon_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        # Log the failure type only; never echo auth details back
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    session = getattr(response, "session", None)
    if not session or not session.access_token:
        raise HTTPException(401, "Invalid email or password")

    return TokenResponse(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
    )


# ============================================================
# SIGNUP (auth user + profile row)
# ============================================================
@router.post("/signup", response_model=ProfileRead, status_code=201, summary="Register a member")
def signup(payload: SignupRequest, store: EntityStore = Depends(get_store)):
    """
    Creates the Supabase Auth user, then the matching `profiles` row.
    If the profile insert fails the auth user is removed again.
    """
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    email = payload.email.strip().lower()

    try:
        result = client.auth.admin.create_user(
            {
                "email": email,
                "password": payload.password,
                "email_confirm": True,
                "user_metadata": {"full_name": payload.full_name},
            }
        )
    except Exception as e:
        detail = extract_supabase_error(e)
        logger.warning(f"Signup failed for {email}: {detail}")
        if "already" in detail.lower() or "exists" in detail.lower():
            raise HTTPException(400, "An account with this email already exists")
        raise HTTPException(400, f"Signup failed: {detail}")

    user_id = result.user.id

    try:
        return profile_service.create_profile(store, user_id, payload)
    except Exception:
        logger.error(f"Profile creation failed for {user_id}; removing auth user", exc_info=True)
        try:
            client.auth.admin.delete_user(user_id)
        except Exception as cleanup_error:
            logger.error(f"Could not remove orphan auth user {user_id}: {cleanup_error}")
        raise
