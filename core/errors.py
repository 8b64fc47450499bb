# core/errors.py

from fastapi import HTTPException


# ============================================================
# Domain error taxonomy
# ============================================================

class SocietyError(Exception):
    """Base class for every error the core reports to callers."""

    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(SocietyError):
    """A required field is missing or malformed."""

    status_code = 400
    kind = "validation_error"


class AuthorizationError(SocietyError):
    """The actor's role or ownership does not permit the action."""

    status_code = 403
    kind = "authorization_error"


class InvalidTransitionError(SocietyError):
    """The requested status is not reachable from the current status."""

    status_code = 409
    kind = "invalid_transition"


class NotFoundError(SocietyError):
    """A referenced entity id does not exist."""

    status_code = 404
    kind = "not_found"


class StoreError(SocietyError):
    """The backend call failed (network / PostgREST / malformed row)."""

    status_code = 502
    kind = "store_error"


# ============================================================
# Supabase error helpers
# ============================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST APIError
    if hasattr(error, "message"):
        try:
            return str(error.message)
        except Exception:
            pass

    # Case 2: errors with args (common)
    if hasattr(error, "args") and error.args:
        try:
            return str(error.args[0])
        except Exception:
            pass

    # Case 3: Plain string fallback
    try:
        return str(error)
    except Exception:
        return "Unknown Supabase error"


def to_http_exception(error: SocietyError) -> HTTPException:
    """Map a domain error onto the HTTP status the API reports."""
    return HTTPException(status_code=error.status_code, detail=error.message)
