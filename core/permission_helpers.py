from core.errors import AuthorizationError
from core.permissions import ROLE_PERMISSIONS
from core.result import Err, Ok, Result


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def get_effective_permissions(user) -> set:
    return set(ROLE_PERMISSIONS.get(str(user.role), []))


def has_permission(user, permission: str) -> bool:
    return permission in get_effective_permissions(user)


def check_permission(user, permission: str, action: str) -> Result:
    """Ok(None) when granted, otherwise Err(AuthorizationError) naming the action."""
    if has_permission(user, permission):
        return Ok(None)
    return Err(AuthorizationError(f"Role '{user.role}' may not {action}"))
