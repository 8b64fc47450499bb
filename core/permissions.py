# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Status transitions are governed by core.lifecycle.TRANSITIONS;
# this map covers creation and the remaining admin actions.
# Reads are scoped per service (residents see only their own visitors and dues).
ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN: society committee / management office
    # =====================================================
    "admin": [
        "posts:write", "posts:pin",
        "comments:write",
        "visitors:create",
        "payments:create",
        "issues:create", "issues:manage",
        "profiles:list",
    ],

    # =====================================================
    # SECURITY: gate staff
    # =====================================================
    "security": [
        "posts:write",
        "comments:write",
        "visitors:create",
        "issues:create",
        "profiles:list",
    ],

    # =====================================================
    # RESIDENT
    # =====================================================
    "resident": [
        "posts:write",
        "comments:write",
        "issues:create",
    ],
}
