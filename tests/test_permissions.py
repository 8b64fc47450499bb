# tests/test_permissions.py

"""
Tests for role permissions outside the status transition table.
"""

from core.permission_helpers import check_permission, has_permission
from core.permissions import ROLE_PERMISSIONS
from models.enums import Role


def test_every_role_has_an_entry():
    assert set(ROLE_PERMISSIONS) == set(Role.list())


def test_admin_only_actions(admin, resident, security):
    for permission in ("posts:pin", "payments:create", "issues:manage"):
        assert has_permission(admin, permission)
        assert not has_permission(resident, permission)
        assert not has_permission(security, permission)


def test_gate_staff_log_visitors(admin, resident, security):
    assert has_permission(security, "visitors:create")
    assert has_permission(admin, "visitors:create")
    assert not has_permission(resident, "visitors:create")


def test_everyone_reports_issues(admin, resident, security):
    for actor in (admin, resident, security):
        assert has_permission(actor, "issues:create")


def test_check_permission_names_the_action(resident):
    result = check_permission(resident, "profiles:list", "list residents")
    assert not result.ok
    assert "list residents" in result.error.message


def test_residents_directory_route(client, login_as, resident, security):
    login_as(resident)
    assert client.get("/profiles/residents").status_code == 403

    login_as(security)
    response = client.get("/profiles/residents")
    assert response.status_code == 200
    assert [p["flat_number"] for p in response.json()] == ["A-101", "B-204"]


def test_profile_update_route(client, login_as, resident):
    login_as(resident)
    response = client.patch("/profiles/me", json={"phone": "9876543210", "full_name": "Asha R."})
    assert response.status_code == 200
    assert response.json()["full_name"] == "Asha R."
    assert response.json()["role"] == "resident"

    response = client.patch("/profiles/me", json={"flat_number": "  "})
    assert response.status_code == 400
