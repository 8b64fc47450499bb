# tests/test_issues.py

"""
Tests for issue reporting, admin status changes, SOS handling and ordering.
"""

from datetime import timedelta

import pytest

from core.errors import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from models.enums import IssueCategory, IssuePriority, IssueStatus
from models.issue import IssueCreate
from services import comment_service, issue_service
from tests.conftest import NOW


def _seed_issue(store, status="open", is_sos=False, priority="medium", created_at=NOW, **extra):
    return store.seed(
        "issues",
        reported_by="r1",
        category=extra.pop("category", "maintenance"),
        title="Lift stuck",
        description="Lift B stops between floors",
        status=status,
        priority=priority,
        is_sos=is_sos,
        created_at=created_at,
        updated_at=created_at,
        **extra,
    )


# -----------------------------------------------------
# Scenario: SOS toggled later keeps priority; resolved freezes SOS
# -----------------------------------------------------
def test_issue_scenario(store, resident, admin):
    created = issue_service.create_issue(
        store,
        resident,
        IssueCreate(category="maintenance", title="Leak", description="Ceiling leak in A-101", priority="low"),
    ).value
    assert created.is_sos is False
    assert created.priority == IssuePriority.low

    flagged = issue_service.set_sos(store, admin, created.id, True).value
    assert flagged.is_sos is True
    assert flagged.priority == IssuePriority.low
    assert flagged.effective_priority == IssuePriority.high

    resolved = issue_service.transition_issue(store, admin, created.id, IssueStatus.resolved).value
    assert resolved.status == IssueStatus.resolved

    frozen = issue_service.set_sos(store, admin, created.id, False)
    assert isinstance(frozen.error, InvalidTransitionError)
    assert store.rows("issues")[0]["is_sos"] is True


@pytest.mark.parametrize("requested", ["low", "medium", "high"])
def test_sos_at_creation_forces_high_priority(store, resident, requested):
    payload = IssueCreate(category="security", title="Fire alarm", description="Smoke in basement", priority=requested, is_sos=True)
    issue = issue_service.create_issue(store, resident, payload).value
    assert issue.priority == IssuePriority.high
    assert store.rows("issues")[0]["priority"] == IssuePriority.high


def test_create_issue_defaults(store, security):
    payload = IssueCreate(category="housekeeping", title="Garbage", description="Bins not cleared")
    issue = issue_service.create_issue(store, security, payload).value
    assert issue.status == IssueStatus.open
    assert issue.priority == IssuePriority.medium
    assert issue.reported_by == security.id


def test_create_issue_requires_title(store, resident):
    payload = IssueCreate(category="maintenance", title=" ", description="x")
    assert isinstance(issue_service.create_issue(store, resident, payload).error, ValidationError)


def test_only_admin_changes_status(store, resident, security, admin):
    issue = _seed_issue(store)
    for actor in (resident, security):
        result = issue_service.transition_issue(store, actor, issue["id"], "in_progress")
        assert isinstance(result.error, AuthorizationError)

    result = issue_service.transition_issue(store, admin, issue["id"], "in_progress", now=NOW + timedelta(hours=1))
    assert result.value.status == IssueStatus.in_progress
    assert result.value.updated_at == NOW + timedelta(hours=1)


def test_open_cannot_be_reentered(store, admin):
    issue = _seed_issue(store, status="in_progress")
    result = issue_service.transition_issue(store, admin, issue["id"], "open")
    assert isinstance(result.error, InvalidTransitionError)


def test_open_can_resolve_directly(store, admin):
    issue = _seed_issue(store)
    assert issue_service.transition_issue(store, admin, issue["id"], "resolved").value.status == IssueStatus.resolved


def test_resolved_rejects_everything(store, admin):
    issue = _seed_issue(store, status="resolved")
    for target in IssueStatus.list():
        assert isinstance(issue_service.transition_issue(store, admin, issue["id"], target).error, InvalidTransitionError)
    assert isinstance(issue_service.assign_issue(store, admin, issue["id"], "guard-1").error, InvalidTransitionError)


def test_non_admin_cannot_toggle_sos(store, resident):
    issue = _seed_issue(store)
    assert isinstance(issue_service.set_sos(store, resident, issue["id"], True).error, AuthorizationError)


# -----------------------------------------------------
# Listing
# -----------------------------------------------------
def test_list_orders_sos_first_then_recency(store, resident):
    _seed_issue(store, id="old", created_at=NOW - timedelta(days=3), priority="high")
    _seed_issue(store, id="sos-low", is_sos=True, priority="low", created_at=NOW - timedelta(days=5))
    _seed_issue(store, id="new", created_at=NOW, priority="low")
    _seed_issue(store, id="sos-new", is_sos=True, created_at=NOW - timedelta(days=1))

    ids = [i.id for i in issue_service.list_issues(store, resident)]
    assert ids == ["sos-new", "sos-low", "new", "old"]


def test_list_filters_by_status_and_category(store, resident):
    _seed_issue(store, id="a", status="open", category="maintenance")
    _seed_issue(store, id="b", status="resolved", category="maintenance")
    _seed_issue(store, id="c", status="open", category="security")

    assert [i.id for i in issue_service.list_issues(store, resident, status=IssueStatus.open, category=IssueCategory.security)] == ["c"]
    assert {i.id for i in issue_service.list_issues(store, resident, status=IssueStatus.open)} == {"a", "c"}


# -----------------------------------------------------
# Assignment / comments
# -----------------------------------------------------
def test_assign_issue(store, admin):
    issue = _seed_issue(store)
    assigned = issue_service.assign_issue(store, admin, issue["id"], "guard-1").value
    assert assigned.assigned_to == "guard-1"

    cleared = issue_service.assign_issue(store, admin, issue["id"], None).value
    assert cleared.assigned_to is None


def test_assign_unknown_profile(store, admin):
    issue = _seed_issue(store)
    with pytest.raises(NotFoundError):
        issue_service.assign_issue(store, admin, issue["id"], "nobody")


def test_issue_comments(store, resident, admin):
    issue = _seed_issue(store)
    comment_service.add_comment(store, admin, "issue", issue["id"], "Technician booked")
    comment_service.add_comment(store, resident, "issue", issue["id"], "Thanks")

    thread = comment_service.list_comments(store, "issue", issue["id"])
    assert [c.content for c in thread] == ["Technician booked", "Thanks"]
    assert isinstance(comment_service.add_comment(store, resident, "issue", issue["id"], "").error, ValidationError)


# -----------------------------------------------------
# Routes
# -----------------------------------------------------
def test_issue_routes(client, login_as, store, resident, admin):
    login_as(resident)
    response = client.post(
        "/issues/",
        json={"category": "security", "title": "Gate open", "description": "Back gate unlocked", "priority": "low", "is_sos": True},
    )
    assert response.status_code == 201
    issue_id = response.json()["id"]
    assert response.json()["priority"] == "high"

    response = client.post(f"/issues/{issue_id}/status", json={"status": "resolved"})
    assert response.status_code == 403

    login_as(admin)
    response = client.post(f"/issues/{issue_id}/status", json={"status": "resolved"})
    assert response.status_code == 200

    response = client.post(f"/issues/{issue_id}/sos", json={"is_sos": False})
    assert response.status_code == 409

    response = client.get("/issues/", params={"status": "resolved"})
    assert [i["id"] for i in response.json()] == [issue_id]
