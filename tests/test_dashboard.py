# tests/test_dashboard.py

"""
Tests for the dashboard aggregates.
"""

from datetime import timedelta

from core.errors import StoreError
from services.dashboard_service import get_dashboard_stats
from tests.conftest import NOW


def _populate(store):
    # Visitors: two pending for r1, one pending for r2, one approved for r1
    for resident_id, status in (("r1", "pending"), ("r1", "pending"), ("r2", "pending"), ("r1", "approved")):
        store.seed("visitors", visitor_name="V", visitor_phone="1", flat_number="A-101",
                   resident_id=resident_id, status=status, check_in_time=NOW, added_by="guard-1")

    # Payments: one pending for r1, one paid for r1, one pending for r2
    for resident_id, status in (("r1", "pending"), ("r1", "paid"), ("r2", "pending")):
        store.seed("payments", resident_id=resident_id, amount=100, description="Dues",
                   due_date=NOW, status=status)

    # Posts: two inside the 7 day window, one outside
    for age in (0, 6, 8):
        store.seed("posts", author_id="admin-1", title="t", content="c", post_type="discussion",
                   is_pinned=False, created_at=NOW - timedelta(days=age))

    # Issues: open + in_progress count, resolved does not
    for status in ("open", "in_progress", "resolved"):
        store.seed("issues", reported_by="r2", category="maintenance", title="t", description="d",
                   status=status, priority="low", is_sos=False)


def test_dashboard_counts(store, resident):
    _populate(store)
    stats = get_dashboard_stats(store, resident, now=NOW, window_days=7)

    assert stats.pending_visitors == 2
    assert stats.unpaid_dues == 1
    assert stats.recent_posts == 2
    assert stats.open_issues == 2


def test_pending_visitors_scoped_to_viewer_for_admin(store, admin):
    _populate(store)
    stats = get_dashboard_stats(store, admin, now=NOW, window_days=7)

    assert stats.pending_visitors == 0
    assert stats.unpaid_dues == 0
    # Community-wide metrics are unscoped
    assert stats.recent_posts == 2
    assert stats.open_issues == 2


def test_one_failing_metric_degrades_to_zero(store, resident):
    _populate(store)
    store.fail_on[("count", "payments")] = StoreError("connection reset")

    stats = get_dashboard_stats(store, resident, now=NOW, window_days=7)
    assert stats.unpaid_dues == 0
    assert stats.pending_visitors == 2
    assert stats.recent_posts == 2
    assert stats.open_issues == 2


def test_dashboard_route_survives_total_failure(client, login_as, store, resident):
    for table in ("visitors", "payments", "posts", "issues"):
        store.fail_on[("count", table)] = StoreError("backend down")

    login_as(resident)
    response = client.get("/dashboard/stats")
    assert response.status_code == 200
    assert response.json() == {"pending_visitors": 0, "unpaid_dues": 0, "recent_posts": 0, "open_issues": 0}
