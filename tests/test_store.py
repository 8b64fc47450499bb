# tests/test_store.py

"""
Tests for the Supabase-backed Entity Store Gateway.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest

from core.errors import NotFoundError, StoreError
from core.store import Filter, Order, SupabaseStore, eq, gte, in_
from models.enums import IssueStatus


def _chain(data=None, count=None):
    """A PostgREST query builder mock where every filter returns itself."""
    query = Mock()
    for method in ("select", "eq", "neq", "gt", "gte", "lt", "lte", "in_", "order", "limit", "insert", "update"):
        getattr(query, method).return_value = query
    query.execute.return_value = Mock(data=data, count=count)
    return query


def _store(query):
    client = Mock()
    client.table.return_value = query
    return SupabaseStore(client), client


def test_query_applies_filters_and_order():
    query = _chain(data=[{"id": "1"}])
    store, client = _store(query)

    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    rows = store.query(
        "issues",
        [eq("category", "security"), in_("status", [IssueStatus.open, IssueStatus.in_progress]), gte("created_at", since)],
        [Order("is_sos", descending=True), Order("created_at", descending=True)],
        select="*, reporter:profiles!issues_reported_by_fkey(id, full_name)",
    )

    assert rows == [{"id": "1"}]
    client.table.assert_called_with("issues")
    query.select.assert_called_with("*, reporter:profiles!issues_reported_by_fkey(id, full_name)")
    query.eq.assert_called_with("category", "security")
    query.in_.assert_called_with("status", ["open", "in_progress"])
    query.gte.assert_called_with("created_at", since.isoformat())
    assert [c.args for c in query.order.call_args_list] == [("is_sos",), ("created_at",)]
    assert all(c.kwargs == {"desc": True} for c in query.order.call_args_list)


def test_count_uses_head_request():
    query = _chain(data=[], count=7)
    store, _ = _store(query)

    assert store.count("visitors", [eq("status", "pending")]) == 7
    query.select.assert_called_with("id", count="exact", head=True)
    query.order.assert_not_called()


def test_get_missing_row_raises_not_found():
    store, _ = _store(_chain(data=[]))
    with pytest.raises(NotFoundError):
        store.get("payments", "missing")


def test_batch_insert_is_a_single_request():
    rows = [{"resident_id": "r1"}, {"resident_id": "r2"}]
    query = _chain(data=[{"id": "1", **rows[0]}, {"id": "2", **rows[1]}])
    store, _ = _store(query)

    created = store.insert("payments", rows)

    assert len(created) == 2
    query.insert.assert_called_once()
    assert query.insert.call_args.args[0] == rows


def test_money_amounts_sent_without_float_rounding():
    query = _chain(data=[{"id": "1"}])
    store, _ = _store(query)

    store.insert("payments", {"resident_id": "r1", "amount": Decimal("12345678901234567.89")})

    assert query.insert.call_args.args[0]["amount"] == "12345678901234567.89"


def test_update_sends_enum_values_and_keeps_false():
    query = _chain(data=[{"id": "i1", "is_sos": False}])
    store, _ = _store(query)

    store.update("issues", "i1", {"is_sos": False, "status": IssueStatus.resolved, "assigned_to": None})

    payload = query.update.call_args.args[0]
    assert payload == {"is_sos": False, "status": "resolved", "assigned_to": None}
    query.eq.assert_called_with("id", "i1")


def test_update_no_match_raises_not_found():
    store, _ = _store(_chain(data=[]))
    with pytest.raises(NotFoundError):
        store.update("visitors", "gone", {"status": "approved"})


def test_backend_errors_become_store_errors():
    query = _chain()
    query.execute.side_effect = Exception("connection refused")
    store, _ = _store(query)

    with pytest.raises(StoreError) as exc:
        store.query("posts")
    assert "connection refused" in str(exc.value)


def test_unknown_filter_operator_rejected():
    with pytest.raises(ValueError):
        Filter("status", "like", "open%")


def test_missing_client_is_a_store_error():
    with pytest.raises(StoreError):
        SupabaseStore(None)
