# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import itertools
import os
from collections import defaultdict
from copy import deepcopy
from datetime import datetime, timezone
from enum import Enum

os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from core.errors import NotFoundError, StoreError
from core.store import EntityStore
from core.time_utils import parse_timestamp
from dependencies.auth import CurrentUser, get_current_user
from dependencies.store import get_store
from main import create_app


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================
# In-memory Entity Store
# ============================================================
def _norm(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime) or (isinstance(value, str) and "T" in value and value[:4].isdigit()):
        return parse_timestamp(value)
    return value


def _matches(row, f) -> bool:
    actual = _norm(row.get(f.column))
    expected = [_norm(v) for v in f.value] if f.op == "in" else _norm(f.value)

    if f.op == "eq":
        return actual == expected
    if f.op == "neq":
        return actual != expected
    if f.op == "in":
        return actual in expected
    if actual is None:
        return False
    if f.op == "gt":
        return actual > expected
    if f.op == "gte":
        return actual >= expected
    if f.op == "lt":
        return actual < expected
    if f.op == "lte":
        return actual <= expected
    raise AssertionError(f"unknown op {f.op}")


class FakeStore(EntityStore):
    """
    Dict-backed EntityStore.
    - `fail_on[(method, collection)] = exc` makes that call raise
    - `reject_rows[collection] = predicate` makes an insert fail when any row matches
    Multi-row inserts commit only if every row is accepted.
    """

    def __init__(self):
        self.tables = defaultdict(dict)
        self.fail_on = {}
        self.reject_rows = {}
        self.calls = []
        self._ids = itertools.count(1)

    # -----------------------------------------------------
    # Test helpers
    # -----------------------------------------------------
    def seed(self, collection, **row):
        row.setdefault("id", f"{collection}-{next(self._ids)}")
        row.setdefault("created_at", NOW)
        self.tables[collection][row["id"]] = deepcopy(row)
        return deepcopy(row)

    def rows(self, collection):
        return [deepcopy(r) for r in self.tables[collection].values()]

    def _maybe_fail(self, method, collection):
        self.calls.append((method, collection))
        exc = self.fail_on.get((method, collection))
        if exc is not None:
            raise exc

    # -----------------------------------------------------
    # EntityStore contract
    # -----------------------------------------------------
    def query(self, collection, filters=(), order=(), *, select="*", count_only=False, limit=None):
        self._maybe_fail("count" if count_only else "query", collection)

        rows = [r for r in self.tables[collection].values() if all(_matches(r, f) for f in filters)]
        if count_only:
            return len(rows)

        for o in reversed(list(order)):
            rows.sort(
                key=lambda r: (_norm(r.get(o.column)) is not None, _norm(r.get(o.column)) or 0),
                reverse=o.descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return [deepcopy(r) for r in rows]

    def get(self, collection, row_id, *, select="*"):
        self._maybe_fail("get", collection)
        row = self.tables[collection].get(row_id)
        if row is None:
            raise NotFoundError(f"{collection} {row_id} not found")
        return deepcopy(row)

    def insert(self, collection, rows):
        self._maybe_fail("insert", collection)
        many = isinstance(rows, list)
        batch = rows if many else [rows]

        reject = self.reject_rows.get(collection)
        if reject and any(reject(r) for r in batch):
            raise StoreError(f"Failed to insert into {collection}: rejected row")

        created = []
        for r in batch:
            row = dict(r)
            row.setdefault("id", f"{collection}-{next(self._ids)}")
            row.setdefault("created_at", NOW)
            created.append(row)

        for row in created:
            self.tables[collection][row["id"]] = deepcopy(row)

        created = [deepcopy(r) for r in created]
        return created if many else created[0]

    def update(self, collection, row_id, changes):
        self._maybe_fail("update", collection)
        row = self.tables[collection].get(row_id)
        if row is None:
            raise NotFoundError(f"{collection} {row_id} not found")
        row.update(deepcopy(changes))
        return deepcopy(row)


# ============================================================
# Actors
# ============================================================
@pytest.fixture
def resident():
    return CurrentUser(id="r1", email="r1@example.com", role="resident", full_name="Asha Rao", flat_number="A-101")


@pytest.fixture
def other_resident():
    return CurrentUser(id="r2", email="r2@example.com", role="resident", full_name="Vikram Shah", flat_number="B-204")


@pytest.fixture
def admin():
    return CurrentUser(id="admin-1", email="office@example.com", role="admin", full_name="Society Office", flat_number="OFFICE")


@pytest.fixture
def security():
    return CurrentUser(id="guard-1", email="gate@example.com", role="security", full_name="Main Gate", flat_number="GATE")


# ============================================================
# Store
# ============================================================
@pytest.fixture
def store(resident, other_resident, admin, security):
    """FakeStore seeded with one profile per actor fixture."""
    s = FakeStore()
    for actor in (resident, other_resident, admin, security):
        s.seed(
            "profiles",
            id=actor.id,
            email=actor.email,
            full_name=actor.full_name,
            flat_number=actor.flat_number,
            role=actor.role.value,
        )
    return s


# ============================================================
# Application
# ============================================================
@pytest.fixture(scope="function")
def app(store):
    """Create a test FastAPI application wired to the in-memory store."""
    application = create_app()
    application.dependency_overrides[get_store] = lambda: store
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(app):
    """Switch the authenticated actor for subsequent requests."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
    return _login


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from core.rate_limiter import reset_rate_limits as reset
    reset()
    yield
    reset()
