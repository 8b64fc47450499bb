# core/store.py

"""
Entity Store Gateway.

Uniform query / mutate interface over the community collections. The
lifecycle services only talk to ``EntityStore``; ``SupabaseStore`` is the
production implementation on top of PostgREST.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from core.errors import NotFoundError, StoreError, extract_supabase_error
from core.logging_config import logger
from core.utils import clean_value, sanitize


# -----------------------------------------------------
# Collections
# -----------------------------------------------------
PROFILES = "profiles"
POSTS = "posts"
POST_COMMENTS = "post_comments"
VISITORS = "visitors"
PAYMENTS = "payments"
ISSUES = "issues"
ISSUE_COMMENTS = "issue_comments"

FILTER_OPS = {"eq", "neq", "gt", "gte", "lt", "lte", "in"}

Row = Dict[str, Any]


@dataclass(frozen=True)
class Filter:
    """Conjunctive column predicate: equality, range or set membership."""

    column: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator '{self.op}'")


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, "in", list(values))


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


# ============================================================
# Gateway contract
# ============================================================

class EntityStore(ABC):

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        *,
        select: str = "*",
        count_only: bool = False,
        limit: Optional[int] = None,
    ) -> Union[List[Row], int]:
        """Rows matching every filter in the given order, or their count."""

    @abstractmethod
    def get(self, collection: str, row_id: str, *, select: str = "*") -> Row:
        """Single row by id. Raises NotFoundError when absent."""

    @abstractmethod
    def insert(self, collection: str, rows: Union[Row, List[Row]]) -> Union[Row, List[Row]]:
        """Insert one row, or many rows atomically in a single request."""

    @abstractmethod
    def update(self, collection: str, row_id: str, changes: Row) -> Row:
        """Partial update matched on id. Raises NotFoundError when nothing matched."""

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        return self.query(collection, filters, count_only=True)


# ============================================================
# Supabase implementation
# ============================================================

class SupabaseStore(EntityStore):
    """EntityStore backed by a supabase-py client (PostgREST)."""

    def __init__(self, client):
        if client is None:
            raise StoreError("Supabase client not configured")
        self.client = client

    # -----------------------------------------------------
    # Reads
    # -----------------------------------------------------
    def query(
        self,
        collection,
        filters=(),
        order=(),
        *,
        select="*",
        count_only=False,
        limit=None,
    ):
        try:
            if count_only:
                q = self.client.table(collection).select("id", count="exact", head=True)
            else:
                q = self.client.table(collection).select(select)

            q = _apply_filters(q, filters)

            if not count_only:
                for o in order:
                    q = q.order(o.column, desc=o.descending)
                if limit is not None:
                    q = q.limit(limit)

            result = q.execute()
        except Exception as e:
            raise _store_error(e, f"Failed to query {collection}")

        if count_only:
            return result.count or 0
        return result.data or []

    def get(self, collection, row_id, *, select="*"):
        try:
            result = (
                self.client.table(collection)
                .select(select)
                .eq("id", row_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise _store_error(e, f"Failed to fetch from {collection}")

        if not result.data:
            raise NotFoundError(f"{_singular(collection)} {row_id} not found")
        return result.data[0]

    # -----------------------------------------------------
    # Writes
    # -----------------------------------------------------
    def insert(self, collection, rows):
        many = isinstance(rows, list)
        payload = [sanitize(r) for r in rows] if many else sanitize(rows)

        try:
            result = (
                self.client.table(collection)
                .insert(payload, returning="representation")
                .execute()
            )
        except Exception as e:
            raise _store_error(e, f"Failed to insert into {collection}")

        data = result.data or []
        if many:
            return data
        if not data:
            raise StoreError(f"Insert into {collection} returned no row")
        return data[0]

    def update(self, collection, row_id, changes):
        try:
            result = (
                self.client.table(collection)
                .update(sanitize(changes), returning="representation")
                .eq("id", row_id)
                .execute()
            )
        except Exception as e:
            raise _store_error(e, f"Failed to update {collection}")

        if not result.data:
            raise NotFoundError(f"{_singular(collection)} {row_id} not found")
        return result.data[0]


# -----------------------------------------------------
# Helpers
# -----------------------------------------------------
def _apply_filters(q, filters: Sequence[Filter]):
    for f in filters:
        value = clean_value(f.value)
        if f.op == "in":
            q = q.in_(f.column, value)
        else:
            q = getattr(q, f.op)(f.column, value)
    return q


def _store_error(error: Exception, operation: str) -> StoreError:
    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")
    return StoreError(f"{operation}: {detail}")


def _singular(collection: str) -> str:
    name = collection[:-1] if collection.endswith("s") else collection
    return name.replace("_", " ").capitalize()
