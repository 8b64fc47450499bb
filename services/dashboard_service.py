# services/dashboard_service.py

"""
Dashboard aggregates.

The four counts are independent reads, fetched in parallel. A failing
count is logged and reported as 0; the others are unaffected.

Note: pending_visitors is scoped to the viewer for every role, so an admin
or security dashboard shows only visitors addressed to that account.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from core.config import settings
from core.logging_config import logger
from core.store import ISSUES, PAYMENTS, POSTS, VISITORS, EntityStore, eq, gte, in_
from core.time_utils import utcnow
from dependencies.auth import CurrentUser
from models.dashboard import DashboardStats
from models.enums import IssueStatus, PaymentStatus, VisitorStatus


def _counters(
    store: EntityStore,
    actor: CurrentUser,
    now: datetime,
    window_days: int,
) -> Dict[str, Callable[[], int]]:
    since = now - timedelta(days=window_days)
    return {
        "pending_visitors": lambda: store.count(
            VISITORS,
            [eq("status", VisitorStatus.pending), eq("resident_id", actor.id)],
        ),
        "unpaid_dues": lambda: store.count(
            PAYMENTS,
            [eq("resident_id", actor.id), eq("status", PaymentStatus.pending)],
        ),
        "recent_posts": lambda: store.count(POSTS, [gte("created_at", since)]),
        "open_issues": lambda: store.count(
            ISSUES,
            [in_("status", [IssueStatus.open, IssueStatus.in_progress])],
        ),
    }


def _safe_count(name: str, counter: Callable[[], int]) -> int:
    try:
        return int(counter() or 0)
    except Exception as e:
        logger.warning(f"Dashboard metric '{name}' unavailable, reporting 0: {e}")
        return 0


def get_dashboard_stats(
    store: EntityStore,
    actor: CurrentUser,
    now: Optional[datetime] = None,
    window_days: Optional[int] = None,
) -> DashboardStats:
    now = now or utcnow()
    window_days = window_days or settings.RECENT_POSTS_WINDOW_DAYS
    counters = _counters(store, actor, now, window_days)

    with ThreadPoolExecutor(max_workers=len(counters)) as pool:
        futures = {
            name: pool.submit(_safe_count, name, counter)
            for name, counter in counters.items()
        }
        values = {name: future.result() for name, future in futures.items()}

    return DashboardStats(**values)
