# core/rate_limiter.py

from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, Request
from collections import defaultdict
from threading import Lock
import time


# In-memory sliding window per identifier (single process)
_attempts: Dict[str, List[float]] = defaultdict(list)
_lock = Lock()


def check_rate_limit(identifier: str, max_requests: int, window_seconds: int) -> Tuple[bool, int]:
    """
    Record an attempt for ``identifier``.
    Returns (allowed, remaining) for the current window.
    """
    now = time.time()
    window_start = now - window_seconds

    with _lock:
        recent = [ts for ts in _attempts[identifier] if ts > window_start]
        if len(recent) >= max_requests:
            _attempts[identifier] = recent
            return False, 0

        recent.append(now)
        _attempts[identifier] = recent
        return True, max_requests - len(recent)


def reset_rate_limits():
    with _lock:
        _attempts.clear()


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # First hop is the original client
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def require_rate_limit(
    request: Request,
    identifier: Optional[str] = None,
    max_requests: int = 10,
    window_seconds: int = 60,
) -> int:
    """Raise 429 once ``identifier`` (default: client IP) exceeds the window budget."""
    identifier = identifier or f"ip:{get_client_ip(request)}"

    allowed, remaining = check_rate_limit(identifier, max_requests, window_seconds)
    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"Too many attempts. Try again in {window_seconds // 60 or 1} minute(s).",
            headers={"Retry-After": str(window_seconds)},
        )
    return remaining
