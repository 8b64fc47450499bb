# core/time_utils.py

from datetime import date, datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    """Timezone-aware current UTC instant."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Normalize a Supabase timestamp / date into an aware UTC datetime.
    Accepts "2025-01-01T00:00:00Z", "+00:00" offsets and bare dates.
    """
    if value is None:
        return None

    if isinstance(value, str):
        if value.endswith("Z"):
            value = value.replace("Z", "+00:00")
        value = datetime.fromisoformat(value)

    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
