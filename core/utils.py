# core/utils.py

from datetime import date, datetime
from decimal import Decimal
from enum import Enum


def clean_value(v):
    """
    Normalize a single value for PostgREST:
    - Enums → their value
    - datetime / date → ISO-8601 string
    - Decimal → numeric string (exact, PostgREST casts it)
    - Strings stripped, empty string → None
    """
    if v is None or isinstance(v, bool):
        return v

    if isinstance(v, Enum):
        return v.value

    if isinstance(v, datetime):
        return v.isoformat()

    if isinstance(v, date):
        return v.isoformat()

    if isinstance(v, Decimal):
        return str(v)

    if isinstance(v, str):
        stripped = v.strip()
        return stripped or None

    if isinstance(v, (list, tuple, set)):
        return [clean_value(item) for item in v]

    return v


def sanitize(data: dict) -> dict:
    """Apply clean_value to every field of a row before it is sent to Supabase."""
    return {k: clean_value(v) for k, v in data.items()}
