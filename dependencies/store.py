from fastapi import HTTPException

from core.store import EntityStore, SupabaseStore
from core.supabase_client import get_supabase_client


def get_store() -> EntityStore:
    """Request-scoped Entity Store Gateway (overridden in tests)."""
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return SupabaseStore(client)
