# routers/dashboard.py

from fastapi import APIRouter, Depends

from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.dashboard import DashboardStats
from services.dashboard_service import get_dashboard_stats

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """
    Summary cards. Never fails as a whole: a metric whose
    query errors is reported as 0.
    """
    return get_dashboard_stats(store, current_user)
