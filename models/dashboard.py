from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Summary counts; any metric whose query failed reads 0."""
    pending_visitors: int = 0
    unpaid_dues: int = 0
    recent_posts: int = 0
    open_issues: int = 0
