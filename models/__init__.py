# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    PostType,
    VisitorStatus,
    PaymentStatus,
    IssueStatus,
    IssueCategory,
    IssuePriority,
)

# -------------------------
# Profiles / Auth
# -------------------------
from .common import ProfileSummary
from .profile import ProfileRead, ProfileUpdate, SignupRequest, LoginRequest, TokenResponse

# -------------------------
# Community
# -------------------------
from .post import PostCreate, PostRead, PinUpdate, CommentCreate, CommentRead
from .visitor import VisitorCreate, VisitorRead
from .payment import PaymentCreate, PaymentRead, PaymentSummary, MarkPaidRequest
from .issue import IssueCreate, IssueRead, IssueStatusUpdate, IssueSosUpdate, IssueAssign
from .dashboard import DashboardStats
