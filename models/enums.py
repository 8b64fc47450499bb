from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Profile role; fixed for the lifetime of a session."""

    resident = "resident"
    admin = "admin"
    security = "security"


# -----------------------------------------------------
# POST TYPE
# -----------------------------------------------------
class PostType(BaseStrEnum):
    announcement = "announcement"
    discussion = "discussion"
    poll = "poll"
    alert = "alert"


# -----------------------------------------------------
# VISITOR STATUS
# -----------------------------------------------------
class VisitorStatus(BaseStrEnum):
    """Gate workflow: pending → approved/rejected → checked_out."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    checked_out = "checked_out"


# -----------------------------------------------------
# PAYMENT STATUS
# -----------------------------------------------------
class PaymentStatus(BaseStrEnum):
    """Maintenance dues: pending → paid → verified."""

    pending = "pending"
    paid = "paid"
    verified = "verified"


# -----------------------------------------------------
# ISSUE STATUS
# -----------------------------------------------------
class IssueStatus(BaseStrEnum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"


# -----------------------------------------------------
# ISSUE CATEGORY
# -----------------------------------------------------
class IssueCategory(BaseStrEnum):
    maintenance = "maintenance"
    security = "security"
    housekeeping = "housekeeping"


# -----------------------------------------------------
# ISSUE PRIORITY
# -----------------------------------------------------
class IssuePriority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"
