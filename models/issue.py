from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .common import ProfileSummary, normalize_timestamp
from .enums import IssueCategory, IssuePriority, IssueStatus


class IssueCreate(BaseModel):
    category: IssueCategory
    title: str
    description: str
    priority: IssuePriority = IssuePriority.medium
    is_sos: bool = Field(False, description="SOS issues are always stored as high priority")


class IssueStatusUpdate(BaseModel):
    status: IssueStatus


class IssueSosUpdate(BaseModel):
    is_sos: bool


class IssueAssign(BaseModel):
    assigned_to: Optional[str] = Field(None, description="Profile id; null clears the assignee")


class IssueRead(BaseModel):
    id: str
    reported_by: str
    category: IssueCategory
    title: str
    description: str
    status: IssueStatus
    priority: IssuePriority
    is_sos: bool = False
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    effective_priority: IssuePriority = IssuePriority.medium
    reporter: Optional[ProfileSummary] = None
    assignee: Optional[ProfileSummary] = None
    allowed_actions: List[IssueStatus] = Field(default_factory=list)

    @field_validator("created_at", "updated_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)
