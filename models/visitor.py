from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .common import ProfileSummary, normalize_timestamp
from .enums import VisitorStatus


# -------------------------------------------------
# Create (security / admin at the gate)
# -------------------------------------------------
class VisitorCreate(BaseModel):
    visitor_name: str
    visitor_phone: str
    flat_number: Optional[str] = Field(None, description="Defaults to the host resident's flat")
    resident_id: Optional[str] = Field(None, description="Host resident profile id")
    purpose: Optional[str] = None
    check_in_time: Optional[datetime] = Field(None, description="Defaults to now")

    @field_validator("check_in_time", mode="before")
    def parse_check_in(cls, v):
        return normalize_timestamp(v)


# -------------------------------------------------
# Read
# -------------------------------------------------
class VisitorRead(BaseModel):
    id: str
    visitor_name: str
    visitor_phone: str
    flat_number: str
    resident_id: Optional[str] = None
    purpose: Optional[str] = None
    status: VisitorStatus
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    added_by: str
    created_at: Optional[datetime] = None

    resident: Optional[ProfileSummary] = None
    allowed_actions: List[VisitorStatus] = Field(default_factory=list)

    @field_validator("check_in_time", "check_out_time", "created_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)
