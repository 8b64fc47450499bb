from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from core.time_utils import parse_timestamp
from .common import ProfileSummary, normalize_timestamp
from .enums import PaymentStatus


# -------------------------------------------------
# Create (admin): single resident or every resident
# -------------------------------------------------
class PaymentCreate(BaseModel):
    resident_id: Optional[str] = Field(None, description="Required unless apply_to_all is set")
    apply_to_all: bool = Field(False, description="Create one due per resident in one atomic insert")
    amount: Decimal
    description: str
    due_date: datetime

    @field_validator("due_date", mode="before")
    def parse_due_date(cls, v):
        return parse_timestamp(v) if isinstance(v, str) else v


class MarkPaidRequest(BaseModel):
    transaction_id: str = Field(..., description="Reference of the out-of-band payment")


# -------------------------------------------------
# Read
# -------------------------------------------------
class PaymentRead(BaseModel):
    id: str
    resident_id: str
    amount: Decimal
    description: str
    due_date: datetime
    status: PaymentStatus
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    # Derived on every read, never stored
    is_overdue: bool = False

    resident: Optional[ProfileSummary] = None
    allowed_actions: List[PaymentStatus] = Field(default_factory=list)

    @field_validator("due_date", mode="before")
    def parse_due_date(cls, v):
        return parse_timestamp(v) if isinstance(v, str) else v

    @field_validator("paid_at", "verified_at", "created_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)


class PaymentSummary(BaseModel):
    outstanding_total: Decimal = Decimal("0")
    pending_count: int = 0
    overdue_count: int = 0
