from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from .common import ProfileSummary, normalize_timestamp
from .enums import PostType


class PostCreate(BaseModel):
    title: str
    content: str
    post_type: PostType = PostType.discussion


class PinUpdate(BaseModel):
    is_pinned: bool


class PostRead(BaseModel):
    id: str
    author_id: str
    title: str
    content: str
    post_type: PostType
    is_pinned: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    author: Optional[ProfileSummary] = None
    comment_count: int = 0

    @field_validator("created_at", "updated_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)


# -------------------------------------------------
# Comments (shared by posts and issues)
# -------------------------------------------------
class CommentCreate(BaseModel):
    content: str


class CommentRead(BaseModel):
    id: str
    author_id: str
    content: str
    created_at: datetime
    post_id: Optional[str] = None
    issue_id: Optional[str] = None

    author: Optional[ProfileSummary] = None

    @field_validator("created_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)
