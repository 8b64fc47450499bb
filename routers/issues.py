# routers/issues.py

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from core.result import unwrap_or_raise
from core.store import EntityStore
from dependencies.auth import get_current_user, CurrentUser
from dependencies.store import get_store
from models.enums import IssueCategory, IssueStatus
from models.issue import IssueAssign, IssueCreate, IssueRead, IssueSosUpdate, IssueStatusUpdate
from models.post import CommentCreate, CommentRead
from services import comment_service, issue_service

router = APIRouter(
    prefix="/issues",
    tags=["Issues"],
)


@router.get("/", response_model=List[IssueRead])
def list_issues(
    status: Optional[IssueStatus] = Query(None, description="Filter by status"),
    category: Optional[IssueCategory] = Query(None, description="Filter by category"),
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """SOS issues first, then everything else; newest first within each group."""
    return issue_service.list_issues(store, current_user, status, category)


@router.post("/", response_model=IssueRead, status_code=201)
def create_issue(
    payload: IssueCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(issue_service.create_issue(store, current_user, payload))


@router.get("/{issue_id}", response_model=IssueRead)
def get_issue(
    issue_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return issue_service.get_issue(store, current_user, issue_id)


# -----------------------------------------------------
# Admin actions
# -----------------------------------------------------
@router.post("/{issue_id}/status", response_model=IssueRead)
def update_status(
    issue_id: str,
    payload: IssueStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(
        issue_service.transition_issue(store, current_user, issue_id, payload.status)
    )


@router.post("/{issue_id}/sos", response_model=IssueRead)
def update_sos(
    issue_id: str,
    payload: IssueSosUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(issue_service.set_sos(store, current_user, issue_id, payload.is_sos))


@router.post("/{issue_id}/assign", response_model=IssueRead)
def assign_issue(
    issue_id: str,
    payload: IssueAssign,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(
        issue_service.assign_issue(store, current_user, issue_id, payload.assigned_to)
    )


# -----------------------------------------------------
# Comments
# -----------------------------------------------------
@router.get("/{issue_id}/comments", response_model=List[CommentRead])
def list_issue_comments(
    issue_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return comment_service.list_comments(store, "issue", issue_id)


@router.post("/{issue_id}/comments", response_model=CommentRead, status_code=201)
def add_issue_comment(
    issue_id: str,
    payload: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return unwrap_or_raise(
        comment_service.add_comment(store, current_user, "issue", issue_id, payload.content)
    )
