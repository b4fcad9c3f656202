from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from complaint_desk.api.deps import get_current_principal, get_db, get_notifier
from complaint_desk.api.notifications import (
    publish_complaint_updated,
    publish_new_comment,
    publish_new_complaint,
)
from complaint_desk.core.exceptions import NotFoundError
from complaint_desk.models.enums import ComplaintStatusEnum, PriorityEnum
from complaint_desk.schemas.complaint import (
    CommentCreate,
    CommentRead,
    ComplaintCreate,
    ComplaintDetail,
    ComplaintFilters,
    ComplaintPage,
    ComplaintRead,
    ComplaintUpdate,
)
from complaint_desk.services import access_policy
from complaint_desk.services.auth_service import Principal
from complaint_desk.services.complaint_service import ComplaintService
from complaint_desk.services.notifier import ComplaintNotifier

router = APIRouter()


@router.post("", response_model=ComplaintRead, status_code=status.HTTP_201_CREATED)
def create_complaint(
    payload: ComplaintCreate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    notifier: ComplaintNotifier = Depends(get_notifier),
):
    """File a complaint as the current user and announce it to every dashboard."""
    complaint = ComplaintService.create_complaint(
        db=db,
        payload=payload,
        reporter_id=principal.id,
    )
    body = ComplaintRead.model_validate(complaint)
    publish_new_complaint(background_tasks, notifier, body)
    return body


@router.get("", response_model=ComplaintPage)
def list_complaints(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    status_filter: Optional[ComplaintStatusEnum] = Query(None, alias="status"),
    priority: Optional[PriorityEnum] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    reporter_id: Optional[int] = Query(None, alias="reporterId"),
    assigned_to_id: Optional[int] = Query(None, alias="assignedToId"),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """List complaints visible to the caller, newest first."""
    filters = ComplaintFilters(
        status=status_filter,
        priority=priority,
        category_id=category_id,
        reporter_id=reporter_id,
        assigned_to_id=assigned_to_id,
        search=search,
        page=page,
        limit=limit,
    )
    return ComplaintService.list_complaints(
        db=db,
        filters=filters,
        scope=access_policy.complaint_scope(principal),
    )


@router.get("/{complaint_id}", response_model=ComplaintDetail)
def get_complaint(
    complaint_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get a complaint with its comments and attachments."""
    return ComplaintService.get_visible_complaint(db, principal, complaint_id)


@router.patch("/{complaint_id}", response_model=ComplaintDetail)
def update_complaint(
    complaint_id: int,
    payload: ComplaintUpdate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    notifier: ComplaintNotifier = Depends(get_notifier),
):
    """
    Partially update a complaint.

    STAFF may change only the status, ADMIN any field. STAFF are not limited
    to complaints assigned to them.
    """
    data = payload.model_dump(exclude_unset=True)
    access_policy.ensure_can_update(principal, data)
    ComplaintService.get_visible_complaint(db, principal, complaint_id)

    complaint = ComplaintService.update_complaint(db, complaint_id, data)
    body = ComplaintDetail.model_validate(complaint)
    publish_complaint_updated(background_tasks, notifier, body)
    return body


@router.post(
    "/{complaint_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    complaint_id: int,
    payload: CommentCreate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    notifier: ComplaintNotifier = Depends(get_notifier),
):
    """Comment on a complaint; anyone who can read it may comment."""
    complaint = ComplaintService.get_complaint_by_id(db, complaint_id)
    if complaint is None:
        raise NotFoundError("Complaint", complaint_id)
    access_policy.ensure_can_comment(principal, complaint)

    comment =ComplaintService.add_comment(db, complaint, principal.id, payload.message)
    body = CommentRead.model_validate(comment)
    publish_new_comment(background_tasks, notifier, body)
    return body
