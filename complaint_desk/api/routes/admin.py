from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from complaint_desk.api.deps import get_db, get_notifier, require_roles
from complaint_desk.api.notifications import publish_complaint_updated
from complaint_desk.models.enums import RoleEnum
from complaint_desk.schemas.admin import AnalyticsRead, AssignRequest
from complaint_desk.schemas.complaint import ComplaintDetail
from complaint_desk.schemas.user import UserRead
from complaint_desk.services.admin_service import AdminService
from complaint_desk.services.notifier import ComplaintNotifier

router = APIRouter(dependencies=[Depends(require_roles(RoleEnum.ADMIN))])


@router.get("/admin/analytics", response_model=AnalyticsRead)
def get_analytics(
    db: Session = Depends(get_db),
):
    """
    Dashboard analytics

    Returns:
    - counts: total and per-status complaint counts
    - deptStats: complaints per department, summed over its categories
    """
    return AdminService.get_analytics(db)


@router.post("/admin/assign", response_model=ComplaintDetail)
def assign_complaint(
    payload: AssignRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: ComplaintNotifier = Depends(get_notifier),
):
    """Assign a complaint to a STAFF or ADMIN user; the complaint moves to IN_PROGRESS."""
    complaint = AdminService.assign_complaint(db, payload.complaint_id, payload.staff_id)
    body = ComplaintDetail.model_validate(complaint)
    publish_complaint_updated(background_tasks, notifier, body)
    return body


@router.get("/staff", response_model=List[UserRead])
def list_staff(
    db: Session = Depends(get_db),
):
    return AdminService.list_staff(db)
