import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from complaint_desk.core.exceptions import NotFoundError
from complaint_desk.models.complaint import Complaint
from complaint_desk.models.department import Category, Department
from complaint_desk.models.enums import ComplaintStatusEnum, RoleEnum
from complaint_desk.models.user import User
from complaint_desk.services.complaint_service import ComplaintService, ensure_assignable_user

logger = logging.getLogger(__name__)


class AdminService:
    @staticmethod
    def get_analytics(db: Session) -> Dict[str, Any]:
        """Exact counts at call time; no caching, so every call scans"""
        by_status = dict(
            db.query(Complaint.status, func.count(Complaint.id))
            .group_by(Complaint.status)
            .all()
        )
        # Derived from the same grouped read so the parts always add up
        total = sum(by_status.values())

        counts = {
            "total": total,
            "open": by_status.get(ComplaintStatusEnum.OPEN, 0),
            "in_progress": by_status.get(ComplaintStatusEnum.IN_PROGRESS, 0),
            "resolved": by_status.get(ComplaintStatusEnum.RESOLVED, 0),
            "rejected": by_status.get(ComplaintStatusEnum.REJECTED, 0),
        }
        return {"counts": counts, "dept_stats": AdminService._get_department_stats(db)}

    @staticmethod
    def _get_department_stats(db: Session) -> List[Dict[str, Any]]:
        """Complaints per department across all of its categories, zeros included"""
        results = db.query(
            Department.name,
            func.count(Complaint.id).label('count')
        ).outerjoin(
            Category, Category.department_id == Department.id
        ).outerjoin(
            Complaint, Complaint.category_id == Category.id
        ).group_by(
            Department.id, Department.name
        ).order_by(
            Department.name.asc()
        ).all()

        return [{"name": r.name, "count": r.count} for r in results]

    @staticmethod
    def assign_complaint(db: Session, complaint_id: int, staff_id: int) -> Complaint:
        """
        Assign a complaint and move it to IN_PROGRESS, whatever its status was.

        Assignee and status are written by one UPDATE statement so a concurrent
        writer never sees one without the other.
        """
        if db.get(Complaint, complaint_id) is None:
            raise NotFoundError("Complaint", complaint_id)
        ensure_assignable_user(db, staff_id, field="staffId")

        db.execute(
            update(Complaint)
            .where(Complaint.id == complaint_id)
            .values(
                assigned_to_id=staff_id,
                status=ComplaintStatusEnum.IN_PROGRESS,
                resolved_at=None,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session="fetch")
        )
        db.commit()
        logger.info("Complaint %d assigned to user %d", complaint_id, staff_id)
        return ComplaintService.get_complaint_by_id(db, complaint_id)

    @staticmethod
    def list_staff(db: Session) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == RoleEnum.STAFF)
            .order_by(User.name.asc(), User.id.asc())
            .all()
        )
