import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.sql.elements import ColumnElement

from complaint_desk.core.exceptions import NotFoundError, ValidationError
from complaint_desk.models.comment import Comment
from complaint_desk.models.complaint import Complaint
from complaint_desk.models.department import Category
from complaint_desk.models.enums import (
    ASSIGNABLE_ROLES,
    CLOSED_STATUSES,
    ComplaintStatusEnum,
)
from complaint_desk.models.user import User
from complaint_desk.schemas.complaint import ComplaintCreate, ComplaintFilters
from complaint_desk.services import access_policy
from complaint_desk.services.auth_service import Principal

logger = logging.getLogger(__name__)


def ensure_category_exists(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise ValidationError("Category does not exist", field="categoryId")
    return category


def ensure_assignable_user(db: Session, user_id: int, field: str = "assignedToId") -> User:
    """Assignees must exist and hold STAFF or ADMIN."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    if user.role not in ASSIGNABLE_ROLES:
        raise ValidationError("Complaints can only be assigned to STAFF or ADMIN users", field=field)
    return user


def apply_status(complaint: Complaint, status: ComplaintStatusEnum) -> None:
    """Set status and keep resolved_at in step with it"""
    complaint.status = status
    if status in CLOSED_STATUSES:
        complaint.resolved_at = datetime.now(timezone.utc)
    else:
        complaint.resolved_at = None


class ComplaintService:
    @staticmethod
    def create_complaint(
        db: Session,
        payload: ComplaintCreate,
        reporter_id: int,
    ) -> Complaint:
        """Files a complaint for ``reporter_id``; it always starts OPEN and unassigned."""
        ensure_category_exists(db, payload.category_id)

        complaint = Complaint(
            title=payload.title,
            description=payload.description,
            category_id=payload.category_id,
            priority=payload.priority,
            reporter_id=reporter_id,
            status=ComplaintStatusEnum.OPEN,
        )
        db.add(complaint)
        db.commit()
        db.refresh(complaint)
        logger.info("Complaint %d created by user %d", complaint.id, reporter_id)
        return complaint

    @staticmethod
    def get_complaint_by_id(db: Session, complaint_id: int) -> Optional[Complaint]:
        """Complaint with its category, people, comments and attachments, or None"""
        return (
            db.query(Complaint)
            .options(
                joinedload(Complaint.category),
                joinedload(Complaint.reporter),
                joinedload(Complaint.assigned_to),
                selectinload(Complaint.comments).joinedload(Comment.author),
                selectinload(Complaint.attachments),
            )
            .filter(Complaint.id == complaint_id)
            .first()
        )

    @staticmethod
    def get_visible_complaint(db: Session, principal: Principal, complaint_id: int) -> Complaint:
        """Like get_complaint_by_id, but out-of-scope complaints look nonexistent."""
        complaint = ComplaintService.get_complaint_by_id(db, complaint_id)
        if complaint is None or not access_policy.can_read(principal, complaint):
            raise NotFoundError("Complaint", complaint_id)
        return complaint

    @staticmethod
    def list_complaints(
        db: Session,
        filters: ComplaintFilters,
        scope: Sequence[ColumnElement] = (),
    ) -> Dict[str, Any]:
        """
        Page through complaints, newest first.

        ``scope`` comes from the access policy and is ANDed with the client
        filters, so a filter can narrow the visible set but never widen it.
        ``total`` counts every row matching the same predicate.
        """
        query = db.query(Complaint).filter(*scope)

        if filters.status:
            query = query.filter(Complaint.status == filters.status)
        if filters.priority:
            query = query.filter(Complaint.priority == filters.priority)
        if filters.category_id is not None:
            query = query.filter(Complaint.category_id == filters.category_id)
        if filters.reporter_id is not None:
            query = query.filter(Complaint.reporter_id == filters.reporter_id)
        if filters.assigned_to_id is not None:
            query = query.filter(Complaint.assigned_to_id == filters.assigned_to_id)
        if filters.search and filters.search.strip():
            term = filters.search.strip()
            query = query.filter(or_(
                Complaint.title.icontains(term, autoescape=True),
                Complaint.description.icontains(term, autoescape=True),
            ))

        total = query.count()
        skip = (filters.page - 1) * filters.limit
        items: List[Complaint] = (
            query.options(
                joinedload(Complaint.category),
                joinedload(Complaint.reporter),
                joinedload(Complaint.assigned_to),
            )
            .order_by(Complaint.created_at.desc(), Complaint.id.desc())
            .offset(skip)
            .limit(filters.limit)
            .all()
        )
        return {"items": items, "total": total, "page": filters.page, "limit": filters.limit}

    @staticmethod
    def update_complaint(db: Session, complaint_id: int, data: Dict[str, Any]) -> Complaint:
        """
        Apply a partial update. Field-level permissions are checked by the
        caller; this only validates references.

        Any status may follow any other; there is no transition table.
        """
        complaint = db.get(Complaint, complaint_id)
        if complaint is None:
            raise NotFoundError("Complaint", complaint_id)

        if "category_id" in data:
            ensure_category_exists(db, data["category_id"])
        if data.get("assigned_to_id") is not None:
            ensure_assignable_user(db, data["assigned_to_id"])

        for key, value in data.items():
            if key == "status":
                apply_status(complaint, value)
            else:
                setattr(complaint, key, value)

        db.add(complaint)
        db.commit()
        logger.info("Complaint %d updated: %s", complaint_id, ", ".join(sorted(data)) or "no fields")
        return ComplaintService.get_complaint_by_id(db, complaint_id)

    @staticmethod
    def add_comment(db: Session, complaint: Complaint, author_id: int, message: str) -> Comment:
        comment = Comment(complaint_id=complaint.id, user_id=author_id, message=message)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        logger.info("Comment %d added to complaint %d by user %d", comment.id, complaint.id, author_id)
        return comment
