"""
Role-based access rules for complaints.

USER   reads and comments on the complaints they reported, never updates.
STAFF  reads everything, may change ``status`` only.
ADMIN  unrestricted, plus assignment, analytics and the staff directory.

Comment rights follow read rights.

Role-level denials raise AuthorizationError (403) before any lookup happens.
A complaint outside the caller's scope is reported as not found (404), the
same answer a nonexistent id gets, so existence never leaks.
"""

from typing import Iterable, List

from sqlalchemy.sql.elements import ColumnElement

from complaint_desk.core.exceptions import AuthorizationError, NotFoundError
from complaint_desk.models.complaint import Complaint
from complaint_desk.models.enums import RoleEnum
from complaint_desk.services.auth_service import Principal

UPDATABLE_FIELDS = {
    RoleEnum.USER: frozenset(),
    RoleEnum.STAFF: frozenset({"status"}),
    RoleEnum.ADMIN: frozenset({
        "title", "description", "category_id", "priority", "status", "assigned_to_id",
    }),
}


def complaint_scope(principal: Principal) -> List[ColumnElement]:
    """Mandatory criteria ANDed into every complaint list query for this principal."""
    if principal.role == RoleEnum.USER:
        return [Complaint.reporter_id == principal.id]
    return []


def can_read(principal: Principal, complaint: Complaint) -> bool:
    if principal.role == RoleEnum.USER:
        return complaint.reporter_id == principal.id
    return True


def ensure_can_update(principal: Principal, fields: Iterable[str]) -> None:
    allowed = UPDATABLE_FIELDS[principal.role]
    if not allowed:
        raise AuthorizationError("Your role may not update complaints")

    denied = sorted(set(fields) - allowed)
    if denied:
        raise AuthorizationError(f"Your role may not change: {', '.join(denied)}")


def ensure_can_comment(principal: Principal, complaint: Complaint) -> None:
    # Out of scope looks exactly like a missing complaint
    if not can_read(principal, complaint):
        raise NotFoundError("Complaint", complaint.id)
