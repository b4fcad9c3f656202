"""
Domain errors for the complaint desk.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request. ``complaint_desk.main`` registers one handler that turns any
``ComplaintDeskError`` into a JSON response using ``status_code``.
"""

from typing import Any, Dict, Optional


class ComplaintDeskError(Exception):
    """Base exception for all complaint desk errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ComplaintDeskError):
    """Input is malformed, missing, or references something that does not exist"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(ValidationError):
    """Unique value already taken (e.g. a registration email)"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "CONFLICT"


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ComplaintDeskError):
    """Missing, invalid, or expired credentials"""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(ComplaintDeskError):
    """Valid principal without the privilege for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(ComplaintDeskError):
    """Requested resource does not exist or is outside the caller's scope"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )
