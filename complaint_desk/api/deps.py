from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from complaint_desk.core.exceptions import AuthenticationError, AuthorizationError
from complaint_desk.db.session import get_db  # noqa: F401  re-exported for routes
from complaint_desk.models.enums import RoleEnum
from complaint_desk.services.auth_service import AuthService, Principal
from complaint_desk.services.notifier import ComplaintNotifier

# auto_error=False so a missing header is a 401 from our own handler
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return AuthService.verify_token(credentials.credentials)


def require_roles(*roles: RoleEnum) -> Callable[..., Principal]:
    """Dependency factory allowing only the given roles through"""
    allowed = set(roles)

    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise AuthorizationError("Insufficient privileges")
        return principal

    return checker


def get_notifier(request: Request) -> ComplaintNotifier:
    return request.app.state.notifier
