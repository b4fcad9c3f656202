from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from complaint_desk.api.deps import get_current_principal, get_db
from complaint_desk.core.exceptions import NotFoundError
from complaint_desk.schemas.user import LoginRequest, LoginResponse, UserRead, UserRegister
from complaint_desk.services.auth_service import AuthService, Principal

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserRegister,
    db: Session = Depends(get_db),
):
    """Create an account. The response never includes the credential."""
    return AuthService.register(db, payload)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
):
    user, token = AuthService.login(db, payload.email, payload.password)
    return {"user": user, "token": token}


@router.get("/me", response_model=UserRead)
def read_me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    user = AuthService.get_user(db, principal.id)
    if user is None:
        raise NotFoundError("User", principal.id)
    return user
