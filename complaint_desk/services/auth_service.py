import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from complaint_desk.core.exceptions import AuthenticationError, ConflictError, ValidationError
from complaint_desk.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from complaint_desk.models.department import Department
from complaint_desk.models.enums import RoleEnum
from complaint_desk.models.user import User
from complaint_desk.schemas.user import UserRegister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as carried by a verified token"""
    id: int
    role: RoleEnum


class AuthService:
    @staticmethod
    def register(db: Session, payload: UserRegister) -> User:
        """
        Create an account storing only the bcrypt hash of the password.

        Raises:
            ConflictError: the email is already registered
            ValidationError: departmentId names no department
        """
        email = payload.email.lower()
        if db.query(User.id).filter(User.email == email).first():
            raise ConflictError("Email already registered", field="email")

        if payload.department_id is not None and db.get(Department, payload.department_id) is None:
            raise ValidationError("Department does not exist", field="departmentId")

        user = User(
            name=payload.name,
            email=email,
            password_hash=get_password_hash(payload.password),
            role=payload.role,
            department_id=payload.department_id,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            db.rollback()
            raise ConflictError("Email already registered", field="email")
        db.refresh(user)
        logger.info("Registered user %d with role %s", user.id, user.role.value)
        return user

    @staticmethod
    def login(db: Session, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and issue an access token bound to the user's id and role"""
        user = db.query(User).filter(User.email == email.lower()).first()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        logger.info("User %d logged in", user.id)
        return user, token

    @staticmethod
    def verify_token(token: str) -> Principal:
        payload = decode_access_token(token)
        try:
            return Principal(id=int(payload["sub"]), role=RoleEnum(payload["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token payload")

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)
