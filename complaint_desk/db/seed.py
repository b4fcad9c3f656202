"""
Demo reference data and accounts.

Safe to run repeatedly: existing departments, categories and users are left
untouched.
"""

import logging

from sqlalchemy.orm import Session

from complaint_desk.core.exceptions import ConflictError
from complaint_desk.models.department import Category, Department
from complaint_desk.models.enums import RoleEnum
from complaint_desk.schemas.user import UserRegister
from complaint_desk.services.auth_service import AuthService

logger = logging.getLogger(__name__)

DEMO_DEPARTMENTS = {
    "IT Support": ("Technical issues", ["Hardware", "Software"]),
    "HR": ("Human resources", ["Payroll", "Benefits"]),
}

DEMO_USERS = [
    {"name": "Admin User", "email": "admin@example.com", "password": "password123", "role": RoleEnum.ADMIN},
    {"name": "Staff Member", "email": "staff@example.com", "password": "password123", "role": RoleEnum.STAFF,
     "department": "IT Support"},
    {"name": "Demo User", "email": "demo@gmail.com", "password": "12341234", "role": RoleEnum.USER},
]


def _get_or_create_department(db: Session, name: str, description: str) -> Department:
    department = db.query(Department).filter(Department.name == name).first()
    if department is None:
        department = Department(name=name, description=description)
        db.add(department)
        db.flush()
    return department


def seed_demo_data(db: Session) -> None:
    departments = {}
    for name, (description, categories) in DEMO_DEPARTMENTS.items():
        department = _get_or_create_department(db, name, description)
        departments[name] = department
        existing = {c.name for c in department.categories}
        for category_name in categories:
            if category_name not in existing:
                db.add(Category(name=category_name, department_id=department.id))
    db.commit()

    for account in DEMO_USERS:
        department = departments.get(account.get("department"))
        payload = UserRegister(
            name=account["name"],
            email=account["email"],
            password=account["password"],
            role=account["role"],
            department_id=department.id if department else None,
        )
        try:
            AuthService.register(db, payload)
        except ConflictError:
            logger.debug("Demo user %s already present", account["email"])

    logger.info("Demo data seeded")
