from typing import List

from sqlalchemy.orm import Session, selectinload

from complaint_desk.models.department import Department


class DepartmentService:
    @staticmethod
    def list_departments(db: Session) -> List[Department]:
        """All departments with their categories, alphabetical"""
        return (
            db.query(Department)
            .options(selectinload(Department.categories))
            .order_by(Department.name.asc())
            .all()
        )
