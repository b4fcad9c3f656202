from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from complaint_desk.api.deps import get_db
from complaint_desk.schemas.department import DepartmentRead
from complaint_desk.services.department_service import DepartmentService

router = APIRouter()


@router.get("", response_model=List[DepartmentRead])
def list_departments(
    db: Session = Depends(get_db),
):
    """Departments with their categories; public reference data."""
    return DepartmentService.list_departments(db)
