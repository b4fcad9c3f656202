from typing import List, Optional

from complaint_desk.schemas.common import CamelModel


class CategoryRead(CamelModel):
    id: int
    name: str
    department_id: int


class DepartmentRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    categories: List[CategoryRead] = []
