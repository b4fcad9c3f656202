from typing import List

from complaint_desk.schemas.common import CamelModel


class AssignRequest(CamelModel):
    complaint_id: int
    staff_id: int


class AnalyticsCounts(CamelModel):
    total: int
    open: int
    in_progress: int
    resolved: int
    rejected: int


class DepartmentStat(CamelModel):
    name: str
    count: int


class AnalyticsRead(CamelModel):
    counts: AnalyticsCounts
    dept_stats: List[DepartmentStat]
