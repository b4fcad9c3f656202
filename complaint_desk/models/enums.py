import enum

class RoleEnum(str, enum.Enum):
    """Account roles, least to most privileged"""
    USER = "USER"
    STAFF = "STAFF"
    ADMIN = "ADMIN"


class ComplaintStatusEnum(str, enum.Enum):
    """Complaint lifecycle: OPEN -> IN_PROGRESS -> RESOLVED | REJECTED"""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class PriorityEnum(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


CLOSED_STATUSES = {ComplaintStatusEnum.RESOLVED, ComplaintStatusEnum.REJECTED}
ASSIGNABLE_ROLES = {RoleEnum.STAFF, RoleEnum.ADMIN}
