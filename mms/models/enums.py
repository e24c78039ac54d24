"""도메인 열거형 정의.

Domain enumerations shared by models, schemas and services.
Values are stored as plain strings in the database.
"""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    WORKER = "WORKER"


# 역할 레벨 — 숫자가 낮을수록 높은 권한 (Lower level = higher authority)
ROLE_LEVELS: dict[str, int] = {
    UserRole.ADMIN.value: 1,
    UserRole.MANAGER.value: 2,
    UserRole.WORKER.value: 3,
}


class IssueStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class IssuePriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class LocationType(str, enum.Enum):
    UNIT = "UNIT"
    OTHER = "OTHER"


class ProofType(str, enum.Enum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"
    VERIFICATION = "VERIFICATION"


class MediaType(str, enum.Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class OccupantType(str, enum.Enum):
    OWNER = "OWNER"
    TENANT = "TENANT"


class LogAction(str, enum.Enum):
    """시스템 로그 액션 — System log action codes."""

    LOGIN = "LOGIN"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DEACTIVATE = "DEACTIVATE"
    REACTIVATE = "REACTIVATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    RESOLVE = "RESOLVE"
    VERIFY = "VERIFY"
    OVERRIDE = "OVERRIDE"
    ASSIGN = "ASSIGN"
    UNASSIGN = "UNASSIGN"
    OCCUPY = "OCCUPY"
    VACATE = "VACATE"
