from sqlmodel import SQLModel

from approvals.models.audit import AuditLog
from approvals.models.balance import LeaveBalance
from approvals.models.base import TimestampMixin, UUIDBase
from approvals.models.enums import (
    AuditAction,
    AuditEntityType,
    InitializationStatus,
    Operation,
    RequestKind,
    RequestStatus,
    Role,
)
from approvals.models.holiday import Holiday
from approvals.models.leave_type import LeaveType
from approvals.models.request import Expense, LeaveRequest, RequestFields, Timesheet

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Expense",
    "Holiday",
    "InitializationStatus",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveType",
    "Operation",
    "RequestFields",
    "RequestKind",
    "RequestStatus",
    "Role",
    "SQLModel",
    "Timesheet",
    "TimestampMixin",
    "UUIDBase",
]
