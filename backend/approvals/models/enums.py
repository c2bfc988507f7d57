from __future__ import annotations

import enum


class RequestKind(enum.StrEnum):
    """Discriminant of the three request kinds sharing one lifecycle."""

    TIMESHEET = "timesheet"
    EXPENSE = "expense"
    LEAVE = "leave"


class RequestStatus(enum.StrEnum):
    """Lifecycle state of a request."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    # Reserved for leave; no transition produces or consumes it.
    PENDING = "pending"


class Role(enum.StrEnum):
    """Role of the acting user."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


class Operation(enum.StrEnum):
    """Lifecycle operations checked by the authorization matrix."""

    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


class InitializationStatus(enum.StrEnum):
    """Outcome of seeding a default leave balance."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    TIMESHEET = "TIMESHEET"
    EXPENSE = "EXPENSE"
    LEAVE = "LEAVE"
    LEAVE_TYPE = "LEAVE_TYPE"
    LEAVE_BALANCE = "LEAVE_BALANCE"
    HOLIDAY = "HOLIDAY"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    ADJUST = "ADJUST"
