from __future__ import annotations

from sqlmodel import Field

from approvals.models.base import TimestampMixin, UUIDBase


class LeaveType(UUIDBase, TimestampMixin, table=True):
    """Catalog entry for a kind of leave (annual, sick, ...).

    ``max_days`` of 0 means the type is unlimited and never touches the
    balance ledger.
    """

    __tablename__ = "leave_type"

    code: str = Field(max_length=50, unique=True, index=True)
    name: str = Field(max_length=255)
    description: str = ""
    max_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    is_active: bool = Field(default=True, sa_column_kwargs={"server_default": "1"})
    has_default_balance: bool = Field(default=False, sa_column_kwargs={"server_default": "0"})

    @property
    def is_balance_tracked(self) -> bool:
        return self.max_days > 0
