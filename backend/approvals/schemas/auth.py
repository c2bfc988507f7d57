# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from approvals.models.enums import Role


class ActorContext(BaseModel):
    """The authenticated user performing an operation."""

    user_id: uuid.UUID
    role: Role = Role.EMPLOYEE
