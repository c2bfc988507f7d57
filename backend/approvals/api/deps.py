# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from approvals.exceptions import ForbiddenError
from approvals.models.enums import Role
from approvals.schemas.auth import ActorContext


async def get_actor(
    x_user_id: uuid.UUID = Header(),
    x_role: Role = Header(default=Role.EMPLOYEE),
) -> ActorContext:
    """Extract the acting user from request headers."""
    return ActorContext(user_id=x_user_id, role=x_role)


ActorDep = Annotated[ActorContext, Depends(get_actor)]


async def require_admin(
    actor: ActorDep,
) -> ActorContext:
    """Require admin role for the request."""
    if actor.role != Role.ADMIN:
        raise ForbiddenError("Admin access required")
    return actor


AdminDep = Annotated[ActorContext, Depends(require_admin)]
