# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from approvals.models.enums import Role


class UpsertUserRequest(BaseModel):
    """Request body for upserting a user in the directory stub."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=1, max_length=255)
    role: Role = Role.EMPLOYEE
    manager_id: uuid.UUID | None = None
    is_active: bool = True


class UserResponse(BaseModel):
    """Response schema for a directory user."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    manager_id: uuid.UUID | None
    is_active: bool


class UserListResponse(BaseModel):
    """List of directory users."""

    items: list[UserResponse]
    total: int
