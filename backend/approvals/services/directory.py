# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from approvals.models.enums import Role


class UserInfo(BaseModel):
    """User metadata from the directory service."""

    id: uuid.UUID
    name: str
    email: str
    role: Role = Role.EMPLOYEE
    manager_id: uuid.UUID | None = None  # reporting line used for "managed employees"
    is_active: bool = True


@runtime_checkable
class UserDirectory(Protocol):
    """Interface for the user directory."""

    async def get_user(self, user_id: uuid.UUID) -> UserInfo | None:
        """Fetch user metadata. Returns None if not found."""
        ...

    async def list_users(self) -> list[UserInfo]:
        """List every known user."""
        ...

    async def list_managed_user_ids(self, manager_id: uuid.UUID) -> frozenset[uuid.UUID]:
        """Return the ids of users whose manager_id is ``manager_id``."""
        ...

    async def list_active_users(self) -> list[UserInfo]:
        """List users that are still active."""
        ...

    async def upsert_user(self, user: UserInfo) -> UserInfo:
        """Create or replace a user record."""
        ...


class InMemoryUserDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserInfo] = {}

    def seed(self, user: UserInfo) -> None:
        """Seed a user for testing."""
        self._users[user.id] = user

    async def get_user(self, user_id: uuid.UUID) -> UserInfo | None:
        return self._users.get(user_id)

    async def list_users(self) -> list[UserInfo]:
        return sorted(self._users.values(), key=lambda u: u.name)

    async def list_managed_user_ids(self, manager_id: uuid.UUID) -> frozenset[uuid.UUID]:
        return frozenset(u.id for u in self._users.values() if u.manager_id == manager_id)

    async def list_active_users(self) -> list[UserInfo]:
        return [u for u in await self.list_users() if u.is_active]

    async def upsert_user(self, user: UserInfo) -> UserInfo:
        self.seed(user)
        return user


_user_directory: UserDirectory = InMemoryUserDirectory()


def get_user_directory() -> UserDirectory:
    """Return the configured user directory."""
    return _user_directory


def set_user_directory(directory: UserDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _user_directory
    _user_directory = directory
