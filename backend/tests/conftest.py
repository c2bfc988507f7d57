from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from approvals.db import get_session
from approvals.main import app
from approvals.models import SQLModel
from approvals.models.enums import Role
from approvals.schemas.auth import ActorContext
from approvals.services.directory import InMemoryUserDirectory, UserInfo, set_user_directory
from approvals.services.notification import (
    InMemoryNotificationSink,
    LoggingNotificationSink,
    drain_notifications,
    set_notification_sink,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@dataclass
class People:
    """The users seeded into the directory for every test.

    ``employee`` and ``teammate`` report to ``manager``; ``outsider``
    reports to ``other_manager``.
    """

    admin: UserInfo
    manager: UserInfo
    other_manager: UserInfo
    employee: UserInfo
    teammate: UserInfo
    outsider: UserInfo

    @staticmethod
    def headers(user: UserInfo) -> dict[str, str]:
        return {"X-User-Id": str(user.id), "X-Role": user.role.value}

    @staticmethod
    def actor(user: UserInfo) -> ActorContext:
        return ActorContext(user_id=user.id, role=user.role)


def _user(name: str, role: Role, manager_id: uuid.UUID | None = None) -> UserInfo:
    return UserInfo(
        id=uuid.uuid4(),
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        role=role,
        manager_id=manager_id,
    )


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with a fresh schema per test."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a database session on the per-test engine."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def people() -> Iterator[People]:
    """Seed the in-memory user directory for every test."""
    manager = _user("Morgan Manager", Role.MANAGER)
    other_manager = _user("Olive Other", Role.MANAGER)
    seeded = People(
        admin=_user("Ada Admin", Role.ADMIN),
        manager=manager,
        other_manager=other_manager,
        employee=_user("Eve Employee", Role.EMPLOYEE, manager.id),
        teammate=_user("Theo Teammate", Role.EMPLOYEE, manager.id),
        outsider=_user("Oscar Outsider", Role.EMPLOYEE, other_manager.id),
    )
    directory = InMemoryUserDirectory()
    for user in (
        seeded.admin,
        seeded.manager,
        seeded.other_manager,
        seeded.employee,
        seeded.teammate,
        seeded.outsider,
    ):
        directory.seed(user)
    set_user_directory(directory)
    yield seeded
    set_user_directory(InMemoryUserDirectory())


@pytest.fixture(autouse=True)
async def notifications() -> AsyncIterator[InMemoryNotificationSink]:
    """Capture notifications sent during a test.

    Delivery runs in background tasks; call ``drain_notifications()`` before
    asserting on ``events``.
    """
    sink = InMemoryNotificationSink()
    set_notification_sink(sink)
    yield sink
    await drain_notifications(timeout=1)
    set_notification_sink(LoggingNotificationSink())
