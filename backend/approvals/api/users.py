# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from approvals.api.deps import ActorDep, AdminDep
from approvals.exceptions import NotFoundError
from approvals.schemas.user import UpsertUserRequest, UserListResponse, UserResponse
from approvals.services.directory import UserInfo, get_user_directory

users_router = APIRouter(prefix="/users", tags=["users"])


def _build_user_response(user: UserInfo) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        manager_id=user.manager_id,
        is_active=user.is_active,
    )


@users_router.put(
    "/{user_id}",
    response_model=UserResponse,
)
async def upsert_user(
    user_id: uuid.UUID,
    payload: UpsertUserRequest,
    auth: AdminDep,
) -> UserResponse:
    """Create or update a user in the stub directory (admin only)."""
    user = await get_user_directory().upsert_user(UserInfo(id=user_id, **payload.model_dump()))
    return _build_user_response(user)


@users_router.get(
    "/{user_id}",
    response_model=UserResponse,
)
async def get_user(
    user_id: uuid.UUID,
    actor: ActorDep,
) -> UserResponse:
    """Get user info from the directory."""
    user = await get_user_directory().get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return _build_user_response(user)


@users_router.get(
    "",
    response_model=UserListResponse,
)
async def list_users(
    actor: ActorDep,
) -> UserListResponse:
    """List every user in the directory."""
    users = await get_user_directory().list_users()
    items = [_build_user_response(u) for u in users]
    return UserListResponse(items=items, total=len(items))
