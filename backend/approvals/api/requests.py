# ruff: noqa: B008
# No postponed annotations here: endpoint signatures close over per-kind schema types.
import uuid

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from approvals.api.deps import ActorDep
from approvals.db import SessionDep
from approvals.models.enums import RequestKind
from approvals.schemas.request import (
    CreateExpensePayload,
    CreateLeavePayload,
    CreateTimesheetPayload,
    DeleteResponse,
    ExpenseResponse,
    LeaveResponse,
    RejectPayload,
    RequestListResponse,
    TimesheetResponse,
    UpdateExpensePayload,
    UpdateLeavePayload,
    UpdateTimesheetPayload,
)
from approvals.services import workflow


def build_request_router(
    kind: RequestKind,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
) -> APIRouter:
    """Build the CRUD and lifecycle routes for one request kind."""
    router = APIRouter(prefix=f"/{kind.value}s", tags=[f"{kind.value}s"])

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    async def create(payload: create_schema, session: SessionDep, actor: ActorDep):  # type: ignore[valid-type]
        return await workflow.create_request(session, actor, kind, payload)

    @router.get("", response_model=RequestListResponse)
    async def list_(
        session: SessionDep,
        actor: ActorDep,
        status_filter: str | None = Query(default=None, alias="status"),
    ) -> RequestListResponse:
        return await workflow.list_requests(session, actor, kind, status_filter)

    @router.get("/{request_id}", response_model=response_schema)
    async def get(request_id: uuid.UUID, session: SessionDep, actor: ActorDep):
        return await workflow.get_request(session, actor, kind, request_id)

    @router.patch("/{request_id}", response_model=response_schema)
    async def update(request_id: uuid.UUID, payload: update_schema, session: SessionDep, actor: ActorDep):  # type: ignore[valid-type]
        return await workflow.update_request(session, actor, kind, request_id, payload)

    @router.delete("/{request_id}", response_model=DeleteResponse)
    async def delete(request_id: uuid.UUID, session: SessionDep, actor: ActorDep) -> DeleteResponse:
        deleted_id = await workflow.delete_request(session, actor, kind, request_id)
        return DeleteResponse(id=deleted_id)

    @router.post("/{request_id}/submit", response_model=response_schema)
    async def submit(request_id: uuid.UUID, session: SessionDep, actor: ActorDep):
        return await workflow.submit_request(session, actor, kind, request_id)

    @router.post("/{request_id}/approve", response_model=response_schema)
    async def approve(request_id: uuid.UUID, session: SessionDep, actor: ActorDep):
        return await workflow.approve_request(session, actor, kind, request_id)

    @router.post("/{request_id}/reject", response_model=response_schema)
    async def reject(request_id: uuid.UUID, payload: RejectPayload, session: SessionDep, actor: ActorDep):
        return await workflow.reject_request(session, actor, kind, request_id, payload.reason)

    return router


timesheets_router = build_request_router(
    RequestKind.TIMESHEET, CreateTimesheetPayload, UpdateTimesheetPayload, TimesheetResponse
)
expenses_router = build_request_router(RequestKind.EXPENSE, CreateExpensePayload, UpdateExpensePayload, ExpenseResponse)
leaves_router = build_request_router(RequestKind.LEAVE, CreateLeavePayload, UpdateLeavePayload, LeaveResponse)
