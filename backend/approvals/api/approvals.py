# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from approvals.api.deps import ActorDep
from approvals.db import SessionDep
from approvals.models.enums import RequestKind
from approvals.schemas.request import RejectPayload, RequestResponse
from approvals.services import workflow

approvals_router = APIRouter(prefix="/approvals", tags=["approvals"])


@approvals_router.post("/{kind}/{request_id}/approve", response_model=RequestResponse)
async def approve(
    kind: RequestKind,
    request_id: uuid.UUID,
    session: SessionDep,
    actor: ActorDep,
):
    """Approve a submitted request of any kind."""
    return await workflow.approve_request(session, actor, kind, request_id)


@approvals_router.post("/{kind}/{request_id}/reject", response_model=RequestResponse)
async def reject(
    kind: RequestKind,
    request_id: uuid.UUID,
    payload: RejectPayload,
    session: SessionDep,
    actor: ActorDep,
):
    """Reject a submitted request of any kind."""
    return await workflow.reject_request(session, actor, kind, request_id, payload.reason)
