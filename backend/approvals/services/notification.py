# ruff: noqa: TC003
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from approvals.models.enums import AuditAction, RequestKind

logger = logging.getLogger(__name__)


class NotificationEvent(BaseModel):
    """A lifecycle transition worth telling someone about."""

    kind: RequestKind
    request_id: uuid.UUID
    action: AuditAction
    actor_id: uuid.UUID
    recipient_ids: list[uuid.UUID]
    message: str


@runtime_checkable
class NotificationSink(Protocol):
    """Interface for the notification delivery service."""

    async def notify(self, event: NotificationEvent) -> None:
        """Deliver the event. May raise; callers never let it fail a transition."""
        ...


class LoggingNotificationSink:
    """Default sink that only writes the event to the log."""

    async def notify(self, event: NotificationEvent) -> None:
        logger.info(
            "Notify %s: %s (%s %s)",
            ",".join(str(r) for r in event.recipient_ids),
            event.message,
            event.kind,
            event.request_id,
        )


class InMemoryNotificationSink:
    """Sink that records events, for tests and local development."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    async def notify(self, event: NotificationEvent) -> None:
        self.events.append(event)


_notification_sink: NotificationSink = LoggingNotificationSink()


def get_notification_sink() -> NotificationSink:
    """Return the configured notification sink."""
    return _notification_sink


def set_notification_sink(sink: NotificationSink) -> None:
    """Override the sink (for testing or production wiring)."""
    global _notification_sink
    _notification_sink = sink


# Strong references to in-flight deliveries; the event loop only keeps weak ones.
_pending: set[asyncio.Task[None]] = set()


async def _deliver(sink: NotificationSink, event: NotificationEvent) -> None:
    try:
        await sink.notify(event)
    except Exception:
        logger.exception("Notification delivery failed for %s %s", event.kind, event.request_id)


def dispatch(event: NotificationEvent) -> asyncio.Task[None] | None:
    """Schedule delivery in the background and return immediately.

    The sink is resolved now, so a later ``set_notification_sink`` does not
    redirect an event that is already on its way.
    """
    if not event.recipient_ids:
        return None
    task = asyncio.create_task(_deliver(get_notification_sink(), event))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain_notifications(timeout: float | None = None) -> None:
    """Wait for in-flight deliveries; whatever is still running after ``timeout`` is cancelled."""
    if not _pending:
        return
    _done, still_running = await asyncio.wait(set(_pending), timeout=timeout)
    for task in still_running:
        task.cancel()
    if still_running:
        logger.warning("Cancelled %d undelivered notification(s)", len(still_running))
        await asyncio.gather(*still_running, return_exceptions=True)
