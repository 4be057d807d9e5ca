"""Staleness-gated read path for single tickets.

A cached ticket is served as-is while it is fresh. Once ``last_fetched_at``
is missing or older than ``settings.ticket_stale_after_seconds`` the ticket
and its whole conversation thread are pulled from Freshdesk first.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient

from ..config import settings
from ..models import Ticket
from ..schemas.sync import RefreshResult
from .field_mapper import ensure_utc
from .import_tickets import import_conversation_thread, upsert_ticket
from .store import find_by_id
from .sync_engine import paginate

logger = logging.getLogger(__name__)


def is_stale(ticket: Ticket, now: datetime | None = None, threshold_seconds: int | None = None) -> bool:
    if ticket.last_fetched_at is None:
        return True
    now = now or datetime.now(timezone.utc)
    if threshold_seconds is None:
        threshold_seconds = settings.ticket_stale_after_seconds
    return now - ensure_utc(ticket.last_fetched_at) > timedelta(seconds=threshold_seconds)


async def fetch_conversations(fd: FreshdeskClient, ticket_remote_id: int) -> list[dict[str, Any]]:
    return await paginate(
        lambda page, per_page: fd.tickets.conversations(ticket_remote_id, page=page, per_page=per_page)
    )


async def refresh_ticket(db: AsyncSession, fd: FreshdeskClient, ticket: Ticket) -> RefreshResult:
    """Pull one ticket and its thread, reconcile both and stamp ``last_fetched_at``."""
    payload = await fd.tickets.get(ticket.remote_id)
    conversations = await fetch_conversations(fd, ticket.remote_id)

    ticket = await upsert_ticket(db, payload, fetched=True, commit=False)
    thread = await import_conversation_thread(db, ticket, conversations, commit=False)
    await db.commit()

    logger.info(
        "Refreshed ticket #%s (%d new conversations, %d new attachments)",
        ticket.remote_id, thread.created, thread.attachments_added,
    )
    return RefreshResult(refreshed=True, conversations=thread)


async def show(
    db: AsyncSession,
    fd: FreshdeskClient,
    ticket_id: int,
    *,
    force: bool = False,
) -> Ticket | None:
    """Return the local ticket, refreshing it first when stale. None if unknown locally."""
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None
    if force or is_stale(ticket):
        await refresh_ticket(db, fd, ticket)
    return ticket
