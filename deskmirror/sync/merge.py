"""Merge coordinator - replays Freshdesk contact and ticket merges locally."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient

from ..models import Avatar, Contact, ContactCustomField, Conversation, Ticket
from ..schemas.merge import MergeResult
from .import_tickets import import_conversation_thread, upsert_ticket
from .importer import upsert_contact
from .refresh import fetch_conversations
from .store import as_int, find_by_id
from .translator import company_ids_outbound

logger = logging.getLogger(__name__)


async def _resolve_secondaries(
    db: AsyncSession, model: type, primary_id: int, secondary_ids: Sequence[Any],
) -> list:
    """Load secondary rows that exist locally and carry a remote id."""
    rows = []
    seen: set[int] = set()
    for raw_id in secondary_ids:
        local_id = as_int(raw_id)
        if local_id is None or local_id == primary_id or local_id in seen:
            continue
        seen.add(local_id)
        row = await find_by_id(db, model, local_id)
        if row is None or row.remote_id is None:
            logger.warning("Skipping %s %s in merge: not mirrored locally", model.__tablename__, local_id)
            continue
        rows.append(row)
    return rows


async def merge_contacts(
    db: AsyncSession,
    fd: FreshdeskClient,
    primary_id: int,
    secondary_ids: Sequence[Any],
    overrides: dict[str, Any] | None = None,
) -> MergeResult | None:
    """Merge secondary contacts into the primary, remotely then locally.

    Locally, tickets requested by a secondary move to the primary and the
    secondary rows are hard-deleted. Conversation authorship is left as is.
    Returns None when the primary is not mirrored locally.
    """
    primary = await find_by_id(db, Contact, primary_id)
    if primary is None or primary.remote_id is None:
        return None
    secondaries = await _resolve_secondaries(db, Contact, primary.id, secondary_ids)
    if not secondaries:
        raise ValueError("No secondary contacts to merge")

    contact_data = dict(overrides or {})
    if "company_ids" in contact_data:
        contact_data["company_ids"] = await company_ids_outbound(db, contact_data["company_ids"])

    secondary_remote_ids = [c.remote_id for c in secondaries]
    remote = await fd.contacts.merge(primary.remote_id, secondary_remote_ids, contact_data or None)
    merged = await fd.contacts.get(primary.remote_id)

    secondary_local_ids = [c.id for c in secondaries]
    repointed = await db.execute(
        update(Ticket)
        .where(Ticket.requester_id.in_(secondary_local_ids))
        .values(requester_id=primary.id)
        .execution_options(synchronize_session="evaluate")
    )
    for child_model in (ContactCustomField, Avatar):
        await db.execute(
            delete(child_model)
            .where(child_model.contact_id.in_(secondary_local_ids))
            .execution_options(synchronize_session="fetch")
        )
    await db.execute(
        delete(Contact)
        .where(Contact.id.in_(secondary_local_ids))
        .execution_options(synchronize_session="fetch")
    )
    await db.flush()

    # Secondaries are gone, so the merged email cannot collide with them
    await upsert_contact(db, merged, commit=False)
    await db.commit()

    logger.info("Merged contacts %s into %s", secondary_local_ids, primary.id)
    return MergeResult(
        primary_id=primary.id,
        primary_remote_id=primary.remote_id,
        merged_ids=secondary_local_ids,
        merged_remote_ids=secondary_remote_ids,
        tickets_repointed=repointed.rowcount or 0,
        remote=remote,
    )


async def merge_tickets(
    db: AsyncSession,
    fd: FreshdeskClient,
    primary_id: int,
    secondary_ids: Sequence[Any],
) -> MergeResult | None:
    """Merge secondary tickets into the primary, remotely then locally.

    The primary is re-fetched and reconciled, secondary conversations move
    under it and the secondaries are soft-deleted. Then every involved
    ticket's remote thread is pulled and conversations missing locally are
    inserted under the primary, so retries never duplicate them.
    """
    primary = await find_by_id(db, Ticket, primary_id)
    if primary is None or primary.remote_id is None:
        return None
    secondaries = await _resolve_secondaries(db, Ticket, primary.id, secondary_ids)
    if not secondaries:
        raise ValueError("No secondary tickets to merge")

    secondary_remote_ids = [t.remote_id for t in secondaries]
    secondary_local_ids = [t.id for t in secondaries]
    remote = await fd.tickets.merge(primary.remote_id, secondary_remote_ids)
    payload = await fd.tickets.get(primary.remote_id)

    primary = await upsert_ticket(db, payload, commit=False)
    # Description conversations stay with their (soft-deleted) ticket
    stmt = select(Conversation.id).where(
        Conversation.ticket_id.in_(secondary_local_ids),
        Conversation.ticket_conversation.is_(False),
    )
    moved_ids = list((await db.execute(stmt)).scalars().all())
    if moved_ids:
        await db.execute(
            update(Conversation)
            .where(Conversation.id.in_(moved_ids))
            .values(ticket_id=primary.id)
            .execution_options(synchronize_session="evaluate")
        )
    await db.execute(
        update(Ticket)
        .where(Ticket.id.in_(secondary_local_ids))
        .values(is_deleted=True, deleted_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session="evaluate")
    )
    await db.commit()

    imported = 0
    for remote_id in [primary.remote_id, *secondary_remote_ids]:
        conversations = await fetch_conversations(fd, remote_id)
        thread = await import_conversation_thread(db, primary, conversations, commit=False)
        imported += thread.created
    await db.commit()

    logger.info("Merged tickets %s into %s (%d conversations imported)", secondary_local_ids, primary.id, imported)
    return MergeResult(
        primary_id=primary.id,
        primary_remote_id=primary.remote_id,
        merged_ids=secondary_local_ids,
        merged_remote_ids=secondary_remote_ids,
        conversations_repointed=len(moved_ids),
        conversations_imported=imported,
        remote=remote,
    )
