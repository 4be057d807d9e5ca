"""Ticket service - local listing and detail, write-through to Freshdesk.

Writes go to Freshdesk first; the record Freshdesk returns is then
reconciled into the mirror.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient
from freshdesk_api.client import FileTuple

from ..config import settings
from ..models import (
    TICKET_EMAIL_TYPES,
    Conversation,
    ConversationAttachment,
    ConversationDeliveryDetail,
    ConversationEmail,
    Ticket,
    TicketCustomField,
    TicketEmail,
    TicketTag,
)
from ..schemas.common import AttachmentRead, ListMeta
from ..schemas.ticket import ConversationRead, TicketDetail, TicketFilters, TicketList, TicketRead
from ..sync import refresh
from ..sync.field_mapper import ensure_utc
from ..sync.import_tickets import (
    TICKET_CHILD_KEYS,
    find_description_conversation,
    upsert_conversation,
    upsert_ticket,
)
from ..sync.store import as_int, find_by_id, load_children
from ..sync.translator import translate_outbound

SORTABLE_COLUMNS = {
    "id": Ticket.id,
    "created_at": Ticket.created_at,
    "updated_at": Ticket.updated_at,
    "due_by": Ticket.due_by,
    "priority": Ticket.priority,
    "status": Ticket.status,
    "subject": Ticket.subject,
}

INTEGER_FIELDS = ("status", "priority", "source")


def _coerce_integers(payload: dict[str, Any]) -> dict[str, Any]:
    result = dict(payload)
    for key in INTEGER_FIELDS:
        if key in result and result[key] is not None:
            result[key] = as_int(result[key])
    return result


def _apply_filters(stmt, filters: TicketFilters):
    if filters.search:
        q = f"%{filters.search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Ticket.subject).like(q),
                cast(Ticket.id, String).like(q),
                cast(Ticket.remote_id, String).like(q),
            )
        )

    ranges = (
        (Ticket.created_at, filters.created_after, filters.created_before),
        (Ticket.updated_at, filters.updated_after, filters.updated_before),
        (Ticket.due_by, filters.due_after, filters.due_before),
    )
    for column, after, before in ranges:
        if after is not None:
            stmt = stmt.where(column >= ensure_utc(after))
        if before is not None:
            stmt = stmt.where(column <= ensure_utc(before))

    membership = (
        (Ticket.status, filters.status),
        (Ticket.priority, filters.priority),
        (Ticket.source, filters.source),
        (Ticket.responder_id, filters.responder_id),
        (Ticket.group_id, filters.group_id),
        (Ticket.company_id, filters.company_id),
        (Ticket.requester_id, filters.requester_id),
        (Ticket.ticket_type, filters.ticket_type),
    )
    for column, values in membership:
        if values:
            stmt = stmt.where(column.in_(values))

    if filters.tags:
        stmt = stmt.where(Ticket.id.in_(select(TicketTag.ticket_id).where(TicketTag.tag.in_(filters.tags))))

    for field_name, values in filters.custom_fields.items():
        if not values:
            continue
        stmt = stmt.where(
            Ticket.id.in_(
                select(TicketCustomField.ticket_id).where(
                    TicketCustomField.field_name == field_name,
                    TicketCustomField.field_value.in_(values),
                )
            )
        )
    return stmt


async def list_tickets(
    db: AsyncSession,
    filters: TicketFilters | None = None,
    *,
    order_by: str = "created_at",
    order_type: str = "desc",
    page: int = 1,
    per_page: int | None = None,
) -> TicketList:
    """List live (not deleted, not spam) tickets with filters and pagination."""
    page = max(page, 1)
    per_page = per_page if per_page and per_page > 0 else settings.default_page_size

    stmt = select(Ticket).where(Ticket.is_deleted.is_(False), Ticket.spam.is_(False))
    stmt = _apply_filters(stmt, filters or TicketFilters())

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    column = SORTABLE_COLUMNS.get(order_by, Ticket.created_at)
    ordering = column.asc() if order_type.lower() == "asc" else column.desc()
    stmt = stmt.order_by(ordering, Ticket.id.desc()).offset((page - 1) * per_page).limit(per_page)
    tickets = list((await db.execute(stmt)).scalars().all())

    return TicketList(
        tickets=[TicketRead.model_validate(t) for t in tickets],
        meta=ListMeta.build(total, page, per_page),
    )


async def get_ticket_data(db: AsyncSession, ticket_id: int) -> TicketDetail | None:
    """Ticket with description, description attachments, tags, custom fields and emails."""
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None

    detail = TicketDetail.model_validate(ticket)
    description = await find_description_conversation(db, ticket.id)
    if description is not None:
        detail.description = description.body
        detail.description_text = description.body_text
        detail.attachments = [
            AttachmentRead.model_validate(a)
            for a in await load_children(db, ConversationAttachment, "conversation_id", description.id)
        ]

    detail.tags = [t.tag for t in await load_children(db, TicketTag, "ticket_id", ticket.id)]
    detail.custom_fields = {
        f.field_name: f.field_value for f in await load_children(db, TicketCustomField, "ticket_id", ticket.id)
    }
    emails = await load_children(db, TicketEmail, "ticket_id", ticket.id)
    for email_type in TICKET_EMAIL_TYPES:
        setattr(detail, email_type, [e.email for e in emails if e.email_type == email_type])
    return detail


async def show_ticket(
    db: AsyncSession, fd: FreshdeskClient, ticket_id: int, *, force: bool = False,
) -> TicketDetail | None:
    """Ticket detail, refreshed from Freshdesk first when the cached copy is stale."""
    ticket = await refresh.show(db, fd, ticket_id, force=force)
    if ticket is None:
        return None
    return await get_ticket_data(db, ticket.id)


async def list_conversations(db: AsyncSession, ticket_id: int) -> list[ConversationRead]:
    """Live conversations of a ticket (description excluded), oldest first."""
    stmt = (
        select(Conversation)
        .where(
            Conversation.ticket_id == ticket_id,
            Conversation.ticket_conversation.is_(False),
            Conversation.is_deleted.is_(False),
        )
        .order_by(Conversation.created_at, Conversation.id)
    )
    conversations = list((await db.execute(stmt)).scalars().all())

    out = []
    for conv in conversations:
        item = ConversationRead.model_validate(conv)
        item.attachments = [
            AttachmentRead.model_validate(a)
            for a in await load_children(db, ConversationAttachment, "conversation_id", conv.id)
        ]
        emails = await load_children(db, ConversationEmail, "conversation_id", conv.id)
        item.cc_emails = [e.email for e in emails if e.email_type == "cc_emails"]
        item.to_emails = [e.email for e in emails if e.email_type == "to_emails"]
        item.bcc_emails = [e.email for e in emails if e.email_type == "bcc_emails"]
        details = await load_children(db, ConversationDeliveryDetail, "conversation_id", conv.id)
        item.failed_emails = [d.email for d in details if d.status == "failed"]
        item.pending_emails = [d.email for d in details if d.status == "pending"]
        out.append(item)
    return out


# =========================================================================
# Write-through
# =========================================================================


async def create_ticket(
    db: AsyncSession,
    fd: FreshdeskClient,
    data: dict[str, Any],
    attachments: list[FileTuple] | None = None,
) -> Ticket:
    payload = _coerce_integers(await translate_outbound(db, "ticket", data))
    remote = await fd.tickets.create(payload, attachments)
    return await upsert_ticket(db, remote)


async def update_ticket(
    db: AsyncSession, fd: FreshdeskClient, ticket_id: int, data: dict[str, Any],
) -> Ticket | None:
    """Partial update: only the child collections present in ``data`` are rebuilt."""
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None
    payload = _coerce_integers(await translate_outbound(db, "ticket", data))
    remote = await fd.tickets.update(ticket.remote_id, payload)
    return await upsert_ticket(db, remote, rebuild=[k for k in TICKET_CHILD_KEYS if k in data])


async def delete_ticket(db: AsyncSession, fd: FreshdeskClient, ticket_id: int) -> bool:
    """Delete remotely, then soft-delete the local row."""
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return False
    await fd.tickets.delete(ticket.remote_id)
    ticket.is_deleted = True
    ticket.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    return True


async def add_reply(
    db: AsyncSession,
    fd: FreshdeskClient,
    ticket_id: int,
    data: dict[str, Any],
    attachments: list[FileTuple] | None = None,
) -> Conversation | None:
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None
    payload = await translate_outbound(db, "conversation", data)
    remote = await fd.tickets.reply(ticket.remote_id, payload, attachments)
    return await upsert_conversation(db, remote, ticket=ticket)


async def add_note(
    db: AsyncSession,
    fd: FreshdeskClient,
    ticket_id: int,
    data: dict[str, Any],
    attachments: list[FileTuple] | None = None,
) -> Conversation | None:
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None
    payload = await translate_outbound(db, "conversation", data)
    remote = await fd.tickets.note(ticket.remote_id, payload, attachments)
    return await upsert_conversation(db, remote, ticket=ticket)


async def forward_ticket(
    db: AsyncSession, fd: FreshdeskClient, ticket_id: int, data: dict[str, Any],
) -> Conversation | None:
    ticket = await find_by_id(db, Ticket, ticket_id)
    if ticket is None:
        return None
    payload = await translate_outbound(db, "conversation", data)
    remote = await fd.tickets.forward(ticket.remote_id, payload)
    return await upsert_conversation(db, remote, ticket=ticket)


async def update_conversation(
    db: AsyncSession,
    fd: FreshdeskClient,
    conversation_id: int,
    data: dict[str, Any],
    attachments: list[FileTuple] | None = None,
) -> Conversation | None:
    """Update a note remotely; its attachments, emails and delivery details are replaced."""
    conversation = await find_by_id(db, Conversation, conversation_id)
    if conversation is None or conversation.remote_id is None:
        return None
    ticket = await find_by_id(db, Ticket, conversation.ticket_id)
    payload = await translate_outbound(db, "conversation", data)
    remote = await fd.tickets.update_conversation(conversation.remote_id, payload, attachments)
    return await upsert_conversation(db, remote, ticket=ticket)


async def delete_conversation(db: AsyncSession, fd: FreshdeskClient, conversation_id: int) -> bool:
    conversation = await find_by_id(db, Conversation, conversation_id)
    if conversation is None or conversation.remote_id is None:
        return False
    await fd.tickets.delete_conversation(conversation.remote_id)
    conversation.is_deleted = True
    conversation.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    return True
