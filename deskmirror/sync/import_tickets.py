"""Reconcile Freshdesk tickets and their conversation threads."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import (
    CONVERSATION_EMAIL_TYPES,
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
from ..schemas.sync import ThreadImportResult
from .field_mapper import (
    ATTACHMENT_FIELD_MAP,
    CONVERSATION_FIELD_MAP,
    iter_custom_fields,
    iter_strings,
    parse_datetime,
    remote_ticket_to_local,
    remote_to_local,
)
from .importer import assign, attachment_rows, finish, require_remote_id, upsert_row
from .store import as_int, find_by_remote_id, load_children, replace_children
from .translator import translate_inbound

TICKET_CHILD_KEYS = ("custom_fields", "tags", *TICKET_EMAIL_TYPES)


# =========================================================================
# Tickets
# =========================================================================


async def _rebuild_ticket_children(
    db: AsyncSession, ticket: Ticket, payload: dict[str, Any], keys: Collection[str],
) -> None:
    if "custom_fields" in keys:
        await replace_children(
            db, TicketCustomField, "ticket_id", ticket.id,
            [{"field_name": n, "field_value": v} for n, v in iter_custom_fields(payload.get("custom_fields"))],
        )
    if "tags" in keys:
        await replace_children(
            db, TicketTag, "ticket_id", ticket.id,
            [{"tag": t} for t in iter_strings(payload.get("tags"))],
        )
    for email_type in TICKET_EMAIL_TYPES:
        if email_type not in keys:
            continue
        await db.execute(
            delete(TicketEmail)
            .where(TicketEmail.ticket_id == ticket.id, TicketEmail.email_type == email_type)
            .execution_options(synchronize_session="fetch")
        )
        for email in iter_strings(payload.get(email_type)):
            db.add(TicketEmail(ticket_id=ticket.id, email=email, email_type=email_type))


async def upsert_ticket(
    db: AsyncSession,
    payload: dict[str, Any],
    *,
    rebuild: Collection[str] | None = None,
    fetched: bool = False,
    commit: bool = True,
) -> Ticket:
    """Reconcile one ticket.

    Scalars are always fully replaced. ``rebuild`` limits which child
    collections are destroyed and recreated (``custom_fields``, ``tags`` and
    the email-list keys); ``None`` rebuilds all of them. ``fetched`` marks a
    full single-ticket refresh and stamps ``last_fetched_at``.

    When the payload carries a ``description`` the ticket's description
    conversation is created or updated as well.
    """
    remote_id = require_remote_id(payload, "ticket")
    translated = await translate_inbound(db, "ticket", payload)
    values = remote_ticket_to_local(translated)
    if fetched:
        values["last_fetched_at"] = datetime.now(timezone.utc)

    ticket = await upsert_row(db, Ticket, remote_id, values)
    await _rebuild_ticket_children(db, ticket, payload, TICKET_CHILD_KEYS if rebuild is None else rebuild)

    if payload.get("description"):
        await upsert_description_conversation(db, ticket, payload)

    await finish(db, commit)
    return ticket


# =========================================================================
# Description pseudo-conversation
# =========================================================================


async def find_description_conversation(db: AsyncSession, ticket_id: int) -> Conversation | None:
    stmt = (
        select(Conversation)
        .where(Conversation.ticket_id == ticket_id, Conversation.ticket_conversation.is_(True))
        .order_by(Conversation.id)
        .limit(1)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def merge_attachments(db: AsyncSession, conversation_id: int, attachments: Any) -> int:
    """Add attachments missing from a conversation and refresh existing ones in place.

    Rows are matched by remote id, or by ``(name, attachment_url)`` when the
    item carries no id, and never deleted, so local metadata on attachments
    survives. Returns the number of rows created.
    """
    by_remote_id: dict[int, ConversationAttachment] = {}
    by_name_url: dict[tuple, ConversationAttachment] = {}
    for a in await load_children(db, ConversationAttachment, "conversation_id", conversation_id):
        if a.remote_id is not None:
            by_remote_id[a.remote_id] = a
        else:
            by_name_url[(a.name, a.attachment_url)] = a
    created = 0
    for item in attachments or []:
        if not isinstance(item, dict):
            continue
        remote_id = as_int(item.get("id"))
        values = remote_to_local(item, ATTACHMENT_FIELD_MAP)
        name_url = (values.get("name"), values.get("attachment_url"))
        if remote_id is not None:
            row = by_remote_id.get(remote_id)
        else:
            row = by_name_url.get(name_url)
        if row is None:
            row = ConversationAttachment(conversation_id=conversation_id, remote_id=remote_id, **values)
            db.add(row)
            if remote_id is not None:
                by_remote_id[remote_id] = row
            else:
                by_name_url[name_url] = row
            created += 1
        else:
            assign(row, {k: v for k, v in values.items() if v is not None})
    return created


async def upsert_description_conversation(
    db: AsyncSession, ticket: Ticket, payload: dict[str, Any],
) -> Conversation:
    """Create the ticket's description conversation, or update its body in place."""
    conversation = await find_description_conversation(db, ticket.id)
    if conversation is None:
        conversation = Conversation(
            ticket_id=ticket.id,
            ticket_conversation=True,
            body=payload.get("description"),
            body_text=payload.get("description_text"),
            user_id=ticket.requester_id,
            created_at=parse_datetime(payload.get("created_at")),
            updated_at=parse_datetime(payload.get("updated_at")),
        )
        db.add(conversation)
        await db.flush()
    else:
        conversation.body = payload.get("description")
        conversation.body_text = payload.get("description_text")
        conversation.updated_at = parse_datetime(payload.get("updated_at"))

    await merge_attachments(db, conversation.id, payload.get("attachments"))
    return conversation


# =========================================================================
# Conversations
# =========================================================================


def _email_rows(payload: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        {"email": email, "email_type": email_type}
        for email_type in CONVERSATION_EMAIL_TYPES
        for email in iter_strings(payload.get(email_type))
    ]


def _delivery_rows(payload: dict[str, Any]) -> list[dict[str, Any]]:
    details = payload.get("delivery_details")
    if not isinstance(details, dict):
        return []
    rows = []
    for key, emails in details.items():
        status = "failed" if key == "failed_emails" else "pending"
        rows.extend({"email": email, "status": status} for email in iter_strings(emails))
    return rows


async def upsert_conversation(
    db: AsyncSession,
    payload: dict[str, Any],
    *,
    ticket: Ticket | None = None,
    commit: bool = True,
) -> Conversation:
    """Reconcile one conversation and replace its attachments, emails and delivery details.

    ``ticket`` pins the owning local ticket; otherwise the payload's
    ``ticket_id`` is translated.
    """
    remote_id = require_remote_id(payload, "conversation")
    translated = await translate_inbound(db, "conversation", payload)
    values = remote_to_local(translated, CONVERSATION_FIELD_MAP)
    values["ticket_id"] = ticket.id if ticket is not None else translated.get("ticket_id")
    values["ticket_conversation"] = False
    values["is_deleted"] = False
    values["deleted_at"] = None

    conversation = await upsert_row(db, Conversation, remote_id, values)
    await replace_children(
        db, ConversationAttachment, "conversation_id", conversation.id, attachment_rows(payload.get("attachments")),
    )
    await replace_children(db, ConversationEmail, "conversation_id", conversation.id, _email_rows(payload))
    await replace_children(
        db, ConversationDeliveryDetail, "conversation_id", conversation.id, _delivery_rows(payload),
    )
    await finish(db, commit)
    return conversation


async def import_conversation_thread(
    db: AsyncSession,
    ticket: Ticket,
    conversations: list[dict[str, Any]],
    *,
    commit: bool = True,
) -> ThreadImportResult:
    """Insert conversations missing under ``ticket``; merge attachments on known ones.

    Matching is by remote id, so re-running with the same thread adds nothing.
    Existing conversations are not rewritten.
    """
    result = ThreadImportResult()
    for item in conversations:
        remote_id = as_int(item.get("id")) if isinstance(item, dict) else None
        if remote_id is None:
            result.skipped += 1
            continue
        existing = await find_by_remote_id(db, Conversation, remote_id)
        if existing is None:
            await upsert_conversation(db, item, ticket=ticket, commit=False)
            result.created += 1
        else:
            result.attachments_added += await merge_attachments(db, existing.id, item.get("attachments"))
            result.existing += 1
    await finish(db, commit)
    return result
