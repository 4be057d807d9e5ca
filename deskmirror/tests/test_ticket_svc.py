"""Test ticket service listing and write-through."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from deskmirror.models import Agent, Contact, Conversation, Group, Ticket, TicketCustomField, TicketTag
from deskmirror.schemas.ticket import TicketFilters
from deskmirror.services import ticket_svc
from deskmirror.sync.store import load_children


@pytest.fixture
def remote_ticket():
    return {
        "id": 950,
        "subject": "New laptop",
        "status": 2,
        "priority": 1,
        "requester_id": 42,
        "group_id": 55,
        "tags": ["hardware"],
        "custom_fields": {"cf_asset": "LT-1"},
        "ticket_bcc_emails": ["audit@example.com"],
        "description": "<p>Need one</p>",
        "description_text": "Need one",
    }


async def _seed_tickets(db: AsyncSession) -> None:
    db.add_all([
        Ticket(id=1, remote_id=1, subject="Alpha", status=2, priority=1,
               created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        Ticket(id=2, remote_id=2, subject="Beta", status=3, priority=2,
               created_at=datetime(2024, 1, 2, tzinfo=timezone.utc)),
        Ticket(id=3, remote_id=3, subject="Gamma", status=2, priority=4,
               created_at=datetime(2024, 1, 3, tzinfo=timezone.utc)),
        Ticket(id=4, remote_id=4, subject="Deleted", status=2, is_deleted=True,
               created_at=datetime(2024, 1, 4, tzinfo=timezone.utc)),
        Ticket(id=5, remote_id=5, subject="Spam", status=2, spam=True,
               created_at=datetime(2024, 1, 5, tzinfo=timezone.utc)),
    ])
    await db.flush()
    db.add_all([
        TicketTag(ticket_id=1, tag="vip"),
        TicketTag(ticket_id=3, tag="vip"),
        TicketCustomField(ticket_id=3, field_name="cf_region", field_value="EU"),
        TicketCustomField(ticket_id=1, field_name="cf_region", field_value="US"),
    ])
    await db.commit()


@pytest.mark.asyncio
async def test_list_excludes_deleted_and_spam(db: AsyncSession):
    await _seed_tickets(db)
    result = await ticket_svc.list_tickets(db)

    assert [t.subject for t in result.tickets] == ["Gamma", "Beta", "Alpha"]
    assert result.meta.total == 3
    assert result.meta.current_page == 1


@pytest.mark.asyncio
async def test_list_pagination_meta(db: AsyncSession):
    await _seed_tickets(db)
    result = await ticket_svc.list_tickets(db, order_by="created_at", order_type="asc", page=2, per_page=2)

    assert [t.subject for t in result.tickets] == ["Gamma"]
    assert result.meta.total == 3
    assert result.meta.per_page == 2
    assert result.meta.total_pages == 2


@pytest.mark.asyncio
async def test_list_filters(db: AsyncSession):
    await _seed_tickets(db)

    by_status = await ticket_svc.list_tickets(db, TicketFilters(status=[2]))
    assert {t.subject for t in by_status.tickets} == {"Alpha", "Gamma"}

    by_tag = await ticket_svc.list_tickets(db, TicketFilters(tags=["vip"], priority=[4]))
    assert [t.subject for t in by_tag.tickets] == ["Gamma"]

    by_field = await ticket_svc.list_tickets(db, TicketFilters(custom_fields={"cf_region": ["US"]}))
    assert [t.subject for t in by_field.tickets] == ["Alpha"]

    by_search = await ticket_svc.list_tickets(db, TicketFilters(search="bet"))
    assert [t.subject for t in by_search.tickets] == ["Beta"]

    by_date = await ticket_svc.list_tickets(
        db, TicketFilters(created_after=datetime(2024, 1, 2, tzinfo=timezone.utc)),
    )
    assert {t.subject for t in by_date.tickets} == {"Beta", "Gamma"}


@pytest.mark.asyncio
async def test_create_ticket_translates_both_ways(db: AsyncSession, fd, contact: Contact, group: Group, remote_ticket):
    fd.tickets.create = AsyncMock(return_value=remote_ticket)

    ticket = await ticket_svc.create_ticket(db, fd, {
        "subject": "New laptop", "requester_id": contact.id, "group_id": group.id, "status": "2",
    })

    sent = fd.tickets.create.await_args.args[0]
    assert sent["requester_id"] == 42
    assert sent["group_id"] == 55
    assert sent["status"] == 2
    assert ticket.requester_id == contact.id
    assert ticket.group_id == group.id

    detail = await ticket_svc.get_ticket_data(db, ticket.id)
    assert detail.description_text == "Need one"
    assert detail.tags == ["hardware"]
    assert detail.custom_fields == {"cf_asset": "LT-1"}
    assert detail.ticket_bcc_emails == ["audit@example.com"]


@pytest.mark.asyncio
async def test_update_ticket_rebuilds_only_sent_children(db: AsyncSession, fd, remote_ticket):
    fd.tickets.create = AsyncMock(return_value=remote_ticket)
    ticket = await ticket_svc.create_ticket(db, fd, {"subject": "New laptop"})

    fd.tickets.update = AsyncMock(return_value={**remote_ticket, "tags": ["urgent"], "custom_fields": {}})
    await ticket_svc.update_ticket(db, fd, ticket.id, {"tags": ["urgent"]})

    fd.tickets.update.assert_awaited_once_with(950, {"tags": ["urgent"]})
    assert [t.tag for t in await load_children(db, TicketTag, "ticket_id", ticket.id)] == ["urgent"]
    assert len(await load_children(db, TicketCustomField, "ticket_id", ticket.id)) == 1


@pytest.mark.asyncio
async def test_delete_ticket_soft_deletes(db: AsyncSession, fd, ticket: Ticket):
    assert await ticket_svc.delete_ticket(db, fd, ticket.id) is True
    fd.tickets.delete.assert_awaited_once_with(900)
    assert ticket.is_deleted is True
    assert ticket.deleted_at is not None

    assert await ticket_svc.delete_ticket(db, fd, 4040) is False


@pytest.mark.asyncio
async def test_add_note_translates_user(db: AsyncSession, fd, ticket: Ticket, agent: Agent):
    fd.tickets.note = AsyncMock(return_value={
        "id": 8001, "ticket_id": 900, "user_id": 5001, "body": "<p>Internal</p>", "private": True,
    })

    conversation = await ticket_svc.add_note(db, fd, ticket.id, {"body": "<p>Internal</p>", "user_id": agent.id})

    fd.tickets.note.assert_awaited_once_with(900, {"body": "<p>Internal</p>", "user_id": 5001}, None)
    assert conversation.ticket_id == ticket.id
    assert conversation.user_id == agent.id
    assert conversation.private is True


@pytest.mark.asyncio
async def test_update_and_delete_conversation(db: AsyncSession, fd, ticket: Ticket):
    conversation = Conversation(ticket_id=ticket.id, remote_id=8001, body="<p>Old</p>")
    db.add(conversation)
    await db.commit()

    fd.tickets.update_conversation = AsyncMock(return_value={"id": 8001, "body": "<p>New</p>"})
    updated = await ticket_svc.update_conversation(db, fd, conversation.id, {"body": "<p>New</p>"})
    assert updated.body == "<p>New</p>"
    assert updated.ticket_id == ticket.id

    assert await ticket_svc.delete_conversation(db, fd, conversation.id) is True
    fd.tickets.delete_conversation.assert_awaited_once_with(8001)
    assert conversation.is_deleted is True
    assert await ticket_svc.list_conversations(db, ticket.id) == []
