"""Test the sync orchestrator: pagination, cursors, ordering and failure isolation."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import ServiceUnavailableError

from deskmirror.models import (
    CannedResponse,
    CannedResponseFolder,
    Company,
    Contact,
    Ticket,
)
from deskmirror.sync.sync_engine import paginate, sync_all, sync_cursor, sync_tickets


def _records(n: int, start: int = 1) -> list[dict]:
    return [{"id": i} for i in range(start, start + n)]


@pytest.mark.asyncio
async def test_paginate_stops_on_short_page():
    fetch = AsyncMock(side_effect=[_records(100), _records(100, 101), _records(37, 201)])
    items = await paginate(fetch, page_size=100)

    assert fetch.await_count == 3
    assert len(items) == 237
    assert [c.args for c in fetch.await_args_list] == [(1, 100), (2, 100), (3, 100)]


@pytest.mark.asyncio
async def test_paginate_empty_first_page():
    fetch = AsyncMock(return_value=[])
    assert await paginate(fetch, page_size=100) == []
    assert fetch.await_count == 1


@pytest.mark.asyncio
async def test_paginate_exact_multiple_needs_one_more_call():
    fetch = AsyncMock(side_effect=[_records(100), []])
    items = await paginate(fetch, page_size=100)
    assert len(items) == 100
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_paginate_respects_max_pages():
    fetch = AsyncMock(return_value=_records(10))
    items = await paginate(fetch, page_size=10, max_pages=2)
    assert fetch.await_count == 2
    assert len(items) == 20


@pytest.mark.asyncio
async def test_cursor_is_none_for_empty_table(db: AsyncSession):
    assert await sync_cursor(db, Ticket) is None


@pytest.mark.asyncio
async def test_cursor_is_one_second_past_newest(db: AsyncSession):
    db.add(Ticket(remote_id=1, updated_at=datetime(2024, 1, 15, 9, 0, 0, tzinfo=timezone.utc)))
    db.add(Ticket(remote_id=2, updated_at=datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)))
    await db.commit()

    assert await sync_cursor(db, Ticket) == "2024-01-15T10:00:01Z"


@pytest.mark.asyncio
async def test_bulk_ticket_sync_when_empty(db: AsyncSession, fd, paged):
    calls: list[dict] = []
    fd.tickets.list = AsyncMock(side_effect=paged(_records(237, 1000), calls))

    count = await sync_tickets(db, fd)

    assert count == 237
    assert len(calls) == 3
    assert all(c["updated_since"] is None for c in calls)
    assert all(c["per_page"] == 100 for c in calls)
    assert len((await db.execute(select(Ticket))).scalars().all()) == 237


@pytest.mark.asyncio
async def test_incremental_ticket_sync_passes_cursor(db: AsyncSession, fd, paged):
    db.add(Ticket(remote_id=1, updated_at=datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)))
    await db.commit()

    calls: list[dict] = []
    fd.tickets.list = AsyncMock(side_effect=paged([
        {"id": 2, "subject": "New", "updated_at": "2024-01-15T11:00:00Z"},
    ], calls))

    await sync_tickets(db, fd)

    assert calls == [{"page": 1, "per_page": 100, "updated_since": "2024-01-15T10:00:01Z"}]


@pytest.mark.asyncio
async def test_sync_all_order_and_results(db: AsyncSession, fd):
    order: list[str] = []

    def _step(name, result):
        def _call(*args, **kwargs):
            order.append(name)
            return result
        return _call

    fd.companies.list = AsyncMock(side_effect=_step("companies", [{"id": 3001, "name": "Acme"}]))
    fd.contacts.list = AsyncMock(side_effect=_step("contacts", [{"id": 42, "name": "Jane", "company_id": 3001}]))
    fd.agents.list = AsyncMock(side_effect=_step("agents", [{"id": 5001, "contact": {"name": "Alex"}}]))
    fd.groups.list = AsyncMock(side_effect=_step("groups", [{"id": 55, "name": "Billing", "agent_ids": [5001]}]))
    fd.tickets.list = AsyncMock(side_effect=_step("tickets", [
        {"id": 900, "subject": "Hi", "requester_id": 42, "group_id": 55, "responder_id": 5001},
    ]))
    fd.canned_responses.folders = AsyncMock(side_effect=_step("canned_responses", []))

    results = await sync_all(db, fd)

    assert order == ["companies", "contacts", "agents", "groups", "tickets", "canned_responses"]
    assert list(results) == order
    assert all(r.success for r in results.values())
    assert results["tickets"].message == "Successfully synced 1 tickets"
    assert results["canned_responses"].message == "Successfully synced 0 canned responses"

    contact = (await db.execute(select(Contact))).scalar_one()
    company = (await db.execute(select(Company))).scalar_one()
    ticket = (await db.execute(select(Ticket))).scalar_one()
    assert contact.company_id == company.id
    assert ticket.requester_id == contact.id
    assert ticket.group_id is not None
    assert ticket.responder_id is not None


@pytest.mark.asyncio
async def test_sync_all_isolates_failures(db: AsyncSession, fd):
    fd.companies.list = AsyncMock(return_value=[{"id": 3001, "name": "Acme"}])
    fd.contacts.list = AsyncMock(side_effect=ServiceUnavailableError("API request failed: down", 503))
    fd.tickets.list = AsyncMock(return_value=[{"id": 900, "subject": "Hi", "requester_id": 42}])

    results = await sync_all(db, fd)

    assert results["contacts"].success is False
    assert results["contacts"].message.startswith("Failed to sync contacts")
    for name in ("companies", "agents", "groups", "tickets", "canned_responses"):
        assert results[name].success is True

    ticket = (await db.execute(select(Ticket))).scalar_one()
    assert ticket.requester_id is None
    assert len((await db.execute(select(Company))).scalars().all()) == 1


@pytest.mark.asyncio
async def test_sync_canned_responses(db: AsyncSession, fd):
    fd.canned_responses.folders = AsyncMock(return_value=[{"id": 1, "name": "General", "responses_count": 2}])
    fd.canned_responses.folder = AsyncMock(return_value={
        "id": 1, "name": "General", "canned_responses": [{"id": 10}, {"id": 11}],
    })
    fd.canned_responses.get = AsyncMock(side_effect=lambda rid: {"id": rid, "title": f"Response {rid}", "folder_id": 1})

    results = await sync_all(db, fd)

    assert results["canned_responses"].count == 2
    folder = (await db.execute(select(CannedResponseFolder))).scalar_one()
    responses = (await db.execute(select(CannedResponse).order_by(CannedResponse.remote_id))).scalars().all()
    assert [r.title for r in responses] == ["Response 10", "Response 11"]
    assert all(r.folder_id == folder.id for r in responses)
