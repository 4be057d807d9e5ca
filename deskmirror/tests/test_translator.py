"""Test id translation between local and Freshdesk ids."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from deskmirror.models import Agent, Company, Contact, Group, Ticket
from deskmirror.sync.translator import (
    company_ids_outbound,
    translate_inbound,
    translate_other_companies,
    translate_outbound,
)


@pytest.mark.asyncio
async def test_group_id_round_trip(db: AsyncSession, group: Group):
    outbound = await translate_outbound(db, "ticket", {"group_id": group.id, "subject": "Hi"})
    assert outbound == {"group_id": 55, "subject": "Hi"}

    inbound = await translate_inbound(db, "ticket", outbound)
    assert inbound["group_id"] == group.id
    assert inbound["subject"] == "Hi"


@pytest.mark.asyncio
async def test_translate_returns_copy(db: AsyncSession, group: Group):
    payload = {"group_id": 55}
    result = await translate_inbound(db, "ticket", payload)
    assert result["group_id"] == group.id
    assert payload == {"group_id": 55}


@pytest.mark.asyncio
async def test_unresolved_reference_becomes_none(db: AsyncSession):
    result = await translate_inbound(db, "ticket", {"requester_id": 999999, "responder_id": None})
    assert result["requester_id"] is None
    assert result["responder_id"] is None


@pytest.mark.asyncio
async def test_absent_fields_stay_absent(db: AsyncSession):
    result = await translate_outbound(db, "ticket", {"subject": "No relations"})
    assert result == {"subject": "No relations"}


@pytest.mark.asyncio
async def test_ticket_inbound_translates_every_relation(
    db: AsyncSession, contact: Contact, agent: Agent, company: Company, group: Group,
):
    result = await translate_inbound(db, "ticket", {
        "requester_id": 42,
        "responder_id": 5001,
        "company_id": 3001,
        "group_id": 55,
        "status": 2,
    })
    assert result == {
        "requester_id": contact.id,
        "responder_id": agent.id,
        "company_id": company.id,
        "group_id": group.id,
        "status": 2,
    }


@pytest.mark.asyncio
async def test_conversation_user_id_resolves_agents_only(db: AsyncSession, contact: Contact, agent: Agent):
    by_agent = await translate_inbound(db, "conversation", {"user_id": 5001})
    assert by_agent["user_id"] == agent.id

    by_contact = await translate_inbound(db, "conversation", {"user_id": 42})
    assert by_contact["user_id"] is None


@pytest.mark.asyncio
async def test_conversation_ticket_id_inbound(db: AsyncSession, ticket: Ticket):
    result = await translate_inbound(db, "conversation", {"ticket_id": 900})
    assert result["ticket_id"] == ticket.id


@pytest.mark.asyncio
async def test_numeric_string_ids_are_accepted(db: AsyncSession, group: Group):
    result = await translate_inbound(db, "ticket", {"group_id": "55"})
    assert result["group_id"] == group.id


@pytest.mark.asyncio
async def test_unknown_entity_type_raises(db: AsyncSession):
    with pytest.raises(ValueError):
        await translate_inbound(db, "widget", {"id": 1})


@pytest.mark.asyncio
async def test_other_companies_inbound(db: AsyncSession, company: Company):
    result = await translate_other_companies(db, [
        {"company_id": 3001, "view_all_tickets": True},
        {"company_id": 424242},
    ])
    assert result == [
        {"company_id": company.id, "view_all_tickets": True},
        {"company_id": None},
    ]


@pytest.mark.asyncio
async def test_company_ids_outbound_drops_unknown(db: AsyncSession, company: Company):
    assert await company_ids_outbound(db, [company.id, 777]) == [3001]
