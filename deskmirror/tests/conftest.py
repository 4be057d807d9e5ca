"""Async test fixtures for mirror tests using SQLite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deskmirror.models import Agent, Company, Contact, Group, Ticket

# Methods each Freshdesk sub-API exposes; list-style ones default to an empty page
FRESHDESK_METHODS = {
    "tickets": (
        "list", "get", "create", "update", "delete", "fields", "merge", "conversations",
        "reply", "note", "forward", "update_conversation", "delete_conversation",
    ),
    "contacts": ("list", "get", "create", "update", "delete", "merge", "fields"),
    "companies": ("list", "get", "create", "update", "delete", "fields"),
    "agents": ("list", "get"),
    "groups": ("list", "get"),
    "canned_responses": ("folders", "folder", "get"),
}
LIST_METHODS = {"list", "conversations", "folders", "fields"}


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    from deskmirror.models import Base

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def fd():
    """Stand-in FreshdeskClient whose sub-API methods are AsyncMocks."""
    client = MagicMock()
    for api_name, methods in FRESHDESK_METHODS.items():
        api = MagicMock()
        for method in methods:
            setattr(api, method, AsyncMock(return_value=[] if method in LIST_METHODS else {}))
        setattr(client, api_name, api)
    return client


@pytest.fixture
def paged():
    """Factory: a ``list(page=, per_page=)`` side effect serving ``records`` page by page."""
    def _paged(records: list[dict], calls: list | None = None):
        def _list(page: int = 1, per_page: int = 100, **kwargs):
            if calls is not None:
                calls.append({"page": page, "per_page": per_page, **kwargs})
            start = (page - 1) * per_page
            return records[start:start + per_page]
        return _list
    return _paged


@pytest_asyncio.fixture
async def company(db: AsyncSession):
    row = Company(remote_id=3001, name="Acme")
    db.add(row)
    await db.commit()
    return row


@pytest_asyncio.fixture
async def contact(db: AsyncSession):
    row = Contact(id=7, remote_id=42, name="Jane Doe", email="jane@example.com")
    db.add(row)
    await db.commit()
    return row


@pytest_asyncio.fixture
async def agent(db: AsyncSession):
    row = Agent(remote_id=5001, name="Alex Agent", email="alex@support.example.com")
    db.add(row)
    await db.commit()
    return row


@pytest_asyncio.fixture
async def group(db: AsyncSession):
    row = Group(id=12, remote_id=55, name="Billing")
    db.add(row)
    await db.commit()
    return row


@pytest_asyncio.fixture
async def ticket(db: AsyncSession, contact: Contact):
    row = Ticket(remote_id=900, subject="Printer on fire", status=2, priority=1, requester_id=contact.id)
    db.add(row)
    await db.commit()
    return row
