"""Sync orchestrator - pulls every entity type from Freshdesk into the mirror.

Types run in a fixed order so that foreign keys resolve: companies, contacts,
agents, groups, tickets, canned responses. Each type is isolated: a failure is
recorded for that type and the run moves on. Records reconciled before a
failure stay committed.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient

from ..config import settings
from ..models import Company, Contact, Ticket
from ..schemas.sync import SyncStepResult
from .field_mapper import format_remote_datetime
from .import_tickets import upsert_ticket
from .importer import (
    upsert_agent,
    upsert_canned_folder,
    upsert_canned_response,
    upsert_company,
    upsert_contact,
    upsert_group,
)
from .store import count_rows, max_updated_at

logger = logging.getLogger(__name__)

FetchPage = Callable[[int, int], Awaitable[Any]]


async def paginate(
    fetch_page: FetchPage,
    page_size: int | None = None,
    max_pages: int | None = None,
) -> list[dict]:
    """Request pages 1, 2, ... until one comes back shorter than ``page_size``."""
    page_size = page_size or settings.sync_page_size
    max_pages = settings.sync_max_pages if max_pages is None else max_pages
    items: list[dict] = []
    page = 1

    while True:
        batch = await fetch_page(page, page_size)
        if not isinstance(batch, list):
            batch = []
        items.extend(item for item in batch if isinstance(item, dict))
        if len(batch) < page_size:
            break
        if max_pages and page >= max_pages:
            logger.warning("Stopped paginating after %d pages (sync_max_pages)", page)
            break
        page += 1

    return items


async def sync_cursor(db: AsyncSession, model: type) -> str | None:
    """``updated_since`` for an incremental pull, or None for a bulk pull.

    The cursor is one second past the newest local ``updated_at`` so the
    boundary record is not pulled again on every run.
    """
    if await count_rows(db, model) == 0:
        return None
    latest = await max_updated_at(db, model)
    if latest is None:
        return None
    return format_remote_datetime(latest + timedelta(seconds=1))


async def sync_companies(db: AsyncSession, fd: FreshdeskClient) -> int:
    since = await sync_cursor(db, Company)
    companies = await paginate(
        lambda page, per_page: fd.companies.list(page=page, per_page=per_page, updated_since=since)
    )
    for payload in companies:
        await upsert_company(db, payload)
    return len(companies)


async def sync_contacts(db: AsyncSession, fd: FreshdeskClient) -> int:
    since = await sync_cursor(db, Contact)
    contacts = await paginate(
        lambda page, per_page: fd.contacts.list(page=page, per_page=per_page, updated_since=since)
    )
    for payload in contacts:
        await upsert_contact(db, payload)
    return len(contacts)


async def sync_agents(db: AsyncSession, fd: FreshdeskClient) -> int:
    agents = await paginate(lambda page, per_page: fd.agents.list(page=page, per_page=per_page))
    for payload in agents:
        await upsert_agent(db, payload)
    return len(agents)


async def sync_groups(db: AsyncSession, fd: FreshdeskClient) -> int:
    groups = await paginate(lambda page, per_page: fd.groups.list(page=page, per_page=per_page))
    for payload in groups:
        await upsert_group(db, payload)
    return len(groups)


async def sync_tickets(db: AsyncSession, fd: FreshdeskClient) -> int:
    since = await sync_cursor(db, Ticket)
    tickets = await paginate(
        lambda page, per_page: fd.tickets.list(page=page, per_page=per_page, updated_since=since)
    )
    for payload in tickets:
        await upsert_ticket(db, payload)
    return len(tickets)


async def sync_canned_responses(db: AsyncSession, fd: FreshdeskClient) -> int:
    """Folders first, then every response listed in each folder's detail."""
    count = 0
    for folder_brief in await fd.canned_responses.folders() or []:
        detail = await fd.canned_responses.folder(folder_brief["id"])
        folder = await upsert_canned_folder(db, folder_brief)
        for response_brief in (detail or {}).get("canned_responses") or []:
            response = await fd.canned_responses.get(response_brief["id"])
            await upsert_canned_response(db, response, folder=folder)
            count += 1
    return count


SYNC_STEPS: list[tuple[str, Callable[[AsyncSession, FreshdeskClient], Awaitable[int]]]] = [
    ("companies", sync_companies),
    ("contacts", sync_contacts),
    ("agents", sync_agents),
    ("groups", sync_groups),
    ("tickets", sync_tickets),
    ("canned_responses", sync_canned_responses),
]


async def sync_all(db: AsyncSession, fd: FreshdeskClient) -> dict[str, SyncStepResult]:
    """Sync every entity type in order and report per-type success."""
    results: dict[str, SyncStepResult] = {}

    for name, step in SYNC_STEPS:
        label = name.replace("_", " ")
        logger.info("Syncing %s", label)
        try:
            count = await step(db, fd)
        except Exception as e:
            await db.rollback()
            logger.warning("Failed to sync %s: %s", label, e)
            results[name] = SyncStepResult(success=False, message=f"Failed to sync {label}: {e}")
            continue
        logger.info("Synced %d %s", count, label)
        results[name] = SyncStepResult(
            success=True, message=f"Successfully synced {count} {label}", count=count,
        )

    return results
