"""Contact service - local listing and detail, write-through to Freshdesk."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient
from freshdesk_api.client import FileTuple

from ..config import settings
from ..models import Avatar, Contact, ContactCustomField, Ticket
from ..schemas.common import AttachmentRead, ListMeta
from ..schemas.contact import ContactDetail, ContactFilters, ContactList, ContactRead
from ..sync.field_mapper import ensure_utc
from ..sync.importer import upsert_contact
from ..sync.store import find_by_id, load_children
from ..sync.translator import translate_outbound


async def list_contacts(
    db: AsyncSession,
    filters: ContactFilters | None = None,
    *,
    page: int = 1,
    per_page: int | None = None,
) -> ContactList:
    """List contacts with optional search and pagination, newest first."""
    filters = filters or ContactFilters()
    page = max(page, 1)
    per_page = per_page if per_page and per_page > 0 else settings.default_page_size

    stmt = select(Contact)
    if filters.search:
        q = f"%{filters.search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Contact.name).like(q),
                func.lower(Contact.email).like(q),
                Contact.phone.like(q),
                Contact.mobile.like(q),
            )
        )
    if filters.company_id:
        stmt = stmt.where(Contact.company_id.in_(filters.company_id))
    if filters.created_after is not None:
        stmt = stmt.where(Contact.created_at >= ensure_utc(filters.created_after))
    if filters.created_before is not None:
        stmt = stmt.where(Contact.created_at <= ensure_utc(filters.created_before))
    if filters.updated_after is not None:
        stmt = stmt.where(Contact.updated_at >= ensure_utc(filters.updated_after))
    if filters.updated_before is not None:
        stmt = stmt.where(Contact.updated_at <= ensure_utc(filters.updated_before))

    # Count
    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    # Fetch page
    stmt = stmt.order_by(Contact.created_at.desc(), Contact.id.desc()).offset((page - 1) * per_page).limit(per_page)
    contacts = list((await db.execute(stmt)).scalars().all())

    return ContactList(
        contacts=[ContactRead.model_validate(c) for c in contacts],
        meta=ListMeta.build(total, page, per_page),
    )


async def get_contact_data(db: AsyncSession, contact_id: int) -> ContactDetail | None:
    contact = await find_by_id(db, Contact, contact_id)
    if contact is None:
        return None
    detail = ContactDetail.model_validate(contact)
    detail.custom_fields = {
        f.field_name: f.field_value
        for f in await load_children(db, ContactCustomField, "contact_id", contact.id)
    }
    avatars = await load_children(db, Avatar, "contact_id", contact.id)
    if avatars:
        detail.avatar = AttachmentRead.model_validate(avatars[0])
    return detail


async def create_contact(
    db: AsyncSession,
    fd: FreshdeskClient,
    data: dict[str, Any],
    avatar: FileTuple | None = None,
) -> Contact:
    payload = await translate_outbound(db, "contact", data)
    remote = await fd.contacts.create(payload, avatar)
    return await upsert_contact(db, remote)


async def update_contact(
    db: AsyncSession,
    fd: FreshdeskClient,
    contact_id: int,
    data: dict[str, Any],
    avatar: FileTuple | None = None,
) -> Contact | None:
    contact = await find_by_id(db, Contact, contact_id)
    if contact is None:
        return None
    payload = await translate_outbound(db, "contact", data)
    remote = await fd.contacts.update(contact.remote_id, payload, avatar)
    return await upsert_contact(db, remote)


async def delete_contact(db: AsyncSession, fd: FreshdeskClient, contact_id: int) -> bool:
    """Delete remotely, then hard-delete the local contact.

    Tickets the contact requested are soft-deleted and detached from it.
    """
    contact = await find_by_id(db, Contact, contact_id)
    if contact is None:
        return False
    await fd.contacts.delete(contact.remote_id)

    await db.execute(
        update(Ticket)
        .where(Ticket.requester_id == contact.id)
        .values(requester_id=None, is_deleted=True, deleted_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session="evaluate")
    )
    for child_model in (ContactCustomField, Avatar):
        await db.execute(
            delete(child_model)
            .where(child_model.contact_id == contact.id)
            .execution_options(synchronize_session="fetch")
        )
    await db.delete(contact)
    await db.commit()
    return True
