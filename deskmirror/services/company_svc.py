"""Company service - local listing and detail, write-through to Freshdesk."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from freshdesk_api import FreshdeskClient

from ..config import settings
from ..models import Company, CompanyCustomField, CompanyDomain, Contact, Ticket
from ..schemas.common import ListMeta
from ..schemas.company import CompanyDetail, CompanyList, CompanyRead
from ..sync.importer import upsert_company
from ..sync.store import find_by_id, load_children


async def list_companies(
    db: AsyncSession,
    *,
    search: str | None = None,
    page: int = 1,
    per_page: int | None = None,
) -> CompanyList:
    page = max(page, 1)
    per_page = per_page if per_page and per_page > 0 else settings.default_page_size

    stmt = select(Company)
    if search:
        stmt = stmt.where(func.lower(Company.name).like(f"%{search.lower()}%"))

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    stmt = stmt.order_by(Company.name, Company.id).offset((page - 1) * per_page).limit(per_page)
    companies = list((await db.execute(stmt)).scalars().all())
    return CompanyList(
        companies=[CompanyRead.model_validate(c) for c in companies],
        meta=ListMeta.build(total, page, per_page),
    )


async def get_company_data(db: AsyncSession, company_id: int) -> CompanyDetail | None:
    company = await find_by_id(db, Company, company_id)
    if company is None:
        return None
    detail = CompanyDetail.model_validate(company)
    detail.domains = [d.domain for d in await load_children(db, CompanyDomain, "company_id", company.id)]
    detail.custom_fields = {
        f.field_name: f.field_value
        for f in await load_children(db, CompanyCustomField, "company_id", company.id)
    }
    return detail


async def create_company(db: AsyncSession, fd: FreshdeskClient, data: dict[str, Any]) -> Company:
    remote = await fd.companies.create(data)
    return await upsert_company(db, remote)


async def update_company(
    db: AsyncSession, fd: FreshdeskClient, company_id: int, data: dict[str, Any],
) -> Company | None:
    company = await find_by_id(db, Company, company_id)
    if company is None:
        return None
    remote = await fd.companies.update(company.remote_id, data)
    return await upsert_company(db, remote)


async def delete_company(db: AsyncSession, fd: FreshdeskClient, company_id: int) -> bool:
    """Delete remotely, then hard-delete locally after clearing references to it."""
    company = await find_by_id(db, Company, company_id)
    if company is None:
        return False
    await fd.companies.delete(company.remote_id)

    for model in (Contact, Ticket):
        await db.execute(
            update(model)
            .where(model.company_id == company.id)
            .values(company_id=None)
            .execution_options(synchronize_session="evaluate")
        )
    for child_model in (CompanyDomain, CompanyCustomField):
        await db.execute(
            delete(child_model)
            .where(child_model.company_id == company.id)
            .execution_options(synchronize_session="fetch")
        )
    await db.delete(company)
    await db.commit()
    return True
