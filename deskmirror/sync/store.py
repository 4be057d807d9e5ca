"""Local store accessors shared by the translator, reconcilers and services."""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .field_mapper import ensure_utc

M = TypeVar("M")


def as_int(value: Any) -> int | None:
    """Coerce an id-like value (int or numeric string) to int, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


async def find_by_remote_id(db: AsyncSession, model: type[M], remote_id: Any) -> M | None:
    rid = as_int(remote_id)
    if rid is None:
        return None
    stmt = select(model).where(model.remote_id == rid)
    return (await db.execute(stmt)).scalar_one_or_none()


async def find_by_id(db: AsyncSession, model: type[M], local_id: Any) -> M | None:
    lid = as_int(local_id)
    if lid is None:
        return None
    return await db.get(model, lid)


async def local_id_for(db: AsyncSession, model: type, remote_id: Any) -> int | None:
    rid = as_int(remote_id)
    if rid is None:
        return None
    stmt = select(model.id).where(model.remote_id == rid)
    return (await db.execute(stmt)).scalar_one_or_none()


async def remote_id_for(db: AsyncSession, model: type, local_id: Any) -> int | None:
    lid = as_int(local_id)
    if lid is None:
        return None
    stmt = select(model.remote_id).where(model.id == lid)
    return (await db.execute(stmt)).scalar_one_or_none()


async def count_rows(db: AsyncSession, model: type) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def max_updated_at(db: AsyncSession, model: type) -> datetime | None:
    value = (await db.execute(select(func.max(model.updated_at)))).scalar_one_or_none()
    return ensure_utc(value)


async def delete_children(db: AsyncSession, child_model: type, fk_name: str, parent_id: int) -> None:
    await db.execute(
        delete(child_model)
        .where(getattr(child_model, fk_name) == parent_id)
        .execution_options(synchronize_session="fetch")
    )


async def replace_children(
    db: AsyncSession,
    child_model: type,
    fk_name: str,
    parent_id: int,
    rows: list[dict[str, Any]],
) -> None:
    """Destroy every child of ``parent_id`` and recreate them from ``rows``."""
    await delete_children(db, child_model, fk_name, parent_id)
    for row in rows:
        db.add(child_model(**{fk_name: parent_id, **row}))


async def load_children(db: AsyncSession, child_model: type[M], fk_name: str, parent_id: int) -> list[M]:
    stmt = select(child_model).where(getattr(child_model, fk_name) == parent_id).order_by(child_model.id)
    return list((await db.execute(stmt)).scalars().all())
