"""Freshdesk -> local mirror reconcilers for companies, contacts, agents,
groups and canned responses.

Each ``upsert_*`` takes a raw Freshdesk payload, finds the row by remote id
(or creates it), overwrites every mapped scalar and rebuilds the child
collections from the payload. Foreign keys are translated inbound here, so
callers always pass payloads exactly as the remote returned them.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import (
    Agent,
    AgentGroupMapping,
    Avatar,
    CannedResponse,
    CannedResponseAttachment,
    CannedResponseFolder,
    Company,
    CompanyCustomField,
    CompanyDomain,
    Contact,
    ContactCustomField,
    Group,
)
from .field_mapper import (
    ATTACHMENT_FIELD_MAP,
    CANNED_FOLDER_FIELD_MAP,
    CANNED_RESPONSE_FIELD_MAP,
    COMPANY_FIELD_MAP,
    CONTACT_FIELD_MAP,
    iter_custom_fields,
    iter_strings,
    remote_agent_to_local,
    remote_group_to_local,
    remote_to_local,
)
from .store import as_int, find_by_remote_id, replace_children
from .translator import translate_inbound, translate_other_companies


class MissingRemoteIdError(ValueError):
    """Raised when a payload handed to a reconciler has no usable ``id``."""


def require_remote_id(payload: dict[str, Any], entity_type: str) -> int:
    remote_id = as_int(payload.get("id")) if isinstance(payload, dict) else None
    if remote_id is None:
        raise MissingRemoteIdError(f"Freshdesk {entity_type} payload has no id")
    return remote_id


def assign(row: Any, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(row, key, value)


async def upsert_row(db: AsyncSession, model: type, remote_id: int, values: dict[str, Any]):
    """Find-or-create ``model`` by remote id and overwrite ``values``. Flushes so ``id`` is set."""
    row = await find_by_remote_id(db, model, remote_id)
    if row is None:
        row = model(remote_id=remote_id, **values)
        db.add(row)
    else:
        assign(row, values)
    await db.flush()
    return row


def attachment_rows(attachments: Any) -> list[dict[str, Any]]:
    rows = []
    for item in attachments or []:
        if not isinstance(item, dict):
            continue
        rows.append({"remote_id": as_int(item.get("id")), **remote_to_local(item, ATTACHMENT_FIELD_MAP)})
    return rows


async def finish(db: AsyncSession, commit: bool) -> None:
    if commit:
        await db.commit()
    else:
        await db.flush()


# =========================================================================
# Companies
# =========================================================================


async def upsert_company(db: AsyncSession, payload: dict[str, Any], *, commit: bool = True) -> Company:
    remote_id = require_remote_id(payload, "company")
    company = await upsert_row(db, Company, remote_id, remote_to_local(payload, COMPANY_FIELD_MAP))

    await replace_children(
        db, CompanyDomain, "company_id", company.id,
        [{"domain": d} for d in iter_strings(payload.get("domains"))],
    )
    await replace_children(
        db, CompanyCustomField, "company_id", company.id,
        [{"field_name": n, "field_value": v} for n, v in iter_custom_fields(payload.get("custom_fields"))],
    )
    await finish(db, commit)
    return company


# =========================================================================
# Contacts
# =========================================================================


def _avatar_rows(avatar: Any) -> list[dict[str, Any]]:
    if not isinstance(avatar, dict):
        return []
    return [{"remote_id": as_int(avatar.get("id")), **remote_to_local(avatar, ATTACHMENT_FIELD_MAP)}]


async def upsert_contact(db: AsyncSession, payload: dict[str, Any], *, commit: bool = True) -> Contact:
    remote_id = require_remote_id(payload, "contact")
    translated = await translate_inbound(db, "contact", payload)
    values = remote_to_local(translated, CONTACT_FIELD_MAP)
    values["other_companies"] = await translate_other_companies(db, payload.get("other_companies"))

    contact = await upsert_row(db, Contact, remote_id, values)

    await replace_children(
        db, ContactCustomField, "contact_id", contact.id,
        [{"field_name": n, "field_value": v} for n, v in iter_custom_fields(payload.get("custom_fields"))],
    )
    await replace_children(db, Avatar, "contact_id", contact.id, _avatar_rows(payload.get("avatar")))
    await finish(db, commit)
    return contact


# =========================================================================
# Agents
# =========================================================================


async def upsert_agent(db: AsyncSession, payload: dict[str, Any], *, commit: bool = True) -> Agent:
    remote_id = require_remote_id(payload, "agent")
    agent = await upsert_row(db, Agent, remote_id, remote_agent_to_local(payload))
    await finish(db, commit)
    return agent


# =========================================================================
# Groups
# =========================================================================


async def upsert_group(db: AsyncSession, payload: dict[str, Any], *, commit: bool = True) -> Group:
    """Reconcile a group and replace its agent membership mapping.

    Agents not yet mirrored locally are left out of the mapping.
    """
    remote_id = require_remote_id(payload, "group")
    group = await upsert_row(db, Group, remote_id, remote_group_to_local(payload))

    agent_remote_ids = [a for a in (as_int(x) for x in payload.get("agent_ids") or []) if a is not None]
    agent_ids: list[int] = []
    if agent_remote_ids:
        stmt = select(Agent.id).where(Agent.remote_id.in_(agent_remote_ids))
        agent_ids = sorted(set((await db.execute(stmt)).scalars().all()))

    await replace_children(
        db, AgentGroupMapping, "group_id", group.id,
        [{"agent_id": agent_id} for agent_id in agent_ids],
    )
    await finish(db, commit)
    return group


# =========================================================================
# Canned responses
# =========================================================================


async def upsert_canned_folder(
    db: AsyncSession, payload: dict[str, Any], *, commit: bool = True,
) -> CannedResponseFolder:
    remote_id = require_remote_id(payload, "canned response folder")
    folder = await upsert_row(db, CannedResponseFolder, remote_id, remote_to_local(payload, CANNED_FOLDER_FIELD_MAP))
    await finish(db, commit)
    return folder


async def upsert_canned_response(
    db: AsyncSession,
    payload: dict[str, Any],
    *,
    folder: CannedResponseFolder | None = None,
    commit: bool = True,
) -> CannedResponse:
    remote_id = require_remote_id(payload, "canned response")
    values = remote_to_local(payload, CANNED_RESPONSE_FIELD_MAP)
    if folder is not None:
        values["folder_id"] = folder.id
    else:
        folder_row = await find_by_remote_id(db, CannedResponseFolder, payload.get("folder_id"))
        values["folder_id"] = folder_row.id if folder_row else None

    response = await upsert_row(db, CannedResponse, remote_id, values)
    await replace_children(
        db, CannedResponseAttachment, "canned_response_id", response.id,
        attachment_rows(payload.get("attachments")),
    )
    await finish(db, commit)
    return response
