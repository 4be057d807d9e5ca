"""Identifier translation between local surrogate ids and Freshdesk ids.

Direction is explicit: ``translate_outbound`` turns local ids into remote ids
before a payload is sent, ``translate_inbound`` turns remote ids into local
ids before a payload is reconciled. Only foreign-key fields listed in
``FOREIGN_KEYS`` are touched; a reference that cannot be resolved becomes
``None`` (an absent relation, never an error).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Agent, Company, Contact, Group, Ticket
from .store import local_id_for, remote_id_for

# entity type -> {payload field: referenced model}
FOREIGN_KEYS: dict[str, dict[str, type]] = {
    "ticket": {
        "group_id": Group,
        "requester_id": Contact,
        "responder_id": Agent,
        "company_id": Company,
    },
    "contact": {
        "company_id": Company,
    },
    "conversation": {
        "user_id": Agent,
        "ticket_id": Ticket,
    },
}


def _fields_for(entity_type: str) -> dict[str, type]:
    try:
        return FOREIGN_KEYS[entity_type]
    except KeyError:
        raise ValueError(f"No foreign keys registered for entity type {entity_type!r}") from None


async def translate_outbound(db: AsyncSession, entity_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with local foreign keys replaced by remote ids."""
    result = dict(payload)
    for field, model in _fields_for(entity_type).items():
        if field in result and result[field] not in (None, ""):
            result[field] = await remote_id_for(db, model, result[field])
    return result


async def translate_inbound(db: AsyncSession, entity_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with remote foreign keys replaced by local ids."""
    result = dict(payload)
    for field, model in _fields_for(entity_type).items():
        if field in result and result[field] is not None:
            result[field] = await local_id_for(db, model, result[field])
    return result


async def translate_other_companies(db: AsyncSession, entries: Any) -> list[dict[str, Any]] | None:
    """Translate ``company_id`` inside a contact's ``other_companies`` entries (inbound)."""
    if not isinstance(entries, list):
        return entries
    translated = []
    for entry in entries:
        if isinstance(entry, dict) and entry.get("company_id") is not None:
            entry = {**entry, "company_id": await local_id_for(db, Company, entry["company_id"])}
        translated.append(entry)
    return translated


async def company_ids_outbound(db: AsyncSession, company_ids: list[Any]) -> list[int]:
    """Local company ids -> remote ids, dropping any that do not resolve."""
    out = []
    for company_id in company_ids or []:
        rid = await remote_id_for(db, Company, company_id)
        if rid is not None:
            out.append(rid)
    return out
