"""Contacts API - CRUD and merge for Freshdesk contacts."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FileTuple, FreshdeskClient


class ContactsAPI:
    """Contacts API for Freshdesk.

    Usage:
        async with FreshdeskClient(config) as fd:
            contacts = await fd.contacts.list(page=1, per_page=100)
            contact = await fd.contacts.create({"name": "Jane", "email": "jane@example.com"})
            await fd.contacts.merge(100, [200], {"phone": "+15551234567"})
    """

    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    async def list(
        self,
        page: int = 1,
        per_page: int = 100,
        updated_since: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._client._get(
            "/contacts", page=page, per_page=per_page, updated_since=updated_since,
        )

    async def get(self, contact_id: int) -> dict[str, Any]:
        return await self._client._get(f"/contacts/{contact_id}")

    async def create(
        self, data: dict[str, Any], avatar: "FileTuple | None" = None,
    ) -> dict[str, Any]:
        """Create a contact; multipart when an avatar image is given."""
        if avatar:
            return await self._client._post_multipart(
                "/contacts", data, [avatar], file_field="avatar",
            )
        return await self._client._post("/contacts", data)

    async def update(
        self, contact_id: int, data: dict[str, Any], avatar: "FileTuple | None" = None,
    ) -> dict[str, Any]:
        endpoint = f"/contacts/{contact_id}"
        if avatar:
            return await self._client._post_multipart(
                endpoint, data, [avatar], method="put", file_field="avatar",
            )
        return await self._client._put(endpoint, data)

    async def delete(self, contact_id: int) -> dict[str, Any]:
        """Soft delete on the remote side (contact moves to trash)."""
        return await self._client._delete(f"/contacts/{contact_id}")

    async def merge(
        self,
        primary_contact_id: int,
        secondary_contact_ids: list[int],
        contact: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge secondary contacts into the primary.

        ``contact`` optionally overrides fields on the merged record
        (email, phone, mobile, other_emails, company_ids, ...).
        """
        payload: dict[str, Any] = {
            "primary_contact_id": int(primary_contact_id),
            "secondary_contact_ids": [int(c) for c in secondary_contact_ids],
        }
        if contact:
            payload["contact"] = contact
        return await self._client._post("/contacts/merge", payload)

    async def fields(self) -> list[dict[str, Any]]:
        return await self._client._get("/contact_fields")
