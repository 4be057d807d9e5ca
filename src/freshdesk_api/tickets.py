"""Tickets API - tickets, conversations, replies, notes and merges."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FileTuple, FreshdeskClient


class TicketsAPI:
    """Tickets API for Freshdesk.

    Usage:
        async with FreshdeskClient(config) as fd:
            page = await fd.tickets.list(page=1, per_page=100)
            ticket = await fd.tickets.get(900)
            convs = await fd.tickets.conversations(900, page=1)
            await fd.tickets.note(900, {"body": "Internal", "private": True})
            await fd.tickets.merge(900, [901, 902])
    """

    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    async def list(
        self,
        page: int = 1,
        per_page: int = 100,
        updated_since: str | None = None,
        include: str | None = None,
    ) -> list[dict[str, Any]]:
        """List tickets, optionally only those updated at or after ``updated_since``.

        Note: the remote default only returns tickets from the last 30 days
        unless ``updated_since`` is given.
        """
        return await self._client._get(
            "/tickets",
            page=page,
            per_page=per_page,
            updated_since=updated_since,
            include=include,
        )

    async def get(self, ticket_id: int, include: str | None = None) -> dict[str, Any]:
        return await self._client._get(f"/tickets/{ticket_id}", include=include)

    async def create(
        self, data: dict[str, Any], attachments: list["FileTuple"] | None = None,
    ) -> dict[str, Any]:
        """Create a ticket; multipart when attachments are given."""
        if attachments:
            return await self._client._post_multipart("/tickets", data, attachments)
        return await self._client._post("/tickets", data)

    async def update(self, ticket_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._client._put(f"/tickets/{ticket_id}", data)

    async def delete(self, ticket_id: int) -> dict[str, Any]:
        return await self._client._delete(f"/tickets/{ticket_id}")

    async def fields(self) -> list[dict[str, Any]]:
        return await self._client._get("/ticket_fields")

    async def merge(self, primary_id: int, ticket_ids: list[int]) -> dict[str, Any]:
        """Merge secondary tickets into ``primary_id``."""
        return await self._client._put(
            "/tickets/merge",
            {"primary_id": int(primary_id), "ticket_ids": [int(t) for t in ticket_ids]},
        )

    # =========================================================================
    # Conversations
    # =========================================================================

    async def conversations(
        self, ticket_id: int, page: int = 1, per_page: int = 100,
    ) -> list[dict[str, Any]]:
        return await self._client._get(
            f"/tickets/{ticket_id}/conversations", page=page, per_page=per_page,
        )

    async def reply(
        self,
        ticket_id: int,
        data: dict[str, Any],
        attachments: list["FileTuple"] | None = None,
    ) -> dict[str, Any]:
        endpoint = f"/tickets/{ticket_id}/reply"
        if attachments:
            return await self._client._post_multipart(endpoint, data, attachments)
        return await self._client._post(endpoint, data)

    async def note(
        self,
        ticket_id: int,
        data: dict[str, Any],
        attachments: list["FileTuple"] | None = None,
    ) -> dict[str, Any]:
        endpoint = f"/tickets/{ticket_id}/notes"
        if attachments:
            return await self._client._post_multipart(endpoint, data, attachments)
        return await self._client._post(endpoint, data)

    async def forward(self, ticket_id: int, data: dict[str, Any]) -> dict[str, Any]:
        payload = dict(data)
        payload.setdefault("include_original_attachments", False)
        return await self._client._post(f"/tickets/{ticket_id}/forward", payload)

    async def update_conversation(
        self,
        conversation_id: int,
        data: dict[str, Any],
        attachments: list["FileTuple"] | None = None,
    ) -> dict[str, Any]:
        endpoint = f"/conversations/{conversation_id}"
        if attachments:
            return await self._client._post_multipart(endpoint, data, attachments, method="put")
        return await self._client._put(endpoint, data)

    async def delete_conversation(self, conversation_id: int) -> dict[str, Any]:
        return await self._client._delete(f"/conversations/{conversation_id}")
