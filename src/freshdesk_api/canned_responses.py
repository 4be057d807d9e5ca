"""Canned Responses API - folders and the responses inside them."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FreshdeskClient


class CannedResponsesAPI:
    """Canned responses are read through their folders.

    Usage:
        async with FreshdeskClient(config) as fd:
            for folder in await fd.canned_responses.folders():
                detail = await fd.canned_responses.folder(folder["id"])
                for brief in detail.get("canned_responses", []):
                    response = await fd.canned_responses.get(brief["id"])
    """

    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    async def folders(self) -> list[dict[str, Any]]:
        return await self._client._get("/canned_response_folders")

    async def folder(self, folder_id: int) -> dict[str, Any]:
        """Folder detail, including a brief ``canned_responses`` list."""
        return await self._client._get(f"/canned_response_folders/{folder_id}")

    async def get(self, response_id: int) -> dict[str, Any]:
        return await self._client._get(f"/canned_responses/{response_id}")
