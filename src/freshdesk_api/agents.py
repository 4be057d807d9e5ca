"""Agents API (read-only)."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FreshdeskClient


class AgentsAPI:
    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    async def list(self, page: int = 1, per_page: int = 100) -> list[dict[str, Any]]:
        return await self._client._get("/agents", page=page, per_page=per_page)

    async def get(self, agent_id: int) -> dict[str, Any]:
        return await self._client._get(f"/agents/{agent_id}")
