"""Groups API (read-only).

Listing goes through ``/admin/groups``, which returns ``agent_ids`` for each
group; the plain ``/groups`` listing omits them.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FreshdeskClient


class GroupsAPI:
    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    async def list(self, page: int = 1, per_page: int = 100) -> list[dict[str, Any]]:
        return await self._client._get("/admin/groups", page=page, per_page=per_page)

    async def get(self, group_id: int) -> dict[str, Any]:
        return await self._client._get(f"/groups/{group_id}")
