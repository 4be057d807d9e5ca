"""Companies API."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import FreshdeskClient


class CompaniesAPI:
    def __init__(self, client: "FreshdeskClient"):
        self._client = client

    async def list(
        self,
        page: int = 1,
        per_page: int = 100,
        updated_since: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self._client._get(
            "/companies", page=page, per_page=per_page, updated_since=updated_since,
        )

    async def get(self, company_id: int) -> dict[str, Any]:
        return await self._client._get(f"/companies/{company_id}")

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._client._post("/companies", data)

    async def update(self, company_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._client._put(f"/companies/{company_id}", data)

    async def delete(self, company_id: int) -> dict[str, Any]:
        return await self._client._delete(f"/companies/{company_id}")

    async def fields(self) -> list[dict[str, Any]]:
        return await self._client._get("/company_fields")
