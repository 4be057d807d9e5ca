"""Merge schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class MergeResult(BaseModel):
    primary_id: int
    primary_remote_id: int
    merged_ids: list[int] = []
    merged_remote_ids: list[int] = []
    tickets_repointed: int = 0
    conversations_repointed: int = 0
    conversations_imported: int = 0
    remote: dict[str, Any] | list[Any] | None = None
