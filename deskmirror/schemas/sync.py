"""Sync schemas."""

from __future__ import annotations

from pydantic import BaseModel


class SyncStepResult(BaseModel):
    """Outcome of syncing one entity type."""

    success: bool
    message: str
    count: int = 0


class ThreadImportResult(BaseModel):
    created: int = 0
    existing: int = 0
    skipped: int = 0
    attachments_added: int = 0


class RefreshResult(BaseModel):
    refreshed: bool = False
    conversations: ThreadImportResult = ThreadImportResult()
