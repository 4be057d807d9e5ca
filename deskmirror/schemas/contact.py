"""Contact schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from .common import AttachmentRead, ListMeta


class ContactRead(BaseModel):
    id: int
    gid: uuid.UUID
    remote_id: int | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    mobile: str | None = None
    job_title: str | None = None
    active: bool | None = None
    unique_external_id: str | None = None
    other_emails: list[Any] | None = None
    other_companies: list[Any] | None = None
    tags: list[Any] | None = None
    company_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ContactDetail(ContactRead):
    address: str | None = None
    description: str | None = None
    language: str | None = None
    time_zone: str | None = None
    custom_fields: dict[str, str | None] = {}
    avatar: AttachmentRead | None = None


class ContactList(BaseModel):
    contacts: list[ContactRead]
    meta: ListMeta


class ContactFilters(BaseModel):
    search: str | None = None
    company_id: list[int] = []
    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
