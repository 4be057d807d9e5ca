"""Company schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel

from .common import ListMeta


class CompanyRead(BaseModel):
    id: int
    gid: uuid.UUID
    remote_id: int | None = None
    name: str | None = None
    description: str | None = None
    note: str | None = None
    health_score: str | None = None
    account_tier: str | None = None
    renewal_date: datetime | None = None
    industry: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CompanyDetail(CompanyRead):
    domains: list[str] = []
    custom_fields: dict[str, str | None] = {}


class CompanyList(BaseModel):
    companies: list[CompanyRead]
    meta: ListMeta
