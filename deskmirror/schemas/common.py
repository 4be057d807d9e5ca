"""Shared listing schemas."""

from __future__ import annotations

import math

from pydantic import BaseModel


class ListMeta(BaseModel):
    total: int
    per_page: int
    current_page: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, per_page: int) -> "ListMeta":
        return cls(
            total=total,
            per_page=per_page,
            current_page=page,
            total_pages=math.ceil(total / per_page) if per_page else 0,
        )


class AttachmentRead(BaseModel):
    id: int
    remote_id: int | None = None
    name: str | None = None
    content_type: str | None = None
    size: int | None = None
    attachment_url: str | None = None

    model_config = {"from_attributes": True}
