"""Ticket and conversation schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel

from .common import AttachmentRead, ListMeta


class TicketRead(BaseModel):
    id: int
    gid: uuid.UUID
    remote_id: int | None = None
    subject: str | None = None
    status: int | None = None
    priority: int | None = None
    source: int | None = None
    ticket_type: str | None = None
    requester_id: int | None = None
    responder_id: int | None = None
    company_id: int | None = None
    group_id: int | None = None
    due_by: datetime | None = None
    fr_due_by: datetime | None = None
    is_escalated: bool | None = None
    spam: bool | None = None
    is_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_fetched_at: datetime | None = None

    model_config = {"from_attributes": True}


class TicketDetail(TicketRead):
    description: str | None = None
    description_text: str | None = None
    attachments: list[AttachmentRead] = []
    tags: list[str] = []
    custom_fields: dict[str, str | None] = {}
    cc_emails: list[str] = []
    fwd_emails: list[str] = []
    reply_cc_emails: list[str] = []
    ticket_cc_emails: list[str] = []
    ticket_bcc_emails: list[str] = []
    to_emails: list[str] = []


class TicketList(BaseModel):
    tickets: list[TicketRead]
    meta: ListMeta


class ConversationRead(BaseModel):
    id: int
    gid: uuid.UUID
    remote_id: int | None = None
    ticket_id: int | None = None
    user_id: int | None = None
    body: str | None = None
    body_text: str | None = None
    incoming: bool | None = None
    private: bool | None = None
    source: int | None = None
    from_email: str | None = None
    support_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    attachments: list[AttachmentRead] = []
    cc_emails: list[str] = []
    to_emails: list[str] = []
    bcc_emails: list[str] = []
    failed_emails: list[str] = []
    pending_emails: list[str] = []

    model_config = {"from_attributes": True}


class TicketFilters(BaseModel):
    """Filters for local ticket listings. List values match any of their items."""

    search: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    updated_after: datetime | None = None
    updated_before: datetime | None = None
    due_after: datetime | None = None
    due_before: datetime | None = None
    status: list[int] = []
    priority: list[int] = []
    source: list[int] = []
    responder_id: list[int] = []
    group_id: list[int] = []
    company_id: list[int] = []
    requester_id: list[int] = []
    ticket_type: list[str] = []
    tags: list[str] = []
    # "cf_*" field name -> accepted values; every entry must match
    custom_fields: dict[str, list[str]] = {}
