"""Ticket model with custom-field, tag and email children."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import (
    Base,
    ChildMixin,
    IdentityMixin,
    RemoteSyncMixin,
    RemoteTimestampMixin,
    SoftDeleteMixin,
)

TICKET_EMAIL_TYPES = (
    "cc_emails",
    "fwd_emails",
    "reply_cc_emails",
    "ticket_cc_emails",
    "ticket_bcc_emails",
    "to_emails",
)


class Ticket(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "ticket"

    subject: Mapped[str | None] = mapped_column(Text, default=None)
    status: Mapped[int | None] = mapped_column(Integer, default=None, index=True)
    priority: Mapped[int | None] = mapped_column(Integer, default=None, index=True)
    source: Mapped[int | None] = mapped_column(Integer, default=None)
    ticket_type: Mapped[str | None] = mapped_column(String(100), default=None)
    due_by: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    fr_due_by: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    nr_due_by: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    is_escalated: Mapped[bool | None] = mapped_column(Boolean, default=None)
    fr_escalated: Mapped[bool | None] = mapped_column(Boolean, default=None)
    nr_escalated: Mapped[bool | None] = mapped_column(Boolean, default=None)
    spam: Mapped[bool] = mapped_column(Boolean, default=False)
    email_config_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    product_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    association_type: Mapped[str | None] = mapped_column(String(50), default=None)
    associated_tickets_count: Mapped[int | None] = mapped_column(Integer, default=None)
    support_email: Mapped[str | None] = mapped_column(String(255), default=None)
    sentiment_score: Mapped[float | None] = mapped_column(Float, default=None)
    initial_sentiment_score: Mapped[float | None] = mapped_column(Float, default=None)
    structured_description: Mapped[str | None] = mapped_column(Text, default=None)

    requester_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("contact.id", ondelete="SET NULL"), default=None, index=True
    )
    responder_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("agent.id", ondelete="SET NULL"), default=None, index=True
    )
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="SET NULL"), default=None, index=True
    )
    group_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("group.id", ondelete="SET NULL"), default=None, index=True
    )

    # Set only by a full single-ticket refresh
    last_fetched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    def __repr__(self) -> str:
        return f"<Ticket #{self.remote_id} {self.subject!r}>"


class TicketCustomField(ChildMixin, Base):
    __tablename__ = "ticket_custom_field"

    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ticket.id", ondelete="CASCADE"), index=True
    )
    field_name: Mapped[str] = mapped_column(String(255), index=True)
    field_value: Mapped[str | None] = mapped_column(Text, default=None)


class TicketTag(ChildMixin, Base):
    __tablename__ = "ticket_tag"

    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ticket.id", ondelete="CASCADE"), index=True
    )
    tag: Mapped[str] = mapped_column(String(255), index=True)


class TicketEmail(ChildMixin, Base):
    __tablename__ = "ticket_email"

    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ticket.id", ondelete="CASCADE"), index=True
    )
    email: Mapped[str] = mapped_column(String(255))
    email_type: Mapped[str] = mapped_column(String(50))  # one of TICKET_EMAIL_TYPES
