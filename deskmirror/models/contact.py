"""Contact model with custom fields and avatar."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ChildMixin, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin


class Contact(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "contact"

    name: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    email: Mapped[str | None] = mapped_column(String(255), default=None, unique=True)
    unique_external_id: Mapped[str | None] = mapped_column(String(255), default=None, unique=True)
    active: Mapped[bool | None] = mapped_column(Boolean, default=None)
    address: Mapped[str | None] = mapped_column(Text, default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    job_title: Mapped[str | None] = mapped_column(String(255), default=None)
    language: Mapped[str | None] = mapped_column(String(20), default=None)
    mobile: Mapped[str | None] = mapped_column(String(50), default=None)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    twitter_id: Mapped[str | None] = mapped_column(String(255), default=None)
    preferred_source: Mapped[str | None] = mapped_column(String(50), default=None)
    time_zone: Mapped[str | None] = mapped_column(String(100), default=None)
    visitor_id: Mapped[str | None] = mapped_column(String(100), default=None)
    org_contact_id: Mapped[str | None] = mapped_column(String(100), default=None)
    view_all_tickets: Mapped[bool | None] = mapped_column(Boolean, default=None)
    other_emails: Mapped[list | None] = mapped_column(JSON, default=None)
    other_companies: Mapped[list | None] = mapped_column(JSON, default=None)
    other_phone_numbers: Mapped[list | None] = mapped_column(JSON, default=None)
    tags: Mapped[list | None] = mapped_column(JSON, default=None)

    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="SET NULL"), default=None, index=True
    )

    def __repr__(self) -> str:
        return f"<Contact {self.name!r} remote={self.remote_id}>"


class ContactCustomField(ChildMixin, Base):
    __tablename__ = "contact_custom_field"

    contact_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contact.id", ondelete="CASCADE"), index=True
    )
    field_name: Mapped[str] = mapped_column(String(255))
    field_value: Mapped[str | None] = mapped_column(Text, default=None)


class Avatar(ChildMixin, Base):
    """Contact avatar metadata (0..1 per contact)."""

    __tablename__ = "avatar"

    contact_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contact.id", ondelete="CASCADE"), index=True
    )
    remote_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    name: Mapped[str | None] = mapped_column(String(255), default=None)
    content_type: Mapped[str | None] = mapped_column(String(100), default=None)
    size: Mapped[int | None] = mapped_column(Integer, default=None)
    attachment_url: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
