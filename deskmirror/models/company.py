"""Company model with domain and custom-field children."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ChildMixin, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin


class Company(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "company"

    name: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    note: Mapped[str | None] = mapped_column(Text, default=None)
    health_score: Mapped[str | None] = mapped_column(String(100), default=None)
    account_tier: Mapped[str | None] = mapped_column(String(100), default=None)
    renewal_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    industry: Mapped[str | None] = mapped_column(String(255), default=None)
    org_company_id: Mapped[str | None] = mapped_column(String(100), default=None)

    def __repr__(self) -> str:
        return f"<Company {self.name!r} remote={self.remote_id}>"


class CompanyDomain(ChildMixin, Base):
    __tablename__ = "company_domain"

    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), index=True
    )
    domain: Mapped[str] = mapped_column(String(255))


class CompanyCustomField(ChildMixin, Base):
    __tablename__ = "company_custom_field"

    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company.id", ondelete="CASCADE"), index=True
    )
    field_name: Mapped[str] = mapped_column(String(255))
    field_value: Mapped[str | None] = mapped_column(Text, default=None)
