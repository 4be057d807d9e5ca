"""Agent model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin


class Agent(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "agent"

    name: Mapped[str | None] = mapped_column(String(255), default=None)
    email: Mapped[str | None] = mapped_column(String(255), default=None, index=True)
    org_agent_id: Mapped[str | None] = mapped_column(String(100), default=None)
    available: Mapped[bool | None] = mapped_column(Boolean, default=None)
    available_since: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    occasional: Mapped[bool | None] = mapped_column(Boolean, default=None)
    ticket_scope: Mapped[int | None] = mapped_column(Integer, default=None)
    agent_type: Mapped[str | None] = mapped_column(String(50), default=None)
    deactivated: Mapped[bool | None] = mapped_column(Boolean, default=None)
    signature: Mapped[str | None] = mapped_column(Text, default=None)
    focus_mode: Mapped[bool | None] = mapped_column(Boolean, default=None)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    active: Mapped[bool | None] = mapped_column(Boolean, default=None)
    job_title: Mapped[str | None] = mapped_column(String(255), default=None)
    language: Mapped[str | None] = mapped_column(String(20), default=None)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    mobile: Mapped[str | None] = mapped_column(String(50), default=None)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    time_zone: Mapped[str | None] = mapped_column(String(100), default=None)
    scope: Mapped[dict | None] = mapped_column(JSON, default=None)
    roles: Mapped[list | None] = mapped_column(JSON, default=None)
    skills: Mapped[list | None] = mapped_column(JSON, default=None)
    contribution_groups: Mapped[list | None] = mapped_column(JSON, default=None)

    def __repr__(self) -> str:
        return f"<Agent {self.name!r} remote={self.remote_id}>"
