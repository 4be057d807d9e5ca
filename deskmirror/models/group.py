"""Group model and agent membership mapping."""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ChildMixin, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin


class Group(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "group"

    name: Mapped[str | None] = mapped_column(String(255), default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    escalate_to: Mapped[int | None] = mapped_column(BigInteger, default=None)
    unassigned_for: Mapped[str | None] = mapped_column(String(50), default=None)
    group_type: Mapped[str | None] = mapped_column(String(50), default=None)
    business_calendar_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    allow_agents_to_change_availability: Mapped[bool | None] = mapped_column(Boolean, default=None)
    agent_availability_status: Mapped[bool | None] = mapped_column(Boolean, default=None)
    automatic_agent_assignment: Mapped[bool | None] = mapped_column(Boolean, default=None)

    def __repr__(self) -> str:
        return f"<Group {self.name!r} remote={self.remote_id}>"


class AgentGroupMapping(ChildMixin, Base):
    __tablename__ = "agent_group_mapping"
    __table_args__ = (UniqueConstraint("agent_id", "group_id", name="uq_agent_group"),)

    agent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agent.id", ondelete="CASCADE"), index=True
    )
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("group.id", ondelete="CASCADE"), index=True
    )
