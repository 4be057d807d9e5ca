"""Ticket conversations and their attachment, email and delivery children.

Each ticket's description is kept as one conversation row flagged
``ticket_conversation``; it has no remote id of its own.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ChildMixin, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, SoftDeleteMixin

CONVERSATION_EMAIL_TYPES = ("cc_emails", "to_emails", "bcc_emails")


class Conversation(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "conversation"

    ticket_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("ticket.id", ondelete="CASCADE"), default=None, index=True
    )
    # Agent or contact id depending on who wrote it; kept as authored
    user_id: Mapped[int | None] = mapped_column(Integer, default=None)
    ticket_conversation: Mapped[bool] = mapped_column(Boolean, default=False)

    body: Mapped[str | None] = mapped_column(Text, default=None)
    body_text: Mapped[str | None] = mapped_column(Text, default=None)
    incoming: Mapped[bool | None] = mapped_column(Boolean, default=None)
    private: Mapped[bool | None] = mapped_column(Boolean, default=None)
    source: Mapped[int | None] = mapped_column(Integer, default=None)
    category: Mapped[int | None] = mapped_column(Integer, default=None)
    support_email: Mapped[str | None] = mapped_column(String(255), default=None)
    from_email: Mapped[str | None] = mapped_column(String(255), default=None)
    email_failure_count: Mapped[int | None] = mapped_column(Integer, default=None)
    outgoing_failures: Mapped[int | None] = mapped_column(Integer, default=None)
    thread_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    thread_message_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    last_edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    last_edited_user_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    automation_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    automation_type_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    auto_response: Mapped[bool | None] = mapped_column(Boolean, default=None)
    threading_type: Mapped[str | None] = mapped_column(String(50), default=None)
    source_additional_info: Mapped[str | None] = mapped_column(Text, default=None)

    def __repr__(self) -> str:
        return f"<Conversation ticket={self.ticket_id} remote={self.remote_id}>"


class ConversationAttachment(ChildMixin, Base):
    __tablename__ = "conversation_attachment"

    conversation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("conversation.id", ondelete="CASCADE"), index=True
    )
    remote_id: Mapped[int | None] = mapped_column(BigInteger, default=None, index=True)
    name: Mapped[str | None] = mapped_column(String(255), default=None)
    content_type: Mapped[str | None] = mapped_column(String(100), default=None)
    size: Mapped[int | None] = mapped_column(Integer, default=None)
    attachment_url: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)


class ConversationEmail(ChildMixin, Base):
    __tablename__ = "conversation_email"

    conversation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("conversation.id", ondelete="CASCADE"), index=True
    )
    email: Mapped[str] = mapped_column(String(255))
    email_type: Mapped[str] = mapped_column(String(50))  # one of CONVERSATION_EMAIL_TYPES


class ConversationDeliveryDetail(ChildMixin, Base):
    __tablename__ = "conversation_delivery_detail"

    conversation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("conversation.id", ondelete="CASCADE"), index=True
    )
    email: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(20))  # failed, pending
