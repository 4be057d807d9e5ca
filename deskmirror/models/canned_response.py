"""Canned response folders, responses and attachments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ChildMixin, IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin


class CannedResponseFolder(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "canned_response_folder"

    name: Mapped[str | None] = mapped_column(String(255), default=None)
    responses_count: Mapped[int | None] = mapped_column(Integer, default=None)

    def __repr__(self) -> str:
        return f"<CannedResponseFolder {self.name!r}>"


class CannedResponse(IdentityMixin, RemoteSyncMixin, RemoteTimestampMixin, Base):
    __tablename__ = "canned_response"

    folder_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("canned_response_folder.id", ondelete="CASCADE"), default=None, index=True
    )
    title: Mapped[str | None] = mapped_column(String(255), default=None)
    content: Mapped[str | None] = mapped_column(Text, default=None)
    content_html: Mapped[str | None] = mapped_column(Text, default=None)
    visibility: Mapped[int | None] = mapped_column(Integer, default=None)
    group_ids: Mapped[list | None] = mapped_column(JSON, default=None)

    def __repr__(self) -> str:
        return f"<CannedResponse {self.title!r}>"


class CannedResponseAttachment(ChildMixin, Base):
    __tablename__ = "canned_response_attachment"

    canned_response_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("canned_response.id", ondelete="CASCADE"), index=True
    )
    remote_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    name: Mapped[str | None] = mapped_column(String(255), default=None)
    content_type: Mapped[str | None] = mapped_column(String(100), default=None)
    size: Mapped[int | None] = mapped_column(Integer, default=None)
    attachment_url: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
