"""Base model classes and mixins for mirror models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class IdentityMixin:
    """Adds the local surrogate key and the external-facing gid token.

    Surrogate ids are never reused after a row is deleted.
    """

    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gid: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, default=uuid.uuid4)


class RemoteSyncMixin:
    """Binds a row to its Freshdesk record. At most one row per remote id."""

    remote_id: Mapped[int | None] = mapped_column(
        BigInteger, unique=True, index=True, default=None
    )


class RemoteTimestampMixin:
    """created_at / updated_at mirrored verbatim from the remote payload."""

    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None, index=True
    )


class SoftDeleteMixin:
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)


class ChildMixin:
    """Plain integer key for child-collection rows."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
