"""Database models."""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MediaItem(Base):
    """One tracked captured asset awaiting expiry."""

    __tablename__ = "media_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    locator: Mapped[str] = mapped_column(String(1024), nullable=False, index=True)
    media_type: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expires_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    duration_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    __table_args__ = (
        Index("ix_media_items_created_at_ms_id", "created_at_ms", "id"),
        # keeps SQLite from handing out the id of a deleted max row again
        {"sqlite_autoincrement": True},
    )


class PolicySetting(Base):
    """Single retention policy field, stored as text."""

    __tablename__ = "policy_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
