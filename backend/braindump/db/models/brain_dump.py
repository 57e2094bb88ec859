"""BrainDump ORM model."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Index, Text, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from braindump.db.base import Base
from braindump.db.types import StringList


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BrainDump(Base):
    __tablename__ = "brain_dumps"
    __table_args__ = (Index("ix_brain_dumps_user_id_created_at", "user_id", "created_at"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    # Owned by the identity provider; there is no local users table to reference.
    user_id = Column(UUID(as_uuid=True), nullable=False)
    original_text = Column(Text, nullable=False)
    summary = Column(Text, nullable=False, default="", server_default=sa_text("''"))
    what_matters = Column(StringList, nullable=False, default=list)
    what_doesnt = Column(StringList, nullable=False, default=list)
    actionable_focus = Column(Text, nullable=False, default="", server_default=sa_text("''"))
    processed = Column(Boolean, nullable=False, default=False, server_default=sa_text("false"))
    processed_at = Column(DateTime(timezone=True), nullable=True)
    # Python-side default keeps microsecond ordering between rapid inserts.
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
