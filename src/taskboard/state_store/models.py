"""SQLAlchemy models for State Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from taskboard.board.models import DEFAULT_COLUMN_COLOR


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # Python-side timestamps keep microseconds, which task ordering relies on
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ColumnRecord(Base):
    """Column model - a board column; its id is the status tasks reference."""

    __tablename__ = "columns"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_title: Mapped[str] = mapped_column(String(255), nullable=False)
    is_fixed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    tasks: Mapped[list[TaskRecord]] = relationship(
        "TaskRecord", back_populates="column", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        id: str,
        display_title: str,
        position: int,
        is_fixed: bool = False,
        color: str = DEFAULT_COLUMN_COLOR,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id
        self.display_title = display_title
        self.position = position
        self.is_fixed = is_fixed
        self.color = color

    def __repr__(self) -> str:
        return f"<ColumnRecord(id={self.id!r}, display_title={self.display_title!r})>"


class TaskRecord(Base):
    """Task model - a card in one column."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(
        String(64), ForeignKey("columns.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    column: Mapped[ColumnRecord] = relationship("ColumnRecord", back_populates="tasks")

    def __init__(
        self,
        title: str,
        status: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.title = title
        self.status = status

    def __repr__(self) -> str:
        return f"<TaskRecord(id={self.id!r}, title={self.title!r}, status={self.status!r})>"
