"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from taskboard.board.models import DEFAULT_COLUMN_COLOR

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Task models


class TaskCreate(BaseModel):
    """Request model for creating a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    status: str = Field(..., min_length=1, max_length=64)


class TaskUpdate(BaseModel):
    """Request model for updating a task (partial update)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=500)
    status: str | None = Field(default=None, min_length=1, max_length=64)


class TaskResponse(BaseModel):
    """Response model for a task."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    status: str
    created_at: datetime
    updated_at: datetime


def task_to_response(task: Any) -> TaskResponse:
    """Convert a TaskRecord to TaskResponse."""
    return TaskResponse.model_validate(task)


# Column models


class ColumnCreate(BaseModel):
    """Request model for creating a column."""

    model_config = ConfigDict(str_strip_whitespace=True)

    display_title: str = Field(..., min_length=1, max_length=255)
    color: str = Field(default=DEFAULT_COLUMN_COLOR, pattern=r"^#[0-9a-fA-F]{3,8}$")


class ColumnResponse(BaseModel):
    """Response model for a column."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    display_title: str
    is_fixed: bool
    color: str
    position: int


def column_to_response(column: Any) -> ColumnResponse:
    """Convert a ColumnRecord to ColumnResponse."""
    return ColumnResponse.model_validate(column)


# Board models


class BoardResponse(BaseModel):
    """Response model for the whole board."""

    tasks: list[TaskResponse]
    columns: list[ColumnResponse]
