"""REST API for Taskboard."""

from taskboard.api.app import create_app, register_exception_handlers
from taskboard.api.models import (
    APIResponse,
    BoardResponse,
    ColumnCreate,
    ColumnResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)

__all__ = [
    "APIResponse",
    "BoardResponse",
    "ColumnCreate",
    "ColumnResponse",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "create_app",
    "register_exception_handlers",
]
