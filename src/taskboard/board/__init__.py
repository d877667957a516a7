"""Board - Task/column models, in-memory state and transition rules."""

from taskboard.board.confirmation import (
    CONFIRMATION_WORD,
    INVALID_CONFIRMATION,
    DeleteConfirmation,
    is_delete_confirmed,
)
from taskboard.board.exceptions import (
    BoardError,
    ColumnNotFoundError,
    TaskNotFoundError,
    TransitionNotAllowedError,
    ValidationError,
)
from taskboard.board.models import (
    DEFAULT_COLUMN_COLOR,
    DONE,
    FIXED_COLUMN_IDS,
    IN_PROGRESS,
    TODO,
    Column,
    Task,
    default_columns,
)
from taskboard.board.store import BoardStateStore, ColumnTasks, RemovedColumn
from taskboard.board.transitions import TransitionValidator

__all__ = [
    "CONFIRMATION_WORD",
    "DEFAULT_COLUMN_COLOR",
    "DONE",
    "FIXED_COLUMN_IDS",
    "INVALID_CONFIRMATION",
    "IN_PROGRESS",
    "TODO",
    "BoardError",
    "BoardStateStore",
    "Column",
    "ColumnNotFoundError",
    "ColumnTasks",
    "DeleteConfirmation",
    "RemovedColumn",
    "Task",
    "TaskNotFoundError",
    "TransitionNotAllowedError",
    "TransitionValidator",
    "ValidationError",
    "default_columns",
    "is_delete_confirmed",
]
