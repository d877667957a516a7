"""State Store - Persistent storage for board columns and tasks."""

from taskboard.state_store.exceptions import (
    ColumnExistsError,
    ColumnNotFoundError,
    FixedColumnError,
    InvalidTitleError,
    InvalidTransitionError,
    StateStoreError,
    TaskNotFoundError,
)
from taskboard.state_store.models import ColumnRecord, TaskRecord
from taskboard.state_store.store import StateStore, column_id_for

__all__ = [
    "ColumnExistsError",
    "ColumnNotFoundError",
    "ColumnRecord",
    "FixedColumnError",
    "InvalidTitleError",
    "InvalidTransitionError",
    "StateStore",
    "StateStoreError",
    "TaskNotFoundError",
    "TaskRecord",
    "column_id_for",
]
