"""BoardStateStore - In-memory tasks and columns for the client."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from taskboard.board.exceptions import ColumnNotFoundError, TaskNotFoundError
from taskboard.board.models import Column, Task

logger = logging.getLogger(__name__)


class ColumnTasks:
    """Lazily filtered view of the tasks in one column.

    Each iteration filters the store's current task list again, so the view
    can be iterated any number of times and always reflects the latest state.
    """

    def __init__(self, store: BoardStateStore, column_id: str) -> None:
        self._store = store
        self.column_id = column_id

    def __iter__(self) -> Iterator[Task]:
        return (task for task in self._store.tasks if task.status == self.column_id)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, task: object) -> bool:
        return any(t == task for t in self)

    def ids(self) -> list[str]:
        return [task.id for task in self]


@dataclass
class RemovedColumn:
    """What ``remove_column`` took off the board, with original positions."""

    index: int
    column: Column
    tasks: list[tuple[int, Task]] = field(default_factory=list)


class BoardStateStore:
    """Single source of truth for the board the client renders.

    Holds tasks (most recently added first) and columns (server order).
    Records are immutable and incoming collections are copied, so callers'
    data is never mutated.

    Invariant: every task's status names a column on the board.
    """

    def __init__(self) -> None:
        self._tasks: list[Task] = []
        self._columns: list[Column] = []

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    # --- Bulk ---

    def replace_all(self, tasks: Iterable[Task], columns: Iterable[Column]) -> None:
        """Replace the whole board, e.g. after the initial load.

        Tasks whose status names no column are dropped, since keeping them
        would break the board invariant.
        """
        new_columns = list(columns)
        column_ids = {column.id for column in new_columns}
        new_tasks = []
        for task in tasks:
            if task.status not in column_ids:
                logger.warning("Dropping task %s: unknown column '%s'", task.id, task.status)
                continue
            new_tasks.append(task)
        self._columns = new_columns
        self._tasks = new_tasks

    # --- Lookups ---

    def get_task(self, task_id: str) -> Task:
        """Get task by ID.

        Raises:
            TaskNotFoundError: If the task isn't on the board
        """
        return self._tasks[self._task_index(task_id)]

    def get_column(self, column_id: str) -> Column:
        """Get column by ID.

        Raises:
            ColumnNotFoundError: If the column isn't on the board
        """
        return self._columns[self._column_index(column_id)]

    def has_column(self, column_id: str) -> bool:
        return any(column.id == column_id for column in self._columns)

    def tasks_in_column(self, column_id: str) -> ColumnTasks:
        """Return a restartable view of the tasks whose status is ``column_id``."""
        return ColumnTasks(self, column_id)

    # --- Tasks ---

    def upsert_task(self, task: Task, index: int | None = None) -> Task | None:
        """Insert or replace a task.

        An existing task is replaced in place. A new task goes to the front,
        or to ``index`` when restoring a previous position.

        Returns:
            The task previously stored under the same ID, if any

        Raises:
            ColumnNotFoundError: If the task's status names no column
        """
        if not self.has_column(task.status):
            raise ColumnNotFoundError(f"Column '{task.status}' not found")

        for i, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[i] = task
                return existing

        position = 0 if index is None else min(max(index, 0), len(self._tasks))
        self._tasks.insert(position, task)
        return None

    def replace_task(self, old_id: str, task: Task) -> None:
        """Swap the task stored as ``old_id`` for ``task``, keeping its position."""
        index = self._task_index(old_id)
        if not self.has_column(task.status):
            raise ColumnNotFoundError(f"Column '{task.status}' not found")
        self._tasks[index] = task

    def remove_task(self, task_id: str) -> tuple[int, Task]:
        """Remove a task.

        Returns:
            The removed task and the position it held

        Raises:
            TaskNotFoundError: If the task isn't on the board
        """
        index = self._task_index(task_id)
        return index, self._tasks.pop(index)

    # --- Columns ---

    def upsert_column(self, column: Column, index: int | None = None) -> Column | None:
        """Insert or replace a column. New columns are appended unless ``index`` is given."""
        for i, existing in enumerate(self._columns):
            if existing.id == column.id:
                self._columns[i] = column
                return existing

        if index is None:
            self._columns.append(column)
        else:
            self._columns.insert(min(max(index, 0), len(self._columns)), column)
        return None

    def replace_column(self, old_id: str, column: Column) -> None:
        """Swap the column stored as ``old_id`` for ``column``, keeping its position.

        Tasks referencing the old id follow the column to its new id.
        """
        index = self._column_index(old_id)
        self._columns[index] = column
        if old_id != column.id:
            self._tasks = [
                Task(id=t.id, title=t.title, status=column.id) if t.status == old_id else t
                for t in self._tasks
            ]

    def remove_column(self, column_id: str) -> RemovedColumn | None:
        """Remove a user column and every task in it.

        Fixed columns can't be removed; the call is a no-op returning None.

        Raises:
            ColumnNotFoundError: If the column isn't on the board
        """
        index = self._column_index(column_id)
        column = self._columns[index]
        if column.is_fixed:
            logger.debug("Ignoring removal of fixed column '%s'", column_id)
            return None

        removed = RemovedColumn(index=index, column=column)
        kept = []
        for i, task in enumerate(self._tasks):
            if task.status == column_id:
                removed.tasks.append((i, task))
            else:
                kept.append(task)
        self._tasks = kept
        del self._columns[index]
        return removed

    def restore_column(self, removed: RemovedColumn) -> None:
        """Put back a column and its tasks as returned by ``remove_column``."""
        self.upsert_column(removed.column, index=removed.index)
        for index, task in removed.tasks:
            self.upsert_task(task, index=index)

    # --- Internals ---

    def _task_index(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(f"Task with id '{task_id}' not found")

    def _column_index(self, column_id: str) -> int:
        for i, column in enumerate(self._columns):
            if column.id == column_id:
                return i
        raise ColumnNotFoundError(f"Column with id '{column_id}' not found")
