"""StateStore - Main API for server-side task and column persistence."""

from __future__ import annotations

import logging

from sqlalchemy import func, literal_column, select

from taskboard.board.models import DEFAULT_COLUMN_COLOR, FIXED_COLUMNS
from taskboard.board.transitions import TransitionValidator
from taskboard.state_store.database import Database
from taskboard.state_store.exceptions import (
    ColumnExistsError,
    ColumnNotFoundError,
    FixedColumnError,
    InvalidTitleError,
    InvalidTransitionError,
    TaskNotFoundError,
)
from taskboard.state_store.models import ColumnRecord, TaskRecord

logger = logging.getLogger(__name__)


def column_id_for(display_title: str) -> str:
    """Derive a column ID from its display title ("In Review" -> "inreview")."""
    return "".join(ch for ch in display_title.lower() if ch.isalnum())


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise InvalidTitleError("Title must not be empty")
    return cleaned


class StateStore:
    """Main API for State Store operations.

    Provides CRUD operations for board columns and tasks. The fixed columns
    are created on first start.
    """

    def __init__(
        self,
        db_path: str = "taskboard.db",
        validator: TransitionValidator | None = None,
    ) -> None:
        """Initialize State Store with SQLite database.

        Creates database, tables and fixed columns if they don't exist.

        Args:
            db_path: Path to SQLite database file
            validator: Rules applied to task status changes
        """
        self._db = Database(db_path)
        self._db.create_tables()
        self.validator = validator if validator is not None else TransitionValidator()
        self._seed_fixed_columns()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def _seed_fixed_columns(self) -> None:
        session = self._db.get_session()
        try:
            for position, (column_id, title, color) in enumerate(FIXED_COLUMNS):
                if session.get(ColumnRecord, column_id) is None:
                    session.add(
                        ColumnRecord(
                            id=column_id,
                            display_title=title,
                            position=position,
                            is_fixed=True,
                            color=color,
                        )
                    )
            session.commit()
        finally:
            session.close()

    # --- Column Operations ---

    def list_columns(self) -> list[ColumnRecord]:
        """List all columns in board order."""
        session = self._db.get_session()
        try:
            stmt = select(ColumnRecord).order_by(ColumnRecord.position)
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def create_column(
        self, display_title: str, color: str = DEFAULT_COLUMN_COLOR
    ) -> ColumnRecord:
        """Create a user column at the end of the board.

        Args:
            display_title: Human-readable label; the column ID is derived from it
            color: Display color

        Returns:
            Created ColumnRecord

        Raises:
            InvalidTitleError: If the title is empty or has no letters/digits
            ColumnExistsError: If a column with the derived ID already exists
        """
        display_title = _clean_title(display_title)
        column_id = column_id_for(display_title)
        if not column_id:
            raise InvalidTitleError(f"Cannot derive a column id from '{display_title}'")

        session = self._db.get_session()
        try:
            if session.get(ColumnRecord, column_id) is not None:
                raise ColumnExistsError(f"Column '{column_id}' already exists")

            last = session.execute(select(func.max(ColumnRecord.position))).scalar()
            column = ColumnRecord(
                id=column_id,
                display_title=display_title,
                position=0 if last is None else last + 1,
                color=color,
            )
            session.add(column)
            session.commit()
            session.refresh(column)
            logger.info("Created column %s", column_id)
            return column
        finally:
            session.close()

    def delete_column(self, column_id: str) -> int:
        """Delete a user column and all tasks in it.

        Returns:
            Number of tasks removed with the column

        Raises:
            ColumnNotFoundError: If column doesn't exist
            FixedColumnError: If column is one of the built-in columns
        """
        session = self._db.get_session()
        try:
            column = session.get(ColumnRecord, column_id)
            if column is None:
                raise ColumnNotFoundError(f"Column with id '{column_id}' not found")
            if column.is_fixed:
                raise FixedColumnError(f"Column '{column_id}' is fixed")

            removed = len(column.tasks)
            session.delete(column)
            session.commit()
            logger.info("Deleted column %s with %d task(s)", column_id, removed)
            return removed
        finally:
            session.close()

    # --- Task Operations ---

    def list_tasks(self) -> list[TaskRecord]:
        """List all tasks, most recently created first."""
        session = self._db.get_session()
        try:
            stmt = select(TaskRecord).order_by(
                TaskRecord.created_at.desc(), literal_column("tasks.rowid").desc()
            )
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def get_task(self, task_id: str) -> TaskRecord:
        """Get task by ID.

        Raises:
            TaskNotFoundError: If task doesn't exist
        """
        session = self._db.get_session()
        try:
            task = session.get(TaskRecord, task_id)
            if task is None:
                raise TaskNotFoundError(f"Task with id '{task_id}' not found")
            return task
        finally:
            session.close()

    def create_task(self, title: str, status: str) -> TaskRecord:
        """Create a task.

        Args:
            title: Task title, trimmed
            status: ID of the column the task goes in

        Returns:
            Created TaskRecord with generated ID

        Raises:
            InvalidTitleError: If the title is empty
            ColumnNotFoundError: If the column doesn't exist
        """
        title = _clean_title(title)
        session = self._db.get_session()
        try:
            if session.get(ColumnRecord, status) is None:
                raise ColumnNotFoundError(f"Column with id '{status}' not found")

            task = TaskRecord(title=title, status=status)
            session.add(task)
            session.commit()
            session.refresh(task)
            return task
        finally:
            session.close()

    def update_task(
        self,
        task_id: str,
        title: str | None = None,
        status: str | None = None,
    ) -> TaskRecord:
        """Update task fields. Only provided fields are updated.

        Raises:
            TaskNotFoundError: If task doesn't exist
            InvalidTitleError: If the new title is empty
            ColumnNotFoundError: If the new column doesn't exist
            InvalidTransitionError: If the move breaks the transition rules
        """
        if title is not None:
            title = _clean_title(title)

        session = self._db.get_session()
        try:
            task = session.get(TaskRecord, task_id)
            if task is None:
                raise TaskNotFoundError(f"Task with id '{task_id}' not found")

            if status is not None and status != task.status:
                if session.get(ColumnRecord, status) is None:
                    raise ColumnNotFoundError(f"Column with id '{status}' not found")
                if not self.validator.can_move(task.status, status):
                    raise InvalidTransitionError(
                        f"Task '{task_id}' can't move from '{task.status}' to '{status}'"
                    )
                task.status = status
            if title is not None:
                task.title = title

            session.commit()
            session.refresh(task)
            return task
        finally:
            session.close()

    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: If task doesn't exist
        """
        session = self._db.get_session()
        try:
            task = session.get(TaskRecord, task_id)
            if task is None:
                raise TaskNotFoundError(f"Task with id '{task_id}' not found")
            session.delete(task)
            session.commit()
        finally:
            session.close()
