"""OptimisticUpdateCoordinator - Applies board changes locally, then remotely."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import replace
from typing import Any, Protocol

from taskboard.board.exceptions import (
    BoardError,
    ColumnNotFoundError,
    TaskNotFoundError,
    TransitionNotAllowedError,
    ValidationError,
)
from taskboard.board.models import (
    DEFAULT_COLUMN_COLOR,
    PROVISIONAL_PREFIX,
    Column,
    Task,
)
from taskboard.board.store import BoardStateStore
from taskboard.board.transitions import TransitionValidator
from taskboard.coordinator.models import Mutation, MutationKind, MutationState
from taskboard.gateway.exceptions import GatewayError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class TaskGateway(Protocol):
    """Interface for the remote task/column store."""

    async def list_tasks_and_columns(self) -> tuple[list[Task], list[Column]]: ...

    async def create_task(self, title: str, status: str) -> Task: ...

    async def update_task(
        self, task_id: str, title: str | None = None, status: str | None = None
    ) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def create_column(self, display_title: str, color: str = ...) -> Column: ...

    async def delete_column(self, column_id: str) -> None: ...


def _clean_text(value: str, field_name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    return text


def _provisional_id() -> str:
    return f"{PROVISIONAL_PREFIX}{uuid.uuid4().hex}"


class OptimisticUpdateCoordinator:
    """Keeps the local board and the remote store in step.

    Every change goes through the same state machine: the store is updated
    immediately (PENDING), the remote call is issued, and the store is then
    reconciled with the server's record (COMMITTED) or restored to what it
    held before the change (FAILED).

    Mutations on the same task or column run one at a time in submission
    order, so the last change submitted is the one that sticks. Deleting a
    column also waits for pending task changes in or into that column. Each
    remote call is bounded by ``timeout``; expiry counts as a transport failure.
    """

    def __init__(
        self,
        gateway: TaskGateway,
        store: BoardStateStore | None = None,
        validator: TransitionValidator | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        on_failure: Callable[[Mutation], None] | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            gateway: Remote store client.
            store: Local board state. A fresh empty store when omitted.
            validator: Transition rules. Defaults to ``done`` being terminal.
            timeout: Upper bound in seconds for each remote call.
            on_failure: Called with every mutation that ends FAILED.
        """
        self.gateway = gateway
        self.store = store if store is not None else BoardStateStore()
        self.validator = validator if validator is not None else TransitionValidator()
        self.timeout = timeout
        self.on_failure = on_failure
        self.failed: list[Mutation] = []
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    # --- Loading ---

    async def load(self) -> None:
        """Replace the local board with the server's.

        Raises:
            GatewayError: If the board can't be fetched
        """
        tasks, columns = await self._call(self.gateway.list_tasks_and_columns())
        self.store.replace_all(tasks, columns)

    # --- Tasks ---

    async def add_task(self, title: str, status: str) -> Mutation:
        """Add a task to the front of the board.

        A provisional task is shown right away and swapped for the server's
        task (with its real id) on commit.

        Raises:
            ValidationError: Empty title, unsaved column, or terminal column
            ColumnNotFoundError: Unknown column
        """
        title = _clean_text(title, "title")
        provisional = Task(id=_provisional_id(), title=title, status=status)
        async with self._serialized(f"task:{provisional.id}"), self._serialized_columns(status):
            if not self.store.has_column(status):
                raise ColumnNotFoundError(f"Column with id '{status}' not found")
            if status.startswith(PROVISIONAL_PREFIX):
                raise ValidationError(f"Column '{status}' is not saved yet")
            if not self.validator.can_create_in(status):
                raise TransitionNotAllowedError(f"Tasks can't be added to '{status}'")

            mutation = Mutation(
                kind=MutationKind.CREATE_TASK,
                target_id=provisional.id,
                payload={"title": title, "status": status},
            )
            self.store.upsert_task(provisional)
            return await self._run(
                mutation,
                lambda: self.gateway.create_task(title, status),
                commit=lambda task: self.store.replace_task(provisional.id, task),
                rollback=lambda: self._discard_task(provisional.id),
            )

    async def edit_task(self, task_id: str, title: str) -> Mutation | None:
        """Change a task's title.

        Returns:
            The mutation, or None if the title is unchanged

        Raises:
            ValidationError: Whitespace-only title (the task is left untouched)
            TaskNotFoundError: Unknown task
        """
        title = _clean_text(title, "title")
        async with self._serialized(f"task:{task_id}"):
            column_id = self._saved_task(task_id).status
            async with self._serialized_columns(column_id):
                current = self._saved_task(task_id)
                if current.title == title:
                    return None
                return await self._update_task(
                    current, replace(current, title=title), title=title
                )

    async def move_task(self, task_id: str, dest_status: str) -> Mutation | None:
        """Move a task to another column.

        Returns:
            The mutation, or None when the task is already in ``dest_status``

        Raises:
            TransitionNotAllowedError: The move breaks the transition rules
            TaskNotFoundError / ColumnNotFoundError: Unknown task or column
        """
        async with self._serialized(f"task:{task_id}"):
            source = self._saved_task(task_id).status
            # Deleting either column waits until this move settles
            async with self._serialized_columns(source, dest_status):
                current = self._saved_task(task_id)
                if not self.store.has_column(dest_status):
                    raise ColumnNotFoundError(f"Column with id '{dest_status}' not found")
                if not self.validator.can_move(current.status, dest_status):
                    raise TransitionNotAllowedError(
                        f"Task '{task_id}' can't move from '{current.status}' to '{dest_status}'"
                    )
                if current.status == dest_status:
                    return None
                return await self._update_task(
                    current, replace(current, status=dest_status), status=dest_status
                )

    async def delete_task(self, task_id: str) -> Mutation:
        """Remove a task.

        Raises:
            TaskNotFoundError: Unknown task
        """
        async with self._serialized(f"task:{task_id}"):
            column_id = self._saved_task(task_id).status
            async with self._serialized_columns(column_id):
                self._saved_task(task_id)
                index, task = self.store.remove_task(task_id)
                mutation = Mutation(kind=MutationKind.DELETE_TASK, target_id=task_id)
                return await self._run(
                    mutation,
                    lambda: self.gateway.delete_task(task_id),
                    commit=lambda _: None,
                    rollback=lambda: self.store.upsert_task(task, index=index),
                )

    # --- Columns ---

    async def add_column(
        self, display_title: str, color: str = DEFAULT_COLUMN_COLOR
    ) -> Mutation:
        """Append a user column. Its id is assigned by the server on commit.

        Raises:
            ValidationError: Empty title
        """
        display_title = _clean_text(display_title, "display_title")
        provisional = Column(id=_provisional_id(), display_title=display_title, color=color)
        mutation = Mutation(
            kind=MutationKind.CREATE_COLUMN,
            target_id=provisional.id,
            payload={"display_title": display_title, "color": color},
        )
        async with self._serialized(f"column:{provisional.id}"):
            self.store.upsert_column(provisional)
            return await self._run(
                mutation,
                lambda: self.gateway.create_column(display_title, color),
                commit=lambda column: self.store.replace_column(provisional.id, column),
                rollback=lambda: self._discard_column(provisional.id),
            )

    async def delete_column(self, column_id: str) -> Mutation | None:
        """Remove a user column together with its tasks.

        Returns:
            The mutation, or None for a fixed column (which is never removed)

        Raises:
            ColumnNotFoundError: Unknown column
            ValidationError: Column not saved yet
        """
        async with self._serialized(f"column:{column_id}"):
            column = self.store.get_column(column_id)
            if column.is_fixed:
                logger.info("Column '%s' is fixed; not deleting", column_id)
                return None
            if column_id.startswith(PROVISIONAL_PREFIX):
                raise ValidationError(f"Column '{column_id}' is not saved yet")

            removed = self.store.remove_column(column_id)
            mutation = Mutation(kind=MutationKind.DELETE_COLUMN, target_id=column_id)
            return await self._run(
                mutation,
                lambda: self.gateway.delete_column(column_id),
                commit=lambda _: None,
                rollback=lambda: self.store.restore_column(removed),
            )

    # --- Retry ---

    async def retry(self, mutation: Mutation) -> Mutation | None:
        """Reissue a failed mutation against the current board.

        Raises:
            ValueError: If the mutation hasn't failed
        """
        if mutation.state != MutationState.FAILED:
            raise ValueError(f"Only failed mutations can be retried (state={mutation.state})")
        if mutation in self.failed:
            self.failed.remove(mutation)

        payload = mutation.payload
        if mutation.kind == MutationKind.CREATE_TASK:
            return await self.add_task(payload["title"], payload["status"])
        if mutation.kind == MutationKind.UPDATE_TASK:
            if "status" in payload:
                return await self.move_task(mutation.target_id, payload["status"])
            return await self.edit_task(mutation.target_id, payload["title"])
        if mutation.kind == MutationKind.DELETE_TASK:
            return await self.delete_task(mutation.target_id)
        if mutation.kind == MutationKind.CREATE_COLUMN:
            return await self.add_column(payload["display_title"], payload["color"])
        return await self.delete_column(mutation.target_id)

    # --- Internals ---

    async def _update_task(self, previous: Task, optimistic: Task, **patch: Any) -> Mutation:
        mutation = Mutation(kind=MutationKind.UPDATE_TASK, target_id=previous.id, payload=patch)
        self.store.upsert_task(optimistic)
        return await self._run(
            mutation,
            lambda: self.gateway.update_task(previous.id, **patch),
            commit=self._reconcile_task,
            rollback=lambda: self._reconcile_task(previous),
        )

    async def _run(
        self,
        mutation: Mutation,
        remote: Callable[[], Awaitable[Any]],
        commit: Callable[[Any], None],
        rollback: Callable[[], None],
    ) -> Mutation:
        """Drive one already-applied local change through the remote call."""
        mutation.state = MutationState.PENDING
        logger.debug("Mutation %s %s pending", mutation.kind, mutation.target_id)
        try:
            result = await self._call(remote())
        except GatewayError as e:
            self._apply_safely(rollback)
            mutation.state = MutationState.FAILED
            mutation.error = e
            self.failed.append(mutation)
            logger.warning(
                "Mutation %s %s failed, rolled back: %s", mutation.kind, mutation.target_id, e
            )
            if self.on_failure is not None:
                self.on_failure(mutation)
            return mutation
        except BaseException:
            # Cancelled or unexpected: undo the local change and propagate
            self._apply_safely(rollback)
            mutation.state = MutationState.FAILED
            raise

        mutation.result = result
        self._apply_safely(lambda: commit(result))
        mutation.state = MutationState.COMMITTED
        logger.debug("Mutation %s %s committed", mutation.kind, mutation.target_id)
        return mutation

    async def _call(self, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            raise TransportError(f"Remote call timed out after {self.timeout}s") from e

    @asynccontextmanager
    async def _serialized(self, key: str) -> AsyncIterator[None]:
        """Hold the FIFO lock for one task or column."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    @asynccontextmanager
    async def _serialized_columns(self, *column_ids: str) -> AsyncIterator[None]:
        """Hold the locks of the columns a task mutation touches.

        Taken after the task's own lock and in sorted order, so two task
        mutations never wait on each other in a cycle. ``delete_column`` only
        takes its column lock and so waits for every task mutation that
        touches that column.
        """
        async with AsyncExitStack() as stack:
            for column_id in sorted(set(column_ids)):
                await stack.enter_async_context(self._serialized(f"column:{column_id}"))
            yield

    def _saved_task(self, task_id: str) -> Task:
        task = self.store.get_task(task_id)
        if task.is_provisional:
            raise ValidationError(f"Task '{task_id}' is not saved yet")
        return task

    def _reconcile_task(self, task: Task) -> None:
        """Overwrite the local copy of ``task`` if it is still on the board."""
        try:
            self.store.get_task(task.id)
        except TaskNotFoundError:
            logger.debug("Task %s left the board; nothing to reconcile", task.id)
            return
        self.store.upsert_task(task)

    def _discard_task(self, task_id: str) -> None:
        if any(task.id == task_id for task in self.store.tasks):
            self.store.remove_task(task_id)

    def _discard_column(self, column_id: str) -> None:
        for task in list(self.store.tasks_in_column(column_id)):
            self.store.remove_task(task.id)
        self.store.remove_column(column_id)

    @staticmethod
    def _apply_safely(change: Callable[[], None]) -> None:
        # The board may have moved on (e.g. reloaded) while the call was
        # in flight; a change that no longer fits is dropped.
        try:
            change()
        except BoardError as e:
            logger.warning("Could not apply board change: %s", e)
