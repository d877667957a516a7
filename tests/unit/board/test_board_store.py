"""Unit tests for BoardStateStore."""

import pytest

from taskboard.board import (
    DONE,
    IN_PROGRESS,
    TODO,
    BoardStateStore,
    Column,
    ColumnNotFoundError,
    Task,
    TaskNotFoundError,
    default_columns,
)


@pytest.fixture
def review() -> Column:
    return Column(id="review", display_title="Review")


@pytest.fixture
def store(review: Column) -> BoardStateStore:
    """Store with the fixed columns, one custom column and three tasks."""
    s = BoardStateStore()
    s.replace_all(
        [
            Task(id="3", title="Write docs", status=TODO),
            Task(id="2", title="Review PR", status="review"),
            Task(id="1", title="Ship it", status=TODO),
        ],
        [*default_columns(), review],
    )
    return s


def _assert_statuses_valid(store: BoardStateStore) -> None:
    column_ids = {c.id for c in store.columns}
    assert all(t.status in column_ids for t in store.tasks)


@pytest.mark.unit
class TestReplaceAll:
    """Tests for replace_all."""

    def test_replaces_tasks_and_columns(self, store: BoardStateStore) -> None:
        assert [t.id for t in store.tasks] == ["3", "2", "1"]
        assert [c.id for c in store.columns] == [TODO, IN_PROGRESS, DONE, "review"]

    def test_drops_tasks_with_unknown_column(self) -> None:
        s = BoardStateStore()
        s.replace_all(
            [Task(id="1", title="a", status=TODO), Task(id="2", title="b", status="gone")],
            default_columns(),
        )

        assert [t.id for t in s.tasks] == ["1"]

    def test_does_not_keep_caller_list(self) -> None:
        tasks = [Task(id="1", title="a", status=TODO)]
        s = BoardStateStore()
        s.replace_all(tasks, default_columns())

        tasks.append(Task(id="2", title="b", status=TODO))

        assert len(s.tasks) == 1


@pytest.mark.unit
class TestUpsertTask:
    """Tests for upsert_task."""

    def test_new_task_goes_to_front(self, store: BoardStateStore) -> None:
        store.upsert_task(Task(id="4", title="New", status=IN_PROGRESS))

        assert store.tasks[0].id == "4"

    def test_existing_task_replaced_in_place(self, store: BoardStateStore) -> None:
        previous = store.upsert_task(Task(id="2", title="Review PR #7", status="review"))

        assert previous == Task(id="2", title="Review PR", status="review")
        assert store.tasks[1].title == "Review PR #7"
        assert len(store.tasks) == 3

    def test_insert_at_index(self, store: BoardStateStore) -> None:
        store.upsert_task(Task(id="4", title="New", status=TODO), index=2)

        assert [t.id for t in store.tasks] == ["3", "2", "4", "1"]

    def test_unknown_status_rejected(self, store: BoardStateStore) -> None:
        with pytest.raises(ColumnNotFoundError):
            store.upsert_task(Task(id="4", title="New", status="nowhere"))

        assert len(store.tasks) == 3


@pytest.mark.unit
class TestRemoveTask:
    """Tests for remove_task."""

    def test_returns_position_and_task(self, store: BoardStateStore) -> None:
        index, task = store.remove_task("2")

        assert index == 1
        assert task.title == "Review PR"
        assert [t.id for t in store.tasks] == ["3", "1"]

    def test_unknown_task_raises(self, store: BoardStateStore) -> None:
        with pytest.raises(TaskNotFoundError):
            store.remove_task("missing")


@pytest.mark.unit
class TestColumns:
    """Tests for column operations."""

    def test_upsert_column_appends(self, store: BoardStateStore) -> None:
        store.upsert_column(Column(id="blocked", display_title="Blocked"))

        assert store.columns[-1].id == "blocked"

    def test_remove_column_cascades_to_tasks(self, store: BoardStateStore) -> None:
        removed = store.remove_column("review")

        assert removed is not None
        assert removed.index == 3
        assert [t.id for _, t in removed.tasks] == ["2"]
        assert not store.has_column("review")
        assert [t.id for t in store.tasks] == ["3", "1"]
        _assert_statuses_valid(store)

    @pytest.mark.parametrize("column_id", [TODO, IN_PROGRESS, DONE])
    def test_remove_fixed_column_is_noop(self, store: BoardStateStore, column_id: str) -> None:
        assert store.remove_column(column_id) is None

        assert store.has_column(column_id)
        assert len(store.tasks) == 3

    def test_remove_unknown_column_raises(self, store: BoardStateStore) -> None:
        with pytest.raises(ColumnNotFoundError):
            store.remove_column("missing")

    def test_restore_column_puts_everything_back(self, store: BoardStateStore) -> None:
        before_tasks, before_columns = store.tasks, store.columns
        removed = store.remove_column("review")

        store.restore_column(removed)

        assert store.tasks == before_tasks
        assert store.columns == before_columns

    def test_replace_column_moves_tasks_to_new_id(self, store: BoardStateStore) -> None:
        store.upsert_column(Column(id="local-1", display_title="Blocked"))

        store.replace_column("local-1", Column(id="blocked", display_title="Blocked"))

        assert store.columns[-1].id == "blocked"
        assert not store.has_column("local-1")


@pytest.mark.unit
class TestTasksInColumn:
    """Tests for tasks_in_column."""

    def test_filters_in_board_order(self, store: BoardStateStore) -> None:
        assert store.tasks_in_column(TODO).ids() == ["3", "1"]

    def test_view_is_restartable(self, store: BoardStateStore) -> None:
        view = store.tasks_in_column(TODO)

        assert list(view) == list(view)
        assert len(view) == 2

    def test_view_reflects_later_changes(self, store: BoardStateStore) -> None:
        view = store.tasks_in_column(IN_PROGRESS)
        assert len(view) == 0

        store.upsert_task(Task(id="1", title="Ship it", status=IN_PROGRESS))

        assert view.ids() == ["1"]
        assert "1" not in store.tasks_in_column(TODO).ids()

    def test_contains(self, store: BoardStateStore) -> None:
        assert Task(id="2", title="Review PR", status="review") in store.tasks_in_column("review")

    def test_empty_for_unknown_column(self, store: BoardStateStore) -> None:
        assert list(store.tasks_in_column("nowhere")) == []
