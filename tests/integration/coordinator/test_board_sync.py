"""Integration tests: coordinator and gateway against the real API app."""

import httpx
import pytest

from taskboard.api.app import create_app
from taskboard.api.dependencies import get_state_store
from taskboard.board import DONE, IN_PROGRESS, TODO, TransitionValidator
from taskboard.coordinator import MutationState, OptimisticUpdateCoordinator
from taskboard.gateway import RemoteTaskGateway
from taskboard.state_store import StateStore


class PermissiveValidator(TransitionValidator):
    """Client-side rules that let every move through, to exercise server rejection."""

    def can_move(self, source_status: str, dest_status: str) -> bool:
        return True


@pytest.fixture
def store():
    """Create an in-memory StateStore."""
    s = StateStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def gateway(store: StateStore):
    """Gateway wired to the API app in-process."""
    app = create_app(":memory:")

    def override_get_state_store():
        yield store

    app.dependency_overrides[get_state_store] = override_get_state_store

    g = RemoteTaskGateway(base_url="http://testserver/api")
    g._client = httpx.AsyncClient(
        base_url=g.base_url, transport=httpx.ASGITransport(app=app)
    )
    return g


@pytest.mark.integration
class TestBoardSync:
    """End-to-end flows through coordinator, gateway, API and database."""

    @pytest.mark.asyncio
    async def test_add_then_move(self, gateway: RemoteTaskGateway, store: StateStore) -> None:
        coordinator = OptimisticUpdateCoordinator(gateway)
        await coordinator.load()

        added = await coordinator.add_task("Buy milk", TODO)

        assert added.state == MutationState.COMMITTED
        first = coordinator.store.tasks[0]
        assert first.title == "Buy milk"
        assert not first.is_provisional
        assert store.get_task(first.id).status == TODO

        moved = await coordinator.move_task(first.id, IN_PROGRESS)

        assert moved.state == MutationState.COMMITTED
        assert coordinator.store.tasks_in_column(TODO).ids() == []
        assert coordinator.store.tasks_in_column(IN_PROGRESS).ids() == [first.id]
        assert store.get_task(first.id).status == IN_PROGRESS

        await gateway.close()

    @pytest.mark.asyncio
    async def test_load_reflects_server_board(
        self, gateway: RemoteTaskGateway, store: StateStore
    ) -> None:
        store.create_column("Review")
        older = store.create_task("Older", TODO)
        newer = store.create_task("Newer", "review")
        coordinator = OptimisticUpdateCoordinator(gateway)

        await coordinator.load()

        assert [t.id for t in coordinator.store.tasks] == [newer.id, older.id]
        assert [c.id for c in coordinator.store.columns] == [TODO, IN_PROGRESS, DONE, "review"]
        assert coordinator.store.get_column(TODO).is_fixed

        await gateway.close()

    @pytest.mark.asyncio
    async def test_server_rejection_rolls_back(
        self, gateway: RemoteTaskGateway, store: StateStore
    ) -> None:
        task = store.create_task("Ship it", TODO)
        store.update_task(task.id, status=DONE)
        coordinator = OptimisticUpdateCoordinator(gateway, validator=PermissiveValidator())
        await coordinator.load()

        mutation = await coordinator.move_task(task.id, TODO)

        assert mutation.state == MutationState.FAILED
        assert "Move not allowed" in str(mutation.error)
        assert coordinator.store.get_task(task.id).status == DONE
        assert store.get_task(task.id).status == DONE

        await gateway.close()

    @pytest.mark.asyncio
    async def test_column_lifecycle(self, gateway: RemoteTaskGateway, store: StateStore) -> None:
        coordinator = OptimisticUpdateCoordinator(gateway)
        await coordinator.load()

        await coordinator.add_column("In Review")
        await coordinator.add_task("Check PR", "inreview")
        assert coordinator.store.columns[-1].id == "inreview"

        deleted = await coordinator.delete_column("inreview")

        assert deleted.state == MutationState.COMMITTED
        assert not coordinator.store.has_column("inreview")
        assert coordinator.store.tasks == ()
        assert store.list_tasks() == []

        await gateway.close()

    @pytest.mark.asyncio
    async def test_edit_and_delete(self, gateway: RemoteTaskGateway, store: StateStore) -> None:
        coordinator = OptimisticUpdateCoordinator(gateway)
        await coordinator.load()
        await coordinator.add_task("Buy milk", TODO)
        task_id = coordinator.store.tasks[0].id

        await coordinator.edit_task(task_id, "Buy oat milk")
        assert store.get_task(task_id).title == "Buy oat milk"

        deleted = await coordinator.delete_task(task_id)

        assert deleted.state == MutationState.COMMITTED
        assert coordinator.store.tasks == ()
        assert store.list_tasks() == []

        await gateway.close()
