"""Task CRUD endpoints."""

from fastapi import APIRouter, status

from taskboard.api.dependencies import StateStoreDep
from taskboard.api.models import (
    APIResponse,
    BoardResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    column_to_response,
    task_to_response,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=APIResponse[BoardResponse])
def list_board(store: StateStoreDep) -> APIResponse[BoardResponse]:
    """List all tasks (most recent first) together with the board's columns."""
    tasks = store.list_tasks()
    columns = store.list_columns()
    return APIResponse(
        data=BoardResponse(
            tasks=[task_to_response(t) for t in tasks],
            columns=[column_to_response(c) for c in columns],
        )
    )


@router.post(
    "",
    response_model=APIResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_task(task: TaskCreate, store: StateStoreDep) -> APIResponse[TaskResponse]:
    """Create a new task."""
    created = store.create_task(title=task.title, status=task.status)
    return APIResponse(data=task_to_response(created))


@router.get("/{task_id}", response_model=APIResponse[TaskResponse])
def get_task(task_id: str, store: StateStoreDep) -> APIResponse[TaskResponse]:
    """Get a task by ID."""
    return APIResponse(data=task_to_response(store.get_task(task_id)))


@router.put("/{task_id}", response_model=APIResponse[TaskResponse])
def update_task(task_id: str, task: TaskUpdate, store: StateStoreDep) -> APIResponse[TaskResponse]:
    """Update a task's title and/or status (partial update)."""
    updated = store.update_task(task_id, title=task.title, status=task.status)
    return APIResponse(data=task_to_response(updated))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, store: StateStoreDep) -> None:
    """Delete a task."""
    store.delete_task(task_id)
