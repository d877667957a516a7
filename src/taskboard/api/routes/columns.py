"""Column endpoints."""

from fastapi import APIRouter, status

from taskboard.api.dependencies import StateStoreDep
from taskboard.api.models import (
    APIResponse,
    ColumnCreate,
    ColumnResponse,
    column_to_response,
)

router = APIRouter(prefix="/columns", tags=["columns"])


@router.get("", response_model=APIResponse[list[ColumnResponse]])
def list_columns(store: StateStoreDep) -> APIResponse[list[ColumnResponse]]:
    """List all columns in board order."""
    return APIResponse(data=[column_to_response(c) for c in store.list_columns()])


@router.post(
    "",
    response_model=APIResponse[ColumnResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_column(column: ColumnCreate, store: StateStoreDep) -> APIResponse[ColumnResponse]:
    """Create a user column."""
    created = store.create_column(display_title=column.display_title, color=column.color)
    return APIResponse(data=column_to_response(created))


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_column(column_id: str, store: StateStoreDep) -> None:
    """Delete a user column and every task in it."""
    store.delete_column(column_id)
