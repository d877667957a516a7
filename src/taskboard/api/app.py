"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.api.dependencies import close_state_store, init_state_store
from taskboard.api.models import APIResponse
from taskboard.api.routes import columns, tasks
from taskboard.state_store import (
    ColumnExistsError,
    ColumnNotFoundError,
    FixedColumnError,
    InvalidTitleError,
    InvalidTransitionError,
    StateStoreError,
    TaskNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Store exception -> (status code, client-facing message). Handlers resolve by
# the most specific class, so StateStoreError only catches the rest.
ERROR_RESPONSES: list[tuple[type[StateStoreError], int, str]] = [
    (TaskNotFoundError, status.HTTP_404_NOT_FOUND, "Task not found"),
    (ColumnNotFoundError, status.HTTP_404_NOT_FOUND, "Column not found"),
    (ColumnExistsError, status.HTTP_409_CONFLICT, "Column already exists"),
    (FixedColumnError, status.HTTP_409_CONFLICT, "Fixed columns cannot be deleted"),
    (InvalidTransitionError, status.HTTP_409_CONFLICT, "Move not allowed"),
    (InvalidTitleError, 422, "Invalid title"),
    (StateStoreError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
]


def register_exception_handlers(app: FastAPI) -> None:
    """Map State Store and request validation errors to enveloped JSON responses."""

    def make_handler(status_code: int, message: str):  # noqa: ANN202
        async def handler(_request: Request, _exc: Exception) -> JSONResponse:
            return JSONResponse(
                status_code=status_code,
                content=APIResponse[None](data=None, error=message).model_dump(),
            )

        return handler

    for exc_type, status_code, message in ERROR_RESPONSES:
        app.add_exception_handler(exc_type, make_handler(status_code, message))

    async def validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return JSONResponse(
            status_code=422,
            content=APIResponse[None](data=None, error=f"Invalid request: {problems}").model_dump(),
        )

    app.add_exception_handler(RequestValidationError, validation_handler)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    db_path = app.state.db_path if hasattr(app.state, "db_path") else "taskboard.db"
    init_state_store(db_path)
    yield
    close_state_store()


def create_app(db_path: str = "taskboard.db") -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Taskboard API",
        description="REST API for the Taskboard kanban board",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.db_path = db_path

    # The browser board is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(tasks.router, prefix="/api")
    app.include_router(columns.router, prefix="/api")

    return app
