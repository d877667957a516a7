"""RemoteTaskGateway - CRUD client for the task/column REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from taskboard.board.exceptions import ValidationError
from taskboard.board.models import DEFAULT_COLUMN_COLOR, Column, Task
from taskboard.gateway.exceptions import (
    ConflictError,
    RemoteNotFoundError,
    TransportError,
)
from taskboard.logging import shorten_body

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


def _require_text(value: str, field_name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    return text


class RemoteTaskGateway:
    """Client for the remote task and column collections.

    Every operation is one request/response round trip and returns the
    server's canonical record. The gateway never touches local board state.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API root, e.g. "http://localhost:5000/api"
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        """Send a request and unwrap the ``{data, error}`` envelope.

        Returns:
            The ``data`` member of the response, or None for 204 responses

        Raises:
            TransportError: On connection failure, timeout or unexpected status
            ConflictError: On HTTP 409
            RemoteNotFoundError: On HTTP 404
        """
        logger.debug("%s %s %s", method, path, payload or "")
        try:
            response = await self.client.request(method, path, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204:
            return None

        try:
            body: dict[str, Any] = response.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        detail = error or shorten_body(response.text)

        if response.status_code == 404:
            raise RemoteNotFoundError(f"{method} {path}: {detail}")
        if response.status_code == 409:
            raise ConflictError(f"{method} {path}: {detail}")
        if not 200 <= response.status_code < 300 or not isinstance(body, dict):
            raise TransportError(f"{method} {path} failed: {response.status_code} - {detail}")
        if error:
            raise TransportError(f"{method} {path} failed: {error}")

        return body.get("data")

    async def list_tasks_and_columns(self) -> tuple[list[Task], list[Column]]:
        """Fetch the whole board.

        Returns:
            Tasks (most recent first) and columns (board order)
        """
        data = await self._request("GET", "/tasks")
        tasks = [Task.from_dict(item) for item in data.get("tasks", [])]
        columns = [Column.from_dict(item) for item in data.get("columns", [])]
        logger.info("Loaded %d task(s) in %d column(s)", len(tasks), len(columns))
        return tasks, columns

    async def create_task(self, title: str, status: str) -> Task:
        """Create a task. The server assigns its id."""
        title = _require_text(title, "title")
        data = await self._request("POST", "/tasks", {"title": title, "status": status})
        task = Task.from_dict(data)
        logger.info("Created task %s in %s", task.id, task.status)
        return task

    async def update_task(
        self,
        task_id: str,
        title: str | None = None,
        status: str | None = None,
    ) -> Task:
        """Update a task's title and/or status. Only provided fields are sent."""
        patch: dict[str, Any] = {}
        if title is not None:
            patch["title"] = _require_text(title, "title")
        if status is not None:
            patch["status"] = status
        if not patch:
            raise ValidationError("Nothing to update")

        data = await self._request("PUT", f"/tasks/{task_id}", patch)
        task = Task.from_dict(data)
        logger.info("Updated task %s (%s)", task.id, ", ".join(patch))
        return task

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
        logger.info("Deleted task %s", task_id)

    async def create_column(
        self, display_title: str, color: str = DEFAULT_COLUMN_COLOR
    ) -> Column:
        """Create a user column. The server derives its id from the title."""
        display_title = _require_text(display_title, "display_title")
        data = await self._request(
            "POST", "/columns", {"display_title": display_title, "color": color}
        )
        column = Column.from_dict(data)
        logger.info("Created column %s", column.id)
        return column

    async def delete_column(self, column_id: str) -> None:
        """Delete a user column. The server removes the column's tasks too."""
        await self._request("DELETE", f"/columns/{column_id}")
        logger.info("Deleted column %s", column_id)
