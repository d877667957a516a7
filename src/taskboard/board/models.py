"""Data models for the board."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TODO = "todo"
IN_PROGRESS = "inprogress"
DONE = "done"

# Built-in columns in board order: (id, display title, color)
FIXED_COLUMNS = (
    (TODO, "To Do", "#3b82f6"),
    (IN_PROGRESS, "In Progress", "#f59e0b"),
    (DONE, "Done", "#10b981"),
)
FIXED_COLUMN_IDS = frozenset(column_id for column_id, _, _ in FIXED_COLUMNS)

DEFAULT_COLUMN_COLOR = "#6b7280"

PROVISIONAL_PREFIX = "local-"


@dataclass(frozen=True)
class Task:
    """A task card on the board."""

    id: str
    title: str
    status: str  # id of the column the task belongs to

    @property
    def is_provisional(self) -> bool:
        """Whether the id is a local placeholder not yet confirmed by the server."""
        return self.id.startswith(PROVISIONAL_PREFIX)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(id=str(data["id"]), title=data["title"], status=data["status"])


@dataclass(frozen=True)
class Column:
    """A board column. Its id is the value tasks use as their status."""

    id: str
    display_title: str
    is_fixed: bool = False
    color: str = DEFAULT_COLUMN_COLOR

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        return cls(
            id=str(data["id"]),
            display_title=data["display_title"],
            is_fixed=bool(data.get("is_fixed", False)),
            color=data.get("color") or DEFAULT_COLUMN_COLOR,
        )


def default_columns() -> list[Column]:
    """Return the built-in columns every board starts with."""
    return [
        Column(id=column_id, display_title=title, is_fixed=True, color=color)
        for column_id, title, color in FIXED_COLUMNS
    ]
