"""Transition rules for moving tasks between columns."""

from __future__ import annotations

from collections.abc import Iterable

from taskboard.board.models import DONE


class TransitionValidator:
    """Decides whether a task may move from one column to another.

    Terminal columns (``done`` by default) are one-way: anything can be dropped
    into them, nothing can be dragged back out.
    """

    def __init__(self, terminal_statuses: Iterable[str] = (DONE,)) -> None:
        self.terminal_statuses = frozenset(terminal_statuses)

    def is_terminal(self, status: str) -> bool:
        return status in self.terminal_statuses

    def can_move(self, source_status: str, dest_status: str) -> bool:
        """Return True if a task in ``source_status`` may move to ``dest_status``.

        A move onto the same column is a permitted no-op.
        """
        if source_status == dest_status:
            return True
        if self.is_terminal(source_status):
            return self.is_terminal(dest_status)
        return True

    def can_create_in(self, status: str) -> bool:
        """New tasks may not be added straight into a terminal column."""
        return not self.is_terminal(status)
