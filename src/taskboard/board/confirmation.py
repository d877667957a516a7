"""Typed confirmation required before a task is deleted."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskboard.coordinator import Mutation, OptimisticUpdateCoordinator

CONFIRMATION_WORD = "delete"
INVALID_CONFIRMATION = "Invalid"


def is_delete_confirmed(text: str) -> bool:
    """Return True if ``text`` is the word "delete", ignoring case and surrounding space."""
    return text.strip().lower() == CONFIRMATION_WORD


@dataclass
class DeleteConfirmation:
    """State of a delete-confirmation prompt for one task.

    Attributes:
        task_id: Task the user asked to delete.
        value: Text typed so far.
        error: Message shown after a mismatched submission, empty otherwise.
    """

    task_id: str
    value: str = ""
    error: str = ""

    async def submit(
        self, coordinator: OptimisticUpdateCoordinator, text: str | None = None
    ) -> Mutation | None:
        """Delete the task if the typed text confirms it.

        Args:
            coordinator: Coordinator that performs the deletion.
            text: Submitted text; defaults to ``value``.

        Returns:
            The delete mutation, or None when the text didn't match
        """
        if text is not None:
            self.value = text
        if not is_delete_confirmed(self.value):
            self.error = INVALID_CONFIRMATION
            return None
        self.error = ""
        return await coordinator.delete_task(self.task_id)
