"""Data models for the Optimistic Update Coordinator."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class MutationState(StrEnum):
    """Lifecycle of one user action."""

    IDLE = "idle"  # created, not yet applied
    PENDING = "pending"  # applied locally, remote call in flight
    COMMITTED = "committed"
    FAILED = "failed"


class MutationKind(StrEnum):
    """What a mutation does."""

    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    CREATE_COLUMN = "create_column"
    DELETE_COLUMN = "delete_column"


@dataclass
class Mutation:
    """One optimistic change and its outcome.

    Attributes:
        kind: Which operation this is.
        target_id: Task or column the change applies to (provisional id for creates).
        payload: Arguments needed to reissue the change on retry.
        state: Current lifecycle state.
        result: Canonical record returned by the server once committed.
        error: The failure, once failed.
    """

    kind: MutationKind
    target_id: str
    payload: dict[str, Any] = field(default_factory=dict)
    state: MutationState = MutationState.IDLE
    result: Any = None
    error: Exception | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def done(self) -> bool:
        return self.state in (MutationState.COMMITTED, MutationState.FAILED)
