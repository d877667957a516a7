"""Optimistic Update Coordinator - Local-first board changes synced to the server."""

from taskboard.coordinator.coordinator import (
    DEFAULT_TIMEOUT,
    OptimisticUpdateCoordinator,
    TaskGateway,
)
from taskboard.coordinator.models import Mutation, MutationKind, MutationState

__all__ = [
    "DEFAULT_TIMEOUT",
    "Mutation",
    "MutationKind",
    "MutationState",
    "OptimisticUpdateCoordinator",
    "TaskGateway",
]
