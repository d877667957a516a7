"""Remote Task Gateway - CRUD client for the task/column store."""

from taskboard.gateway.exceptions import (
    ConflictError,
    GatewayError,
    RemoteNotFoundError,
    TransportError,
)
from taskboard.gateway.gateway import DEFAULT_BASE_URL, RemoteTaskGateway

__all__ = [
    "DEFAULT_BASE_URL",
    "ConflictError",
    "GatewayError",
    "RemoteNotFoundError",
    "RemoteTaskGateway",
    "TransportError",
]
