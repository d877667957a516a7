"""Custom exceptions for the Remote Task Gateway."""

from taskboard.board.exceptions import BoardError


class GatewayError(BoardError):
    """Base exception for remote store errors."""


class TransportError(GatewayError):
    """Remote call failed: connection error, timeout or unexpected response."""


class ConflictError(GatewayError):
    """Server rejected the change as conflicting with its current state."""


class RemoteNotFoundError(GatewayError):
    """Server has no record with the given ID."""
