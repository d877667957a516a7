"""Custom exceptions for the board."""


class BoardError(Exception):
    """Base exception for board errors."""


class ValidationError(BoardError):
    """Input rejected before any local change or remote call."""


class TransitionNotAllowedError(ValidationError):
    """Task may not move between the given columns."""


class TaskNotFoundError(BoardError):
    """Task with given ID is not on the board."""


class ColumnNotFoundError(BoardError):
    """Column with given ID is not on the board."""
