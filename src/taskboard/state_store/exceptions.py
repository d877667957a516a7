"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class TaskNotFoundError(StateStoreError):
    """Task with given ID does not exist."""


class ColumnNotFoundError(StateStoreError):
    """Column with given ID does not exist."""


class ColumnExistsError(StateStoreError):
    """A column with the same ID already exists."""


class FixedColumnError(StateStoreError):
    """Built-in columns cannot be deleted."""


class InvalidTitleError(StateStoreError):
    """Title is empty, or yields no usable column ID."""


class InvalidTransitionError(StateStoreError):
    """Task may not move to the requested column."""
