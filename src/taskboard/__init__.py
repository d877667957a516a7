"""Taskboard - Kanban to-do board with optimistic client-side updates."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed Taskboard version."""
    return __version__
