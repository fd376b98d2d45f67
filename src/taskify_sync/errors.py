# src/taskify_sync/errors.py

"""
Error taxonomy.

None of these are fatal: every code path at an OS callback boundary catches them
and ends in a rendered (possibly degraded) state.
"""

from __future__ import annotations


class TaskifyError(Exception):
    """Base class for subsystem errors."""


class StoreError(TaskifyError):
    """The shared store could not be read or written."""


class DecodeError(TaskifyError):
    """Malformed or missing snapshot / payload field. Always recovered to a default."""


class DispatchError(TaskifyError):
    """The relay or renderer could not complete a write or render. Logged and swallowed."""

    def __init__(self, message: str, *, surface_id: int | None = None) -> None:
        super().__init__(message)
        self.surface_id = surface_id
