"""Exception hierarchy shared by the task client and coordinators."""

from __future__ import annotations

from typing import Any


class TaskDeskError(RuntimeError):
    """Base class for task list failures."""


class TaskApiError(TaskDeskError):
    """Wrap transport or API failures when communicating with the task store."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(str(detail))
        self.status_code = status_code
        self.detail = detail


class MissingIdentityError(TaskDeskError):
    """Raised when an operation needs a store-assigned id the record lacks."""


class UnknownTaskError(TaskDeskError):
    """Raised when an id does not name any record in the current view."""


__all__ = [
    "MissingIdentityError",
    "TaskApiError",
    "TaskDeskError",
    "UnknownTaskError",
]
