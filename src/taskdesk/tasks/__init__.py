"""Task domain package: records, filtering, dropdown state and mutations."""

from .board import TaskBoard
from .client import TaskApiClient, TaskBackend
from .errors import MissingIdentityError, TaskApiError, TaskDeskError, UnknownTaskError
from .filters import TaskSelector, filter_tasks
from .models import TaskKind, TaskRecord, TaskStatus
from .mutations import MutationCoordinator, MutationResult
from .session import EditSession, NotesSession, SessionMode
from .state import TaskState
from .toggles import DropdownKind, toggle_dropdown

__all__ = [
    "DropdownKind",
    "EditSession",
    "MissingIdentityError",
    "MutationCoordinator",
    "MutationResult",
    "NotesSession",
    "SessionMode",
    "TaskApiClient",
    "TaskApiError",
    "TaskBackend",
    "TaskBoard",
    "TaskDeskError",
    "TaskKind",
    "TaskRecord",
    "TaskSelector",
    "TaskState",
    "TaskStatus",
    "UnknownTaskError",
    "filter_tasks",
    "toggle_dropdown",
]
