"""Domain models representing task records exchanged with the task store."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

LOCAL_ID_PREFIX = "local-"


class TaskKind(str, Enum):
    """Closed set of task kinds used as a filter dimension."""

    CALL = "Call"
    MEETING = "Meeting"
    VIDEO_CALL = "Video Call"


class TaskStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"

    def flipped(self) -> "TaskStatus":
        return TaskStatus.CLOSED if self is TaskStatus.OPEN else TaskStatus.OPEN


def new_local_id() -> str:
    """Return a synthetic id for records the store has not assigned one to."""

    return f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def is_local_id(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(LOCAL_ID_PREFIX)  # type: ignore[union-attr]


class TaskRecord(BaseModel):
    """A single task row.

    The store names the identity ``_id``; it is accepted under either name and
    always exposed as ``id``. The two dropdown flags are UI state only and are
    excluded from every dump, so they never reach the store.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id"),
    )
    date: str = ""
    time: str = ""
    entity: str = ""
    task: str = ""
    person: str = ""
    notes: str = ""
    status: TaskStatus = TaskStatus.OPEN

    status_dropdown_open: bool = Field(default=False, exclude=True)
    action_dropdown_open: bool = Field(default=False, exclude=True)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("date", "time", "entity", "task", "person", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, TaskStatus):
            return value
        if value is None or not str(value).strip():
            return TaskStatus.OPEN
        lowered = str(value).strip().lower()
        for member in TaskStatus:
            if member.value.lower() == lowered:
                return member
        return value

    @property
    def is_persisted(self) -> bool:
        """Return True when the id was assigned by the store."""

        return self.id is not None and not is_local_id(self.id)

    def textual_fields(self) -> tuple[str, ...]:
        return (
            self.date,
            self.time,
            self.entity,
            self.task,
            self.person,
            self.notes,
            self.status.value,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize the persisted fields for a create or full-edit request."""

        return self.model_dump(mode="json", exclude={"id"})


class TaskListEnvelope(BaseModel):
    """Response wrapper returned by ``GET /products``; only ``data`` is used."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    # Rows are validated one at a time by the client so a bad row is skipped.
    data: list[Any] = Field(default_factory=list)
    remark: Optional[str] = None


__all__ = [
    "LOCAL_ID_PREFIX",
    "TaskKind",
    "TaskListEnvelope",
    "TaskRecord",
    "TaskStatus",
    "is_local_id",
    "new_local_id",
]
