"""Staging areas backing the add/edit form and the notes form."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models import TaskRecord


class SessionMode(str, Enum):
    CLOSED = "closed"
    CREATE = "create"
    EDIT = "edit"


@dataclass
class EditSession:
    """Draft record for the add/edit form.

    The draft is always a deep copy, so typing into the form never touches
    the canonical collection before the submit succeeds.
    """

    mode: SessionMode = SessionMode.CLOSED
    draft: TaskRecord = field(default_factory=TaskRecord)
    target_id: Optional[str] = None
    last_error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.mode is not SessionMode.CLOSED

    @property
    def is_edit(self) -> bool:
        return self.mode is SessionMode.EDIT

    def open_for_create(self) -> TaskRecord:
        self.draft = TaskRecord()
        self.target_id = None
        self.last_error = None
        self.mode = SessionMode.CREATE
        return self.draft

    def open_for_edit(self, record: TaskRecord) -> TaskRecord:
        self.draft = record.model_copy(deep=True)
        self.draft.status_dropdown_open = False
        self.draft.action_dropdown_open = False
        self.target_id = record.id
        self.last_error = None
        self.mode = SessionMode.EDIT
        return self.draft

    def close(self) -> None:
        self.mode = SessionMode.CLOSED
        self.target_id = None
        self.last_error = None

    def cancel(self) -> None:
        self.draft = TaskRecord()
        self.close()


@dataclass
class NotesSession:
    """Notes-only form bound to one record.

    ``record`` is a direct reference to the row; the edited text is staged in
    ``notes`` and copied onto the row only after the store accepts it.
    """

    record: Optional[TaskRecord] = None
    notes: str = ""
    is_open: bool = False
    last_error: Optional[str] = None

    def open_for(self, record: TaskRecord) -> None:
        self.record = record
        self.notes = record.notes
        self.last_error = None
        self.is_open = True

    def close(self) -> None:
        self.record = None
        self.notes = ""
        self.last_error = None
        self.is_open = False


__all__ = ["EditSession", "NotesSession", "SessionMode"]
