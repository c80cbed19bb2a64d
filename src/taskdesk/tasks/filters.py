"""Search and task-kind filtering over task records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import TaskKind, TaskRecord

_KIND_FLAGS: dict[TaskKind, str] = {
    TaskKind.CALL: "call",
    TaskKind.MEETING: "meeting",
    TaskKind.VIDEO_CALL: "video_call",
}


@dataclass
class TaskSelector:
    """Four-way task kind selector backing the filter dropdown.

    ``all`` passes every record regardless of the other flags. With ``all``
    unset a record passes when it matches any set kind flag, so clearing every
    flag yields an empty result rather than an error.
    """

    all: bool = True
    call: bool = False
    meeting: bool = False
    video_call: bool = False

    def select(self, kind: TaskKind) -> None:
        """Make ``kind`` the only selected kind."""

        self.all = False
        for flag in _KIND_FLAGS.values():
            setattr(self, flag, False)
        setattr(self, _KIND_FLAGS[kind], True)

    def select_all(self) -> None:
        self.all = True
        for flag in _KIND_FLAGS.values():
            setattr(self, flag, False)

    def toggle(self, kind: TaskKind) -> None:
        """Flip one kind flag, as a checkbox would."""

        flag = _KIND_FLAGS[kind]
        enabled = not getattr(self, flag)
        setattr(self, flag, enabled)
        if enabled:
            self.all = False

    def selected_kinds(self) -> list[TaskKind]:
        return [kind for kind, flag in _KIND_FLAGS.items() if getattr(self, flag)]

    def matches(self, record: TaskRecord) -> bool:
        if self.all:
            return True
        return any(record.task == kind.value for kind in self.selected_kinds())

    def describe(self) -> str:
        if self.all:
            return "All"
        kinds = self.selected_kinds()
        if not kinds:
            return "None"
        return ", ".join(kind.value for kind in kinds)


def matches_query(record: TaskRecord, query: str) -> bool:
    """Return True when ``query`` is a case-insensitive substring of any field."""

    if not query:
        return True
    needle = query.lower()
    return any(value and needle in value.lower() for value in record.textual_fields())


def filter_tasks(
    records: Iterable[TaskRecord], query: str, selector: TaskSelector
) -> list[TaskRecord]:
    """Return the records passing both the kind selector and the search query.

    Order follows ``records`` and the returned list holds the same objects.
    """

    return [
        record
        for record in records
        if selector.matches(record) and matches_query(record, query)
    ]


__all__ = ["TaskSelector", "filter_tasks", "matches_query"]
