"""Canonical task collection and its derived filtered view."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .filters import TaskSelector, filter_tasks
from .models import TaskRecord, new_local_id
from .toggles import close_all

logger = logging.getLogger(__name__)


class TaskState:
    """Own the canonical records and the view derived from them.

    Every change to ``canonical`` goes through a method here and ends with
    :meth:`rederive`, which rebuilds ``filtered`` as a new list holding the
    same record objects. The only write that skips re-derivation is
    :meth:`insert_into_view`, used for local-only duplicates.

    All mutation happens on the event loop thread; callers driving this from
    OS threads need their own lock around it.
    """

    def __init__(self, selector: Optional[TaskSelector] = None) -> None:
        self.canonical: list[TaskRecord] = []
        self.filtered: list[TaskRecord] = []
        self.query: str = ""
        self.selector = selector or TaskSelector()

    def rederive(self) -> list[TaskRecord]:
        view = filter_tasks(self.canonical, self.query, self.selector)
        # Hidden rows lose their open dropdowns so they cannot reappear open.
        visible = {id(record) for record in view}
        close_all(record for record in self.canonical if id(record) not in visible)
        self.filtered = view
        return self.filtered

    def replace_all(self, records: Iterable[TaskRecord]) -> None:
        """Swap in a fresh collection, e.g. after a fetch."""

        fresh = list(records)
        for record in fresh:
            if record.id is None:
                record.id = new_local_id()
        close_all(fresh)
        self.canonical = fresh
        self.rederive()
        logger.debug("Task state replaced total=%s visible=%s", len(fresh), len(self.filtered))

    def set_query(self, query: str) -> None:
        self.query = query or ""
        self.rederive()

    def find(self, task_id: str) -> Optional[TaskRecord]:
        return next((r for r in self.canonical if r.id == task_id), None)

    def find_in_view(self, task_id: str) -> Optional[TaskRecord]:
        return next((r for r in self.filtered if r.id == task_id), None)

    def append(self, record: TaskRecord) -> None:
        self.canonical.append(record)
        self.rederive()

    def replace(self, task_id: str, record: TaskRecord) -> bool:
        for index, current in enumerate(self.canonical):
            if current.id == task_id:
                self.canonical[index] = record
                self.rederive()
                return True
        return False

    def patch(self, task_id: str, **fields: Any) -> Optional[TaskRecord]:
        record = self.find(task_id)
        if record is None:
            return None
        for name, value in fields.items():
            setattr(record, name, value)
        self.rederive()
        return record

    def remove(self, task_id: str) -> bool:
        before = len(self.canonical)
        self.canonical = [r for r in self.canonical if r.id != task_id]
        self.filtered = [r for r in self.filtered if r.id != task_id]
        return len(self.canonical) != before

    def insert_into_view(self, record: TaskRecord) -> None:
        self.filtered = [*self.filtered, record]


__all__ = ["TaskState"]
