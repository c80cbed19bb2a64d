"""Task board orchestrating filters, dropdowns, forms and mutations."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .client import TaskBackend
from .errors import TaskApiError, TaskDeskError, UnknownTaskError
from .filters import TaskSelector
from .models import TaskKind, TaskRecord, TaskStatus
from .mutations import MutationCoordinator, MutationResult
from .session import EditSession, NotesSession
from .state import TaskState
from .toggles import DropdownKind, close_all, toggle_dropdown

logger = logging.getLogger(__name__)


class TaskBoard:
    """Own the task state and wire user actions to it.

    ``filtered`` is what a front end renders. Search and filter changes
    re-derive it locally; row actions that touch the store go through the
    :class:`MutationCoordinator`.
    """

    def __init__(
        self,
        backend: TaskBackend,
        *,
        coordinator_factory: Callable[
            [TaskBackend, TaskState], MutationCoordinator
        ] = MutationCoordinator,
    ) -> None:
        self._backend = backend
        self.state = TaskState()
        # The coordinator must share this board's state.
        self.mutations = coordinator_factory(backend, self.state)
        self.edit_session = EditSession()
        self.notes_session = NotesSession()
        self.filter_menu_open = False

    @property
    def canonical(self) -> list[TaskRecord]:
        return self.state.canonical

    @property
    def filtered(self) -> list[TaskRecord]:
        return self.state.filtered

    @property
    def selector(self) -> TaskSelector:
        return self.state.selector

    @property
    def query(self) -> str:
        return self.state.query

    async def load(self) -> MutationResult:
        """Fetch every task and replace the canonical collection."""

        try:
            records = await self._backend.fetch_all()
        except TaskApiError as exc:
            logger.error("Error loading tasks status=%s detail=%s", exc.status_code, exc.detail)
            return MutationResult.failed(exc)
        self.state.replace_all(records)
        return MutationResult(ok=True)

    # ---- search & filter ----

    def search(self, query: str) -> list[TaskRecord]:
        self.state.set_query(query)
        return self.filtered

    def select_kind(self, kind: Optional[TaskKind]) -> list[TaskRecord]:
        """Select a single kind, or every kind when ``kind`` is None."""

        if kind is None:
            self.selector.select_all()
        else:
            self.selector.select(kind)
        return self.state.rederive()

    def toggle_kind(self, kind: TaskKind) -> list[TaskRecord]:
        self.selector.toggle(kind)
        return self.state.rederive()

    def toggle_filter_menu(self) -> bool:
        self.filter_menu_open = not self.filter_menu_open
        return self.filter_menu_open

    # ---- row dropdowns ----

    def toggle_status_dropdown(self, task_id: str) -> bool:
        return toggle_dropdown(self.filtered, DropdownKind.STATUS, task_id)

    def toggle_action_dropdown(self, task_id: str) -> bool:
        return toggle_dropdown(self.filtered, DropdownKind.ACTION, task_id)

    def _row(self, task_id: str) -> TaskRecord:
        record = self.state.find_in_view(task_id)
        if record is None:
            raise UnknownTaskError(f"Task {task_id} is not in the current view")
        return record

    # ---- add / edit form ----

    def open_create(self) -> TaskRecord:
        close_all(self.filtered)
        return self.edit_session.open_for_create()

    def open_edit(self, task_id: str) -> TaskRecord:
        record = self._row(task_id)
        close_all(self.filtered)
        return self.edit_session.open_for_edit(record)

    async def submit(self) -> MutationResult:
        """Send the draft as a create or an update depending on the form mode.

        The form closes on success. On failure it stays open with
        ``last_error`` set so the user can retry.
        """

        session = self.edit_session
        if not session.is_open:
            return MutationResult.failed(TaskDeskError("No task form is open"))

        if session.is_edit:
            session.draft.id = session.target_id
            result = await self.mutations.update(session.draft)
        else:
            result = await self.mutations.create(session.draft)

        if result.ok:
            session.close()
        else:
            session.last_error = str(result.error)
        return result

    def cancel(self) -> None:
        self.edit_session.cancel()

    # ---- notes form ----

    def open_notes(self, task_id: str) -> NotesSession:
        self.notes_session.open_for(self._row(task_id))
        return self.notes_session

    async def save_notes(self) -> MutationResult:
        session = self.notes_session
        task_id = session.record.id if session.record is not None else None
        result = await self.mutations.save_notes(task_id, session.notes)
        if result.ok:
            session.close()
        else:
            session.last_error = str(result.error)
        return result

    def close_notes(self) -> None:
        self.notes_session.close()

    # ---- row actions ----

    async def toggle_status(self, task_id: str) -> MutationResult:
        return await self.mutations.toggle_status(task_id)

    async def change_status(self, task_id: str, status: TaskStatus) -> MutationResult:
        return await self.mutations.set_status(task_id, status)

    def duplicate(self, task_id: str) -> MutationResult:
        return self.mutations.duplicate(task_id)

    async def delete(self, task_id: str) -> MutationResult:
        return await self.mutations.delete(task_id)


__all__ = ["TaskBoard"]
