"""Coordinate remote task mutations with the local task state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .client import TaskBackend
from .errors import MissingIdentityError, TaskApiError, TaskDeskError, UnknownTaskError
from .models import TaskRecord, TaskStatus, is_local_id, new_local_id
from .state import TaskState
from .toggles import DropdownKind, set_open

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MutationResult:
    """Outcome of a coordinated mutation."""

    ok: bool
    record: Optional[TaskRecord] = None
    error: Optional[TaskDeskError] = None

    @classmethod
    def failed(cls, error: TaskDeskError) -> "MutationResult":
        return cls(ok=False, error=error)


class MutationCoordinator:
    """Apply local changes only after the matching remote call succeeds.

    Transport failures and missing ids never raise out of here; they are
    logged and returned as a failed :class:`MutationResult` with the state
    left as it was.
    """

    def __init__(self, backend: TaskBackend, state: TaskState) -> None:
        self._backend = backend
        self._state = state

    def _require_persisted(self, task_id: Optional[str], action: str) -> Optional[MutationResult]:
        if task_id is None or is_local_id(task_id):
            error = MissingIdentityError(f"Cannot {action}: task has no store-assigned id")
            logger.error("%s (id=%s)", error, task_id)
            return MutationResult.failed(error)
        return None

    @staticmethod
    def _transport_failure(action: str, task_id: Optional[str], exc: TaskApiError) -> MutationResult:
        logger.error(
            "Error %s task id=%s status=%s detail=%s",
            action,
            task_id,
            exc.status_code,
            exc.detail,
        )
        return MutationResult.failed(exc)

    async def create(self, draft: TaskRecord) -> MutationResult:
        record = draft.model_copy(deep=True)
        try:
            echoed = await self._backend.create(record)
        except TaskApiError as exc:
            return self._transport_failure("creating", None, exc)

        if echoed is not None and echoed.is_persisted:
            record.id = echoed.id
        else:
            record.id = new_local_id()
        record.status_dropdown_open = False
        record.action_dropdown_open = False
        self._state.append(record)
        logger.info("Task added id=%s", record.id)
        return MutationResult(ok=True, record=record)

    async def update(self, draft: TaskRecord) -> MutationResult:
        """Persist a full edit and replace the local record wholesale."""

        task_id = draft.id
        if (failure := self._require_persisted(task_id, "update")) is not None:
            return failure
        assert task_id is not None

        try:
            await self._backend.update(task_id, draft.to_payload())
        except TaskApiError as exc:
            return self._transport_failure("updating", task_id, exc)

        record = draft.model_copy(deep=True)
        if not self._state.replace(task_id, record):
            logger.warning("Updated task id=%s is not in the local collection", task_id)
        logger.info("Task updated id=%s", task_id)
        return MutationResult(ok=True, record=record)

    async def set_status(self, task_id: Optional[str], status: TaskStatus) -> MutationResult:
        if (failure := self._require_persisted(task_id, "change status")) is not None:
            return failure
        assert task_id is not None

        try:
            await self._backend.update(task_id, {"status": status.value})
        except TaskApiError as exc:
            return self._transport_failure("updating status of", task_id, exc)

        record = self._state.find(task_id)
        if record is not None:
            set_open(record, DropdownKind.STATUS, False)
            self._state.patch(task_id, status=status)
        logger.info("Status updated id=%s status=%s", task_id, status.value)
        return MutationResult(ok=True, record=record)

    async def toggle_status(self, task_id: Optional[str]) -> MutationResult:
        record = self._state.find(task_id) if task_id else None
        if record is None:
            if (failure := self._require_persisted(task_id, "change status")) is not None:
                return failure
            error = UnknownTaskError(f"Task {task_id} is not loaded")
            logger.error("%s", error)
            return MutationResult.failed(error)
        return await self.set_status(task_id, record.status.flipped())

    async def save_notes(self, task_id: Optional[str], notes: str) -> MutationResult:
        if (failure := self._require_persisted(task_id, "save notes")) is not None:
            return failure
        assert task_id is not None

        try:
            await self._backend.update(task_id, {"notes": notes})
        except TaskApiError as exc:
            return self._transport_failure("saving notes of", task_id, exc)

        record = self._state.patch(task_id, notes=notes)
        logger.info("Notes updated id=%s", task_id)
        return MutationResult(ok=True, record=record)

    async def delete(self, task_id: Optional[str]) -> MutationResult:
        if (failure := self._require_persisted(task_id, "delete")) is not None:
            return failure
        assert task_id is not None

        try:
            await self._backend.delete(task_id)
        except TaskApiError as exc:
            return self._transport_failure("deleting", task_id, exc)

        if not self._state.remove(task_id):
            logger.debug("Deleted task id=%s was not present locally", task_id)
        logger.info("Task with id %s deleted", task_id)
        return MutationResult(ok=True)

    def duplicate(self, task_id: str) -> MutationResult:
        """Copy a visible row into the view only; nothing is sent to the store."""

        source = self._state.find_in_view(task_id)
        if source is None:
            error = UnknownTaskError(f"Task {task_id} is not in the current view")
            logger.error("%s", error)
            return MutationResult.failed(error)

        copy = source.model_copy(deep=True)
        copy.id = new_local_id()
        copy.status_dropdown_open = False
        copy.action_dropdown_open = False
        self._state.insert_into_view(copy)
        logger.debug("Duplicated task id=%s as %s", task_id, copy.id)
        return MutationResult(ok=True, record=copy)


__all__ = ["MutationCoordinator", "MutationResult"]
