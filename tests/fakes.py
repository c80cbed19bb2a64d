"""Shared test doubles and record factories."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from taskdesk.tasks.models import TaskRecord


def make_record(**overrides) -> TaskRecord:
    fields = {
        "id": "1",
        "date": "2024-05-01",
        "time": "10:00",
        "entity": "Acme",
        "task": "Call",
        "person": "Dana",
        "notes": "",
        "status": "Open",
    }
    fields.update(overrides)
    return TaskRecord.model_validate(fields)


def make_backend(records: list[TaskRecord] | None = None) -> MagicMock:
    """Task store double whose calls all succeed by default."""
    fake = MagicMock()
    fake.fetch_all = AsyncMock(return_value=list(records or []))
    fake.create = AsyncMock(return_value=None)
    fake.update = AsyncMock(return_value=None)
    fake.delete = AsyncMock(return_value=None)
    return fake
