"""Per-row dropdown state for the rendered task view."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from .models import TaskRecord


class DropdownKind(str, Enum):
    STATUS = "status"
    ACTION = "action"


_FLAG_NAMES: dict[DropdownKind, str] = {
    DropdownKind.STATUS: "status_dropdown_open",
    DropdownKind.ACTION: "action_dropdown_open",
}


def is_open(record: TaskRecord, kind: DropdownKind) -> bool:
    return bool(getattr(record, _FLAG_NAMES[kind]))


def set_open(record: TaskRecord, kind: DropdownKind, value: bool) -> None:
    setattr(record, _FLAG_NAMES[kind], value)


def toggle_dropdown(
    view: Iterable[TaskRecord], kind: DropdownKind, target_id: str
) -> bool:
    """Flip ``kind`` on the target row and close it on every other row.

    Returns False when no row in ``view`` carries ``target_id``.
    """

    rows = list(view)
    target = next((row for row in rows if row.id == target_id), None)
    if target is None:
        return False

    for row in rows:
        if row is not target:
            set_open(row, kind, False)
    set_open(target, kind, not is_open(target, kind))
    return True


def close_all(
    records: Iterable[TaskRecord], kind: Optional[DropdownKind] = None
) -> None:
    """Close dropdowns of ``kind`` (or both kinds) on every record."""

    kinds = [kind] if kind is not None else list(DropdownKind)
    for record in records:
        for item in kinds:
            set_open(record, item, False)


def open_row(view: Iterable[TaskRecord], kind: DropdownKind) -> Optional[TaskRecord]:
    return next((row for row in view if is_open(row, kind)), None)


__all__ = ["DropdownKind", "close_all", "is_open", "open_row", "set_open", "toggle_dropdown"]
