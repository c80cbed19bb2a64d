"""End-to-end tests for the task board orchestration."""

from __future__ import annotations

import pytest

from fakes import make_backend, make_record

from taskdesk.tasks.board import TaskBoard
from taskdesk.tasks.errors import TaskApiError, UnknownTaskError
from taskdesk.tasks.models import TaskKind, TaskRecord, TaskStatus
from taskdesk.tasks.mutations import MutationCoordinator
from taskdesk.tasks.toggles import DropdownKind, is_open


async def _loaded_board(records: list[TaskRecord]):
    backend = make_backend(records)
    board = TaskBoard(backend)
    result = await board.load()
    assert result.ok
    return board, backend


@pytest.mark.asyncio
async def test_load_populates_both_collections() -> None:
    board, _ = await _loaded_board([make_record(id="1"), make_record(id="2")])

    assert [r.id for r in board.canonical] == ["1", "2"]
    assert board.filtered == board.canonical


@pytest.mark.asyncio
async def test_failed_load_reports_and_stays_interactive() -> None:
    backend = make_backend()
    backend.fetch_all.side_effect = TaskApiError(502, "down")
    board = TaskBoard(backend)

    result = await board.load()

    assert not result.ok
    assert board.canonical == []
    assert board.search("x") == []


@pytest.mark.asyncio
async def test_search_for_status_finds_open_record() -> None:
    board, _ = await _loaded_board([make_record(id="1", task="Call", status="Open")])

    assert [r.id for r in board.search("open")] == ["1"]


@pytest.mark.asyncio
async def test_call_filter_excludes_meetings() -> None:
    board, _ = await _loaded_board(
        [make_record(id="1", task="Call"), make_record(id="2", task="Meeting")]
    )

    board.select_kind(TaskKind.CALL)

    assert [r.id for r in board.filtered] == ["1"]
    assert not board.selector.all

    board.select_kind(None)
    assert len(board.filtered) == 2


@pytest.mark.asyncio
async def test_status_change_closes_dropdown() -> None:
    board, backend = await _loaded_board([make_record(id="1", status="Open")])
    board.toggle_status_dropdown("1")

    result = await board.change_status("1", TaskStatus.CLOSED)

    assert result.ok
    record = board.canonical[0]
    assert record.status is TaskStatus.CLOSED
    assert not is_open(record, DropdownKind.STATUS)
    backend.update.assert_awaited_once_with("1", {"status": "Closed"})


@pytest.mark.asyncio
async def test_toggle_kind_and_filter_menu() -> None:
    board, _ = await _loaded_board(
        [
            make_record(id="1", task="Call"),
            make_record(id="2", task="Meeting"),
            make_record(id="3", task="Video Call"),
        ]
    )

    board.toggle_kind(TaskKind.MEETING)
    board.toggle_kind(TaskKind.VIDEO_CALL)

    assert [r.id for r in board.filtered] == ["2", "3"]
    assert board.toggle_filter_menu() is True
    assert board.toggle_filter_menu() is False


@pytest.mark.asyncio
async def test_row_dropdowns_are_exclusive_per_kind() -> None:
    board, _ = await _loaded_board([make_record(id="1"), make_record(id="2")])

    board.toggle_action_dropdown("1")
    board.toggle_action_dropdown("2")
    board.toggle_status_dropdown("1")

    first, second = board.filtered
    assert not is_open(first, DropdownKind.ACTION)
    assert is_open(second, DropdownKind.ACTION)
    assert is_open(first, DropdownKind.STATUS)


@pytest.mark.asyncio
async def test_reload_clears_open_dropdowns() -> None:
    record = make_record(id="1")
    board, backend = await _loaded_board([record])
    board.toggle_action_dropdown("1")

    await board.load()

    assert not is_open(board.canonical[0], DropdownKind.ACTION)


@pytest.mark.asyncio
async def test_create_through_form() -> None:
    board, backend = await _loaded_board([make_record(id="1")])
    backend.create.return_value = TaskRecord(id="srv-2")

    draft = board.open_create()
    draft.task = "Meeting"
    draft.person = "Lee"
    result = await board.submit()

    assert result.ok
    assert not board.edit_session.is_open
    assert [r.id for r in board.canonical] == ["1", "srv-2"]
    assert board.filtered[-1].person == "Lee"


@pytest.mark.asyncio
async def test_failed_submit_keeps_form_open_with_error() -> None:
    board, backend = await _loaded_board([make_record(id="1")])
    backend.create.side_effect = TaskApiError(500, "server exploded")

    board.open_create()
    result = await board.submit()

    assert not result.ok
    assert board.edit_session.is_open
    assert board.edit_session.last_error == "server exploded"
    assert len(board.canonical) == 1


@pytest.mark.asyncio
async def test_edit_through_form_does_not_touch_canonical_until_submit() -> None:
    board, backend = await _loaded_board([make_record(id="1", person="Dana")])

    draft = board.open_edit("1")
    draft.person = "Dee"
    assert board.canonical[0].person == "Dana"

    result = await board.submit()

    assert result.ok
    assert board.canonical[0].person == "Dee"
    assert backend.update.await_args.args[0] == "1"


@pytest.mark.asyncio
async def test_cancel_discards_edit() -> None:
    board, backend = await _loaded_board([make_record(id="1", person="Dana")])

    board.open_edit("1").person = "Nope"
    board.cancel()

    assert board.canonical[0].person == "Dana"
    assert not board.edit_session.is_open
    backend.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_without_open_form_fails() -> None:
    board, backend = await _loaded_board([])

    result = await board.submit()

    assert not result.ok
    backend.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_notes_flow() -> None:
    board, backend = await _loaded_board([make_record(id="1", notes="old")])

    session = board.open_notes("1")
    session.notes = "new"
    assert board.canonical[0].notes == "old"

    result = await board.save_notes()

    assert result.ok
    assert board.canonical[0].notes == "new"
    assert not board.notes_session.is_open


@pytest.mark.asyncio
async def test_notes_failure_keeps_modal_open() -> None:
    board, backend = await _loaded_board([make_record(id="1", notes="old")])
    backend.update.side_effect = TaskApiError(502, "offline")

    board.open_notes("1").notes = "new"
    result = await board.save_notes()

    assert not result.ok
    assert board.notes_session.is_open
    assert board.canonical[0].notes == "old"


@pytest.mark.asyncio
async def test_save_notes_without_session_is_local_error() -> None:
    board, backend = await _loaded_board([make_record(id="1")])

    result = await board.save_notes()

    assert not result.ok
    backend.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_open_edit_unknown_row_raises() -> None:
    board, _ = await _loaded_board([])

    with pytest.raises(UnknownTaskError):
        board.open_edit("missing")


@pytest.mark.asyncio
async def test_duplicate_then_delete_original() -> None:
    board, backend = await _loaded_board([make_record(id="1"), make_record(id="2")])

    duplicate = board.duplicate("1").record
    assert len(board.canonical) == 2
    assert len(board.filtered) == 3

    result = await board.delete("1")

    assert result.ok
    assert [r.id for r in board.canonical] == ["2"]
    assert [r.id for r in board.filtered] == ["2", duplicate.id]
    backend.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_toggle_status_row_action() -> None:
    board, _ = await _loaded_board([make_record(id="1", status="Open")])

    await board.toggle_status("1")

    assert board.canonical[0].status is TaskStatus.CLOSED


@pytest.mark.asyncio
async def test_filter_change_closes_dropdowns_on_hidden_rows() -> None:
    board, _ = await _loaded_board(
        [make_record(id="1", task="Call"), make_record(id="2", task="Meeting")]
    )

    board.select_kind(TaskKind.CALL)
    board.toggle_status_dropdown("1")
    board.select_kind(TaskKind.MEETING)
    board.toggle_status_dropdown("2")
    board.select_kind(None)

    open_rows = [r.id for r in board.filtered if is_open(r, DropdownKind.STATUS)]
    assert open_rows == ["2"]


@pytest.mark.asyncio
async def test_search_hiding_a_row_closes_its_action_menu() -> None:
    board, _ = await _loaded_board(
        [make_record(id="1", person="Dana"), make_record(id="2", person="Lee")]
    )
    board.toggle_action_dropdown("1")

    board.search("lee")
    board.search("")

    assert not any(is_open(r, DropdownKind.ACTION) for r in board.filtered)


class RecordingCoordinator(MutationCoordinator):
    def __init__(self, backend, state) -> None:
        super().__init__(backend, state)
        self.deleted: list[str] = []

    async def delete(self, task_id: str):
        self.deleted.append(task_id)
        return await super().delete(task_id)


@pytest.mark.asyncio
async def test_injected_coordinator_shares_board_state() -> None:
    backend = make_backend([make_record(id="1"), make_record(id="2")])
    board = TaskBoard(backend, coordinator_factory=RecordingCoordinator)
    await board.load()

    result = await board.delete("1")

    assert result.ok
    assert isinstance(board.mutations, RecordingCoordinator)
    assert board.mutations.deleted == ["1"]
    assert [r.id for r in board.canonical] == ["2"]
    assert [r.id for r in board.filtered] == ["2"]
