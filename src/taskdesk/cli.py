"""Task Desk CLI - terminal client for the remote task list.

Renders the filtered task view as a table and maps shell commands onto
:class:`~taskdesk.tasks.board.TaskBoard` operations.
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .config import Settings, get_settings
from .logging_setup import configure_logging
from .tasks import (
    DropdownKind,
    MutationResult,
    TaskApiClient,
    TaskBoard,
    TaskDeskError,
    TaskKind,
    TaskRecord,
    TaskStatus,
)
from .tasks.toggles import is_open

ERROR_STYLE = Style(color="red", bold=True)
INFO_STYLE = Style(color="cyan")
OK_STYLE = Style(color="green")

_KIND_ALIASES: dict[str, Optional[TaskKind]] = {
    "all": None,
    "call": TaskKind.CALL,
    "meeting": TaskKind.MEETING,
    "video": TaskKind.VIDEO_CALL,
    "videocall": TaskKind.VIDEO_CALL,
    "video-call": TaskKind.VIDEO_CALL,
}

_FORM_FIELDS = ("date", "time", "entity", "task", "person", "notes")


class TaskShell:
    """Interactive shell over a task board."""

    def __init__(self, board: TaskBoard, console: Optional[Console] = None):
        self.board = board
        self.console = console or Console()
        self.running = True

    # ---- rendering ----

    def render(self) -> Table:
        board = self.board
        table = Table(
            title=f"Tasks ({len(board.filtered)}/{len(board.canonical)})",
            caption=Text(f"search={board.query!r} filter={board.selector.describe()}"),
        )
        for column in ("ID", "Date", "Time", "Entity", "Task", "Person", "Notes", "Status", ""):
            table.add_column(column)

        for record in board.filtered:
            status = record.status.value
            if is_open(record, DropdownKind.STATUS):
                status += " ▾ open|closed"
            actions = "edit|notes|dup|delete" if is_open(record, DropdownKind.ACTION) else ""
            cells = (
                record.id or "",
                record.date,
                record.time,
                record.entity,
                record.task,
                record.person,
                record.notes,
                status,
                actions,
            )
            table.add_row(*(Text(cell) for cell in cells))
        return table

    def show(self) -> None:
        self.console.print(self.render())

    def _report(self, result: MutationResult, success: str) -> None:
        if result.ok:
            self.console.print(success, style=OK_STYLE)
        else:
            self.console.print(f"Error: {result.error}", style=ERROR_STYLE, markup=False)

    def _show_help(self) -> None:
        help_text = """
[bold]Commands:[/bold]
  list                    Show the current view
  reload                  Fetch tasks from the server again
  search <text>           Search every field (empty clears)
  filter all|call|meeting|video
                          Show a single task kind
  filter +<kind>          Add or remove one kind from the filter
  add                     Add a new task
  edit <id>               Edit a task
  notes <id>              Edit the notes of a task
  status <id> <open|closed>
                          Set or flip the status of a task
  menu status|action <id> Toggle a row dropdown
  dup <id>                Duplicate a row (local only, not saved)
  delete <id>             Delete a task
  quit                    Exit
"""
        self.console.print(Panel(help_text.strip(), title="Task Desk Help", border_style="blue"))

    # ---- forms ----

    def _fill_form(self, draft: TaskRecord) -> None:
        for name in _FORM_FIELDS:
            value = Prompt.ask(name.capitalize(), default=getattr(draft, name), console=self.console)
            setattr(draft, name, value or "")
        status = Prompt.ask(
            "Status",
            choices=[s.value for s in TaskStatus],
            default=draft.status.value,
            console=self.console,
        )
        draft.status = TaskStatus(status)

    async def _run_form(self, draft: TaskRecord, success: str) -> None:
        self._fill_form(draft)
        if Prompt.ask("Save?", choices=["y", "n"], default="y", console=self.console) != "y":
            self.board.cancel()
            self.console.print("Discarded.", style=INFO_STYLE)
            return
        result = await self.board.submit()
        while not result.ok:
            # The form stays open on failure with the draft intact.
            self._report(result, success)
            if Prompt.ask("Retry?", choices=["y", "n"], default="y", console=self.console) != "y":
                self.board.cancel()
                self.console.print("Discarded.", style=INFO_STYLE)
                return
            result = await self.board.submit()
        self._report(result, success)

    async def _edit_notes(self, task_id: str) -> None:
        session = self.board.open_notes(task_id)
        session.notes = Prompt.ask("Notes", default=session.notes, console=self.console) or ""
        result = await self.board.save_notes()
        while not result.ok:
            self._report(result, "Notes saved.")
            if Prompt.ask("Retry?", choices=["y", "n"], default="y", console=self.console) != "y":
                self.board.close_notes()
                return
            result = await self.board.save_notes()
        self._report(result, "Notes saved.")

    # ---- commands ----

    async def handle_command(self, line: str) -> bool:
        """Run one command line. Returns False when the command is unknown."""

        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        try:
            return await self._dispatch(command, arg)
        except TaskDeskError as exc:
            self.console.print(f"Error: {exc}", style=ERROR_STYLE, markup=False)
            return True

    async def _dispatch(self, command: str, arg: str) -> bool:
        board = self.board

        if command in ("help", "?"):
            self._show_help()
        elif command in ("quit", "exit"):
            self.running = False
        elif command in ("list", "ls"):
            self.show()
        elif command == "reload":
            self._report(await board.load(), f"Loaded {len(board.canonical)} task(s).")
            self.show()
        elif command == "search":
            board.search(arg)
            self.show()
        elif command == "filter":
            toggle = arg.startswith("+")
            key = arg.lstrip("+").lower() or "all"
            if key not in _KIND_ALIASES:
                self.console.print("[dim]Usage: filter all|call|meeting|video[/dim]")
                return True
            kind = _KIND_ALIASES[key]
            if toggle and kind is not None:
                board.toggle_kind(kind)
            else:
                board.select_kind(kind)
            self.show()
        elif command == "add":
            await self._run_form(board.open_create(), "Task added.")
            self.show()
        elif command == "edit" and arg:
            await self._run_form(board.open_edit(arg), "Task updated.")
            self.show()
        elif command == "notes" and arg:
            await self._edit_notes(arg)
            self.show()
        elif command == "status" and arg:
            task_id, _, value = arg.partition(" ")
            value = value.strip().lower()
            if value:
                matches = [s for s in TaskStatus if s.value.lower() == value]
                if not matches:
                    self.console.print("[dim]Usage: status <id> open|closed[/dim]")
                    return True
                result = await board.change_status(task_id, matches[0])
            else:
                result = await board.toggle_status(task_id)
            self._report(result, "Status updated.")
            self.show()
        elif command == "menu" and arg:
            which, _, task_id = arg.partition(" ")
            kinds = {"status": DropdownKind.STATUS, "action": DropdownKind.ACTION}
            if which.lower() not in kinds or not task_id.strip():
                self.console.print("[dim]Usage: menu status|action <id>[/dim]")
                return True
            if kinds[which.lower()] is DropdownKind.STATUS:
                found = board.toggle_status_dropdown(task_id.strip())
            else:
                found = board.toggle_action_dropdown(task_id.strip())
            if not found:
                self.console.print(f"No visible task {task_id.strip()}", style=ERROR_STYLE, markup=False)
            self.show()
        elif command == "dup" and arg:
            self._report(board.duplicate(arg), "Duplicated (not saved to the server).")
            self.show()
        elif command == "delete" and arg:
            self._report(await board.delete(arg), "Task deleted.")
            self.show()
        else:
            return False
        return True

    async def run(self) -> None:
        """Main shell loop."""
        result = await self.board.load()
        if not result.ok:
            self.console.print(f"Cannot load tasks: {result.error}", style=ERROR_STYLE, markup=False)
        self.console.print(
            "[bold]Task Desk[/bold] - Type help for commands, Ctrl+D to exit",
            style=INFO_STYLE,
        )
        self.show()

        while self.running:
            try:
                line = Prompt.ask("[bold blue]tasks[/bold blue]", console=self.console)
                if not await self.handle_command(line):
                    self.console.print("[dim]Unknown command. Type help.[/dim]")
            except EOFError:
                self.console.print("\n[dim]Goodbye![/dim]")
                break
            except KeyboardInterrupt:
                self.console.print()
                continue


async def _run_shell(settings: Settings, server: Optional[str]) -> None:
    if server:
        settings = settings.model_copy(update={"api_base_url": server})
    async with TaskApiClient(settings) as client:
        await TaskShell(TaskBoard(client)).run()


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Task Desk - terminal client for a remote task list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  TASKDESK_API_URL    Base URL of the task server
  TASKDESK_TIMEOUT    Request timeout in seconds
  LOG_LEVEL           Logging level (default: INFO)
  LOG_FILE            Optional log file path
""",
    )
    parser.add_argument("--server", "-s", default=None, help="Task server base URL")
    parser.add_argument("--log-level", default=None, help="Logging level")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level, settings.log_file)

    def signal_handler(sig, frame):
        print("\nExiting...")
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        asyncio.run(_run_shell(settings, args.server))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
