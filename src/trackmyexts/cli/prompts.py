"""Terminal implementation of the user interface.

Prompts and pickers use rich; everything goes through one Console so
tests can capture output with ``Console(file=StringIO())``.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from trackmyexts.core.interfaces import IUserInterface
from trackmyexts.git.history import Revision
from trackmyexts.snapshot.models import RestorePlan


def build_history_table(revisions: list[Revision]) -> Table:
    """Render revisions as a numbered table, newest first."""
    table = Table(title="Extension history", show_lines=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Commit", style="yellow")
    table.add_column("Date")
    table.add_column("Message")
    for index, revision in enumerate(revisions, start=1):
        table.add_row(str(index), revision.short_hash, revision.date, revision.subject)
    return table


class ConsoleInterface(IUserInterface):
    """Interactive console prompts and notifications."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask_repository(self) -> str | None:
        value = Prompt.ask(
            "Enter Git repository URL or local path",
            default="",
            show_default=False,
            console=self.console,
        )
        value = value.strip() if value else ""
        return value or None

    def ask_clone_parent(self) -> Path | None:
        value = Prompt.ask(
            "Select the folder to clone into",
            default=str(Path.home()),
            console=self.console,
        )
        value = value.strip() if value else ""
        return Path(value).expanduser() if value else None

    def choose_revision(self, revisions: list[Revision]) -> Revision | None:
        self.console.print(build_history_table(revisions))
        while True:
            answer = Prompt.ask(
                "Select a version to restore (blank to cancel)",
                default="",
                show_default=False,
                console=self.console,
            ).strip()
            if not answer:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(revisions):
                return revisions[int(answer) - 1]
            # Accept a hash prefix as well as a row number
            matches = [r for r in revisions if r.hash.startswith(answer)]
            if len(matches) == 1:
                return matches[0]
            self.console.print(f"[red]No single revision matches '{answer}'.[/red]")

    def show_plan(self, plan: RestorePlan) -> None:
        """Print the install/uninstall lists of a plan."""
        if plan.revision is not None:
            self.console.print(
                f"[bold]Restore to {plan.revision.short_hash}[/bold] "
                f"({plan.revision.date}): {plan.summary()}"
            )
        else:
            self.console.print(f"[bold]Restore:[/bold] {plan.summary()}")
        for extension_id in plan.to_uninstall:
            self.console.print(f"  [red]- {extension_id}[/red]")
        for extension_id in plan.to_install:
            self.console.print(f"  [green]+ {extension_id}[/green]")

    def show_history(self, revisions: list[Revision]) -> None:
        """Print the revision table."""
        self.console.print(build_history_table(revisions))

    def show_failures(self, failed: dict[str, str]) -> None:
        """Print extensions whose install/uninstall failed."""
        self.console.print("[red]Failed:[/red]")
        for extension_id, reason in failed.items():
            self.console.print(f"  [red]{extension_id}[/red]: {reason}")

    def confirm_restore(self, plan: RestorePlan) -> bool:
        self.show_plan(plan)
        return Confirm.ask("Apply these changes?", default=False, console=self.console)

    def progress(self, current: int, total: int, message: str) -> None:
        self.console.print(f"[dim][{current}/{total}][/dim] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")
