"""Terminal rendering of task progress."""

from __future__ import annotations

from rich.console import Console

from ..models.deletion_task import DeletionTask
from ..restore.progress import ProgressSink


class ConsoleProgress(ProgressSink):
    """Prints one task's progress to a rich console."""

    def __init__(self, console: Console, title: str) -> None:
        self.console = console
        self.title = title
        self.console.print(f"\n[bold]{title}[/bold]")

    def next(self, message: str) -> None:
        self.console.print(f"  → {message}")

    def complete(self) -> None:
        self.console.print(f"✓ {self.title}", style="green")

    def error(self, message: str) -> None:
        self.console.print(f"✗ {self.title}: {message}", style="bold red")


def console_progress_factory(console: Console):
    """Progress factory for ResourceCleaner.execute that renders to console."""

    def factory(task: DeletionTask) -> ConsoleProgress:
        return ConsoleProgress(console, task.title)

    return factory
