#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Progress display and summary rendering for the CLI.

Both classes work in two modes: rich terminal output (progress bar, colored
status lines, summary tables) or plain text on stderr.
"""

from __future__ import annotations

import sys
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from tabifyer.pipeline import BatchResult
from tabifyer.progress import ProgressEvent


class ProgressContext:
    """Feed batch progress events into a rich progress bar or plain output.

    Use :meth:`callback` as the ``progress_callback`` of
    :func:`tabifyer.tabify_directory`.

    Examples
    --------
    >>> with ProgressContext(use_rich=True) as progress:
    ...     tabify_directory(src, dst, progress_callback=progress.callback)

    """

    def __init__(self, use_rich: bool, console: Console | None = None):
        """Initialize progress context."""
        self.use_rich = use_rich
        self._console = console or Console(stderr=True)
        self._progress: Progress | None = None
        self._task_id: Any = None

    def __enter__(self) -> ProgressContext:
        if self.use_rich:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=self._console,
            )
            self._progress.__enter__()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None

    def callback(self, event: ProgressEvent) -> None:
        """Handle one progress event."""
        if event.event_type == "started":
            if self._progress is not None:
                self._task_id = self._progress.add_task("[cyan]Converting PDFs...", total=event.total)
            return

        if event.event_type == "item_done":
            self.log(f"Converted {event.metadata.get('source')} -> {event.metadata.get('tsv_path')}", level="success")
        elif event.event_type == "error":
            self.log(f"{event.message}: {event.metadata.get('error', 'Unknown error')}", level="error")
        else:
            return

        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, advance=1)

    def log(self, message: str, level: str = "info") -> None:
        """Print a status line, color-coded when rich output is on."""
        if self.use_rich:
            style = {"success": "green", "error": "red", "warning": "yellow"}.get(level)
            self._console.print(f"[{style}]{message}[/{style}]" if style else message, markup=True, highlight=False)
        else:
            print(message, file=sys.stderr)


class SummaryRenderer:
    """Render the end-of-batch summary in rich or plain text.

    Examples
    --------
    >>> SummaryRenderer(use_rich=True).render(batch)

    """

    def __init__(self, use_rich: bool, console: Console | None = None):
        """Initialize summary renderer."""
        self.use_rich = use_rich
        self._console = console or Console(stderr=True)

    def render_conversion_summary(
        self, successful: int, failed: int, total: int, title: str = "Conversion Summary"
    ) -> None:
        """Render success/failure counts."""
        if self.use_rich:
            table = Table(title=title)
            table.add_column("Status", style="cyan", no_wrap=True)
            table.add_column("Count", style="magenta")

            table.add_row("+ Successful", str(successful))
            table.add_row("- Failed", str(failed))
            table.add_row("Total", str(total))

            self._console.print(table)
        else:
            print(f"\n{title}", file=sys.stderr)
            print("=" * 40, file=sys.stderr)
            print(f"  Successful: {successful}", file=sys.stderr)
            print(f"  Failed:     {failed}", file=sys.stderr)
            print(f"  Total:      {total}", file=sys.stderr)

    def render_failures(self, rows: list[tuple[str, str]], title: str = "Failed Files") -> None:
        """Render one row per failed file with its error."""
        if not rows:
            return
        if self.use_rich:
            table = Table(title=title)
            table.add_column("File", style="cyan")
            table.add_column("Error", style="red")
            for name, error in rows:
                table.add_row(name, error)
            self._console.print(table)
        else:
            print(f"\n{title}", file=sys.stderr)
            print("-" * 60, file=sys.stderr)
            for name, error in rows:
                print(f"{name:30} {error}", file=sys.stderr)

    def render(self, batch: BatchResult) -> None:
        """Render counts and the failure table for a finished batch."""
        self.render_conversion_summary(batch.successful, batch.failed, batch.total)
        self.render_failures([(r.source.name, r.error or "Unknown error") for r in batch.failures])


__all__ = ["ProgressContext", "SummaryRenderer"]
