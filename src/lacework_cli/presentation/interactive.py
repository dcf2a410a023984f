"""Interactive output formatter using Rich."""
from contextlib import contextmanager
from typing import Any, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from lacework_cli.presentation.base import CommandResult, OutputFormatter
from lacework_cli.utils.error_utils import LaceworkError


class InteractiveFormatter(OutputFormatter):
    """Formatter for human readable console output."""

    def __init__(self, use_pager: bool = False, page_threshold: int = 60):
        """Initialize interactive formatter.

        Args:
            use_pager: Page long outputs when attached to a terminal
            page_threshold: Number of lines above which the pager is used
        """
        self.console = Console(highlight=False, emoji=False)
        self.err_console = Console(stderr=True, highlight=False)
        self.use_pager = use_pager
        self.page_threshold = page_threshold

    def output_result(self, result: CommandResult) -> None:
        """Output a command result to the console.

        Args:
            result: The result to output
        """
        if not result.success:
            self.output_error(result.message, result.error_details)
            return

        if result.message:
            self.output_message(result.message)

        if result.render is not None:
            self._output_tables(result.render())

        if result.notes:
            self.console.print(escape(result.notes))

    def output_error(self, error_message: str, details: Optional[Any] = None) -> None:
        """Output an error message to stderr.

        Args:
            error_message: The main error message
            details: Additional error details (optional)
        """
        self.err_console.print(f"[bold red]ERROR[/] {escape(error_message)}")
        if details:
            self.err_console.print(f"[red]{escape(str(details))}[/]")

    def output_exception(self, error: Exception, prefix: str = "") -> None:
        # the structured details are for JSON consumers
        message = error.message if isinstance(error, LaceworkError) else str(error)
        self.output_error(f"{prefix}{message}")

    def output_message(self, message: str) -> None:
        self.console.print(escape(message))

    @contextmanager
    def create_progress(self, description: str, total: Optional[int] = None):
        """Show a spinner on stderr while a request is in flight."""
        with Progress(
            SpinnerColumn(),
            TextColumn(f"[bold blue]{escape(description)}"),
            console=self.err_console,
            transient=True,
        ) as progress:
            task = progress.add_task("Working", total=total)
            yield progress, task

    def _output_tables(self, tables: List[str]) -> None:
        content = "\n".join(table for table in tables if table)
        if not content:
            return

        # tables are pre-rendered plain text, print them without markup
        if (self.use_pager and self.console.is_terminal
                and content.count("\n") > self.page_threshold):
            with self.console.pager():
                self.console.print(content, markup=False, end="", soft_wrap=True)
        else:
            self.console.print(content, markup=False, end="", soft_wrap=True)
