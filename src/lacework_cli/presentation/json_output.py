"""JSON output formatter, passes API data through untouched."""
import json
from contextlib import contextmanager
from typing import Any, Optional

import click

from lacework_cli.presentation.base import CommandResult, OutputFormatter


class JsonFormatter(OutputFormatter):
    """Formatter that writes raw API data as indented JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, default=str)

    def output_result(self, result: CommandResult) -> None:
        if not result.success:
            self.output_error(result.message, result.error_details)
            return
        click.echo(self._dumps(result.data if result.data is not None else []))

    def output_error(self, error_message: str, details: Optional[Any] = None) -> None:
        payload = {"error": error_message}
        if details:
            payload["details"] = details
        click.echo(self._dumps(payload), err=True)

    def output_message(self, message: str) -> None:
        # messages are for humans, JSON output stays machine readable
        pass

    @contextmanager
    def create_progress(self, description: str, total: Optional[int] = None):
        yield None, None
