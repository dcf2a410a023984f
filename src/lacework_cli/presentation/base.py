"""Base classes for command results and output formatters."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from lacework_cli.utils.error_utils import ErrorHandler, LaceworkError


@dataclass
class CommandResult:
    """Outcome of a command, rendered by an OutputFormatter.

    Attributes:
        success: Whether the command succeeded
        message: Message shown to the user, may be empty
        data: Raw API data, emitted as-is for JSON output
        render: Builds the human readable tables, only called for table output
        notes: Extra information shown after the tables
        error_details: Details of a failure
    """

    success: bool
    message: str = ""
    data: Any = None
    render: Optional[Callable[[], List[str]]] = None
    notes: Optional[str] = None
    error_details: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None, render: Optional[Callable[[], List[str]]] = None,
           message: str = "", notes: Optional[str] = None) -> "CommandResult":
        return cls(True, message, data, render, notes)

    @classmethod
    def error(cls, message: str, details: Optional[Any] = None) -> "CommandResult":
        return cls(False, message, error_details=details)


class OutputFormatter(ABC):
    """Interface implemented by every output format."""

    @abstractmethod
    def output_result(self, result: CommandResult) -> None:
        """Output the result of a command."""

    @abstractmethod
    def output_error(self, error_message: str, details: Optional[Any] = None) -> None:
        """Output an error message."""

    def output_exception(self, error: Exception, prefix: str = "") -> None:
        """Output a failed command's error together with its structured details.

        Args:
            error: The error that stopped the command
            prefix: Context prepended to the error message
        """
        message = error.message if isinstance(error, LaceworkError) else str(error)
        self.output_error(f"{prefix}{message}", ErrorHandler.format_error_for_display(error))

    @abstractmethod
    def output_message(self, message: str) -> None:
        """Output an informational message."""

    @abstractmethod
    def create_progress(self, description: str, total: Optional[int] = None):
        """Context manager yielding ``(progress, task)`` while work is in flight."""
