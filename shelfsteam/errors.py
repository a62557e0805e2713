"""
Error handling for shelf-steam.

Provides:
- Custom exception types for every failure the shell can report
- Error boundary wrapper that keeps the REPL alive on failure
- Formatting helper for the log record
"""

import traceback
from typing import Optional, Callable
from dataclasses import dataclass
from enum import Enum


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"           # Reported, session continues
    MEDIUM = "medium"     # Reported, current command abandoned
    HIGH = "high"         # Startup cannot proceed


class ErrorCategory(Enum):
    """Categories of errors for better handling."""
    CONFIGURATION = "configuration"
    STARTUP = "startup"
    PARSE = "parse"
    USAGE = "usage"
    FILE_SYSTEM = "file_system"
    COMMAND_EXECUTION = "command_execution"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information about an error."""
    category: ErrorCategory
    severity: ErrorSeverity
    operation: str
    technical_message: str
    traceback_str: Optional[str] = None


class ShelfSteamError(Exception):
    """Base exception for shelf-steam errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity


class ConfigurationError(ShelfSteamError):
    """Configuration-related errors."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.HIGH):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, severity=severity)


class StartupError(ShelfSteamError):
    """Invalid startup arguments or initial repository."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.HIGH):
        super().__init__(message, category=ErrorCategory.STARTUP, severity=severity)


class CommandParseError(ShelfSteamError):
    """Malformed command line (redirection syntax)."""

    def __init__(self, message: str, line: str = "", severity: ErrorSeverity = ErrorSeverity.LOW):
        super().__init__(message, category=ErrorCategory.PARSE, severity=severity)
        self.line = line


class UsageError(ShelfSteamError):
    """Wrong argument count for a builtin."""

    def __init__(self, message: str, command: str = "", severity: ErrorSeverity = ErrorSeverity.LOW):
        super().__init__(message, category=ErrorCategory.USAGE, severity=severity)
        self.command = command


class RepositoryError(ShelfSteamError):
    """Missing, unreadable or non-directory repository."""

    def __init__(self, message: str, path: str = "", severity: ErrorSeverity = ErrorSeverity.LOW):
        super().__init__(message, category=ErrorCategory.FILE_SYSTEM, severity=severity)
        self.path = path


class ExecutionError(ShelfSteamError):
    """A game could not be started."""

    def __init__(self, message: str, target: str = "", severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        super().__init__(message, category=ErrorCategory.COMMAND_EXECUTION, severity=severity)
        self.target = target


class ErrorBoundary:
    """
    Error boundary for wrapping operations with graceful error handling.

    Usage:
        with ErrorBoundary("dispatch", on_error=report):
            dispatcher.dispatch(command)

    KeyboardInterrupt and SystemExit are never swallowed.
    """

    def __init__(
        self,
        operation: str,
        on_error: Optional[Callable[[ErrorContext], None]] = None,
        show_technical_details: bool = False
    ):
        """
        Initialize the error boundary.

        Args:
            operation: Name of the operation being wrapped
            on_error: Optional callback when error occurs
            show_technical_details: Whether to include traceback
        """
        self.operation = operation
        self.on_error = on_error
        self.show_technical_details = show_technical_details
        self.error_context: Optional[ErrorContext] = None

    def __enter__(self) -> "ErrorBoundary":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """
        Exit the error boundary, catching and processing any exception.

        Returns True to suppress the exception.
        """
        if exc_type is None:
            return False

        if not issubclass(exc_type, Exception):
            return False

        self.error_context = self._exception_to_context(exc_val, exc_tb)

        if self.on_error:
            self.on_error(self.error_context)

        return True

    def _exception_to_context(self, exc: Exception, exc_tb) -> ErrorContext:
        """Convert an exception to an ErrorContext."""
        category = ErrorCategory.UNKNOWN
        severity = ErrorSeverity.MEDIUM

        if isinstance(exc, ShelfSteamError):
            category = exc.category
            severity = exc.severity
        elif isinstance(exc, OSError):
            category = ErrorCategory.FILE_SYSTEM
            severity = ErrorSeverity.LOW

        traceback_str = None
        if self.show_technical_details:
            traceback_str = "".join(traceback.format_exception(type(exc), exc, exc_tb))

        return ErrorContext(
            category=category,
            severity=severity,
            operation=self.operation,
            technical_message=str(exc),
            traceback_str=traceback_str
        )


def format_error_for_log(context: ErrorContext) -> str:
    """
    Format an error context for logging.

    Args:
        context: The error context

    Returns:
        Formatted log message
    """
    lines = [
        f"[{context.severity.value.upper()}] {context.category.value}: {context.operation}",
        f"  Message: {context.technical_message}",
    ]

    if context.traceback_str:
        lines.append(f"  Traceback:\n{context.traceback_str}")

    return "\n".join(lines)
