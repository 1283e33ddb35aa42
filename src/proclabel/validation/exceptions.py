"""
Exception types and error handling helpers.

This module provides the error taxonomy used across proclabel:

- ValidationError for configuration and argument problems.
- ExternalToolError and its subclasses for failures of the OS tools the
  resolvers shell out to (lsof, docker). Resolvers catch these and degrade
  to empty results; they never reach the callers of the identification engine.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used by the configuration validators.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ExternalToolError(Exception):
    """Base class for failures of an external command used as a data source."""

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


class ToolUnavailableError(ExternalToolError):
    """The executable is not installed or cannot be started."""


class ToolTimeoutError(ExternalToolError):
    """The command did not finish within its time budget."""

    def __init__(self, message: str, command: Optional[str] = None,
                 timeout: Optional[float] = None):
        super().__init__(message, command=command)
        self.timeout = timeout


class ToolExecutionError(ExternalToolError):
    """The command ran but failed without producing usable output."""

    def __init__(self, message: str, command: Optional[str] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message, command=command)
        self.returncode = returncode
        self.stderr = stderr


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {type(error).__name__}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def tool_error_severity(error: ExternalToolError) -> ErrorSeverity:
    """Log level for a degraded external query.

    A hung tool is worth a warning; a missing or failing optional tool is not.
    """
    if isinstance(error, ToolTimeoutError):
        return ErrorSeverity.WARNING
    return ErrorSeverity.DEBUG


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI error and exit the process."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
