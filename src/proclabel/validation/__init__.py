"""
Validation and error handling for the proclabel package.

This module provides input validation, the external-tool error taxonomy,
and error handling helpers with consistent reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ExternalToolError,
    ToolExecutionError,
    ToolTimeoutError,
    ToolUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_subprocess_error,
    tool_error_severity,
)
from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ValidationError",
    "ExternalToolError",
    "ToolUnavailableError",
    "ToolTimeoutError",
    "ToolExecutionError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    "tool_error_severity",
    # Validators
    "validate_boolean",
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_simple_command",
]
