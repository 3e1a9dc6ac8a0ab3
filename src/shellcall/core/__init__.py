"""Core modules for shellcall.

Command building, execution, the error hierarchy, configuration, logging
and the process-wide registry of spawned children.
"""

from .command import Cmd, find_in_path, resolve_executable
from .command_executor import CommandExecutor, CommandResult
from .exceptions import (
    E_EXIT_STATUS,
    E_NOT_FOUND,
    E_STATE,
    E_VALIDATION,
    CommandAlreadyExecuted,
    CommandFailed,
    CommandNotFound,
    ConfigurationError,
    ShellCallException,
    error_for_status,
    format_error_for_log,
    format_error_for_user,
)

__all__ = [
    # Error codes
    "E_EXIT_STATUS",
    "E_NOT_FOUND",
    "E_STATE",
    "E_VALIDATION",
    # Exception classes
    "CommandAlreadyExecuted",
    "CommandFailed",
    "CommandNotFound",
    "ConfigurationError",
    "ShellCallException",
    "error_for_status",
    # Commands
    "Cmd",
    "CommandExecutor",
    "CommandResult",
    "find_in_path",
    "resolve_executable",
    # Error formatting utilities
    "format_error_for_log",
    "format_error_for_user",
]
