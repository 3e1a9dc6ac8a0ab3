"""Exception hierarchy with error codes for shellcall.

Every error carries a message, an error code and a metadata dict so failures
can be shown to an operator or written to structured logs the same way.

Failed commands raise one exception class per exit status. Those classes are
created on first use by ``error_for_status`` and cached for the lifetime of
the process, so ``except error_for_status(127)`` and
``except ErrorReturnCode_127`` catch the same thing.
"""

import re
import threading
from dataclasses import dataclass, field
from typing import Any, ClassVar

# Standard error codes
E_NOT_FOUND = "E_NOT_FOUND"
E_EXIT_STATUS = "E_EXIT_STATUS"
E_STATE = "E_STATE"
E_VALIDATION = "E_VALIDATION"


@dataclass
class ShellCallException(Exception):  # noqa: N818
    """Base exception for all shellcall errors."""

    message: str
    error_code: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)


@dataclass
class CommandNotFound(ShellCallException):  # noqa: N818
    """The executable could not be located on disk or in PATH."""

    name: str = ""

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_NOT_FOUND
        if self.name:
            self.metadata["name"] = self.name
        super().__post_init__()


@dataclass
class CommandFailed(ShellCallException):  # noqa: N818
    """A command ran to completion with a non-zero exit status.

    Concrete failures are raised as per-status subclasses obtained from
    ``error_for_status``; catch this class to handle any failing command.
    """

    command: str = ""
    status: int = 0
    stdout: str = ""
    stderr: str = ""

    exit_status: ClassVar[int | None] = None

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_EXIT_STATUS
        if self.command:
            self.metadata["command"] = self.command
        self.metadata["status"] = self.status
        super().__post_init__()


@dataclass
class CommandAlreadyExecuted(ShellCallException):  # noqa: N818
    """A Cmd instance was executed a second time."""

    command: str = ""

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_STATE
        if self.command:
            self.metadata["command"] = self.command
        super().__post_init__()


@dataclass
class ConfigurationError(ShellCallException):
    """Invalid configuration values or configuration files."""

    key: str = ""
    reason: str = ""

    def __post_init__(self) -> None:
        if not self.error_code:
            self.error_code = E_VALIDATION
        if self.key:
            self.metadata["config_key"] = self.key
        if self.reason:
            self.metadata["reason"] = self.reason
        super().__post_init__()


_status_errors: dict[int, type[CommandFailed]] = {}
_status_errors_lock = threading.Lock()

_STATUS_CLASS_RE = re.compile(r"^(ErrorReturnCode|ErrorSignal)_(\d+)$")


def _class_name_for(status: int) -> str:
    if status < 0:
        return f"ErrorSignal_{-status}"
    return f"ErrorReturnCode_{status}"


def error_for_status(status: int) -> type[CommandFailed]:
    """Return the exception class for a non-zero exit status.

    The class is created on first request and the same object is returned for
    every later request with that status. Negative statuses (child killed by
    a signal) map to ``ErrorSignal_<n>``.

    Args:
        status: Non-zero exit status reported by the child

    Returns:
        Subclass of CommandFailed bound to that status

    Raises:
        ValueError: If status is zero
    """
    if status == 0:
        raise ValueError("exit status 0 is success and has no error class")

    with _status_errors_lock:
        error_class = _status_errors.get(status)
        if error_class is None:
            error_class = type(
                _class_name_for(status),
                (CommandFailed,),
                {"exit_status": status, "__module__": __name__},
            )
            _status_errors[status] = error_class
        return error_class


def __getattr__(name: str) -> type[CommandFailed]:
    match = _STATUS_CLASS_RE.match(name)
    if match is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    prefix, number = match.groups()
    status = int(number)
    if prefix == "ErrorSignal":
        status = -status
    if status == 0:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return error_for_status(status)


def format_error_for_user(exception: ShellCallException) -> str:
    """Format exception for user-friendly display.

    Args:
        exception: The shellcall exception to format

    Returns:
        Human-readable error message
    """
    if isinstance(exception, CommandNotFound):
        return f"Command not found: {exception.name or exception.message}"

    if isinstance(exception, CommandFailed):
        return f"Command exited with status {exception.status}: {exception.message}"

    if isinstance(exception, ConfigurationError):
        if exception.key:
            return f"Configuration error '{exception.key}': {exception.message}"
        return f"Configuration error: {exception.message}"

    return str(exception.message)


def format_error_for_log(exception: ShellCallException) -> dict[str, Any]:
    """Format exception for structured logging.

    Args:
        exception: The shellcall exception to format

    Returns:
        Dictionary with structured error information for logs
    """
    log_data: dict[str, Any] = {
        "error_type": type(exception).__name__,
        "message": exception.message,
        "error_code": exception.error_code,
    }

    if exception.metadata:
        log_data["metadata"] = exception.metadata

    if isinstance(exception, CommandNotFound):
        if exception.name:
            log_data["name"] = exception.name

    elif isinstance(exception, CommandFailed):
        log_data["command"] = exception.command
        log_data["status"] = exception.status
        if exception.stderr:
            log_data["stderr"] = exception.stderr

    elif isinstance(exception, ConfigurationError):
        if exception.key:
            log_data["config_key"] = exception.key
        if exception.reason:
            log_data["reason"] = exception.reason

    return log_data
