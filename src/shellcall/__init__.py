"""
shellcall

Call external programs like Python functions. Output is echoed while it is
captured, and a non-zero exit raises an exception class specific to the exit
status.

    from shellcall import sh, ErrorReturnCode

    print(sh.git("log", "--oneline"))

    try:
        sh.grep("needle", "haystack.txt")
    except ErrorReturnCode(1):
        ...
"""

__version__ = "0.3.0"
__license__ = "MIT"

from shellcall.core.command import Cmd
from shellcall.core.command_executor import CommandExecutor, CommandResult
from shellcall.core.config import (
    ShellCallConfig,
    configure,
    is_verbose,
    load_config,
    set_echo,
    set_verbose,
)
from shellcall.core.dispatch import ShellNamespace, cmd, run, sh
from shellcall.core.exceptions import (
    CommandAlreadyExecuted,
    CommandFailed,
    CommandNotFound,
    ConfigurationError,
    ShellCallException,
    error_for_status,
)
from shellcall.core.executors import ThreadedExecutor
from shellcall.core.process_registry import active_processes, install_interrupt_handler

# Convenience alias
ErrorReturnCode = error_for_status

__all__ = [
    # Version
    "__version__",
    # Calling commands
    "sh",
    "run",
    "cmd",
    "Cmd",
    "ShellNamespace",
    "CommandResult",
    "CommandExecutor",
    "ThreadedExecutor",
    # Exceptions
    "ShellCallException",
    "CommandNotFound",
    "CommandFailed",
    "CommandAlreadyExecuted",
    "ConfigurationError",
    "error_for_status",
    "ErrorReturnCode",
    # Configuration
    "ShellCallConfig",
    "configure",
    "load_config",
    "is_verbose",
    "set_verbose",
    "set_echo",
    # Signals
    "active_processes",
    "install_interrupt_handler",
]
