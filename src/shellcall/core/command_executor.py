"""Command execution abstraction.

A Cmd only knows how to render itself; running it is delegated to a
CommandExecutor so the spawning strategy can be swapped (for example in
tests) without changing the builder.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shellcall.core.command import Cmd


@dataclass(frozen=True)
class CommandResult:
    """Result from a completed command.

    Attributes:
        stdout: Everything the child wrote to stdout, in order
        stderr: Everything the child wrote to stderr, in order
        status: Exit status (always 0 for a returned result)
        stdin: Input payload that was sent to the child, if any
        command: Rendered command line that was executed
        duration_ms: Wall-clock execution time in milliseconds
    """

    stdout: str
    stderr: str
    status: int
    stdin: Any = None
    command: str = ""
    duration_ms: int = 0

    def __str__(self) -> str:
        return self.stdout

    @property
    def ok(self) -> bool:
        return self.status == 0

    def lines(self) -> list[str]:
        """Return stdout split into lines without line endings."""
        return self.stdout.splitlines()


class CommandExecutor(ABC):
    """Abstract interface for running a built command."""

    @abstractmethod
    def execute(self, cmd: "Cmd") -> CommandResult:
        """Run a command to completion.

        Args:
            cmd: Built command to run

        Returns:
            CommandResult for a zero exit status

        Raises:
            CommandFailed: Per-status subclass when the exit status is non-zero
            OSError: If the shell could not be started
        """
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Get executor name for logging/debugging."""
        ...
