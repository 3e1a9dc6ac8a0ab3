"""Command builder.

A Cmd is an executable plus an ordered list of argument tokens and an
optional stdin payload. The executable is resolved when the Cmd is created;
rendering quotes every token for the shell so the logged command line is
exactly the one that runs.

Example:
    >>> Cmd("git").arg("log").opt("--oneline").render()
    'git log --oneline'
"""

import os
import shlex
from pathlib import Path
from typing import Any

from shellcall.core.command_executor import CommandExecutor, CommandResult
from shellcall.core.exceptions import CommandAlreadyExecuted, CommandNotFound
from shellcall.core.executors import default_executor

PATH_CHARACTERS = (".", "/")


def is_composite_path(name: str) -> bool:
    """Return True if ``name`` looks like a path rather than a bare command name."""
    return any(char in name for char in PATH_CHARACTERS)


def find_in_path(name: str, search_path: str | None = None) -> str | None:
    """Search each directory of a PATH-style list for ``name``.

    Args:
        name: Bare command name
        search_path: os.pathsep-separated directories (default: $PATH)

    Returns:
        Full path of the first match, or None
    """
    if search_path is None:
        search_path = os.environ.get("PATH", "")

    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        candidate = Path(directory) / name
        if candidate.exists():
            return str(candidate)
    return None


def resolve_executable(name: str, search_path: str | None = None) -> str:
    """Locate the executable for ``name``.

    An existing path is accepted as is. Otherwise only bare names are looked
    up in PATH; a name containing ``.`` or ``/`` that does not exist is
    rejected without searching.

    Raises:
        CommandNotFound: If the executable cannot be located
    """
    if name and Path(name).exists():
        return name

    full_path = None
    if name and not is_composite_path(name):
        full_path = find_in_path(name, search_path)

    if full_path is None:
        raise CommandNotFound(f"No such command: '{name}'", name=name)
    return full_path


class Cmd:
    """A shell command under construction.

    Attributes:
        name: Executable name or path as given
        full_path: Where the executable was found
        stdin: Optional payload written to the child's stdin
    """

    def __init__(self, name: str | os.PathLike[str], *args: Any, stdin: Any = None) -> None:
        """Create a command.

        Args:
            name: Executable name or path
            *args: Initial argument tokens
            stdin: Optional input payload (string or a previous CommandResult)

        Raises:
            CommandNotFound: If the executable cannot be located
        """
        self.name = os.fspath(name)
        self.full_path = resolve_executable(self.name)
        self._args: list[str] = []
        self.stdin = stdin
        self._executed = False
        if args:
            self.arg(*args)

    def arg(self, *args: Any) -> "Cmd":
        """Append argument tokens and return the command for chaining."""
        self._args.extend(str(arg) for arg in args)
        return self

    opt = arg

    def input(self, payload: Any) -> "Cmd":
        """Set the stdin payload and return the command for chaining."""
        self.stdin = payload
        return self

    @property
    def args(self) -> list[str]:
        return list(self._args)

    @property
    def executed(self) -> bool:
        return self._executed

    def argv(self) -> list[str]:
        """Return the unquoted argument vector (executable first)."""
        return [self.name, *self._args]

    def render(self) -> str:
        """Return the shell-escaped command line."""
        return " ".join(shlex.quote(word) for word in self.argv())

    def stdin_text(self) -> str | None:
        """Return the text to write to stdin, or None when there is no payload.

        A CommandResult payload pipes its stdout. The text always ends with a
        newline.
        """
        if self.stdin is None:
            return None

        payload = self.stdin
        if isinstance(payload, CommandResult):
            text = payload.stdout
        elif isinstance(payload, bytes):
            text = payload.decode("utf-8", errors="replace")
        else:
            text = str(payload)

        if not text.endswith("\n"):
            text += "\n"
        return text

    def exec(self, executor: CommandExecutor | None = None) -> CommandResult:
        """Run the command once and return its result.

        Args:
            executor: Executor to use (default: the shared threaded executor)

        Raises:
            CommandAlreadyExecuted: If this Cmd already ran
            CommandFailed: Per-status subclass for a non-zero exit status
        """
        if self._executed:
            raise CommandAlreadyExecuted(
                f"Command already executed: '{self.render()}'", command=self.render()
            )
        self._executed = True
        return (executor or default_executor()).execute(self)

    run = exec

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Cmd({self.render()!r})"
