"""Call external commands as if they were functions.

    >>> from shellcall import sh
    >>> sh.git("log", oneline=True)        # runs: git log --oneline=true
    >>> sh.wc("-l", _in=sh.ls())           # pipes the output of ls into wc

Positional arguments become tokens in order. Keyword options, and any
mapping passed positionally, become ``--key=value`` tokens in insertion
order; the reserved key ``_in`` sets the stdin payload instead.

Names that are not valid identifiers go through ``run("apt-get", ...)``;
``cmd(...)`` and ``sh.Cmd(...)`` build the same Cmd without running it.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from shellcall.core.command import Cmd
from shellcall.core.command_executor import CommandResult

STDIN_KEY = "_in"


@dataclass
class ProcessedArgs:
    """Tokens and properties extracted from a function-style call."""

    args: list[str] = field(default_factory=list)
    stdin: Any = None


def format_option_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def process_args(*args: Any, **options: Any) -> ProcessedArgs:
    """Split call arguments into argument tokens and the stdin payload."""
    processed = ProcessedArgs()

    def add_options(mapping: Mapping[Any, Any]) -> None:
        for key, value in mapping.items():
            if str(key) == STDIN_KEY:
                processed.stdin = value
                continue
            processed.args.append(f"--{key}={format_option_value(value)}")

    for arg in args:
        if isinstance(arg, Mapping):
            add_options(arg)
        else:
            processed.args.append(str(arg))

    add_options(options)
    return processed


def make_cmd(name: str, *args: Any, **options: Any) -> Cmd:
    processed = process_args(*args, **options)
    return Cmd(name, *processed.args, stdin=processed.stdin)


def cmd(name: str, *args: Any, **options: Any) -> Cmd:
    """Build a Cmd from function-style arguments without running it."""
    return make_cmd(name, *args, **options)


def run(name: str, *args: Any, **options: Any) -> CommandResult:
    """Build a Cmd from function-style arguments and run it.

    Raises:
        CommandNotFound: If the executable cannot be located
        CommandFailed: Per-status subclass for a non-zero exit status
    """
    return make_cmd(name, *args, **options).exec()


class ShellNamespace:
    """Attribute access turns into a command: ``sh.ls("-la")``."""

    def Cmd(self, name: str, *args: Any, **options: Any) -> Cmd:  # noqa: N802
        return make_cmd(name, *args, **options)

    def __getattr__(self, name: str) -> Callable[..., CommandResult]:
        if name.startswith("_"):
            raise AttributeError(name)

        def invoke(*args: Any, **options: Any) -> CommandResult:
            return run(name, *args, **options)

        invoke.__name__ = name
        invoke.__qualname__ = f"sh.{name}"
        return invoke

    def __call__(self, name: str, *args: Any, **options: Any) -> CommandResult:
        return run(name, *args, **options)

    def __repr__(self) -> str:
        return "<shellcall.sh>"


sh = ShellNamespace()
