"""Shell executor that drains stdout and stderr on worker threads.

The rendered command line runs through the shell. While the calling thread
waits for the child to exit, two worker threads read stdout and stderr line
by line, echo each line and keep a copy. Both threads are joined before the
result is built, so captured output is always complete for the reported exit
status and a chatty child can never block on a full pipe.
"""

import subprocess
import sys
import threading
import time
from collections.abc import Callable
from typing import IO, TYPE_CHECKING

from rich.console import Console

from shellcall.core.command_executor import CommandExecutor, CommandResult
from shellcall.core.config import RuntimeSettings, settings
from shellcall.core.exceptions import error_for_status, format_error_for_log
from shellcall.core.logger import get_logger
from shellcall.core.process_registry import ActiveProcessRegistry, active_processes

if TYPE_CHECKING:
    from shellcall.core.command import Cmd

INFO_COLOR = "green"

# One lock for the whole process so concurrent commands never split a line
_echo_lock = threading.Lock()


def _echo(line: str) -> None:
    """Write a child line, from either pipe, to the caller's stdout."""
    with _echo_lock:
        # Looked up on every line so a redirected sys.stdout is honored
        sys.stdout.write(line)
        sys.stdout.flush()


class ThreadedExecutor(CommandExecutor):
    """Run commands through the shell with threaded output draining."""

    def __init__(
        self,
        registry: ActiveProcessRegistry | None = None,
        runtime_settings: RuntimeSettings | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            registry: Where spawned pids are recorded (default: process-wide registry)
            runtime_settings: Verbose/echo/shell settings (default: process-wide settings)
        """
        self.registry = registry if registry is not None else active_processes
        self.settings = runtime_settings if runtime_settings is not None else settings

    def get_name(self) -> str:
        return "threaded"

    def print_header(self, command_line: str) -> None:
        console = Console(file=sys.stdout, highlight=False, emoji=False)
        console.print(
            f"=> Executing {command_line}", style=INFO_COLOR, markup=False, soft_wrap=True
        )

    def stream(
        self,
        fd: IO[str],
        sink: list[str],
        echo: Callable[[str], None] | None,
    ) -> threading.Thread:
        """Start a thread that drains ``fd`` into ``sink`` line by line."""

        def drain() -> None:
            try:
                for line in fd:
                    if echo is not None:
                        echo(line)
                    sink.append(line)
            except (ValueError, OSError) as e:
                # Pipe closed under us: same as end-of-stream
                get_logger().debug("Output stream closed during drain", error=str(e))
            finally:
                fd.close()

        thread = threading.Thread(target=drain, daemon=True)
        thread.start()
        return thread

    def _feed_stdin(self, stdin: IO[str], pid: int, payload: str | None) -> None:
        logger = get_logger()
        try:
            if payload is not None:
                stdin.write(payload)
                stdin.flush()
        except BrokenPipeError:
            # The child exited without reading its input; the exit status decides
            logger.debug("Child closed stdin before input was written", pid=pid)
        finally:
            try:
                stdin.close()
            except BrokenPipeError:
                logger.debug("Child closed stdin before input was flushed", pid=pid)

    def execute(self, cmd: "Cmd") -> CommandResult:
        """Run ``cmd`` through the shell and capture its output.

        Args:
            cmd: Built command to run

        Returns:
            CommandResult with captured stdout/stderr

        Raises:
            CommandFailed: ``error_for_status(status)`` for a non-zero exit
            OSError: If the shell could not be started
        """
        config = self.settings.config
        logger = get_logger()
        command_line = cmd.render()

        if config.verbose:
            self.print_header(command_line)

        start_time = time.monotonic()

        with logger.operation("command_execution", command=command_line):
            try:
                process = subprocess.Popen(
                    command_line,
                    shell=True,
                    executable=config.shell,
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    newline="",
                    bufsize=1,
                )
            except (OSError, ValueError) as e:
                raise OSError(f"Failed to execute command: {e}") from e

            self.registry.register(process.pid)
            logger.debug("command_spawned", command=command_line, pid=process.pid)

            if process.stdin is None or process.stdout is None or process.stderr is None:
                process.kill()
                process.wait()
                raise OSError(f"Failed to open pipes for command: {command_line}")

            stdout_lines: list[str] = []
            stderr_lines: list[str] = []
            out_thread = self.stream(
                process.stdout, stdout_lines, _echo if config.echo else None
            )
            err_thread = self.stream(
                process.stderr, stderr_lines, _echo if config.echo else None
            )

            self._feed_stdin(process.stdin, process.pid, cmd.stdin_text())

            status = process.wait()
            for thread in (out_thread, err_thread):
                thread.join()

        duration_ms = int((time.monotonic() - start_time) * 1000)
        stdout = "".join(stdout_lines)
        stderr = "".join(stderr_lines)

        if status != 0:
            error = error_for_status(status)(
                f"ERROR: Could not execute '{command_line}':\n{stderr}",
                command=command_line,
                status=status,
                stdout=stdout,
                stderr=stderr,
            )
            logger.info("command_failed", error=format_error_for_log(error))
            raise error

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            status=status,
            stdin=cmd.stdin,
            command=command_line,
            duration_ms=duration_ms,
        )
