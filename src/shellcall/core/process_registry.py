"""Registry of in-flight child processes and the SIGINT handler.

Every spawned command registers its pid here. The registry is append-only:
entries are never removed, which is acceptable for short-lived scripts.

``install_interrupt_handler`` is a process-wide side effect. It replaces any
existing SIGINT handler, so an embedding application that manages signals
itself should not call it. The CLI entry point installs it once at startup.
"""

import os
import signal
import sys
import threading
from types import FrameType

from rich.console import Console

from shellcall.core.logger import get_logger

INTERRUPT_EXIT_STATUS = 130


class ActiveProcessRegistry:
    """Thread-safe, append-only collection of child process ids."""

    def __init__(self) -> None:
        # Reentrant: the SIGINT handler runs on the main thread and may interrupt
        # it while it holds this lock inside register()
        self._lock = threading.RLock()
        self._pids: list[int] = []

    def register(self, pid: int) -> None:
        with self._lock:
            self._pids.append(pid)

    def pids(self) -> list[int]:
        """Return a snapshot of the registered pids."""
        with self._lock:
            return list(self._pids)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pids)

    def __contains__(self, pid: object) -> bool:
        with self._lock:
            return pid in self._pids

    def terminate_all(self, sig: int = signal.SIGTERM) -> int:
        """Send ``sig`` to every registered pid.

        Processes that already exited, or that we may no longer signal, are
        skipped.

        Returns:
            Number of processes the signal was delivered to
        """
        logger = get_logger()
        delivered = 0
        for pid in self.pids():
            try:
                os.kill(pid, sig)
            except (ProcessLookupError, PermissionError) as e:
                logger.debug("Skipped signal to exited process", pid=pid, error=str(e))
                continue
            logger.info("Forwarded signal to child process", pid=pid, signal=int(sig))
            delivered += 1
        return delivered


active_processes = ActiveProcessRegistry()

_installed = False
_install_lock = threading.Lock()


def _handle_interrupt(signum: int, frame: FrameType | None) -> None:
    console = Console(file=sys.stdout, highlight=False, emoji=False)
    console.print("\nShutdown signal received. Cleaning up...", markup=False)
    active_processes.terminate_all(signal.SIGTERM)
    sys.exit(INTERRUPT_EXIT_STATUS)


def install_interrupt_handler() -> bool:
    """Install the SIGINT handler that terminates registered children.

    Safe to call more than once; only the first call installs the handler.
    Must be called from the main thread.

    Returns:
        True if the handler was installed by this call
    """
    global _installed
    with _install_lock:
        if _installed:
            return False
        signal.signal(signal.SIGINT, _handle_interrupt)
        _installed = True
    get_logger().debug("Interrupt handler installed")
    return True


def interrupt_handler_installed() -> bool:
    return _installed
