"""Command executor implementations.

- ThreadedExecutor: shell execution with threaded stdout/stderr draining
"""

from shellcall.core.executors.threaded_executor import ThreadedExecutor

__all__ = ["ThreadedExecutor", "default_executor"]

_default_executor: ThreadedExecutor | None = None


def default_executor() -> ThreadedExecutor:
    """Return the shared executor bound to the process-wide registry and settings."""
    global _default_executor
    if _default_executor is None:
        _default_executor = ThreadedExecutor()
    return _default_executor
