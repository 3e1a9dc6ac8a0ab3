"""CLI entry point for shellcall.

Implements click-based CLI
"""

import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console

from shellcall import __version__
from shellcall.core.config import configure, load_config
from shellcall.core.dispatch import run as run_command
from shellcall.core.exceptions import (
    CommandFailed,
    CommandNotFound,
    ConfigurationError,
    format_error_for_user,
)
from shellcall.core.process_registry import install_interrupt_handler

NOT_FOUND_EXIT_STATUS = 127
ERROR_COLOR = "red"

# Errors go to stderr; stdout carries the child's echoed output
err_console = Console(stderr=True, highlight=False, emoji=False)


def exit_status_for(error: CommandFailed) -> int:
    """Map a child's status to one this process can exit with."""
    if error.status > 0:
        return error.status
    return 1


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.version_option(version=__version__, prog_name="shellcall")
@click.argument("name")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("--verbose", "-v", is_flag=True, help="Print the command before running it")
@click.option("--quiet", "-q", is_flag=True, help="Capture output without echoing it")
@click.option("--profile", "-p", default="default", help="Configuration profile")
def cli(
    name: str, args: tuple[str, ...], verbose: bool, quiet: bool, profile: str
) -> None:
    """Run NAME with ARGS, echo its output and exit with its status.

    Examples:
        shellcall git log --oneline
        shellcall -v ls -la /tmp
    """
    load_dotenv()
    install_interrupt_handler()

    try:
        config = load_config(profile, Path.cwd())
        if verbose:
            config.verbose = True
        if quiet:
            config.echo = False
        configure(config)

        run_command(name, *args)

    except ConfigurationError as e:
        err_console.print(
            f"Configuration error: {format_error_for_user(e)}", style=ERROR_COLOR, markup=False
        )
        sys.exit(1)
    except CommandNotFound as e:
        err_console.print(e.message, style=ERROR_COLOR, markup=False, soft_wrap=True)
        sys.exit(NOT_FOUND_EXIT_STATUS)
    except CommandFailed as e:
        err_console.print(e.message, style=ERROR_COLOR, markup=False, soft_wrap=True)
        sys.exit(exit_status_for(e))


if __name__ == "__main__":
    cli()
