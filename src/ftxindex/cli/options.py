"""Options and exit codes shared by the ftxindex commands."""

from collections.abc import Callable
from typing import Any, TypeVar

import click

from ftxindex.config.defaults import DEFAULT_HOST, DEFAULT_PORT

F = TypeVar("F", bound=Callable[..., Any])

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_UNEXPECTED = 3


def connection_options(func: F) -> F:
    """Add ``--host``, ``--port``, ``--verbose`` and ``--quiet`` to a command."""
    decorators = [
        click.option(
            "--host",
            default=DEFAULT_HOST,
            show_default=True,
            help="Search service host",
        ),
        click.option(
            "--port",
            default=DEFAULT_PORT,
            show_default=True,
            type=click.IntRange(min=1, max=65535),
            help="Search service port",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose output with debug information",
        ),
        click.option(
            "--quiet",
            "-q",
            is_flag=True,
            help="Only log errors (summary still shown)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func
