"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes for the CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn, Optional

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    CONDITION_FALSE = 1  # Condition evaluated to false
    INVALID_ARGS = 2     # Invalid arguments (same as click usage errors)
    REJECTED = 3         # Condition text rejected or evaluation fault
    INTERNAL_ERROR = 4   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    line: Optional[str] = None,
) -> NoReturn:
    """
    Unified exception handler for the CLI tools.

    Condition errors are rendered with a caret line under the input;
    other package errors are printed as a single line.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        line: The condition text, used to render parse errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from lepr.condition.diagnostics import render_error
    from lepr.errors import ConditionError, InternalError, LeprError, UnknownRegisterError

    if isinstance(error, (InternalError, UnknownRegisterError)):
        # Grammar and builder disagree: a bug, not bad input
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

    elif isinstance(error, ConditionError):
        click.echo(render_error(error, line), err=True)
        sys.exit(ExitCode.REJECTED)

    elif isinstance(error, LeprError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.REJECTED)

    elif isinstance(error, (click.BadParameter, ValueError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
