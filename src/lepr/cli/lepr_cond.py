"""
lepr-cond - Condition Evaluator Command-Line Interface
======================================================

Parses a debugger condition and evaluates it against a machine state
described on the command line.

Usage Examples
--------------
Check a register:
    $ lepr-cond "A = 0x12" -r A=0x12
    true

Check a memory byte:
    $ lepr-cond "#0x1234 >= 0x50" -m 0x1234=0x55
    true

Show the parsed condition:
    $ lepr-cond "SP<0x80" --ast

The exit status is 0 when the condition holds and 1 when it does not, so
the tool can be used directly in shell tests. Rejected conditions print a
caret diagnostic to stderr and exit with 3.

Copyright (c) 2025-2026 Lepr Contributors
"""

import logging
import sys
from typing import Optional

import click

from lepr import __version__
from lepr.cli.errors import ExitCode, handle_cli_exception
from lepr.condition import evaluate, parse_condition
from lepr.config import MachineConfig, parse_int
from lepr.machine import REGISTER_FIELDS, MachineState

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_assignment(text: str) -> tuple[str, int]:
    """
    Split a NAME=VALUE option value.

    Raises:
        click.BadParameter: If the text is not NAME=VALUE with an integer value
    """
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected NAME=VALUE, got '{text}'")
    try:
        return name.strip(), parse_int(value)
    except ValueError:
        raise click.BadParameter(f"invalid value '{value}' in '{text}'") from None


def _register_assignments(ctx, param, values) -> list[tuple[str, int]]:
    result = []
    for text in values:
        name, value = parse_assignment(text)
        if name not in REGISTER_FIELDS:
            raise click.BadParameter(
                f"unknown register '{name}' (valid: {', '.join(REGISTER_FIELDS)})"
            )
        if name != "PC" and not 0 <= value <= 0xFF:
            raise click.BadParameter(f"register {name} is 8-bit, got {value}")
        if value < 0:
            raise click.BadParameter(f"register {name} must not be negative, got {value}")
        result.append((name, value))
    return result


def _memory_assignments(ctx, param, values) -> list[tuple[int, int]]:
    result = []
    for text in values:
        address_text, value = parse_assignment(text)
        try:
            address = parse_int(address_text)
        except ValueError:
            raise click.BadParameter(f"invalid address '{address_text}'") from None
        if address < 0:
            raise click.BadParameter(f"memory addresses must not be negative, got {address_text}")
        if not 0 <= value <= 0xFF:
            raise click.BadParameter(f"memory values are bytes, got {value} at {address_text}")
        result.append((address, value))
    return result


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("condition")
@click.option(
    "-r", "--register",
    "registers",
    multiple=True,
    callback=_register_assignments,
    metavar="NAME=VALUE",
    help="Set a register before evaluating (A, X, Y, S, SP or PC). Repeatable.",
)
@click.option(
    "-m", "--memory",
    "memory",
    multiple=True,
    callback=_memory_assignments,
    metavar="ADDR=VALUE",
    help="Set a memory byte before evaluating. Repeatable.",
)
@click.option(
    "--memory-size",
    type=str,
    default=None,
    help="Memory size in bytes (default: $LEPR_MEMORY_SIZE or 0x10000)",
)
@click.option(
    "--start-address",
    type=str,
    default=None,
    help="Initial command pointer (default: $LEPR_START_ADDRESS or 0)",
)
@click.option(
    "--ast",
    "show_ast",
    is_flag=True,
    help="Print the parsed condition before the result",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lepr-cond")
def main(
    condition: str,
    registers: list[tuple[str, int]],
    memory: list[tuple[int, int]],
    memory_size: Optional[str],
    start_address: Optional[str],
    show_ast: bool,
    verbose: bool,
) -> None:
    """
    Evaluate a debugger condition.

    CONDITION is the text to evaluate, for example "A = 0x12",
    "#0x1234 >= 0x50" or "true".

    Examples:

        # Is the accumulator 0x12?
        lepr-cond "A = 0x12" -r A=0x12

        # Is the byte at $1234 below 0x50?
        lepr-cond "#0x1234 < 0x50" -m 0x1234=0x55
    """
    setup_logging(verbose)

    try:
        config = MachineConfig.from_env()
        if memory_size is not None or start_address is not None:
            config = MachineConfig(
                memory_size=parse_int(memory_size) if memory_size is not None else config.memory_size,
                start_address=parse_int(start_address) if start_address is not None else config.start_address,
            )
        # Memory options are only checkable once the size is known
        for address, _ in memory:
            if address >= config.memory_size:
                raise click.BadParameter(
                    f"address 0x{address:04X} is outside memory "
                    f"(memory size is 0x{config.memory_size:04X})"
                )
    except (click.BadParameter, ValueError) as e:
        handle_cli_exception(e, verbose)

    try:
        parsed = parse_condition(condition)
    except Exception as e:
        handle_cli_exception(e, verbose, line=condition)

    if show_ast:
        click.echo(f"Condition: {parsed}")
        click.echo(f"AST: {parsed!r}")

    try:
        state = MachineState.from_config(config)
        for name, value in registers:
            state.set_register(name, value)
        for address, value in memory:
            state.write_byte(address, value)

        if verbose:
            click.echo(f"State: {state!r}", err=True)

        result = evaluate(parsed, state)
    except Exception as e:
        handle_cli_exception(e, verbose)

    logger.debug(f"{parsed} evaluated to {result}")
    click.echo("true" if result else "false")
    sys.exit(ExitCode.SUCCESS if result else ExitCode.CONDITION_FALSE)


if __name__ == "__main__":
    main()
