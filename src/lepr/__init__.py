"""
Lepr - Condition Engine for an 8-bit Debugger
=============================================

This package provides the condition language used by the Lepr debugger
front end: textual conditions over CPU registers and memory, parsed into
typed expression trees and evaluated against a machine state.

Main Components
---------------
- **condition**: Grammar parser, AST builder, evaluator and diagnostics
- **machine**: Register file and memory of the simulated processor
- **config**: Machine configuration (defaults and environment)
- **cli**: The ``lepr-cond`` command-line tool

Quick Start
-----------
Parse and evaluate a condition:
    >>> from lepr import MachineState, parse_condition, evaluate
    >>> state = MachineState()
    >>> state.write_byte(0x1234, 0x55)
    >>> evaluate(parse_condition("#0x1234 >= 0x50"), state)
    True

Or from the command line:
    $ lepr-cond "#0x1234 >= 0x50" -m 0x1234=0x55
    true

Condition Syntax
----------------
- Registers: A, X, Y, S (status), SP (stack pointer)
- Memory: #0x followed by hex digit pairs, e.g. #0x1234
- Byte literal: 0x followed by two hex digits, e.g. 0x7F
- Comparators: = >= > <= < !=
- Literals: true, false

Version History
---------------
0.1.0 - Initial release with condition parser and evaluator
"""

__version__ = "0.1.0"
__author__ = "Lepr Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from lepr.config import MachineConfig
from lepr.machine import MachineState, Registers
from lepr.condition import (
    Condition,
    ConditionKind,
    SourceKind,
    ValueSource,
    evaluate,
    parse_condition,
    render_error,
)
from lepr.errors import (
    LeprError,
    InputLocation,
    ConditionError,
    ConditionSyntaxError,
    MalformedHexError,
    UnknownRegisterError,
    InternalError,
    EvaluationError,
    OutOfBoundsMemoryAccess,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Machine state
    "MachineConfig",
    "MachineState",
    "Registers",
    # Condition engine
    "Condition",
    "ConditionKind",
    "SourceKind",
    "ValueSource",
    "evaluate",
    "parse_condition",
    "render_error",
    # Exception hierarchy
    "LeprError",
    "InputLocation",
    "ConditionError",
    "ConditionSyntaxError",
    "MalformedHexError",
    "UnknownRegisterError",
    "InternalError",
    "EvaluationError",
    "OutOfBoundsMemoryAccess",
]
