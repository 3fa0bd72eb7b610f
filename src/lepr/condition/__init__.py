"""
Condition Engine
================

Parses textual conditions over CPU registers and memory, and evaluates
them against a machine state.

    text -> grammar.parse -> ParseNode -> builder -> Condition -> evaluate -> bool

Quick Start
-----------
    >>> from lepr.condition import parse_condition, evaluate
    >>> from lepr.machine import MachineState
    >>> state = MachineState()
    >>> state.registers.accumulator = 0x12
    >>> evaluate(parse_condition("A = 0x12"), state)
    True

Module Structure
----------------
- `grammar.py`: Grammar rules, parse tree and recursive descent parser
- `ast.py`: ValueSource and Condition types
- `builder.py`: Parse tree to Condition, with strict hex decoding
- `evaluator.py`: Condition to boolean
- `diagnostics.py`: Caret rendering of rejected input
"""

import logging

from lepr.condition.ast import (
    Condition,
    ConditionKind,
    SourceKind,
    ValueSource,
)
from lepr.condition.builder import ConditionBuilder, build_condition
from lepr.condition.diagnostics import caret_line, render_error
from lepr.condition.evaluator import evaluate
from lepr.condition.grammar import ConditionParser, ParseNode, Rule, parse

logger = logging.getLogger(__name__)


def parse_condition(text: str) -> Condition:
    """
    Parse one line of condition text into a Condition.

    Args:
        text: Condition such as ``A = 0x12``, ``#0x1234 >= 0x10`` or ``true``

    Returns:
        The parsed condition

    Raises:
        ConditionSyntaxError: If the text does not match the grammar
        MalformedHexError: If a hex payload does not decode
    """
    tree = parse(text)
    condition = ConditionBuilder(text).build(tree)
    logger.debug(f"Condition {text!r} -> {condition}")
    return condition


__all__ = [
    "parse_condition",
    "evaluate",
    "Condition",
    "ConditionKind",
    "SourceKind",
    "ValueSource",
    "ConditionBuilder",
    "build_condition",
    "ConditionParser",
    "ParseNode",
    "Rule",
    "parse",
    "caret_line",
    "render_error",
]
