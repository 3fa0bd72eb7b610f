"""
Condition Evaluator
===================

Reduces a Condition to a boolean against a MachineState.

Comparisons are unsigned 8-bit: the source byte and the literal are both
in 0-255 and compared as plain integers, with no sign extension.
Evaluation only reads the machine state.
"""

import logging
import operator
from typing import Callable

from lepr.condition.ast import Condition, ConditionKind
from lepr.machine import MachineState

logger = logging.getLogger(__name__)


COMPARISONS: dict[ConditionKind, Callable[[int, int], bool]] = {
    ConditionKind.EQUAL: operator.eq,
    ConditionKind.GREATER_OR_EQUAL: operator.ge,
    ConditionKind.STRICTLY_GREATER: operator.gt,
    ConditionKind.LESSER_OR_EQUAL: operator.le,
    ConditionKind.STRICTLY_LESSER: operator.lt,
    ConditionKind.DIFFERENT: operator.ne,
}


def evaluate(condition: Condition, state: MachineState) -> bool:
    """
    Evaluate a condition against a machine state.

    Args:
        condition: Parsed condition
        state: Machine state to read registers and memory from

    Returns:
        True if the condition holds

    Raises:
        OutOfBoundsMemoryAccess: If the condition reads memory outside the state
    """
    if condition.kind is ConditionKind.LITERAL:
        return condition.value

    actual = condition.source.resolve(state)
    result = COMPARISONS[condition.kind](actual, condition.operand)
    logger.debug(f"{condition}: {condition.source} is 0x{actual:02X} -> {result}")
    return result
