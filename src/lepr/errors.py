"""
Lepr Error Hierarchy
====================

This module defines the exception hierarchy for the whole package. All
exceptions inherit from LeprError, allowing callers to catch every
package-related error with a single except clause.

Exception Hierarchy
-------------------
LeprError (base)
├── ConditionError (rejected condition text, recoverable)
│   ├── ConditionSyntaxError - text does not match the condition grammar
│   ├── MalformedHexError - hex payload fails strict decoding
│   ├── UnknownRegisterError - register name unknown to the builder
│   └── InternalError - parse tree shape the builder cannot handle
└── EvaluationError (fault while resolving a condition)
    └── OutOfBoundsMemoryAccess - address outside machine memory

Parse-time errors are meant to be caught by the front end, which reports
them and asks for another line. Evaluation errors propagate to whatever
drives the evaluation (for example a "run until" loop), which decides
whether to abort.

UnknownRegisterError and InternalError can only be raised when the
grammar and the builder disagree; seeing one means a bug, not bad input.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from lepr.condition.grammar import Rule


class LeprError(Exception):
    """
    Base exception for all Lepr errors.

        try:
            condition = parse_condition(line)
        except LeprError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Input Location Tracking
# =============================================================================

@dataclass(frozen=True)
class InputLocation:
    """
    Where in a single input line an error was detected.

    A location is either a single 0-indexed position (``end`` is None) or
    a half-open span ``[start, end)``.

    Attributes:
        start: Offending position, or first position of the span
        end: One past the last position of the span, None for a position
    """
    start: int
    end: Optional[int] = None

    @classmethod
    def position(cls, pos: int) -> "InputLocation":
        return cls(pos)

    @classmethod
    def span(cls, start: int, end: int) -> "InputLocation":
        return cls(start, end)

    @property
    def is_span(self) -> bool:
        return self.end is not None

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        if self.end is None:
            return f"at position {self.start}"
        return f"somewhere between position {self.start} and {self.end}"

    def __str__(self) -> str:
        if self.end is None:
            return str(self.start)
        return f"{self.start}..{self.end}"


# =============================================================================
# Condition (parse-time) Exceptions
# =============================================================================

class ConditionError(LeprError):
    """
    Base exception for condition text that was rejected.

    Attributes:
        message: The error description
        text: The input line being parsed (optional)
        location: Where in the line the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        text: Optional[str] = None,
        location: Optional[InputLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.text = text
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with location and hint.

        Example output:
            unknown operand 'Q' at position 0 (expected boolean, register8 or memory_address)
        """
        parts = [self.message]
        if self.location is not None:
            parts.append(self.location.describe())
        msg = " ".join(parts)
        if self.hint:
            msg = f"{msg} ({self.hint})"
        return msg


class ConditionSyntaxError(ConditionError):
    """
    Condition text does not match the grammar.

    Carries the set of grammar rules that would have been accepted at the
    failing location, so front ends can tell the user what was expected.

    Examples:
        - ``Q = 0x00`` (unknown register)
        - ``A == 0x00`` (no such comparator)
        - ``A = 0x12 junk`` (trailing input)
    """

    def __init__(
        self,
        message: str,
        text: str,
        location: InputLocation,
        expected: frozenset["Rule"] = frozenset(),
    ):
        self.expected = expected
        hint = None
        if expected:
            names = sorted(rule.label for rule in expected)
            if len(names) == 1:
                hint = f"expected {names[0]}"
            else:
                hint = f"expected {', '.join(names[:-1])} or {names[-1]}"
        super().__init__(message, text=text, location=location, hint=hint)


class MalformedHexError(ConditionError):
    """
    A hex payload failed strict decoding.

    Raised for an odd number of digits or for characters outside
    ``0-9a-fA-F``. Byte literals must decode to exactly one byte.
    """

    def __init__(
        self,
        payload: str,
        reason: str,
        text: Optional[str] = None,
        location: Optional[InputLocation] = None,
    ):
        self.payload = payload
        self.reason = reason
        super().__init__(
            f"malformed hex '{payload}': {reason}",
            text=text,
            location=location,
        )


class UnknownRegisterError(ConditionError):
    """Register name that the builder cannot map to a value source."""

    def __init__(self, name: str, location: Optional[InputLocation] = None):
        self.name = name
        super().__init__(f"unknown register '{name}'", location=location)


class InternalError(ConditionError):
    """Parse tree has a shape the builder does not handle."""
    pass


# =============================================================================
# Evaluation Exceptions
# =============================================================================

class EvaluationError(LeprError):
    """Base exception for faults raised while evaluating a condition."""
    pass


class OutOfBoundsMemoryAccess(EvaluationError):
    """
    Memory read at an address the machine state does not cover.

    Addresses are never wrapped or truncated. Callers must size memory
    to cover every address their conditions reference.
    """

    def __init__(self, address: int, memory_size: int):
        self.address = address
        self.memory_size = memory_size
        super().__init__(
            f"memory access at 0x{address:04X} is out of bounds "
            f"(memory size is 0x{memory_size:04X})"
        )
