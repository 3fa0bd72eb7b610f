"""
Condition AST
=============

Typed representation of a parsed condition.

A condition is either a literal boolean or a comparison between a value
source (a register or a memory byte) and an 8-bit literal:

    A = 0x12           Condition(EQUAL, ValueSource(ACCUMULATOR), 0x12)
    #0x1234 >= 0x50    Condition(GREATER_OR_EQUAL, ValueSource(MEMORY, 0x1234), 0x50)
    true               Condition(LITERAL, value=True)

Comparisons always put the value source on the left and the literal on
the right; the grammar has no source-to-source form.

All node classes are frozen dataclasses, so two parses of the same text
compare equal and a condition can be shared freely once built.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from lepr.machine import MachineState


# =============================================================================
# Value Sources
# =============================================================================

class SourceKind(Enum):
    """Where a value source reads its byte from."""
    ACCUMULATOR = auto()
    REGISTER_X = auto()
    REGISTER_Y = auto()
    REGISTER_STATUS = auto()
    REGISTER_STACK_POINTER = auto()
    MEMORY = auto()


# Register spelling in condition text -> source kind
REGISTER_SOURCES = {
    "A": SourceKind.ACCUMULATOR,
    "X": SourceKind.REGISTER_X,
    "Y": SourceKind.REGISTER_Y,
    "S": SourceKind.REGISTER_STATUS,
    "SP": SourceKind.REGISTER_STACK_POINTER,
}

REGISTER_NAMES = {kind: name for name, kind in REGISTER_SOURCES.items()}


@dataclass(frozen=True)
class ValueSource:
    """
    Reference to one origin of an 8-bit value.

    Attributes:
        kind: Register or memory
        address: Memory address (MEMORY only)
    """
    kind: SourceKind
    address: Optional[int] = None

    @classmethod
    def register(cls, name: str) -> "ValueSource":
        """Source for a register by its condition-syntax name."""
        return cls(REGISTER_SOURCES[name])

    @classmethod
    def memory(cls, address: int) -> "ValueSource":
        return cls(SourceKind.MEMORY, address)

    def resolve(self, state: "MachineState") -> int:
        """
        Current byte value of this source in the given machine state.

        Raises:
            OutOfBoundsMemoryAccess: If a memory address is outside memory
        """
        regs = state.registers
        match self.kind:
            case SourceKind.ACCUMULATOR:
                return regs.accumulator
            case SourceKind.REGISTER_X:
                return regs.register_x
            case SourceKind.REGISTER_Y:
                return regs.register_y
            case SourceKind.REGISTER_STATUS:
                return regs.status_register
            case SourceKind.REGISTER_STACK_POINTER:
                return regs.stack_pointer
            case SourceKind.MEMORY:
                return state.read_byte(self.address)

    def __str__(self) -> str:
        if self.kind is SourceKind.MEMORY:
            width = 4 if self.address <= 0xFFFF else 8
            return f"#0x{self.address:0{width}X}"
        return REGISTER_NAMES[self.kind]


# =============================================================================
# Conditions
# =============================================================================

class ConditionKind(Enum):
    """Condition node variants."""
    EQUAL = auto()
    GREATER_OR_EQUAL = auto()
    STRICTLY_GREATER = auto()
    LESSER_OR_EQUAL = auto()
    STRICTLY_LESSER = auto()
    DIFFERENT = auto()
    LITERAL = auto()


# Comparator spelling in condition text -> condition kind
COMPARATOR_KINDS = {
    "=": ConditionKind.EQUAL,
    ">=": ConditionKind.GREATER_OR_EQUAL,
    ">": ConditionKind.STRICTLY_GREATER,
    "<=": ConditionKind.LESSER_OR_EQUAL,
    "<": ConditionKind.STRICTLY_LESSER,
    "!=": ConditionKind.DIFFERENT,
}

COMPARATOR_SYMBOLS = {kind: symbol for symbol, kind in COMPARATOR_KINDS.items()}


@dataclass(frozen=True)
class Condition:
    """
    A parsed boolean condition.

    Comparison kinds carry ``source`` and ``operand``; LITERAL carries
    ``value``. Use the factory methods rather than the constructor.

    Attributes:
        kind: Which variant this node is
        source: Left-hand value source (comparisons only)
        operand: Right-hand byte literal, 0-255 (comparisons only)
        value: Boolean value (LITERAL only)
    """
    kind: ConditionKind
    source: Optional[ValueSource] = None
    operand: Optional[int] = None
    value: Optional[bool] = None

    @classmethod
    def comparison(cls, kind: ConditionKind, source: ValueSource, operand: int) -> "Condition":
        if kind is ConditionKind.LITERAL:
            raise ValueError("LITERAL is not a comparison kind")
        if not 0 <= operand <= 0xFF:
            raise ValueError(f"operand must be a byte, got {operand}")
        return cls(kind, source=source, operand=operand)

    @classmethod
    def literal(cls, value: bool) -> "Condition":
        return cls(ConditionKind.LITERAL, value=value)

    @property
    def is_literal(self) -> bool:
        return self.kind is ConditionKind.LITERAL

    def solve(self, state: "MachineState") -> bool:
        """Evaluate this condition against a machine state."""
        from lepr.condition.evaluator import evaluate
        return evaluate(self, state)

    def __str__(self) -> str:
        """Canonical condition text, e.g. 'A = 0x12' or 'true'."""
        if self.kind is ConditionKind.LITERAL:
            return "true" if self.value else "false"
        return f"{self.source} {COMPARATOR_SYMBOLS[self.kind]} 0x{self.operand:02X}"
