"""
Condition Grammar Parser
========================

This module recognizes the textual condition language and produces a
concrete parse tree, or raises ConditionSyntaxError pointing at the
offending position.

Grammar
-------
    sentence           := boolean_expression EOI
    boolean_expression := boolean | operation
    boolean            := "true" | "false"
    operation          := operand comparator value8
    operand            := register8 | memory_address
    register8          := "A" | "X" | "Y" | "S" | "SP"
    memory_address     := "#0x" alnum{1,8}
    value8             := "0x" alnum{2}
    comparator         := "=" | ">=" | ">" | "<=" | "<" | "!="

Whitespace between tokens is skipped. Input left over after a complete
boolean_expression is an error.

The hex payloads of memory_address and value8 accept any alphanumeric
character. Strict hex decoding happens in the builder, so ``A = 0xZZ``
parses here and is rejected there as malformed hex.

Parse Tree
----------
Each node records the rule it matched, its text and its ``[start, end)``
span in the input:

    BOOLEAN_EXPRESSION "A = 0x12"
    └── OPERATION "A = 0x12"
        ├── REGISTER8 "A"
        ├── COMPARATOR "="
        └── VALUE8 "0x12"

Example Usage
-------------
>>> from lepr.condition.grammar import parse
>>> tree = parse("#0x1234 >= 0x10")
>>> [child.rule for child in tree.children[0].children]
[<Rule.MEMORY_ADDRESS: 5>, <Rule.COMPARATOR: 6>, <Rule.VALUE8: 7>]
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto

from lepr.errors import ConditionSyntaxError, InputLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Grammar Rules
# =============================================================================

class Rule(Enum):
    """Grammar rules, used both to tag parse nodes and to report expectations."""
    BOOLEAN_EXPRESSION = auto()
    BOOLEAN = auto()
    OPERATION = auto()
    REGISTER8 = auto()
    MEMORY_ADDRESS = auto()
    COMPARATOR = auto()
    VALUE8 = auto()
    EOI = auto()         # End of input

    @property
    def label(self) -> str:
        """Name as written in the grammar (e.g. 'memory_address')."""
        if self is Rule.EOI:
            return "end of input"
        return self.name.lower()


# Longest spellings first so that "SP" is not read as "S" + "P"
REGISTERS = ("SP", "A", "X", "Y", "S")

BOOLEANS = ("true", "false")

# Two-character comparators must be tried before their one-character prefixes
COMPARATORS = (">=", "<=", "!=", "=", ">", "<")

MEMORY_PREFIX = "#0x"
VALUE8_PREFIX = "0x"
MAX_ADDRESS_DIGITS = 8
VALUE8_DIGITS = 2

WORD_START = string.ascii_letters + "_"
WORD_CHARS = string.ascii_letters + string.digits + "_"
ALNUM = string.ascii_letters + string.digits

OPERAND_START = frozenset({Rule.BOOLEAN, Rule.REGISTER8, Rule.MEMORY_ADDRESS})


# =============================================================================
# Parse Tree
# =============================================================================

@dataclass(frozen=True)
class ParseNode:
    """
    A node of the concrete parse tree.

    Attributes:
        rule: Grammar rule this node matched
        text: The matched input text
        start: Position of the first matched character
        end: Position one past the last matched character
        children: Sub-nodes, in input order
    """
    rule: Rule
    text: str
    start: int
    end: int
    children: tuple["ParseNode", ...] = ()

    def pretty(self, indent: int = 0) -> str:
        """Render the subtree one node per line, for debugging."""
        lines = [f"{'  ' * indent}{self.rule.label} {self.text!r} [{self.start}, {self.end})"]
        for child in self.children:
            lines.append(child.pretty(indent + 1))
        return "\n".join(lines)


# =============================================================================
# Parser
# =============================================================================

class ConditionParser:
    """
    Recursive descent parser for one line of condition text.

    The parser works directly on characters; the grammar is small enough
    that a separate tokenizer would add nothing. Each ``_parse_*`` method
    starts at the current position (after skipping whitespace) and either
    returns a ParseNode or raises ConditionSyntaxError.

    Usage:
        tree = ConditionParser("A != 0x00").parse()
    """

    def __init__(self, text: str):
        self.text = text
        self._pos = 0

    def parse(self) -> ParseNode:
        """
        Parse the whole input as a sentence.

        Returns:
            Parse tree rooted at a BOOLEAN_EXPRESSION node

        Raises:
            ConditionSyntaxError: If the input does not match the grammar
        """
        self._pos = 0
        tree = self._parse_boolean_expression()

        self._skip_whitespace()
        if not self._at_end():
            raise self._error(
                f"unexpected '{self._peek()}'",
                InputLocation.position(self._pos),
                {Rule.EOI},
            )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Parsed {self.text!r}:\n{tree.pretty()}")
        return tree

    # =========================================================================
    # Character Access
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.text)

    def _peek(self, offset: int = 0) -> str:
        pos = self._pos + offset
        if pos >= len(self.text):
            return ""
        return self.text[pos]

    def _lookahead(self, literal: str) -> bool:
        return self.text.startswith(literal, self._pos)

    def _skip_whitespace(self) -> None:
        # Must check for non-empty string first because '' in ' \t' is True
        while self._peek() and self._peek() in " \t\r\n":
            self._pos += 1

    def _scan(self, charset: str, start: int) -> int:
        """Return the end of the run of charset characters beginning at start."""
        end = start
        while end < len(self.text) and self.text[end] in charset:
            end += 1
        return end

    def _node(self, rule: Rule, start: int, end: int, children=()) -> ParseNode:
        return ParseNode(rule, self.text[start:end], start, end, tuple(children))

    def _error(
        self,
        message: str,
        location: InputLocation,
        expected: set[Rule],
    ) -> ConditionSyntaxError:
        return ConditionSyntaxError(message, self.text, location, frozenset(expected))

    def _describe_here(self) -> str:
        if self._at_end():
            return "unexpected end of input"
        return f"unexpected '{self._peek()}'"

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _parse_boolean_expression(self) -> ParseNode:
        """boolean_expression := boolean | operation"""
        self._skip_whitespace()
        start = self._pos

        if self._peek() and self._peek() in WORD_START:
            end = self._scan(WORD_CHARS, start)
            word = self.text[start:end]
            if word in BOOLEANS:
                self._pos = end
                inner = self._node(Rule.BOOLEAN, start, end)
                return self._node(Rule.BOOLEAN_EXPRESSION, start, end, [inner])

        inner = self._parse_operation()
        return self._node(Rule.BOOLEAN_EXPRESSION, start, inner.end, [inner])

    def _parse_operation(self) -> ParseNode:
        """operation := operand comparator value8"""
        operand = self._parse_operand()
        comparator = self._parse_comparator()
        value = self._parse_value8()
        return self._node(
            Rule.OPERATION, operand.start, value.end, [operand, comparator, value]
        )

    def _parse_operand(self) -> ParseNode:
        """operand := register8 | memory_address"""
        self._skip_whitespace()
        start = self._pos

        if self._lookahead(MEMORY_PREFIX):
            return self._parse_memory_address()

        if self._peek() and self._peek() in WORD_START:
            end = self._scan(WORD_CHARS, start)
            word = self.text[start:end]
            if word in REGISTERS:
                self._pos = end
                return self._node(Rule.REGISTER8, start, end)
            raise self._error(
                f"unknown operand '{word}'",
                InputLocation.span(start, end),
                OPERAND_START,
            )

        raise self._error(
            self._describe_here(),
            InputLocation.position(start),
            OPERAND_START,
        )

    def _parse_memory_address(self) -> ParseNode:
        """memory_address := "#0x" alnum{1,8}"""
        start = self._pos
        digits_start = start + len(MEMORY_PREFIX)
        end = self._scan(ALNUM, digits_start)
        count = end - digits_start

        if count == 0:
            self._pos = digits_start
            raise self._error(
                f"missing address digits, {self._describe_here()}",
                InputLocation.position(digits_start),
                {Rule.MEMORY_ADDRESS},
            )
        if count > MAX_ADDRESS_DIGITS:
            raise self._error(
                f"address has {count} digits, at most {MAX_ADDRESS_DIGITS} allowed",
                InputLocation.span(start, end),
                {Rule.MEMORY_ADDRESS},
            )

        self._pos = end
        return self._node(Rule.MEMORY_ADDRESS, start, end)

    def _parse_comparator(self) -> ParseNode:
        """comparator := "=" | ">=" | ">" | "<=" | "<" | "!=" """
        self._skip_whitespace()
        start = self._pos
        for comparator in COMPARATORS:
            if self._lookahead(comparator):
                self._pos += len(comparator)
                return self._node(Rule.COMPARATOR, start, self._pos)
        raise self._error(
            self._describe_here(),
            InputLocation.position(start),
            {Rule.COMPARATOR},
        )

    def _parse_value8(self) -> ParseNode:
        """value8 := "0x" alnum{2}"""
        self._skip_whitespace()
        start = self._pos

        if not self._lookahead(VALUE8_PREFIX):
            raise self._error(
                self._describe_here(),
                InputLocation.position(start),
                {Rule.VALUE8},
            )

        digits_start = start + len(VALUE8_PREFIX)
        end = self._scan(ALNUM, digits_start)
        count = end - digits_start
        if count != VALUE8_DIGITS:
            if count == 0:
                self._pos = digits_start
                raise self._error(
                    f"missing byte digits, {self._describe_here()}",
                    InputLocation.position(digits_start),
                    {Rule.VALUE8},
                )
            raise self._error(
                f"byte literal needs exactly {VALUE8_DIGITS} hex digits, got {count}",
                InputLocation.span(start, end),
                {Rule.VALUE8},
            )

        self._pos = end
        return self._node(Rule.VALUE8, start, end)


def parse(text: str) -> ParseNode:
    """
    Parse one line of condition text into a parse tree.

    Convenience wrapper around ConditionParser.

    Raises:
        ConditionSyntaxError: If the text does not match the grammar
    """
    return ConditionParser(text).parse()
