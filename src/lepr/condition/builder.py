"""
Condition AST Builder
=====================

Walks a parse tree produced by lepr.condition.grammar and constructs the
corresponding Condition.

The grammar fixes the shape of the tree, so the builder only has two real
checks to make:

1. Hex payloads must decode strictly (even length, hex digits only).
   Byte literals must decode to exactly one byte; memory addresses may be
   any whole number of bytes and are folded big-endian.
2. Operand text must map to a known register.

Register lookup failures and unexpected node kinds mean the grammar and
the builder disagree. They raise UnknownRegisterError and InternalError
respectively and should never be seen with input that came through
the parser.
"""

import binascii
import logging

from lepr.condition.ast import (
    COMPARATOR_KINDS,
    REGISTER_SOURCES,
    Condition,
    ValueSource,
)
from lepr.condition.grammar import MEMORY_PREFIX, VALUE8_PREFIX, ParseNode, Rule
from lepr.errors import (
    InputLocation,
    InternalError,
    MalformedHexError,
    UnknownRegisterError,
)

logger = logging.getLogger(__name__)


class ConditionBuilder:
    """
    Builds Condition objects from parse trees.

    The builder keeps the input text only to attach it to errors.

    Usage:
        tree = parse(text)
        condition = ConditionBuilder(text).build(tree)
    """

    def __init__(self, text: str = ""):
        self.text = text

    def build(self, tree: ParseNode) -> Condition:
        """
        Build a condition from a BOOLEAN_EXPRESSION node.

        Raises:
            MalformedHexError: If a hex payload does not decode
            UnknownRegisterError: If a register name is not known
            InternalError: If the tree has an unexpected shape
        """
        if tree.rule is not Rule.BOOLEAN_EXPRESSION or len(tree.children) != 1:
            raise self._internal(f"expected a boolean_expression node, got {tree.rule.label}", tree)

        node = tree.children[0]
        match node.rule:
            case Rule.BOOLEAN:
                condition = Condition.literal(node.text == "true")
            case Rule.OPERATION:
                condition = self._build_operation(node)
            case _:
                raise self._internal(f"unknown node type '{node.rule.label}'", node)

        logger.debug(f"Built condition {condition!r} from {tree.text!r}")
        return condition

    # =========================================================================
    # Node Handlers
    # =========================================================================

    def _build_operation(self, node: ParseNode) -> Condition:
        if len(node.children) != 3:
            raise self._internal(
                f"operation needs 3 children, got {len(node.children)}", node
            )
        operand_node, comparator_node, value_node = node.children

        match operand_node.rule:
            case Rule.REGISTER8:
                source = self._build_register(operand_node)
            case Rule.MEMORY_ADDRESS:
                source = self._build_memory(operand_node)
            case _:
                raise self._internal(f"unexpected node '{operand_node.rule.label}' here", operand_node)

        operand = self._build_value8(value_node)

        kind = COMPARATOR_KINDS.get(comparator_node.text)
        if kind is None:
            raise self._internal(f"unknown comparator '{comparator_node.text}'", comparator_node)

        return Condition.comparison(kind, source, operand)

    def _build_register(self, node: ParseNode) -> ValueSource:
        if node.text not in REGISTER_SOURCES:
            raise UnknownRegisterError(node.text, self._location(node))
        return ValueSource.register(node.text)

    def _build_memory(self, node: ParseNode) -> ValueSource:
        data = self._decode_hex(node, len(MEMORY_PREFIX))

        address = 0
        for byte in data:
            address = (address << 8) | byte
        return ValueSource.memory(address)

    def _build_value8(self, node: ParseNode) -> int:
        if node.rule is not Rule.VALUE8:
            raise self._internal(f"expected value8, got {node.rule.label}", node)

        data = self._decode_hex(node, len(VALUE8_PREFIX))
        if len(data) != 1:
            raise MalformedHexError(
                node.text[len(VALUE8_PREFIX):],
                f"expected exactly one byte, got {len(data)}",
                text=self.text,
                location=self._location(node),
            )
        return data[0]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _decode_hex(self, node: ParseNode, prefix_length: int) -> bytes:
        """Strictly decode the hex digits following a node's prefix."""
        payload = node.text[prefix_length:]
        if len(payload) % 2:
            raise MalformedHexError(
                payload,
                "odd number of digits",
                text=self.text,
                location=self._location(node),
            )
        try:
            return binascii.unhexlify(payload)
        except (binascii.Error, ValueError):
            raise MalformedHexError(
                payload,
                "invalid hex digit",
                text=self.text,
                location=self._location(node),
            ) from None

    @staticmethod
    def _location(node: ParseNode) -> InputLocation:
        return InputLocation.span(node.start, node.end)

    def _internal(self, message: str, node: ParseNode) -> InternalError:
        return InternalError(message, text=self.text, location=self._location(node))


def build_condition(tree: ParseNode, text: str = "") -> Condition:
    """Build a Condition from a parse tree (see ConditionBuilder.build)."""
    return ConditionBuilder(text).build(tree)
