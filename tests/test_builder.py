# =============================================================================
# test_builder.py - Condition AST Builder Unit Tests
# =============================================================================
# Tests for turning parse trees into Condition objects via parse_condition
# and ConditionBuilder.
#
# Test coverage includes:
#   - Register and memory value sources
#   - Byte literal decoding over the whole 0-255 range
#   - Comparator to condition kind mapping
#   - Strict hex decoding errors
#   - Defensive checks against malformed trees
#   - Canonical text rendering
# =============================================================================

import pytest
from lepr.condition import parse_condition
from lepr.condition.ast import Condition, ConditionKind, SourceKind, ValueSource
from lepr.condition.builder import ConditionBuilder, build_condition
from lepr.condition.grammar import ParseNode, Rule, parse
from lepr.errors import (
    ConditionSyntaxError,
    InputLocation,
    InternalError,
    MalformedHexError,
    UnknownRegisterError,
)


# =============================================================================
# Value Source Tests
# =============================================================================

class TestValueSources:
    """Test operand to value source mapping."""

    @pytest.mark.parametrize("register,kind", [
        ("A", SourceKind.ACCUMULATOR),
        ("X", SourceKind.REGISTER_X),
        ("Y", SourceKind.REGISTER_Y),
        ("S", SourceKind.REGISTER_STATUS),
        ("SP", SourceKind.REGISTER_STACK_POINTER),
    ])
    def test_registers(self, register, kind):
        """Each register name maps to its own source."""
        condition = parse_condition(f"{register} = 0x00")
        assert condition.source == ValueSource(kind)
        assert condition.source.address is None

    def test_memory_address(self):
        """Two-byte addresses fold big-endian."""
        condition = parse_condition("#0x1234 = 0x00")
        assert condition.source == ValueSource.memory(0x1234)

    def test_single_byte_address(self):
        """A one-byte address is just that byte."""
        assert parse_condition("#0x7F = 0x00").source.address == 0x7F

    def test_four_byte_address(self):
        """Eight digits give a 32-bit address."""
        assert parse_condition("#0xDEADBEEF = 0x00").source.address == 0xDEADBEEF

    def test_leading_zero_bytes(self):
        """Leading zero bytes do not change the address."""
        assert parse_condition("#0x000012 = 0x00").source.address == 0x12

    def test_lower_case_hex(self):
        """Hex digits may be lower case."""
        assert parse_condition("#0xbeef = 0xab").source.address == 0xBEEF


# =============================================================================
# Byte Literal Tests
# =============================================================================

class TestByteLiterals:
    """Test value8 decoding."""

    def test_every_byte(self):
        """Every two-digit hex string decodes to its integer value."""
        decoded = [parse_condition(f"A = 0x{value:02X}").operand for value in range(256)]
        assert decoded == list(range(256))

    def test_lower_case(self):
        """Lower-case hex digits decode the same."""
        assert parse_condition("A = 0xff").operand == 0xFF

    def test_invalid_digits(self):
        """Non-hex digits are a hex error, not a default value."""
        with pytest.raises(MalformedHexError) as exc_info:
            parse_condition("A = 0xZZ")
        err = exc_info.value
        assert err.payload == "ZZ"
        assert err.location == InputLocation.span(4, 8)
        assert err.text == "A = 0xZZ"

    def test_half_valid_digits(self):
        """One bad digit is enough to reject the literal."""
        with pytest.raises(MalformedHexError):
            parse_condition("A = 0x1G")

    def test_not_a_syntax_error(self):
        """Hex errors are distinct from syntax errors."""
        with pytest.raises(MalformedHexError):
            parse_condition("X != 0xQ1")
        assert not issubclass(MalformedHexError, ConditionSyntaxError)


class TestMemoryHexErrors:
    """Test strict decoding of memory addresses."""

    def test_odd_number_of_digits(self):
        """Addresses must be whole bytes."""
        with pytest.raises(MalformedHexError) as exc_info:
            parse_condition("#0x123 = 0x00")
        assert exc_info.value.payload == "123"
        assert "odd number of digits" in str(exc_info.value)

    def test_invalid_digit(self):
        """Non-hex characters in an address are rejected."""
        with pytest.raises(MalformedHexError) as exc_info:
            parse_condition("#0x12XY = 0x00")
        assert "invalid hex digit" in str(exc_info.value)


# =============================================================================
# Comparator and Literal Tests
# =============================================================================

class TestConditionKinds:
    """Test comparator mapping and boolean literals."""

    @pytest.mark.parametrize("comparator,kind", [
        ("=", ConditionKind.EQUAL),
        (">=", ConditionKind.GREATER_OR_EQUAL),
        (">", ConditionKind.STRICTLY_GREATER),
        ("<=", ConditionKind.LESSER_OR_EQUAL),
        ("<", ConditionKind.STRICTLY_LESSER),
        ("!=", ConditionKind.DIFFERENT),
    ])
    def test_comparators(self, comparator, kind):
        """Each comparator builds its own condition kind."""
        condition = parse_condition(f"Y {comparator} 0x20")
        assert condition.kind is kind
        assert condition.source == ValueSource(SourceKind.REGISTER_Y)
        assert condition.operand == 0x20

    def test_true(self):
        """true builds a literal True."""
        condition = parse_condition("true")
        assert condition == Condition.literal(True)
        assert condition.is_literal
        assert condition.source is None

    def test_false(self):
        """false builds a literal False."""
        assert parse_condition("false") == Condition.literal(False)

    def test_reparse_gives_equal_condition(self):
        """Parsing is deterministic."""
        text = "#0x1234 >= 0x50"
        assert parse_condition(text) == parse_condition(text)
        assert hash(parse_condition(text)) == hash(parse_condition(text))

    def test_syntax_errors_propagate(self):
        """parse_condition raises the parser's syntax error."""
        with pytest.raises(ConditionSyntaxError):
            parse_condition("Z = 0x00")


# =============================================================================
# Defensive Check Tests
# =============================================================================

class TestDefensiveChecks:
    """Test builder errors that the grammar never produces."""

    def test_unknown_register(self):
        """A register8 node with an unknown name is rejected."""
        tree = ParseNode(Rule.BOOLEAN_EXPRESSION, "Q = 0x00", 0, 8, (
            ParseNode(Rule.OPERATION, "Q = 0x00", 0, 8, (
                ParseNode(Rule.REGISTER8, "Q", 0, 1),
                ParseNode(Rule.COMPARATOR, "=", 2, 3),
                ParseNode(Rule.VALUE8, "0x00", 4, 8),
            )),
        ))
        with pytest.raises(UnknownRegisterError) as exc_info:
            build_condition(tree)
        assert exc_info.value.name == "Q"

    def test_unexpected_operand_node(self):
        """Only register8 and memory_address can be operands."""
        tree = ParseNode(Rule.BOOLEAN_EXPRESSION, "true = 0x00", 0, 11, (
            ParseNode(Rule.OPERATION, "true = 0x00", 0, 11, (
                ParseNode(Rule.BOOLEAN, "true", 0, 4),
                ParseNode(Rule.COMPARATOR, "=", 5, 6),
                ParseNode(Rule.VALUE8, "0x00", 7, 11),
            )),
        ))
        with pytest.raises(InternalError):
            build_condition(tree)

    def test_wrong_root(self):
        """The builder only accepts a boolean_expression root."""
        operation = parse("A = 0x00").children[0]
        with pytest.raises(InternalError):
            ConditionBuilder("A = 0x00").build(operation)

    def test_unknown_comparator(self):
        """Comparator text outside the grammar is rejected."""
        tree = ParseNode(Rule.BOOLEAN_EXPRESSION, "A == 0x00", 0, 9, (
            ParseNode(Rule.OPERATION, "A == 0x00", 0, 9, (
                ParseNode(Rule.REGISTER8, "A", 0, 1),
                ParseNode(Rule.COMPARATOR, "==", 2, 4),
                ParseNode(Rule.VALUE8, "0x00", 5, 9),
            )),
        ))
        with pytest.raises(InternalError):
            build_condition(tree)

    def test_operand_out_of_range(self):
        """Comparisons only hold byte operands."""
        with pytest.raises(ValueError):
            Condition.comparison(ConditionKind.EQUAL, ValueSource.register("A"), 0x100)


# =============================================================================
# Canonical Text Tests
# =============================================================================

class TestCanonicalText:
    """Test str() of conditions."""

    @pytest.mark.parametrize("text,canonical", [
        ("A=0x12", "A = 0x12"),
        ("SP  !=  0xff", "SP != 0xFF"),
        ("#0x12 < 0x01", "#0x0012 < 0x01"),
        ("#0xDEADBEEF >= 0x80", "#0xDEADBEEF >= 0x80"),
        ("true", "true"),
        ("false", "false"),
    ])
    def test_str(self, text, canonical):
        """Conditions render in canonical form."""
        assert str(parse_condition(text)) == canonical

    @pytest.mark.parametrize("text", ["S > 0x30", "#0x1234 <= 0x10", "false"])
    def test_canonical_text_reparses(self, text):
        """Canonical text parses back to an equal condition."""
        condition = parse_condition(text)
        assert parse_condition(str(condition)) == condition
