"""
Machine State and Configuration Unit Tests
==========================================

Tests for the register file, memory access and MachineConfig.

Copyright (c) 2025-2026 Lepr Contributors
"""

import pytest
from lepr.config import DEFAULT_MEMORY_SIZE, MachineConfig, parse_int
from lepr.errors import OutOfBoundsMemoryAccess
from lepr.machine import STATUS_RESET_VALUE, MachineState, Registers


# =============================================================================
# Register Tests
# =============================================================================

class TestRegisters:
    """Test register file initialization and access."""

    def test_initial_values(self):
        """Fresh registers are zero except the status register."""
        regs = Registers()
        assert regs.accumulator == 0
        assert regs.register_x == 0
        assert regs.register_y == 0
        assert regs.stack_pointer == 0
        assert regs.status_register == 0b00110000
        assert STATUS_RESET_VALUE == 0x30

    def test_start_address(self):
        """The command pointer starts at the given address."""
        state = MachineState(start_address=0x0600)
        assert state.registers.command_pointer == 0x0600

    def test_set_register(self):
        state = MachineState()
        state.set_register("A", 0x42)
        state.set_register("SP", 0xFF)
        state.set_register("PC", 0x1234)
        assert state.registers.accumulator == 0x42
        assert state.registers.stack_pointer == 0xFF
        assert state.registers.command_pointer == 0x1234

    def test_set_register_masks_to_byte(self):
        state = MachineState()
        state.set_register("X", 0x1FF)
        assert state.registers.register_x == 0xFF

    def test_set_unknown_register(self):
        with pytest.raises(ValueError, match="Unknown register"):
            MachineState().set_register("B", 0)

    def test_register_values(self):
        state = MachineState(start_address=0x10)
        state.set_register("Y", 7)
        values = state.register_values
        assert list(values) == ["A", "X", "Y", "S", "SP", "PC"]
        assert values["Y"] == 7
        assert values["S"] == STATUS_RESET_VALUE
        assert values["PC"] == 0x10

    def test_repr(self):
        assert "A=$00" in repr(MachineState())


# =============================================================================
# Memory Tests
# =============================================================================

class TestMemory:
    """Test memory access and bounds checks."""

    def test_default_size(self):
        """Memory defaults to 64 KiB of zeros."""
        state = MachineState()
        assert state.memory_size == DEFAULT_MEMORY_SIZE == 0x10000
        assert state.read_byte(0xFFFF) == 0

    def test_read_write(self):
        state = MachineState()
        state.write_byte(0x1234, 0x55)
        assert state.read_byte(0x1234) == 0x55
        assert state.memory[0x1234] == 0x55

    def test_write_masks_to_byte(self):
        state = MachineState()
        state.write_byte(0, 0x1AB)
        assert state.read_byte(0) == 0xAB

    def test_read_out_of_bounds(self):
        state = MachineState(memory_size=16)
        with pytest.raises(OutOfBoundsMemoryAccess):
            state.read_byte(16)

    def test_negative_address(self):
        """Negative addresses do not index from the end."""
        with pytest.raises(OutOfBoundsMemoryAccess):
            MachineState(memory_size=16).read_byte(-1)

    def test_write_out_of_bounds(self):
        with pytest.raises(OutOfBoundsMemoryAccess):
            MachineState(memory_size=16).write_byte(0x100, 0)

    def test_load_bytes(self):
        state = MachineState(memory_size=0x100)
        state.load_bytes(0x10, b"\x01\x02\x03")
        assert bytes(state.memory[0x10:0x13]) == b"\x01\x02\x03"
        assert state.memory_size == 0x100

    def test_load_bytes_past_end(self):
        """A block that runs past the end is rejected, not truncated."""
        state = MachineState(memory_size=0x10)
        with pytest.raises(OutOfBoundsMemoryAccess):
            state.load_bytes(0x0E, b"\x01\x02\x03")
        assert state.memory_size == 0x10

    def test_existing_buffer(self):
        buf = bytearray(b"\xAA" * 4)
        state = MachineState(memory=buf)
        assert state.memory is buf
        assert state.read_byte(3) == 0xAA

    def test_error_message(self):
        err = OutOfBoundsMemoryAccess(0x10000, 0x10000)
        assert "0x10000" in str(err)
        assert "out of bounds" in str(err)


# =============================================================================
# Configuration Tests
# =============================================================================

class TestMachineConfig:
    """Test MachineConfig defaults, validation and environment loading."""

    def test_defaults(self):
        config = MachineConfig()
        assert config.memory_size == 0x10000
        assert config.start_address == 0

    def test_from_config(self):
        state = MachineState.from_config(MachineConfig(memory_size=0x800, start_address=0x200))
        assert state.memory_size == 0x800
        assert state.registers.command_pointer == 0x200

    def test_invalid_memory_size(self):
        with pytest.raises(ValueError):
            MachineConfig(memory_size=0)

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("LEPR_MEMORY_SIZE", raising=False)
        monkeypatch.delenv("LEPR_START_ADDRESS", raising=False)
        assert MachineConfig.from_env() == MachineConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LEPR_MEMORY_SIZE", "0x2000")
        monkeypatch.setenv("LEPR_START_ADDRESS", "512")
        config = MachineConfig.from_env()
        assert config.memory_size == 0x2000
        assert config.start_address == 512

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("LEPR_MEMORY_SIZE", "lots")
        with pytest.raises(ValueError, match="LEPR_MEMORY_SIZE"):
            MachineConfig.from_env()

    @pytest.mark.parametrize("text,value", [
        ("42", 42),
        ("0x2A", 42),
        ("0X2a", 42),
        ("$2A", 42),
        (" 7 ", 7),
    ])
    def test_parse_int(self, text, value):
        assert parse_int(text) == value

    def test_parse_int_invalid(self):
        with pytest.raises(ValueError):
            parse_int("0xZZ")
