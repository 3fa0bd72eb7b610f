"""
Machine State
=============

The register file and memory of the simulated 8-bit processor, as seen by
the condition engine. This module holds data only: nothing here executes
instructions, and the condition engine reads the state without ever
changing it.

Register file:
    accumulator      A   8-bit
    register_x       X   8-bit
    register_y       Y   8-bit
    status_register  S   8-bit, reset to 0b00110000 (reserved + break)
    stack_pointer    SP  8-bit
    command_pointer  PC  address-sized, starts at the caller's address

Memory is a flat bytearray. Reads outside it raise OutOfBoundsMemoryAccess;
addresses are never wrapped.

Copyright (c) 2025-2026 Lepr Contributors
"""

from dataclasses import dataclass
from typing import Optional

from lepr.config import DEFAULT_MEMORY_SIZE, MachineConfig
from lepr.errors import OutOfBoundsMemoryAccess


# Reserved (bit 5) and break (bit 4) flags set
STATUS_RESET_VALUE = 0b00110000

# Condition-syntax register names -> Registers attribute
REGISTER_FIELDS = {
    "A": "accumulator",
    "X": "register_x",
    "Y": "register_y",
    "S": "status_register",
    "SP": "stack_pointer",
    "PC": "command_pointer",
}


@dataclass
class Registers:
    """
    CPU register file.

    Attributes:
        accumulator: A register
        register_x: X index register
        register_y: Y index register
        status_register: Processor status flags
        stack_pointer: Stack pointer (offset into the stack page)
        command_pointer: Address of the next instruction
    """
    accumulator: int = 0
    register_x: int = 0
    register_y: int = 0
    status_register: int = STATUS_RESET_VALUE
    stack_pointer: int = 0
    command_pointer: int = 0


class MachineState:
    """
    Registers plus memory of the simulated processor.

    Example:
        >>> state = MachineState(start_address=0x0600)
        >>> state.registers.accumulator = 0x12
        >>> state.write_byte(0x1234, 0x55)
        >>> state.read_byte(0x1234)
        85
    """

    def __init__(
        self,
        start_address: int = 0,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        memory: Optional[bytearray] = None,
    ):
        """
        Initialize a fresh machine state.

        Args:
            start_address: Initial command pointer
            memory_size: Size of zeroed memory to allocate (ignored if
                         memory is given)
            memory: Existing memory buffer to use as-is
        """
        self.registers = Registers(command_pointer=start_address)
        self.memory = memory if memory is not None else bytearray(memory_size)

    @classmethod
    def from_config(cls, config: Optional[MachineConfig] = None) -> "MachineState":
        """Build a state sized and positioned by a MachineConfig."""
        config = config or MachineConfig()
        return cls(start_address=config.start_address, memory_size=config.memory_size)

    @property
    def memory_size(self) -> int:
        return len(self.memory)

    # =========================================================================
    # Memory Access
    # =========================================================================

    def _check_address(self, address: int) -> None:
        if not 0 <= address < len(self.memory):
            raise OutOfBoundsMemoryAccess(address, len(self.memory))

    def read_byte(self, address: int) -> int:
        """
        Read one byte from memory.

        Raises:
            OutOfBoundsMemoryAccess: If address is outside memory
        """
        self._check_address(address)
        return self.memory[address]

    def write_byte(self, address: int, value: int) -> None:
        """
        Write one byte to memory (value is masked to 8 bits).

        Raises:
            OutOfBoundsMemoryAccess: If address is outside memory
        """
        self._check_address(address)
        self.memory[address] = value & 0xFF

    def load_bytes(self, address: int, data: bytes) -> None:
        """
        Copy a block of bytes into memory starting at address.

        Raises:
            OutOfBoundsMemoryAccess: If any part of the block is outside memory
        """
        if data:
            self._check_address(address)
            self._check_address(address + len(data) - 1)
        self.memory[address:address + len(data)] = data

    # =========================================================================
    # State Inspection
    # =========================================================================

    def set_register(self, name: str, value: int) -> None:
        """
        Set a register by its condition-syntax name (A, X, Y, S, SP, PC).

        8-bit registers are masked to 8 bits; PC is stored as given.

        Raises:
            ValueError: If the name is not a register
        """
        try:
            field_name = REGISTER_FIELDS[name]
        except KeyError:
            raise ValueError(
                f"Unknown register '{name}'. Valid registers: {', '.join(REGISTER_FIELDS)}"
            ) from None
        if name != "PC":
            value &= 0xFF
        setattr(self.registers, field_name, value)

    @property
    def register_values(self) -> dict:
        """
        Current register values keyed by their condition-syntax names.

        Returns:
            Dictionary with keys: A, X, Y, S, SP, PC
        """
        return {
            name: getattr(self.registers, field_name)
            for name, field_name in REGISTER_FIELDS.items()
        }

    def __repr__(self) -> str:
        regs = " ".join(f"{name}=${value:02X}" for name, value in self.register_values.items())
        return f"<MachineState {regs} memory={len(self.memory)} bytes>"
