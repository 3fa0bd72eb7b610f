"""
Machine Configuration
=====================

Settings used to build a MachineState. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (see lepr.cli.lepr_cond)

Environment variables (all optional):
    LEPR_MEMORY_SIZE: Memory size in bytes (decimal or 0x hex)
    LEPR_START_ADDRESS: Initial command pointer (decimal or 0x hex)

Copyright (c) 2025-2026 Lepr Contributors
"""

from dataclasses import dataclass
import os


DEFAULT_MEMORY_SIZE = 0x10000  # 64 KiB address space
DEFAULT_START_ADDRESS = 0x0000


def parse_int(value: str) -> int:
    """
    Parse an integer written in decimal or with a 0x/$ hex prefix.

    Raises:
        ValueError: If the text is not a valid integer
    """
    value = value.strip()
    if value.lower().startswith("0x"):
        return int(value[2:], 16)
    if value.startswith("$"):
        return int(value[1:], 16)
    return int(value)


@dataclass(frozen=True)
class MachineConfig:
    """
    Configuration for MachineState construction.

    Attributes:
        memory_size: Number of addressable bytes (default: 64 KiB)
        start_address: Initial command pointer value (default: 0x0000)

    Example:
        >>> config = MachineConfig(memory_size=0x2000)
        >>> state = MachineState.from_config(config)
    """
    memory_size: int = DEFAULT_MEMORY_SIZE
    start_address: int = DEFAULT_START_ADDRESS

    def __post_init__(self):
        if self.memory_size <= 0:
            raise ValueError(f"memory size must be positive, got {self.memory_size}")
        if self.start_address < 0:
            raise ValueError(f"start address must not be negative, got {self.start_address}")

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """
        Create a MachineConfig from environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable is set but is not a valid integer
        """
        values = {}

        if memory_size := os.environ.get("LEPR_MEMORY_SIZE"):
            try:
                values["memory_size"] = parse_int(memory_size)
            except ValueError:
                raise ValueError(
                    f"LEPR_MEMORY_SIZE must be an integer, got {memory_size!r}"
                ) from None

        if start_address := os.environ.get("LEPR_START_ADDRESS"):
            try:
                values["start_address"] = parse_int(start_address)
            except ValueError:
                raise ValueError(
                    f"LEPR_START_ADDRESS must be an integer, got {start_address!r}"
                ) from None

        return cls(**values)
