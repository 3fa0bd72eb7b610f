"""
Lepr Command-Line Interface
===========================

This package provides command-line tools for Lepr:

- **lepr-cond**: parse a condition and evaluate it against a machine state

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["lepr_cond"]
