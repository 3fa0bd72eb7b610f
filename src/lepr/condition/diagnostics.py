"""
Syntax Error Rendering
======================

Formats rejected condition text for display. Rendering is kept out of the
error classes so that each front end can present errors its own way.

Example output for ``Q = 0x00``:

    Syntax error: unknown operand 'Q'
    Q = 0x00
    ↑↑
    somewhere between position 0 and 1 (expected boolean, memory_address or register8)

A position is marked with a single caret in its 0-indexed column. A span
``[start, end)`` is marked with a caret at ``start`` and another at
``end``.
"""

from typing import Optional

from lepr.errors import ConditionError, ConditionSyntaxError, InputLocation


DEFAULT_MARKER = "↑"


def _padding(line: str, start: int, end: int) -> str:
    # Tabs stay tabs so the markers line up with the input
    chunk = line[start:end].ljust(end - start)
    return "".join("\t" if char == "\t" else " " for char in chunk)


def caret_line(
    location: InputLocation,
    marker: str = DEFAULT_MARKER,
    line: str = "",
) -> str:
    """
    Build the marker line for a location.

    Args:
        location: Position or span to mark
        marker: Character placed under each marked column
        line: The input line the markers go under

    Returns:
        A line of spaces and markers aligned to the input columns
    """
    result = _padding(line, 0, location.start) + marker
    if location.end is not None and location.end > location.start:
        result += _padding(line, location.start + 1, location.end) + marker
    return result


def location_message(location: InputLocation, hint: Optional[str] = None) -> str:
    """One-line description of a location, with the optional hint appended."""
    msg = location.describe()
    if hint:
        msg = f"{msg} ({hint})"
    return msg


def render_error(
    error: ConditionError,
    line: Optional[str] = None,
    marker: str = DEFAULT_MARKER,
) -> str:
    """
    Render a rejected condition as a multi-line report.

    Args:
        error: The syntax or hex error raised while parsing
        line: The input line; defaults to the text stored on the error
        marker: Caret character

    Returns:
        Title, the input line, a caret line and a message line. Errors
        without a location render as a title and the message only.
    """
    line = line if line is not None else (error.text or "")

    if isinstance(error, ConditionSyntaxError):
        title = f"Syntax error: {error.message}"
        detail = location_message(error.location, error.hint)
    else:
        title = f"Rejected condition: {error.message}"
        detail = location_message(error.location, error.hint) if error.location else ""

    if error.location is None:
        return "\n".join(part for part in (title, line, detail) if part)

    return "\n".join([title, line, caret_line(error.location, marker, line), detail])
