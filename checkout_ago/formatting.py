"""Formatting and output helpers.

We try to handle both textual output and interactive output (output to a
"TTY"). In the case of interactive output, we render with colors, using
shell-specific escape codes.
"""
from typing import TextIO

import colorama
from typing_extensions import Protocol

from .history import CommitRecord


class Glyphs(Protocol):
    """Interface for styling the report printed before a checkout."""

    def color_fg(self, color: colorama.Fore, message: str) -> str:  # pragma: no cover
        """Render the foreground (text) color for the given message.

        Args:
          color: The color to render the foreground as.
          message: The message to render.

        Returns:
          An updated message that potentially includes escape codes to render
          the color.
        """
        ...

    def style(self, style: colorama.Style, message: str) -> str:  # pragma: no cover
        """Apply a certain style to the given message.

        Args:
          style: The style to apply.
          message: The message to render.

        Returns:
          An updated message that potentially includes escape codes to render
          the style.
        """
        ...


class TextGlyphs:
    """Glyphs used for output to a text file or non-TTY."""

    def color_fg(self, color: colorama.Fore, message: str) -> str:
        return message

    def style(self, style: colorama.Style, message: str) -> str:
        return message


class PrettyGlyphs:
    """Glyphs used for output to a TTY."""

    def __init__(self) -> None:
        colorama.init()

    def color_fg(self, color: colorama.Fore, message: str) -> str:
        return color + message + colorama.Fore.RESET

    def style(self, style: colorama.Style, message: str) -> str:
        return style + message + colorama.Style.RESET_ALL


def make_glyphs(out: TextIO) -> Glyphs:
    """Make the `Glyphs` object appropriate for the provided output stream.

    Args:
      out: The output stream being written to.

    Returns:
      The `Glyphs` object.
    """
    if out.isatty():
        return PrettyGlyphs()
    else:
        return TextGlyphs()


def pluralize(amount: int, singular: str, plural: str) -> str:
    """Pluralize a quantity, as appropriate.

    Args:
      amount: The quantity to pluralize.
      singular: The string to return if singular.
      plural: The string to return if plural.

    Returns:
      The appropriately-pluralized amount as a string.
    """
    if amount == 1:
        return f"{amount} {singular}"
    else:
        return f"{amount} {plural}"


def describe_time_delta(now: int, previous_time: int) -> str:
    """Describe how long ago `previous_time` was, e.g. "3d".

    Args:
      now: The current time, as a Unix timestamp.
      previous_time: The time to describe, as a Unix timestamp.

    Returns:
      A short description of the elapsed time.
    """
    time_delta = now - previous_time
    if time_delta < 60:
        return f"{time_delta}s"
    time_delta //= 60
    if time_delta < 60:
        return f"{time_delta}m"
    time_delta //= 60
    if time_delta < 24:
        return f"{time_delta}h"
    time_delta //= 24
    if time_delta < 365:
        return f"{time_delta}d"
    time_delta //= 365

    # Arguably at this point, users would want a specific date rather than a delta.
    return f"{time_delta}y"


def render_commit(glyphs: Glyphs, record: CommitRecord, now: int) -> str:
    """Render a one-line description of a commit.

    Args:
      glyphs: The glyphs to use.
      record: The commit to describe.
      now: The current time, as a Unix timestamp.

    Returns:
      The abbreviated hash, the age of the commit and its summary line.
    """
    abbreviated_oid = glyphs.color_fg(
        color=colorama.Fore.YELLOW, message=f"{record.oid:8.8}"
    )
    age = glyphs.color_fg(
        color=colorama.Fore.GREEN,
        message=describe_time_delta(
            now=now, previous_time=int(record.timestamp.timestamp())
        ),
    )
    return f"{abbreviated_oid} {age} {record.summary}"
