"""
Announcement — WHAT/WHY preamble printed before the child starts

    WHAT: <what>
    WHY: <why>

Text is written verbatim (no escaping, wrapping, or tab expansion). Color,
when enabled, wraps the labels only. The stream is flushed before return so
the child's output can never land ahead of the preamble.
"""

import os
import sys
from typing import Optional, TextIO

from ..config import Config
from ..core.gate import Rationale

ANSI_COLORS = {
    "black": "30",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
    "cyan": "36",
    "white": "37",
}
RESET = "\x1b[0m"


def color_enabled(config: Config, stream: TextIO, environ=None) -> bool:
    """Config says yes, NO_COLOR is unset, and the stream is a terminal."""
    environ = os.environ if environ is None else environ
    if not config.output.color or environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def paint(label: str, color: str) -> str:
    code = ANSI_COLORS.get(color)
    if code is None:
        # "default" or unknown: plain label
        return label
    return f"\x1b[{code}m{label}{RESET}"


def render_preamble(rationale: Rationale, config: Config, colored: bool = False) -> str:
    what_label, why_label = "WHAT:", "WHY:"
    if colored:
        what_label = paint(what_label, config.output.what_color)
        why_label = paint(why_label, config.output.why_color)
    return f"{what_label} {rationale.what}\n{why_label} {rationale.why}\n"


def emit_preamble(rationale: Rationale, config: Config, stream: Optional[TextIO] = None,
                  environ=None) -> bool:
    """
    Write the preamble unless output mode is quiet.

    Returns:
        True if anything was written
    """
    if not config.should_print_header:
        return False
    stream = stream or sys.stdout
    stream.write(render_preamble(rationale, config, color_enabled(config, stream, environ)))
    stream.flush()
    return True
