#!/usr/bin/env python3
# simboot/ui/ansi.py
from __future__ import annotations

import os
import re
from typing import IO, Optional

# ---- Core SGR maps ----------------------------------------------------------

# Standard 8 colors + bright variants, foreground only.
# Foreground: 30-37, Bright Foreground: 90-97
ANSI = {
    # reset
    "reset": "\x1b[0m",

    # styles
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "underline": "\x1b[4m",

    # fg 8-color
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",

    # fg bright
    "bright_black": "\x1b[90m",
    "bright_red": "\x1b[91m",
    "bright_green": "\x1b[92m",
    "bright_yellow": "\x1b[93m",
    "bright_blue": "\x1b[94m",
    "bright_magenta": "\x1b[95m",
    "bright_cyan": "\x1b[96m",
    "bright_white": "\x1b[97m",
}

# Useful compiled regex
ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


# ---- Utilities --------------------------------------------------------------

def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_REGEX.sub("", text)


def supports_color(stream: Optional[IO[str]] = None) -> bool:
    """
    Return True if ANSI escapes should be written to `stream`.

    Honors NO_COLOR (https://no-color.org) and TERM=dumb, then requires a TTY.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM", "") == "dumb":
        return False
    if stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


# ---- High-level helpers -----------------------------------------------------


def colorize(text: str, *styles: str) -> str:
    """
    Wrap text with one or more SGR styles/keys from ANSI (e.g., 'red', 'bold').
    Always auto-resets at the end.
    """
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text


def paint(text: str, *styles: str, enabled: bool = True) -> str:
    """colorize() that degrades to plain text when colors are disabled."""
    return colorize(text, *styles) if enabled else text
