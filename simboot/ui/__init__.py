#!/usr/bin/env python3
# simboot/ui/__init__.py
from __future__ import annotations
# Re-export convenient top-level API
from .ansi import ANSI, strip_ansi, supports_color, colorize, paint
from .console import PRINT_MUTEX, print_line
from .logging import init_logger, ColorizingStreamHandler, PlainFormatter

__all__ = [
    "ANSI",
    "strip_ansi",
    "supports_color",
    "colorize",
    "paint",
    "PRINT_MUTEX",
    "print_line",
    "init_logger",
    "ColorizingStreamHandler",
    "PlainFormatter",
]
