#!/usr/bin/env python3
# simboot/picker.py
from __future__ import annotations

"""
Interactive device picker built on prompt_toolkit.

A picker is any callable taking the display strings and returning the chosen
string, or None when the user backs out. The CLI uses `dialog_picker`; tests
substitute a plain function.
"""

import sys
from typing import Callable, Optional, Sequence

from simboot.errors import SimbootError

Picker = Callable[[Sequence[str]], Optional[str]]


def dialog_picker(
    choices: Sequence[str],
    *,
    title: str = "simboot",
    text: str = "Select a simulator to boot:",
) -> Optional[str]:
    """Full-screen radio list; Enter/OK selects, Esc/Cancel returns None."""
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SimbootError("Interactive mode needs a terminal (stdin/stdout is not a TTY)")

    from prompt_toolkit.shortcuts import radiolist_dialog

    return radiolist_dialog(
        title=title,
        text=text,
        values=[(choice, choice) for choice in choices],
        default=choices[0] if choices else None,
    ).run()
