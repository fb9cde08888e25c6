#!/usr/bin/env python3
# simboot/ui/console.py
from __future__ import annotations

import sys
import threading

# Single shared print mutex for all UI output (status lines and logging).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file=None, flush: bool = False) -> None:
    """Single-line print that cooperates with the logging handler."""
    # Resolve at call time so redirected/captured streams are honored.
    stream = sys.stdout if file is None else file
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()
