#!/usr/bin/env python3
# simboot/ui/logging.py
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from simboot.ui.ansi import ANSI, strip_ansi, supports_color
from simboot.ui.console import PRINT_MUTEX


class ColorizingStreamHandler(logging.StreamHandler):
    """
    StreamHandler with ANSI level colors and a plain fallback.
    """

    _LEVEL_COLORS = {
        logging.DEBUG: ANSI["bright_black"],
        logging.INFO: "",
        logging.WARNING: ANSI["yellow"],
        logging.ERROR: ANSI["red"],
        logging.CRITICAL: ANSI["magenta"],
    }

    def __init__(self, stream=None, *, use_color: Optional[bool] = None) -> None:
        super().__init__(stream)
        self.use_ansi = supports_color(self.stream) if use_color is None else use_color

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)

            if self.use_ansi:
                ansi = self._LEVEL_COLORS.get(record.levelno, "")
                if ansi:
                    message = f"{ansi}{message}{ANSI['reset']}"
            else:
                message = strip_ansi(message)

            with PRINT_MUTEX:
                self.stream.write(message + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class PlainFormatter(logging.Formatter):
    """Formatter that strips ANSI (good for log files)."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def init_logger(
    name: str = "simboot",
    level: int = logging.WARNING,
    logfile: Optional[str] = None,
    *,
    use_color: Optional[bool] = None,
) -> logging.Logger:
    """
    Initialize a color-safe logger.

    Console: level-colored ANSI on a TTY, else plain, always on stderr.
    File (optional): rotating, plain text, UTF-8, always at DEBUG.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    console_handler = next(
        (h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)), None)
    if console_handler is None:
        console_handler = ColorizingStreamHandler(stream=sys.stderr, use_color=use_color)
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)
    else:
        # stderr may have been swapped since the first call (tests, wrappers)
        console_handler.stream = sys.stderr
        if use_color is not None:
            console_handler.use_ansi = use_color
    console_handler.setLevel(level)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            PlainFormatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
