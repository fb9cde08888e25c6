#!/usr/bin/env python3
# simboot/errors.py
from __future__ import annotations

"""
Error types surfaced to the user.

Everything the CLI reports derives from SimbootError and is printed once as a
single [ERROR] line. Nothing is retried.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from simboot.kernel import CommandResult


class SimbootError(RuntimeError):
    """Base class for every failure reported by simboot."""


class CommandError(SimbootError):
    """Could not run an external command (spawn failure, timeout, undecodable output)."""


class CommandFailedError(CommandError):
    """An external command ran but exited non-zero."""

    def __init__(self, message: str, result: Optional["CommandResult"] = None) -> None:
        super().__init__(message)
        self.result = result


class DeviceNotFoundError(SimbootError):
    """No device matches the requested name."""


class SelectionCancelledError(SimbootError):
    """The interactive picker was dismissed without a choice."""


class ConfigError(SimbootError, ValueError):
    """A configuration value failed validation."""
