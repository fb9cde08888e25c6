#!/usr/bin/env python3
# simboot/__init__.py
from __future__ import annotations
"""
simboot: list and boot Xcode simulators from the terminal.

Keep this module light; the CLI and tests import the submodules directly.
"""

__version__ = "0.1.0"

from simboot.devices import Device, filter_devices, format_device, parse_devices  # noqa: E402
from simboot.errors import (  # noqa: E402
    CommandError,
    CommandFailedError,
    ConfigError,
    DeviceNotFoundError,
    SelectionCancelledError,
    SimbootError,
)

__all__ = [
    "__version__",
    "Device",
    "parse_devices",
    "filter_devices",
    "format_device",
    "SimbootError",
    "CommandError",
    "CommandFailedError",
    "ConfigError",
    "DeviceNotFoundError",
    "SelectionCancelledError",
]
