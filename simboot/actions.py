#!/usr/bin/env python3
# simboot/actions.py
from __future__ import annotations
"""
Device lookup, boot sequence, and interactive selection.

Each external step prints a Linux-boot style status line:
    [  OK  ] Boot iPhone 15 Pro
    [FAILED] Boot iPhone 15 Pro (CommandFailedError: ...)
"""

import logging
from typing import Any, Callable, Optional, Sequence

from simboot.config import AppConfig
from simboot.devices import Device, format_device
from simboot.errors import (
    CommandError,
    CommandFailedError,
    DeviceNotFoundError,
    SelectionCancelledError,
)
from simboot.kernel import Kernel
from simboot.picker import Picker
from simboot.ui import paint, print_line

log = logging.getLogger(__name__)


def _step(label: str, fn: Callable[[], Any], *, color: bool = True) -> Any:
    """Run a boot step with status output."""
    try:
        out = fn()
    except Exception as exc:
        print_line(
            paint(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red", enabled=color)
        )
        raise
    print_line(paint(f"[  OK  ] {label}", "green", enabled=color))
    return out


def find_device(device_name: str, devices: Sequence[Device]) -> Device:
    """Case-insensitive exact name match; first match wins."""
    wanted = device_name.lower()
    for device in devices:
        if device.name.lower() == wanted:
            return device
    raise DeviceNotFoundError(f"Device '{device_name}' not found")


def _simctl_boot(kernel: Kernel, device: Device) -> None:
    res = kernel.simctl("boot", device.udid)
    if not res.spawned:
        raise CommandError(f"Failed to boot simulator: {res.spawn_error}")
    if res.timed_out:
        raise CommandError(f"Failed to boot simulator: timed out after {res.duration_sec:.0f}s")
    if not res.ok:
        raise CommandFailedError(
            f"Failed to boot simulator: {res.stderr_text().strip()}", res)


def _open_simulator_app(kernel: Kernel, app_name: str) -> None:
    res = kernel.open_app(app_name)
    if not res.spawned:
        raise CommandError(f"Failed to open {app_name}.app: {res.spawn_error}")
    if res.timed_out:
        raise CommandError(f"Failed to open {app_name}.app: timed out")
    if not res.ok:
        # The device is booted either way; only the window failed to come up.
        log.warning("open -a %s exited %s: %s",
                    app_name, res.returncode, res.stderr_text().strip())


def boot_device(
    device_name: str,
    devices: Sequence[Device],
    kernel: Kernel,
    config: AppConfig,
    *,
    color: bool = True,
) -> Device:
    """
    Boot the named simulator and bring Simulator.app to the front.

    Returns the device. Raises DeviceNotFoundError before running anything
    when the name is unknown, CommandFailedError when `simctl boot` exits
    non-zero.
    """
    device = find_device(device_name, devices)

    if device.is_booted:
        print_line("{} {} {}".format(
            paint(device.name, "white", enabled=color),
            paint("is already booted", "yellow", enabled=color),
            paint("✓", "green", enabled=color)))
        log.info("%s (%s) already booted, nothing to do", device.name, device.udid)
        return device

    print_line("{} {} {}".format(
        paint("Booting", "cyan", enabled=color),
        paint(device.name, "white", enabled=color),
        paint("...", "cyan", enabled=color)))
    log.debug("Booting %s (%s, %s)", device.name, device.udid, device.os_version)

    _step(f"Boot {device.name}", lambda: _simctl_boot(kernel, device), color=color)
    if config.open_simulator:
        _step(f"Open {config.simulator_app}.app",
              lambda: _open_simulator_app(kernel, config.simulator_app), color=color)

    print_line("{} {} {}".format(
        paint(device.name, "white", enabled=color),
        paint("booted successfully", "green", enabled=color),
        paint("✓", "green", enabled=color)))
    return device


def select_device(devices: Sequence[Device], picker: Picker) -> Device:
    """
    Present the devices through `picker` and map the choice back.

    The mapping is an exact match on the plain display string.
    """
    if not devices:
        raise DeviceNotFoundError("No simulators to choose from")

    choices = [format_device(d, color=False) for d in devices]
    chosen: Optional[str] = picker(choices)
    if chosen is None:
        raise SelectionCancelledError("No simulator selected")

    for label, device in zip(choices, devices):
        if label == chosen:
            return device
    raise DeviceNotFoundError(f"Selection '{chosen}' does not match any simulator")
