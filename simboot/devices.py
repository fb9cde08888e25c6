#!/usr/bin/env python3
# simboot/devices.py
from __future__ import annotations

"""
Simulator device records and the `simctl list devices` text scraper.

Listing output looks like:

    == Devices ==
    -- iOS 17.2 --
        iPhone 15 Pro (5A1F2C3D-...) (Booted)
        iPad Pro (11-inch) (4th generation) (9B8E...) (Shutdown)
    -- Unavailable: com.apple.CoreSimulator.SimRuntime.iOS-16-0 --
        iPhone 8 (0C1D...) (Shutdown) (unavailable, runtime profile not found)

Section headers scope the device lines below them to an OS version. Anything
that is neither a header nor a well-formed device line is skipped.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from simboot.errors import CommandError, CommandFailedError
from simboot.kernel import Kernel
from simboot.ui import paint, strip_ansi

log = logging.getLogger(__name__)

STATUS_BOOTED = "Booted"
STATUS_SHUTDOWN = "Shutdown"
STATUS_UNKNOWN = "Unknown"

# -- iOS 17.2 --
_HEADER_RE = re.compile(r"^\s*--\s*(?P<label>.*?)\s*--\s*$")

# <name> (<udid>) (<status>) [(unavailable, <reason>)]
# The name is greedy so parenthesized model variants stay in it; the optional
# availability note is matched by its fixed prefix so it is never mistaken
# for the status.
_DEVICE_RE = re.compile(
    r"^\s*(?P<name>\S.*) "
    r"\((?P<udid>[^()\s]+)\) "
    r"\((?P<status>(?!unavailable)[^()]+)\)"
    r"(?: \((?P<note>unavailable[^()]*)\))?\s*$"
)


@dataclass(frozen=True, slots=True)
class Device:
    """One simulator as reported by `simctl list devices`."""
    name: str
    udid: str
    os_version: str
    status: str
    unavailable_reason: Optional[str] = None

    @property
    def is_booted(self) -> bool:
        return STATUS_BOOTED in self.status

    @property
    def is_shutdown(self) -> bool:
        return STATUS_SHUTDOWN in self.status

    @property
    def display_status(self) -> str:
        """Booted / Shutdown, anything else is Unknown."""
        if self.is_shutdown:
            return STATUS_SHUTDOWN
        if self.is_booted:
            return STATUS_BOOTED
        return STATUS_UNKNOWN


# ---------- parsing ----------

def parse_header(line: str) -> Optional[str]:
    """Return the OS label of a `-- <label> --` line, else None."""
    m = _HEADER_RE.match(line)
    return m.group("label") if m else None


def parse_device_line(line: str, os_version: str = "") -> Optional[Device]:
    """Return a Device for a well-formed entry line, else None (silently)."""
    m = _DEVICE_RE.match(line)
    if not m:
        return None
    note = m.group("note")
    reason = None
    if note:
        # "unavailable, runtime profile not found" -> "runtime profile not found"
        reason = note.partition(",")[2].strip() or note
    return Device(
        name=m.group("name").strip(),
        udid=m.group("udid"),
        os_version=os_version,
        status=m.group("status").strip(),
        unavailable_reason=reason,
    )


def parse_devices(text: str) -> list[Device]:
    """
    Turn `simctl list devices` output into Device records, in input order.

    Headers are checked first; a line that is not a header and not a complete
    `<name> (<udid>) (<status>)` entry is dropped.
    """
    devices: list[Device] = []
    current_os_version = ""
    dropped = 0

    for line in text.splitlines():
        label = parse_header(line)
        if label is not None:
            current_os_version = label
            continue
        if "(" not in line:
            continue
        device = parse_device_line(line, current_os_version)
        if device is None:
            dropped += 1
            continue
        devices.append(device)

    log.debug("Parsed %d device(s), skipped %d malformed line(s)", len(devices), dropped)
    return devices


# ---------- listing ----------

def list_devices_output(kernel: Kernel) -> str:
    """Run `simctl list devices` and return its stdout as text."""
    res = kernel.simctl("list", "devices")
    if not res.spawned:
        raise CommandError(f"Failed to execute {res.command_line}: {res.spawn_error}")
    if res.timed_out:
        raise CommandError(f"Timed out running {res.command_line}")
    if not res.ok:
        detail = res.stderr_text().strip() or f"exit status {res.returncode}"
        raise CommandFailedError(f"Failed to list simulators: {detail}", res)
    try:
        return res.stdout_text()
    except UnicodeDecodeError as exc:
        raise CommandError(f"Failed to parse simulator list output: {exc}") from exc


def list_devices(kernel: Kernel) -> list[Device]:
    """Invoke the listing command and parse it."""
    return parse_devices(list_devices_output(kernel))


# ---------- filtering ----------

def matches_filter(device_name: str, filter_text: Optional[str]) -> bool:
    """Case-insensitive substring match; no filter matches everything."""
    if not filter_text:
        return True
    return filter_text.lower() in device_name.lower()


def filter_devices(devices: Iterable[Device], filter_text: Optional[str] = None) -> list[Device]:
    return [d for d in devices if matches_filter(d.name, filter_text)]


# ---------- formatting ----------

_STATUS_STYLES = {
    STATUS_BOOTED: "green",
    STATUS_SHUTDOWN: "red",
    STATUS_UNKNOWN: "yellow",
}


def _status_cell(device: Device, color: bool) -> str:
    label = device.display_status
    return paint(label, _STATUS_STYLES[label], enabled=color)


def format_device(device: Device, *, color: bool = True) -> str:
    """Render `<name> (<os_version>) (<status>)`."""
    return "{} ({}) ({})".format(
        paint(device.name, "white", enabled=color),
        paint(device.os_version, "cyan", enabled=color),
        _status_cell(device, color),
    )


_TABLE_HEADERS = ("Name", "OS", "Status", "UDID")


def _pad_cell(cell: str, width: int) -> str:
    # width counts visible characters; escapes in colored cells take no room
    return cell + " " * (width - len(strip_ansi(cell)))


def format_devices_table(devices: Iterable[Device], *, color: bool = True) -> str:
    """
    Render devices as a bordered Name / OS / Status / UDID table.

        +------+----------+---------+------+
        | Name | OS       | Status  | UDID |
        +------+----------+---------+------+
        | ...  | iOS 17.2 | Booted  | ...  |
        +------+----------+---------+------+
    """
    rows = [
        (device.name, paint(device.os_version, "cyan", enabled=color),
         _status_cell(device, color), device.udid)
        for device in devices
    ]
    widths = [max(len(strip_ansi(cell)) for cell in column)
              for column in zip(_TABLE_HEADERS, *rows)]

    def render(cells: Iterable[str]) -> str:
        return "| " + " | ".join(_pad_cell(c, w) for c, w in zip(cells, widths)) + " |"

    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    return "\n".join([rule, render(_TABLE_HEADERS), rule, *map(render, rows), rule])
