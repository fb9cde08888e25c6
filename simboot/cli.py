#!/usr/bin/env python3
# simboot/cli.py
from __future__ import annotations

"""
simboot - list and boot Xcode simulators.

    simboot -l                    list every simulator
    simboot -l iphone             list simulators whose name contains "iphone"
    simboot --boot "iPhone 15 Pro"
    simboot -i ipad               pick an iPad from a menu, then boot it
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from simboot import __version__
from simboot.actions import boot_device, select_device
from simboot.config import AppConfig, load_config
from simboot.devices import Device, filter_devices, format_device, format_devices_table, list_devices
from simboot.errors import SimbootError
from simboot.kernel import Kernel
from simboot.picker import Picker, dialog_picker
from simboot.ui import init_logger, paint, print_line, supports_color

log = logging.getLogger("simboot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simboot",
        description="List and boot Xcode simulators via `xcrun simctl`.",
    )
    parser.add_argument(
        "-l", "--list", action="store_true",
        help="List all available simulators",
    )
    parser.add_argument(
        "filter", nargs="?", default=None,
        help='Filter devices by name (e.g., "iphone", "ipad")',
    )
    parser.add_argument(
        "--boot", metavar="NAME", default=None,
        help='Boot a specific simulator by name (e.g., "iPhone 15 Pro")',
    )
    parser.add_argument(
        "-i", "--interactive", action="store_true",
        help="Choose a simulator from a menu and boot it",
    )
    parser.add_argument(
        "--table", action="store_true",
        help="List simulators as a table (with UDIDs)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Debug logging (commands run, exit codes, parse counts)",
    )
    parser.add_argument(
        "--no-color", action="store_true",
        help="Disable ANSI colors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_level(args: argparse.Namespace, config: AppConfig) -> int:
    if args.verbose:
        return logging.DEBUG
    return getattr(logging, config.log_level or "WARNING")


def display_simulators(
    devices: Sequence[Device],
    filter_text: Optional[str],
    *,
    table: bool,
    color: bool,
) -> None:
    matching = filter_devices(devices, filter_text)
    if table:
        print_line(format_devices_table(matching, color=color))
        return
    for device in matching:
        print_line(format_device(device, color=color))


def run(args: argparse.Namespace, config: AppConfig, *, picker: Picker, color: bool) -> int:
    kernel = Kernel(
        config.xcrun_path,
        config.open_path,
        timeout=config.timeout,
    )
    devices = list_devices(kernel)

    if args.boot is not None:
        boot_device(args.boot, devices, kernel, config, color=color)
    elif args.interactive:
        selected = select_device(filter_devices(devices, args.filter), picker)
        boot_device(selected.name, [selected], kernel, config, color=color)
    else:
        display_simulators(devices, args.filter, table=args.table, color=color)
    return 0


def main(argv: Optional[Sequence[str]] = None, *, picker: Picker = dialog_picker) -> int:
    args = build_parser().parse_args(argv)

    color = not args.no_color and supports_color(sys.stdout)
    try:
        config = load_config()
    except SimbootError as exc:
        init_logger("simboot", use_color=color and supports_color(sys.stderr))
        log.error("Invalid configuration: %s", exc)
        return 1
    color = color and config.color

    try:
        init_logger(
            "simboot",
            level=_log_level(args, config),
            logfile=str(config.log_file_path) if config.log_file_path else None,
            use_color=color and supports_color(sys.stderr),
        )
    except OSError as exc:
        print_line(paint(f"[ERROR] Cannot open log file {config.log_file_path}: {exc}",
                         "red", enabled=color), file=sys.stderr)
        return 1

    try:
        return run(args, config, picker=picker, color=color)
    except SimbootError as exc:
        log.debug("%s", type(exc).__name__, exc_info=True)
        print_line(paint(f"[ERROR] {exc}", "red", enabled=color), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print_line("", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
