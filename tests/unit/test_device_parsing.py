from __future__ import annotations

from simboot.devices import Device, parse_device_line, parse_devices, parse_header


def test_parse_devices_tags_each_device_with_its_section(sample_listing) -> None:
    devices = parse_devices(sample_listing)

    assert [(d.name, d.os_version) for d in devices] == [
        ("iPhone 15", "iOS 17.2"),
        ("iPhone 15 Pro", "iOS 17.2"),
        ("iPad Pro (11-inch) (4th generation)", "iOS 17.2"),
        ("Apple Watch Series 9 (45mm)", "watchOS 10.2"),
        ("iPhone 8", "Unavailable: com.apple.CoreSimulator.SimRuntime.iOS-16-0"),
    ]


def test_parse_devices_single_header_yields_one_record_per_line() -> None:
    text = "\n".join([
        "-- iOS 18.0 --",
        "    iPhone 16 (A1) (Shutdown)",
        "    iPhone 16 Plus (A2) (Shutdown)",
        "    iPhone 16 Pro (A3) (Booted)",
    ])

    devices = parse_devices(text)

    assert len(devices) == 3
    assert {d.os_version for d in devices} == {"iOS 18.0"}
    assert devices[2] == Device(name="iPhone 16 Pro", udid="A3", os_version="iOS 18.0", status="Booted")


def test_parse_devices_drops_line_with_single_parenthesized_group() -> None:
    text = "\n".join([
        "-- iOS 17.0 --",
        "    iPhone 15 (Shutdown)",
        "    iPhone SE (3rd generation) (B1) (Shutdown)",
    ])

    devices = parse_devices(text)

    assert [d.name for d in devices] == ["iPhone SE (3rd generation)"]
    assert devices[0].udid == "B1"


def test_parse_devices_ignores_banner_blank_and_free_text_lines() -> None:
    text = "== Devices ==\n\nsome noise\n-- iOS 17.0 --\n\n    iPhone 15 (C1) (Booted)\n"

    devices = parse_devices(text)

    assert [d.udid for d in devices] == ["C1"]


def test_parse_devices_before_any_header_has_empty_version() -> None:
    devices = parse_devices("iPhone 15 (D1) (Shutdown)\n")

    assert devices[0].os_version == ""


def test_parse_devices_handles_crlf_line_endings() -> None:
    devices = parse_devices("-- iOS 17.0 --\r\n    iPhone 15 (E1) (Booted)\r\n")

    assert devices == [Device(name="iPhone 15", udid="E1", os_version="iOS 17.0", status="Booted")]


def test_parse_devices_empty_text() -> None:
    assert parse_devices("") == []


def test_parse_header_strips_dashes_and_whitespace() -> None:
    assert parse_header("-- iOS 17.2 --") == "iOS 17.2"
    assert parse_header("   --   tvOS 17.0   --  ") == "tvOS 17.0"
    assert parse_header("== Devices ==") is None
    assert parse_header("    iPhone 15 (A) (Booted)") is None


def test_parse_device_line_records_unavailable_reason(sample_listing) -> None:
    unavailable = [d for d in parse_devices(sample_listing) if d.unavailable_reason]

    assert len(unavailable) == 1
    assert unavailable[0].name == "iPhone 8"
    assert unavailable[0].status == "Shutdown"
    assert unavailable[0].unavailable_reason == "runtime profile not found"


def test_parse_device_line_keeps_multiword_status() -> None:
    device = parse_device_line("    iPhone 15 (F1) (Shutting Down)", "iOS 17.0")

    assert device is not None
    assert device.status == "Shutting Down"
    assert device.display_status == "Unknown"


def test_parse_device_line_rejects_identifier_with_spaces() -> None:
    assert parse_device_line("    iPhone 15 (not an id) (Booted)") is None


def test_device_status_properties() -> None:
    booted = Device("a", "1", "iOS", "Booted")
    shutdown = Device("b", "2", "iOS", "Shutdown")
    creating = Device("c", "3", "iOS", "Creating")

    assert booted.is_booted and not booted.is_shutdown
    assert shutdown.is_shutdown and not shutdown.is_booted
    assert (booted.display_status, shutdown.display_status, creating.display_status) == (
        "Booted", "Shutdown", "Unknown")
