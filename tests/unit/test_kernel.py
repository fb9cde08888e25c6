from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from simboot.kernel import CommandResult, Kernel


def test_kernel_simctl_builds_argument_list(monkeypatch) -> None:
    calls: list[dict] = []

    def fake_run(cmd, **kwargs):
        calls.append({"cmd": cmd, "kwargs": kwargs})
        return SimpleNamespace(stdout=b"out", stderr=b"", returncode=0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    res = Kernel("/usr/bin/xcrun", timeout=7).simctl("list", "devices")

    assert calls[0]["cmd"] == ["/usr/bin/xcrun", "simctl", "list", "devices"]
    assert calls[0]["kwargs"]["timeout"] == 7
    assert calls[0]["kwargs"]["stdin"] is subprocess.DEVNULL
    assert "shell" not in calls[0]["kwargs"]
    assert res.ok and res.spawned
    assert res.stdout_text() == "out"


def test_kernel_open_app(fake_run) -> None:
    Kernel(open_exe="open").open_app("Simulator")

    assert fake_run.calls == [["open", "-a", "Simulator"]]


def test_kernel_spawn_failure_is_a_result_not_an_exception(fake_run) -> None:
    fake_run.fail_to_spawn(["xcrun", "simctl", "list", "devices"])

    res = Kernel().simctl("list", "devices")

    assert not res.ok
    assert not res.spawned
    assert "FileNotFoundError" in res.spawn_error


def test_kernel_timeout_is_flagged(monkeypatch) -> None:
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output=b"partial")

    monkeypatch.setattr(subprocess, "run", fake_run)

    res = Kernel(timeout=1).simctl("boot", "X")

    assert res.timed_out
    assert not res.ok
    assert res.stdout == b"partial"


def test_kernel_rejects_shell_strings() -> None:
    with pytest.raises(TypeError):
        Kernel().run("xcrun simctl list")


def test_kernel_env_overrides_are_merged(monkeypatch) -> None:
    seen: dict = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return SimpleNamespace(stdout=b"", stderr=b"", returncode=0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    monkeypatch.setenv("PATH", "/usr/bin")

    Kernel(env={"DEVELOPER_DIR": "/Applications/Xcode.app"}).simctl("list", "devices")

    assert seen["env"]["DEVELOPER_DIR"] == "/Applications/Xcode.app"
    assert seen["env"]["PATH"] == "/usr/bin"


def test_command_result_decoding() -> None:
    res = CommandResult(args=["x"], stdout=b"\xff\xfe", stderr=b"bad \xff", returncode=1, duration_sec=0.0)

    with pytest.raises(UnicodeDecodeError):
        res.stdout_text()
    assert res.stderr_text() == "bad �"
    assert res.command_line == "x"
