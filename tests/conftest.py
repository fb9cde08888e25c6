from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_on_path()


SAMPLE_LISTING = """\
== Devices ==
-- iOS 17.2 --
    iPhone 15 (11111111-1111-1111-1111-111111111111) (Shutdown)
    iPhone 15 Pro (22222222-2222-2222-2222-222222222222) (Booted)
    iPad Pro (11-inch) (4th generation) (33333333-3333-3333-3333-333333333333) (Shutdown)
-- watchOS 10.2 --
    Apple Watch Series 9 (45mm) (44444444-4444-4444-4444-444444444444) (Shutdown)
-- Unavailable: com.apple.CoreSimulator.SimRuntime.iOS-16-0 --
    iPhone 8 (55555555-5555-5555-5555-555555555555) (Shutdown) (unavailable, runtime profile not found)
"""


class FakeSubprocess:
    """Records subprocess.run calls and answers from a table keyed by argv."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.responses: dict[tuple[str, ...], SimpleNamespace | BaseException] = {}

    def respond(self, argv, *, stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> None:
        self.responses[tuple(argv)] = SimpleNamespace(
            stdout=stdout, stderr=stderr, returncode=returncode)

    def fail_to_spawn(self, argv, exc: BaseException | None = None) -> None:
        self.responses[tuple(argv)] = exc or FileNotFoundError(2, "No such file or directory", argv[0])

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        answer = self.responses.get(tuple(cmd))
        if answer is None:
            return SimpleNamespace(stdout=b"", stderr=b"", returncode=0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def fake_run(monkeypatch) -> FakeSubprocess:
    fake = FakeSubprocess()
    fake.respond(["xcrun", "simctl", "list", "devices"], stdout=SAMPLE_LISTING.encode("utf-8"))
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep user config files and SIMBOOT_* variables out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("SIMBOOT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    return tmp_path


@pytest.fixture
def sample_listing() -> str:
    return SAMPLE_LISTING
