#!/usr/bin/env python3
# simboot/kernel.py
"""
External command interface.

A small, well-typed facade for running `xcrun simctl` and `open`:
- argument lists only, never a shell string;
- stdout/stderr captured as bytes and decoded by the caller's rules;
- spawn failures and timeouts folded into a CommandResult instead of raising.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

# ---- Public result type -----------------------------------------------------


@dataclass(slots=True)
class CommandResult:
    """Normalized result for command execution."""
    args: List[str]
    stdout: bytes
    stderr: bytes
    returncode: int
    duration_sec: float
    timed_out: bool = False
    spawn_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.spawn_error is None

    @property
    def spawned(self) -> bool:
        """False when the executable could not be started at all."""
        return self.spawn_error is None

    def stdout_text(self, encoding: str = "utf-8") -> str:
        """Strict decode; raises UnicodeDecodeError on invalid bytes."""
        return self.stdout.decode(encoding)

    def stderr_text(self, encoding: str = "utf-8") -> str:
        """Lossy decode, suitable for error messages."""
        return self.stderr.decode(encoding, errors="replace")

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)


# ---- Kernel -----------------------------------------------------------------


class Kernel:
    """
    Thin interface to run the simulator tooling.

    Notes:
        - Avoids shell injection by passing argument lists to subprocess.
        - stdin is always closed so a prompting tool cannot hang the CLI.
    """

    def __init__(
        self,
        xcrun: str = "xcrun",
        open_exe: str = "open",
        *,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Args:
            xcrun: Executable name or path used for `simctl`.
            open_exe: Executable name or path used to launch apps.
            timeout: Seconds before terminating each command (None = wait).
            env: Environment overrides merged over os.environ.
        """
        self.xcrun = xcrun
        self.open_exe = open_exe
        self.timeout = timeout
        self.env = dict(env) if env else None

    # ---- Runners ------------------------------------------------------------

    def simctl(self, *args: str) -> CommandResult:
        """
        Run `xcrun simctl <args...>`.

        Examples:
            simctl("list", "devices")
            simctl("boot", udid)
        """
        return self.run([self.xcrun, "simctl", *args])

    def open_app(self, app_name: str) -> CommandResult:
        """Run `open -a <app_name>`."""
        return self.run([self.open_exe, "-a", app_name])

    def run(self, command: Sequence[str]) -> CommandResult:
        """Run an argument list and return a normalized result."""
        if isinstance(command, str):
            raise TypeError("command must be an argument list, not a string")
        args = [str(a) for a in command]
        result = self._exec(args)
        log.debug(
            "%s -> exit=%s in %.2fs",
            result.command_line, result.returncode, result.duration_sec,
        )
        return result

    # ---- Internals ----------------------------------------------------------

    def _exec(self, args: List[str]) -> CommandResult:
        start = time.perf_counter()
        try:
            completed = subprocess.run(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                env={**os.environ, **self.env} if self.env else None,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            return CommandResult(
                args=args,
                stdout=exc.stdout or b"",
                stderr=exc.stderr or b"Process timed out.",
                returncode=1,
                duration_sec=time.perf_counter() - start,
                timed_out=True,
            )
        except OSError as exc:
            # FileNotFoundError, PermissionError, ...
            return CommandResult(
                args=args,
                stdout=b"",
                stderr=str(exc).encode("utf-8", errors="replace"),
                returncode=1,
                duration_sec=time.perf_counter() - start,
                spawn_error=f"{type(exc).__name__}: {exc}",
            )

        return CommandResult(
            args=args,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
            returncode=completed.returncode,
            duration_sec=time.perf_counter() - start,
        )
