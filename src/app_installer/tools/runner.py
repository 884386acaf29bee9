from __future__ import annotations

import subprocess
import time
from typing import Mapping, Protocol

from ..observability import add_error, get_logger


class CommandExecutor(Protocol):
    def run(self, command: str) -> str: ...


class ShellCommandExecutor:
    """Runs commands through the host shell and returns their stdout.

    Blocking, no timeout. A failing command is logged and whatever it printed
    is returned; callers never see an exception.
    """

    def __init__(self, *, cwd: str | None = None) -> None:
        self._cwd = cwd
        self._log = get_logger("app_installer.runner")

    def run(self, command: str) -> str:
        t0 = time.perf_counter()
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                cwd=self._cwd,
            )
        except OSError as e:
            self._log.error("command_spawn_failed", command=command, error=str(e))
            add_error(f"spawn {command!r}: {e}")
            return ""

        latency_ms = round((time.perf_counter() - t0) * 1000, 2)
        if result.returncode != 0:
            self._log.warning(
                "command_failed",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
                latency_ms=latency_ms,
            )
        else:
            self._log.info("command_done", command=command, latency_ms=latency_ms)
        return (result.stdout or "").rstrip()


class FakeCommandExecutor:
    """Offline stub: records commands instead of running them."""

    def __init__(self, outputs: Mapping[str, str] | None = None) -> None:
        self.commands: list[str] = []
        self._outputs = dict(outputs or {})
        self._log = get_logger("app_installer.runner")

    def run(self, command: str) -> str:
        self.commands.append(command)
        self._log.info("command_skipped", command=command)
        return self._outputs.get(command, "").rstrip()
