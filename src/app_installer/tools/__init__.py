"""External command execution."""

from __future__ import annotations

from .runner import CommandExecutor, FakeCommandExecutor, ShellCommandExecutor

__all__ = ["CommandExecutor", "FakeCommandExecutor", "ShellCommandExecutor"]
