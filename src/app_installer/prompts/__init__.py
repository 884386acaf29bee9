"""Operator prompts."""

from __future__ import annotations

from .terminal import TerminalPrompter

__all__ = ["TerminalPrompter"]
