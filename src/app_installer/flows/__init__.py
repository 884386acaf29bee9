"""Installer flows."""

from __future__ import annotations

from .install import GuidedInstaller
from .setup import EXIT_DECLINED, QuickSetup

__all__ = ["EXIT_DECLINED", "GuidedInstaller", "QuickSetup"]
