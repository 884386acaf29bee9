"""Section orchestration."""

from __future__ import annotations

from .section import CONFIRM_QUESTION, SectionOrchestrator

__all__ = ["CONFIRM_QUESTION", "SectionOrchestrator"]
