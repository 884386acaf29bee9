from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable, Iterable

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if src.exists():
        sys.path.insert(0, str(src))


class ScriptedOperator:
    """Feeds canned answers to a TerminalPrompter and records the questions."""

    def __init__(self, answers: Iterable[str], passwords: Iterable[str] = ()) -> None:
        self._answers = list(answers)
        self._passwords = list(passwords)
        self.prompts: list[str] = []
        self.password_prompts: list[str] = []
        self.stream = io.StringIO()

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            raise AssertionError(f"unexpected prompt: {prompt!r}")
        return self._answers.pop(0)

    def password(self, prompt: str) -> str:
        self.password_prompts.append(prompt)
        if not self._passwords:
            raise AssertionError(f"unexpected password prompt: {prompt!r}")
        return self._passwords.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._answers) + len(self._passwords)

    @property
    def output(self) -> str:
        return self.stream.getvalue()

    def prompter(self):
        from app_installer.prompts import TerminalPrompter

        return TerminalPrompter(input_fn=self.input, password_fn=self.password, stream=self.stream)


@pytest.fixture
def operator() -> Callable[..., ScriptedOperator]:
    def make(answers: Iterable[str] = (), passwords: Iterable[str] = ()) -> ScriptedOperator:
        return ScriptedOperator(answers, passwords)

    return make
