from __future__ import annotations

import getpass
import sys
import warnings
from typing import Callable, TextIO

InputFn = Callable[[str], str]
PasswordFn = Callable[[str], str]


class TerminalPrompter:
    """Question/answer primitives on the operator's terminal.

    No validation and no retries: whatever the operator types is returned.
    """

    def __init__(
        self,
        *,
        input_fn: InputFn | None = None,
        password_fn: PasswordFn | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self._input = input_fn or input
        self._password = password_fn or _getpass
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def writeln(self, line: str = "") -> None:
        print(_displayable(line), file=self.stream, flush=True)

    def ask_text(self, question: str, default: str = "") -> str:
        hint = f" ({default})" if default else ""
        answer = self._input(_displayable(f"{question}{hint}: ")).strip()
        if not answer:
            return default
        return answer

    def ask_password(self, question: str) -> str:
        return self._password(f"{question}: ").strip()

    def ask_confirm(self, question: str, default: bool = False) -> bool:
        answer = self.ask_text(f"{question} ({'Y/n' if default else 'y/N'})")
        if not answer:
            return default
        return answer.lower() == "y"


def _displayable(text: str) -> str:
    # lone surrogates (undecodable .env bytes) cannot be printed as-is
    return text.encode("utf-8", "replace").decode("utf-8")


def _getpass(prompt: str) -> str:
    # Without echo control getpass reads visibly and emits GetPassWarning.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", getpass.GetPassWarning)
        return getpass.getpass(prompt)
