"""Line-oriented model of a `.env` style file.

Every line is kept verbatim except assignments that get rewritten. Keys are
matched literally against the text before the first `=` of a line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

__all__ = [
    "EnvDocument",
    "EnvLine",
    "format_value",
    "unquote",
    "validate_key",
]


def validate_key(key: str) -> str:
    if not key:
        raise ValueError("env key must be a non-empty string")
    if "=" in key or any(ch.isspace() for ch in key):
        raise ValueError(f"invalid env key: {key!r}")
    return key


def format_value(value: str, *, force_quote: bool = False) -> str:
    """Render a value for the right-hand side of `KEY=VALUE`.

    Values holding whitespace or `#` are double-quoted with inner double quotes
    escaped. So are values already wrapped in quotes, otherwise `unquote` would
    strip them on the way back.
    """

    if "\n" in value or "\r" in value:
        raise ValueError("env values cannot span lines")
    if force_quote or "#" in value or any(ch.isspace() for ch in value) or _is_quoted(value):
        return '"' + value.replace('"', '\\"') + '"'
    return value


def _is_quoted(raw: str) -> bool:
    return len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in {'"', "'"}


def unquote(raw: str) -> str:
    """Strip one layer of matching surrounding quotes."""

    if _is_quoted(raw):
        inner = raw[1:-1]
        if raw[0] == '"':
            inner = inner.replace('\\"', '"')
        return inner
    return raw


@dataclass(slots=True)
class EnvLine:
    text: str
    key: str | None = None

    @classmethod
    def parse(cls, text: str) -> EnvLine:
        if not text or text.lstrip().startswith("#") or "=" not in text:
            return cls(text=text)
        key, _, _ = text.partition("=")
        if not key or any(ch.isspace() for ch in key):
            return cls(text=text)
        return cls(text=text, key=key)

    @property
    def value(self) -> str | None:
        if self.key is None:
            return None
        return self.text[len(self.key) + 1 :]


class EnvDocument:
    """Ordered key/value document backed by the original lines."""

    def __init__(self, lines: list[EnvLine] | None = None) -> None:
        self._lines: list[EnvLine] = list(lines or [])

    @classmethod
    def parse(cls, text: str) -> EnvDocument:
        # Only "\n" (with an optional "\r") ends a line, unlike str.splitlines().
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls([EnvLine.parse(line.removesuffix("\r")) for line in lines])

    def render(self) -> str:
        if not self._lines:
            return ""
        return "\n".join(line.text for line in self._lines) + "\n"

    def get(self, key: str) -> str | None:
        """Raw value text of the last assignment of `key`."""

        found: str | None = None
        for line in self._lines:
            if line.key == key:
                found = line.value
        return found

    def set(self, key: str, raw_value: str) -> None:
        """Replace the first assignment in place, or append one."""

        validate_key(key)
        text = f"{key}={raw_value}"
        replaced = False
        kept: list[EnvLine] = []
        for line in self._lines:
            if line.key == key:
                if replaced:
                    continue
                kept.append(EnvLine(text=text, key=key))
                replaced = True
            else:
                kept.append(line)
        if not replaced:
            kept.append(EnvLine(text=text, key=key))
        self._lines = kept

    def keys(self) -> list[str]:
        seen: dict[str, None] = {}
        for line in self._lines:
            if line.key is not None:
                seen.setdefault(line.key, None)
        return list(seen)

    def lines(self) -> list[str]:
        return [line.text for line in self._lines]

    def __contains__(self, key: object) -> bool:
        return any(line.key == key for line in self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._lines)
