from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

DefaultFactory = Callable[[Mapping[str, str]], str]


@dataclass(frozen=True, slots=True)
class ConfigItem:
    """One prompt of a configuration section.

    `default` is either a literal or a callable receiving the answers confirmed
    so far (across sections) and returning the literal.
    """

    key: str
    question: str
    default: str | DefaultFactory = ""
    password: bool = False
    quote: bool = False

    def resolve_default(self, answers: Mapping[str, str]) -> str:
        if callable(self.default):
            return str(self.default(answers))
        return self.default


@dataclass(slots=True)
class SectionResult:
    title: str
    values: dict[str, str] = field(default_factory=dict)
    failed_keys: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_keys

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.values
