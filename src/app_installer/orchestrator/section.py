from __future__ import annotations

from typing import Sequence

from ..core.types import ConfigItem, SectionResult
from ..envfile import EnvFileStore
from ..observability import get_logger, set_section
from ..prompts import TerminalPrompter

CONFIRM_QUESTION = "Are all the above settings correct?"


class SectionOrchestrator:
    """Ask → confirm → persist loop for named groups of env settings."""

    def __init__(self, *, prompter: TerminalPrompter, store: EnvFileStore) -> None:
        self._prompter = prompter
        self._store = store
        self._answers: dict[str, str] = {}
        self._log = get_logger("app_installer.orchestrator")

    @property
    def answers(self) -> dict[str, str]:
        """Every confirmed answer so far, across sections."""

        return dict(self._answers)

    def configure(self, title: str, items: Sequence[ConfigItem]) -> SectionResult:
        p = self._prompter
        set_section(title)

        p.writeln()
        p.writeln(f"Setting up {title}...")
        p.writeln()

        rounds = 0
        while True:
            rounds += 1
            values: dict[str, str] = {}
            for item in items:
                if item.password:
                    values[item.key] = p.ask_password(item.question)
                else:
                    context = {**self._answers, **values}
                    values[item.key] = p.ask_text(item.question, item.resolve_default(context))

            if p.ask_confirm(CONFIRM_QUESTION):
                break
            self._log.info("section_declined", title=title, round=rounds)

        p.writeln(f"Updating {title} in {self._store.path.name} file...")

        result = SectionResult(title=title, values=values)
        for item in items:
            if not self._store.upsert(item.key, values[item.key], quote=item.quote):
                result.failed_keys.append(item.key)
                p.writeln(f"Failed to write {item.key} to {self._store.path}.")
        self._answers.update(values)

        self._log.info(
            "section_done",
            title=title,
            rounds=rounds,
            keys=list(values),
            failed_keys=result.failed_keys,
        )
        p.writeln(f"{title} updated successfully!")
        set_section(None)
        return result

    def apply(self, key: str, value: str, *, quote: bool = False) -> bool:
        """Persist a single derived value outside of a section."""

        ok = self._store.upsert(key, value, quote=quote)
        if ok:
            self._answers[key] = value
        else:
            self._prompter.writeln(f"Failed to write {key} to {self._store.path}.")
        return ok
