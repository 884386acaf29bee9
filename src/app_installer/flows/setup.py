"""One-pass Laravel setup.

Every answer is prefilled from the existing env file, the collected values are
shown as a summary and written only after a final confirmation. The artisan
post-install commands (key, storage link, migrations) run afterwards.
"""

from __future__ import annotations

from typing import Sequence

from ..core.config import InstallerSettings
from ..core.types import ConfigItem
from ..envfile import EnvFileStore, EnvInitResult
from ..observability import get_logger, set_section
from ..project import has_reverb
from ..prompts import TerminalPrompter
from ..tools import CommandExecutor
from .defaults import default_db_port, laravel_debug, random_app_id, random_string

EXIT_DECLINED = 1
MASKED = "*********"

SUMMARY_LABELS = {
    "APP_NAME": "Application Name",
    "APP_ENV": "Application Environment",
    "APP_URL": "Application URL",
    "APP_DEBUG": "Application Debug",
    "APP_TIMEZONE": "Application Timezone",
    "LOG_CHANNEL": "Log Channel",
    "LOG_STACK": "Log Stack",
    "LOG_LEVEL": "Log Level",
    "DB_CONNECTION": "Database Connection",
    "DB_HOST": "Database Host",
    "DB_PORT": "Database Port",
    "DB_DATABASE": "Database Name",
    "DB_USERNAME": "Database Username",
    "DB_PASSWORD": "Database Password",
    "REVERB_APP_ID": "Reverb App ID",
    "REVERB_APP_KEY": "Reverb App Key",
    "REVERB_APP_SECRET": "Reverb App Secret",
}

SUMMARY_GROUPS = (
    ("APP_NAME", "APP_ENV", "APP_URL", "APP_DEBUG", "APP_TIMEZONE"),
    ("LOG_CHANNEL", "LOG_STACK", "LOG_LEVEL"),
    ("DB_CONNECTION", "DB_HOST", "DB_PORT", "DB_DATABASE", "DB_USERNAME", "DB_PASSWORD"),
    ("REVERB_APP_ID", "REVERB_APP_KEY", "REVERB_APP_SECRET"),
)

_SUMMARY_WIDTH = 25


class QuickSetup:
    def __init__(
        self,
        *,
        prompter: TerminalPrompter,
        store: EnvFileStore,
        executor: CommandExecutor,
        settings: InstallerSettings,
    ) -> None:
        self._prompter = prompter
        self._store = store
        self._executor = executor
        self._settings = settings
        self._log = get_logger("app_installer.setup")

    def _from_env(self, key: str, fallback: str) -> str:
        value = self._store.lookup(key, fallback)
        return fallback if value is None else value

    def application_items(self) -> list[ConfigItem]:
        env = self._from_env
        return [
            ConfigItem("APP_NAME", "Enter Application Name", env("APP_NAME", "Laravel")),
            ConfigItem("APP_ENV", "Enter Application Environment", env("APP_ENV", "production")),
            ConfigItem("APP_URL", "Enter Application URL", env("APP_URL", "http://localhost")),
            ConfigItem("APP_TIMEZONE", "Enter Application Timezone", env("APP_TIMEZONE", "UTC")),
            ConfigItem("LOG_CHANNEL", "Enter Log Channel", env("LOG_CHANNEL", "single")),
            ConfigItem("LOG_STACK", "Enter Log Stack", env("LOG_STACK", "daily")),
            ConfigItem("LOG_LEVEL", "Enter Log Level", env("LOG_LEVEL", "debug")),
            ConfigItem("DB_CONNECTION", "Enter Database Connection Name", env("DB_CONNECTION", "mysql")),
        ]

    def database_items(self) -> list[ConfigItem]:
        env = self._from_env
        return [
            ConfigItem("DB_HOST", "Enter Database Host", env("DB_HOST", "127.0.0.1")),
            ConfigItem(
                "DB_PORT",
                "Enter Database Port",
                lambda answers: default_db_port(answers.get("DB_CONNECTION", "")),
            ),
            ConfigItem("DB_DATABASE", "Enter Database Name", env("DB_DATABASE", "laravel")),
            ConfigItem("DB_USERNAME", "Enter Database Username", env("DB_USERNAME", "root")),
            ConfigItem("DB_PASSWORD", "Enter Database Password", password=True),
        ]

    def reverb_items(self) -> list[ConfigItem]:
        env = self._from_env
        return [
            ConfigItem("REVERB_APP_ID", "Enter Reverb App ID", env("REVERB_APP_ID", random_app_id())),
            ConfigItem("REVERB_APP_KEY", "Enter Reverb App Key", env("REVERB_APP_KEY", random_string(20))),
            ConfigItem("REVERB_APP_SECRET", "Enter Reverb App Secret", env("REVERB_APP_SECRET", random_string(20))),
        ]

    def _ask(self, items: Sequence[ConfigItem], answers: dict[str, str]) -> None:
        p = self._prompter
        for item in items:
            if item.password:
                answers[item.key] = p.ask_password(item.question)
            else:
                answers[item.key] = p.ask_text(item.question, item.resolve_default(answers))

    def collect(self) -> dict[str, str]:
        answers: dict[str, str] = {}
        self._ask(self.application_items(), answers)
        if answers["DB_CONNECTION"] != "sqlite":
            self._ask(self.database_items(), answers)
        answers["APP_DEBUG"] = laravel_debug(answers["APP_ENV"])
        if has_reverb(self._settings.composer_path):
            self._ask(self.reverb_items(), answers)
        return answers

    def print_summary(self, answers: dict[str, str]) -> None:
        p = self._prompter
        sqlite = answers.get("DB_CONNECTION") == "sqlite"
        p.writeln("------")
        for group in SUMMARY_GROUPS:
            if group[0].startswith("REVERB_") and group[0] not in answers:
                continue
            for key in group:
                if sqlite and key.startswith("DB_") and key != "DB_CONNECTION":
                    value = "N/A"
                elif key == "DB_PASSWORD":
                    value = MASKED
                else:
                    value = answers.get(key, "")
                p.writeln(f"{SUMMARY_LABELS[key]:<{_SUMMARY_WIDTH}}: {value}")
            p.writeln("------")

    def write(self, answers: dict[str, str]) -> list[str]:
        """Upsert every answer; returns the keys that could not be written."""

        failed: list[str] = []
        for key, value in answers.items():
            if not self._store.upsert(key, value):
                failed.append(key)
        return failed

    def run(self) -> int:
        p = self._prompter
        env_name = self._store.path.name

        if not self._store.exists():
            p.writeln(f"No {env_name} file found.")
            template = self._settings.env_template_path
            if template.is_file():
                p.writeln(f"Creating {env_name} file from {template.name}...")
                if self._store.initialize(template=template) is EnvInitResult.FROM_TEMPLATE:
                    p.writeln(f"{env_name} file created successfully from {template.name}!")
            else:
                p.writeln(f"No {template.name} file found. Creating a basic {env_name} file...")

        if not self._store.exists():
            p.writeln(f"No {env_name} file found. Skipping environment configuration.")

        set_section("questions")
        answers = self.collect()
        self.print_summary(answers)

        p.writeln("This script will replace the above values in all relevant variables in the project environment files.")
        if not p.ask_confirm("Modify files?", True):
            self._log.info("setup_declined")
            return EXIT_DECLINED

        set_section("write")
        p.writeln(f"Updating {env_name} file...")
        failed = self.write(answers)
        if failed:
            p.writeln(f"Failed to write: {', '.join(failed)}")
        p.writeln(f"{env_name} file has been updated!")

        set_section("post_install")
        self.post_install()
        set_section(None)
        return 0

    def post_install(self) -> None:
        p = self._prompter
        commands = self._settings.commands
        run = self._executor.run

        node = commands.node_package_manager
        if p.ask_confirm(f"Execute `{node} install`?"):
            run(f"{node} install")

        if p.ask_confirm(f"Execute `{commands.composer} install --no-dev`?", True):
            run(f"{commands.composer} install --no-dev --no-interaction")
        else:
            run(f"{commands.composer} install --no-interaction")

        artisan = f"{commands.php} artisan"
        run(f"{artisan} key:generate")
        # refresh the public/storage symlink
        run(f"{artisan} storage:unlink")
        run(f"{artisan} storage:link")
        run(f"{artisan} migrate --force --no-interaction")
