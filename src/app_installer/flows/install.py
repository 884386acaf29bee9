"""Guided installer for Laravel and vanilla PHP applications.

Laravel projects (composer.json requires laravel/framework) walk through the
application, database and optional mail/cache/queue/S3/deployment sections.
Other projects get a short application + database setup. Both finish with the
npm and composer installs.
"""

from __future__ import annotations

from pathlib import Path

from ..core.config import InstallerSettings
from ..core.types import ConfigItem
from ..envfile import EnvFileStore, EnvInitResult
from ..observability import get_logger
from ..orchestrator import SectionOrchestrator
from ..project import is_laravel
from ..prompts import TerminalPrompter
from ..tools import CommandExecutor
from .defaults import default_db_port, generate_app_key, laravel_debug, vanilla_debug

LARAVEL_ENV_HEADER = "# Laravel Environment Configuration\n\n"
VANILLA_ENV_HEADER = "# Environment Configuration\n\n"

LARAVEL_APP_ITEMS = (
    ConfigItem("APP_NAME", "Enter Application Name", "Laravel", quote=True),
    ConfigItem("APP_ENV", "Enter Application Environment (local/production/staging)", "local"),
    ConfigItem("APP_URL", "Enter Application URL", "http://localhost"),
)

DB_CONNECTION_ITEMS = (
    ConfigItem("DB_CONNECTION", "Enter Database Connection Name (mysql/pgsql/sqlite/sqlsrv)", "mysql"),
)

SQLITE_ITEMS = (
    ConfigItem("DB_DATABASE", "Enter SQLite Database Path (relative to database directory)"),
)

MAIL_ITEMS = (
    ConfigItem("MAIL_MAILER", "Enter Mail Mailer (smtp/sendmail/mailgun/etc)", "smtp"),
    ConfigItem("MAIL_HOST", "Enter Mail Host", "smtp.mailtrap.io"),
    ConfigItem("MAIL_PORT", "Enter Mail Port", "2525"),
    ConfigItem("MAIL_USERNAME", "Enter Mail Username"),
    ConfigItem("MAIL_PASSWORD", "Enter Mail Password", password=True),
    ConfigItem("MAIL_ENCRYPTION", "Enter Mail Encryption (tls/ssl/null)", "tls"),
    ConfigItem("MAIL_FROM_ADDRESS", "Enter Mail From Address", "hello@example.com"),
    ConfigItem(
        "MAIL_FROM_NAME",
        "Enter Mail From Name",
        lambda answers: answers.get("APP_NAME", "Laravel"),
        quote=True,
    ),
)

CACHE_ITEMS = (
    ConfigItem("CACHE_DRIVER", "Enter Cache Driver (file/redis/memcached/database/array)", "file"),
)

REDIS_ITEMS = (
    ConfigItem("REDIS_HOST", "Enter Redis Host", "127.0.0.1"),
    ConfigItem("REDIS_PASSWORD", "Enter Redis Password (leave empty if none)", password=True),
    ConfigItem("REDIS_PORT", "Enter Redis Port", "6379"),
)

SESSION_ITEMS = (
    ConfigItem("SESSION_DRIVER", "Enter Session Driver (file/cookie/database/redis/memcached/array)", "file"),
    ConfigItem("SESSION_LIFETIME", "Enter Session Lifetime (in minutes)", "120"),
)

QUEUE_ITEMS = (
    ConfigItem("QUEUE_CONNECTION", "Enter Queue Connection (sync/database/redis/beanstalkd/sqs)", "sync"),
)

QUEUE_WORKER_ITEMS = (
    ConfigItem("QUEUE_WORKER_TIMEOUT", "Enter Queue Worker Timeout (in seconds)", "60"),
    ConfigItem("QUEUE_WORKER_SLEEP", "Enter Queue Worker Sleep (in seconds)", "3"),
    ConfigItem("QUEUE_WORKER_TRIES", "Enter Queue Worker Tries", "1"),
)

AWS_ITEMS = (
    ConfigItem("AWS_ACCESS_KEY_ID", "Enter AWS Access Key ID"),
    ConfigItem("AWS_SECRET_ACCESS_KEY", "Enter AWS Secret Access Key", password=True),
    ConfigItem("AWS_DEFAULT_REGION", "Enter AWS Default Region", "us-east-1"),
    ConfigItem("AWS_BUCKET", "Enter AWS S3 Bucket Name"),
    ConfigItem("AWS_URL", "Enter AWS URL (optional)"),
    ConfigItem("AWS_ENDPOINT", "Enter AWS Endpoint (optional, for non-AWS S3 compatible services)"),
    ConfigItem("AWS_USE_PATH_STYLE_ENDPOINT", "Use path-style endpoint? (true/false)", "false"),
)

LOGGING_ITEMS = (
    ConfigItem("LOG_CHANNEL", "Enter Log Channel (stack/single/daily/slack/stderr)", "stack"),
    ConfigItem(
        "LOG_LEVEL",
        "Enter Log Level (debug/info/notice/warning/error/critical/alert/emergency)",
        "debug",
    ),
)

CORS_ITEMS = (
    ConfigItem("CORS_ALLOWED_ORIGINS", "Enter CORS Allowed Origins (comma-separated, * for all)", "*"),
)

PROXY_ITEMS = (
    ConfigItem("TRUSTED_PROXIES", "Enter Trusted Proxies (comma-separated, * for all)", "*"),
)

VANILLA_APP_ITEMS = (
    ConfigItem("APP_NAME", "Enter Application Name", "MyApp"),
    ConfigItem("APP_ENV", "Enter Environment (production/development)", "development"),
)

VANILLA_DB_ITEMS = (
    ConfigItem("DB_HOST", "Enter Database Host", "localhost"),
    ConfigItem("DB_NAME", "Enter Database Name", "myapp"),
    ConfigItem("DB_USER", "Enter Database Username", "root"),
    ConfigItem("DB_PASS", "Enter Database Password", password=True),
)


def database_items(connection: str) -> tuple[ConfigItem, ...]:
    if connection == "sqlite":
        return SQLITE_ITEMS
    return (
        ConfigItem("DB_HOST", "Enter Database Host", "127.0.0.1"),
        ConfigItem("DB_PORT", "Enter Database Port", default_db_port(connection)),
        ConfigItem("DB_DATABASE", "Enter Database Name", "laravel"),
        ConfigItem("DB_USERNAME", "Enter Database Username", "root"),
        ConfigItem("DB_PASSWORD", "Enter Database Password", password=True),
    )


class GuidedInstaller:
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
        self._sections = SectionOrchestrator(prompter=prompter, store=store)
        self._log = get_logger("app_installer.install")

    @property
    def answers(self) -> dict[str, str]:
        return self._sections.answers

    def run(self) -> int:
        p = self._prompter
        p.writeln("------------------")

        laravel = is_laravel(self._settings.composer_path)
        self._log.info("install_started", laravel=laravel, project_dir=str(self._settings.project_dir))
        if laravel:
            self._configure_laravel()
        else:
            self._configure_vanilla()

        p.writeln()
        self._install_dependencies()

        p.writeln()
        p.writeln("Installation completed successfully!")
        return 0

    def _init_env(self, header: str, *, template: Path | None = None) -> None:
        """Create the env file when missing, from `template` if given and present."""

        p = self._prompter
        if self._store.exists():
            return

        env_name = self._store.path.name
        p.writeln(f"No {env_name} file found.")
        if template is not None and template.is_file():
            p.writeln(f"Creating {env_name} file from {template.name}...")
        else:
            p.writeln(f"Creating a basic {env_name} file...")

        outcome = self._store.initialize(template=template, basic_content=header)
        if outcome is EnvInitResult.FROM_TEMPLATE and template is not None:
            p.writeln(f"{env_name} file created successfully from {template.name}!")
        elif outcome is EnvInitResult.BASIC:
            p.writeln(f"Basic {env_name} file created successfully!")
        else:
            p.writeln(f"Failed to create {env_name} file!")

    def _configure_laravel(self) -> None:
        p = self._prompter
        sections = self._sections

        self._init_env(LARAVEL_ENV_HEADER, template=self._settings.env_template_path)
        p.writeln("Web App is using Laravel.")

        app = sections.configure("Laravel application environment", LARAVEL_APP_ITEMS)
        sections.apply("APP_DEBUG", laravel_debug(app["APP_ENV"]))

        if p.ask_confirm("Would you like to generate a new APP_KEY?", False):
            p.writeln("Generating new APP_KEY...")
            if sections.apply("APP_KEY", generate_app_key()):
                p.writeln(f"Generated APP_KEY and set it in {self._store.path.name} file.")

        p.writeln("Application configuration updated successfully!")
        p.writeln()

        db = sections.configure("Laravel Database Connection", DB_CONNECTION_ITEMS)
        connection = db["DB_CONNECTION"]
        if connection == "sqlite":
            p.writeln("Using SQLite database - host, port, username and password configuration skipped.")
        sections.configure("Laravel Database Configuration", database_items(connection))
        p.writeln("Database configuration updated successfully!")

        if p.ask_confirm("Would you like to configure mail settings?", False):
            sections.configure("Laravel Mail configuration", MAIL_ITEMS)

        if p.ask_confirm("Would you like to configure cache and session settings?", False):
            cache = sections.configure("Laravel Cache configuration", CACHE_ITEMS)
            if cache["CACHE_DRIVER"] == "redis":
                redis = sections.configure("Redis configuration", REDIS_ITEMS)
                if not redis["REDIS_PASSWORD"]:
                    sections.apply("REDIS_PASSWORD", "null")
            sections.configure("Laravel Session configuration", SESSION_ITEMS)

        if p.ask_confirm("Would you like to configure queue settings?", False):
            queue = sections.configure("Laravel Queue configuration", QUEUE_ITEMS)
            if queue["QUEUE_CONNECTION"] != "sync":
                sections.configure("Queue Worker configuration", QUEUE_WORKER_ITEMS)

        if p.ask_confirm("Would you like to configure AWS S3 storage?", False):
            sections.configure("AWS S3 Storage configuration", AWS_ITEMS)
            if sections.apply("FILESYSTEM_DISK", "s3"):
                p.writeln("Filesystem disk set to s3.")

        if p.ask_confirm("Would you like to configure additional deployment settings?", False):
            sections.configure("Logging configuration", LOGGING_ITEMS)
            sections.configure("CORS configuration", CORS_ITEMS)
            sections.configure("Trusted Proxies configuration", PROXY_ITEMS)
            if p.ask_confirm("Force HTTPS in production?", True):
                if sections.apply("FORCE_HTTPS", "true"):
                    p.writeln("HTTPS will be forced in production.")

        p.writeln()
        p.writeln("Laravel environment configuration completed successfully!")

    def _configure_vanilla(self) -> None:
        p = self._prompter
        sections = self._sections

        p.writeln("Web App is using vanilla PHP.")
        # vanilla PHP projects always start from the basic file
        self._init_env(VANILLA_ENV_HEADER)
        p.writeln("Setting up environment variables...")

        app = sections.configure("Application configuration", VANILLA_APP_ITEMS)
        debug = vanilla_debug(app["APP_ENV"])
        sections.apply("APP_DEBUG", debug)
        p.writeln(f"APP_DEBUG set to {debug} based on environment.")

        sections.configure("Database configuration", VANILLA_DB_ITEMS)
        p.writeln("Environment variables updated successfully!")

    def _install_dependencies(self) -> None:
        p = self._prompter
        commands = self._settings.commands

        if self._settings.package_json_path.is_file() and p.ask_confirm(
            "Would you like to run npm install for frontend dependencies?", True
        ):
            node = p.ask_text("Package Manager (npm/yarn/pnpm)", commands.node_package_manager)
            p.writeln(f"Running {node} install...")
            self._executor.run(f"{node} install")
            p.writeln(f"{node} install completed.")
            p.writeln()

        without_dev = p.ask_confirm("Would you like to run composer install without dev dependencies?", True)
        p.writeln("Running composer install...")
        if without_dev:
            self._executor.run(f"{commands.composer} install --no-dev --no-interaction")
        else:
            self._executor.run(f"{commands.composer} install --no-interaction")
