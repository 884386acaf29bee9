from __future__ import annotations

import json
from pathlib import Path

from app_installer.core.config import InstallerSettings
from app_installer.envfile import EnvFileStore
from app_installer.flows import GuidedInstaller
from app_installer.tools import FakeCommandExecutor


def _laravel_project(tmp_path: Path) -> None:
    (tmp_path / "composer.json").write_text(
        json.dumps({"require": {"php": "^8.2", "laravel/framework": "^11.0"}}),
        encoding="utf-8",
    )


def _installer(tmp_path: Path, op) -> tuple[GuidedInstaller, EnvFileStore, FakeCommandExecutor]:
    settings = InstallerSettings(project_dir=tmp_path)
    store = EnvFileStore(settings.env_path)
    executor = FakeCommandExecutor()
    installer = GuidedInstaller(prompter=op.prompter(), store=store, executor=executor, settings=settings)
    return installer, store, executor


def test_laravel_install_with_mail_cache_and_redis(tmp_path: Path, operator) -> None:
    _laravel_project(tmp_path)
    (tmp_path / ".env.example").write_text("# example\nAPP_NAME=Template\nAPP_KEY=\n", encoding="utf-8")
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")

    op = operator(
        answers=[
            # application
            "Acme Shop", "production", "", "y",
            # APP_KEY
            "y",
            # database connection + details
            "pgsql", "y",
            "", "", "shop", "", "y",
            # mail
            "y", "", "", "", "mailer", "", "", "", "y",
            # cache -> redis -> session
            "y", "redis", "y",
            "", "", "y",
            "", "", "y",
            # queue, s3, deployment
            "", "", "",
            # npm + package manager, composer without dev
            "", "pnpm", "",
        ],
        passwords=["pg-secret", "mail-secret", ""],
    )
    installer, store, executor = _installer(tmp_path, op)

    assert installer.run() == 0
    assert op.remaining == 0

    text = (tmp_path / ".env").read_text(encoding="utf-8")
    assert text.startswith("# example\nAPP_NAME=\"Acme Shop\"\nAPP_KEY=base64:")
    assert store.lookup("APP_ENV") == "production"
    assert store.lookup("APP_URL") == "http://localhost"
    assert store.lookup("APP_DEBUG") == "false"
    assert store.lookup("DB_CONNECTION") == "pgsql"
    assert store.lookup("DB_PORT") == "5432"
    assert store.lookup("DB_DATABASE") == "shop"
    assert store.lookup("DB_PASSWORD") == "pg-secret"
    assert store.lookup("MAIL_FROM_NAME") == "Acme Shop"
    assert 'MAIL_FROM_NAME="Acme Shop"' in text
    assert store.lookup("MAIL_PASSWORD") == "mail-secret"
    assert store.lookup("CACHE_DRIVER") == "redis"
    assert store.lookup("REDIS_PASSWORD") == "null"
    assert store.lookup("SESSION_LIFETIME") == "120"
    assert store.lookup("QUEUE_CONNECTION") is None
    assert text.count("APP_NAME=") == 1

    assert executor.commands == ["pnpm install", "composer install --no-dev --no-interaction"]
    assert "Web App is using Laravel." in op.output
    assert "Installation completed successfully!" in op.output


def test_laravel_sqlite_install_creates_basic_env(tmp_path: Path, operator) -> None:
    _laravel_project(tmp_path)

    op = operator(
        answers=[
            "", "", "", "y",
            "",
            "sqlite", "y",
            "database/database.sqlite", "y",
            "", "", "", "", "",
            "n",
        ]
    )
    installer, store, executor = _installer(tmp_path, op)

    assert installer.run() == 0
    assert op.remaining == 0

    text = (tmp_path / ".env").read_text(encoding="utf-8")
    assert text.startswith("# Laravel Environment Configuration\n\nAPP_NAME=\"Laravel\"\n")
    assert store.lookup("APP_DEBUG") == "true"
    assert store.lookup("APP_KEY") is None
    assert store.lookup("DB_DATABASE") == "database/database.sqlite"
    assert store.lookup("DB_HOST") is None
    assert "host, port, username and password configuration skipped" in op.output
    assert executor.commands == ["composer install --no-interaction"]


def test_laravel_install_optional_sections(tmp_path: Path, operator) -> None:
    _laravel_project(tmp_path)
    (tmp_path / ".env").write_text("APP_NAME=Old\nCUSTOM=kept\n", encoding="utf-8")

    op = operator(
        answers=[
            "", "", "", "y",
            "",
            "", "y",
            "", "", "", "", "y",
            # mail, cache
            "", "",
            # queue -> worker
            "y", "redis", "y",
            "", "", "3", "y",
            # s3
            "y", "AKIA123", "", "assets", "", "", "", "y",
            # deployment
            "y", "", "warning", "y",
            "", "y",
            "", "y",
            "",
            # composer
            "",
        ],
        passwords=["root-pw", "aws-secret"],
    )
    installer, store, executor = _installer(tmp_path, op)

    assert installer.run() == 0
    assert op.remaining == 0

    lines = (tmp_path / ".env").read_text(encoding="utf-8").splitlines()
    assert lines[:2] == ['APP_NAME="Laravel"', "CUSTOM=kept"]
    assert store.lookup("DB_PORT") == "3306"
    assert store.lookup("QUEUE_WORKER_TRIES") == "3"
    assert store.lookup("QUEUE_WORKER_TIMEOUT") == "60"
    assert store.lookup("AWS_SECRET_ACCESS_KEY") == "aws-secret"
    assert store.lookup("AWS_BUCKET") == "assets"
    assert store.lookup("FILESYSTEM_DISK") == "s3"
    assert store.lookup("LOG_LEVEL") == "warning"
    assert store.lookup("CORS_ALLOWED_ORIGINS") == "*"
    assert store.lookup("TRUSTED_PROXIES") == "*"
    assert store.lookup("FORCE_HTTPS") == "true"
    assert executor.commands == ["composer install --no-dev --no-interaction"]


def test_vanilla_php_install(tmp_path: Path, operator) -> None:
    op = operator(answers=["", "", "y", "", "", "", "y", ""], passwords=["pw"])
    installer, store, executor = _installer(tmp_path, op)

    assert installer.run() == 0
    assert op.remaining == 0

    text = (tmp_path / ".env").read_text(encoding="utf-8")
    assert text.startswith("# Environment Configuration\n\nAPP_NAME=MyApp\n")
    assert store.lookup("APP_DEBUG") == "true"
    assert store.lookup("DB_NAME") == "myapp"
    assert store.lookup("DB_PASS") == "pw"
    assert "Web App is using vanilla PHP." in op.output
    assert "APP_DEBUG set to true based on environment." in op.output
    assert executor.commands == ["composer install --no-dev --no-interaction"]
    assert installer.answers["APP_ENV"] == "development"


def test_vanilla_php_ignores_env_template(tmp_path: Path, operator) -> None:
    (tmp_path / ".env.example").write_text("APP_NAME=FromTemplate\nSECRET=x\n", encoding="utf-8")

    op = operator(answers=["", "", "y", "", "", "", "y", ""], passwords=[""])
    installer, store, _ = _installer(tmp_path, op)

    assert installer.run() == 0

    text = (tmp_path / ".env").read_text(encoding="utf-8")
    assert text.startswith("# Environment Configuration\n\nAPP_NAME=MyApp\n")
    assert store.lookup("SECRET") is None
    assert ".env.example" not in op.output
