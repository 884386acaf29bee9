from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import dotenv_values

from .errors import ConfigError

# re-export for callers/tests
__all__ = [
    "CommandsSettings",
    "ConfigError",
    "DEFAULT_SETTINGS_FILE",
    "InstallerSettings",
    "LoggingSettings",
    "PathsSettings",
    "load_settings",
]

DEFAULT_SETTINGS_FILE = "installer.yaml"

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _expand_env_in_str(value: str, *, path: str, environ: Mapping[str, str]) -> str:
    def repl(match: re.Match[str]) -> str:
        key = match.group(1)
        if not environ.get(key):
            raise ConfigError(f"environment variable {key!r} is not set", path=path)
        return environ[key]

    return _ENV_PATTERN.sub(repl, value)


def _expand_env(obj: Any, *, path: str, environ: Mapping[str, str]) -> Any:
    if isinstance(obj, str):
        return _expand_env_in_str(obj, path=path, environ=environ)
    if isinstance(obj, list):
        return [_expand_env(v, path=f"{path}[{i}]", environ=environ) for i, v in enumerate(obj)]
    if isinstance(obj, dict):
        return {
            k: _expand_env(v, path=f"{path}.{k}" if path else str(k), environ=environ) for k, v in obj.items()
        }
    return obj


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("must be a mapping", path=name)
    return value


def _str_field(section: dict[str, Any], key: str, default: str, *, path: str) -> str:
    value = section.get(key, default)
    if value is None:
        return default
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ConfigError("must be a string", path=f"{path}.{key}")
    value = str(value).strip()
    if not value:
        raise ConfigError("must be a non-empty string", path=f"{path}.{key}")
    return value


@dataclass(frozen=True)
class PathsSettings:
    """File names, relative to the project directory."""

    env_file: str = ".env"
    env_template: str = ".env.example"
    composer_manifest: str = "composer.json"
    package_manifest: str = "package.json"


@dataclass(frozen=True)
class CommandsSettings:
    composer: str = "composer"
    php: str = "php"
    node_package_manager: str = "npm"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "WARNING"


@dataclass(frozen=True)
class InstallerSettings:
    project_dir: Path = field(default_factory=Path.cwd)
    paths: PathsSettings = field(default_factory=PathsSettings)
    commands: CommandsSettings = field(default_factory=CommandsSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def project_path(self, name: str) -> Path:
        return self.project_dir / name

    @property
    def env_path(self) -> Path:
        return self.project_path(self.paths.env_file)

    @property
    def env_template_path(self) -> Path:
        return self.project_path(self.paths.env_template)

    @property
    def composer_path(self) -> Path:
        return self.project_path(self.paths.composer_manifest)

    @property
    def package_json_path(self) -> Path:
        return self.project_path(self.paths.package_manifest)


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_settings(
    path: str | Path | None = None,
    *,
    project_dir: str | Path | None = None,
    required: bool = False,
    load_dotenv_file: bool = True,
    dotenv_path: Path | None = None,
) -> InstallerSettings:
    """Load installer settings from YAML and expand ${ENV_VAR}.

    Args:
        path: Settings file. Defaults to `installer.yaml` in the project directory.
        project_dir: Directory holding the application (default: cwd).
        required: Raise when the settings file is missing instead of falling
            back to defaults.
        load_dotenv_file: Whether `${VAR}` may also resolve from the project .env
            file. Real environment variables win over it.
        dotenv_path: Explicit .env path (default: `<project_dir>/.env`).

    Raises:
        ConfigError: If the file is missing (when required), invalid, or references
            missing env vars.
    """

    base = Path(project_dir) if project_dir is not None else Path.cwd()

    settings_path = Path(path) if path is not None else base / DEFAULT_SETTINGS_FILE
    if not settings_path.exists():
        if required:
            raise ConfigError("settings file does not exist", path=str(settings_path))
        return InstallerSettings(project_dir=base)

    # .env values only feed ${VAR} expansion; os.environ stays untouched.
    environ: dict[str, str] = {}
    if load_dotenv_file:
        dotenv_file = Path(dotenv_path) if dotenv_path is not None else base / ".env"
        if dotenv_file.is_file():
            with dotenv_file.open(encoding="utf-8", errors="surrogateescape") as stream:
                values = dotenv_values(stream=stream)
            environ.update({k: v for k, v in values.items() if v is not None})
    environ.update(os.environ)

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8")) or {}
    except Exception as e:  # noqa: BLE001
        raise ConfigError(f"failed to parse YAML: {e}", path=str(settings_path)) from e

    if not isinstance(raw, dict):
        raise ConfigError("top level must be a YAML mapping (dict)", path=str(settings_path))

    expanded = _expand_env(raw, path="", environ=environ)

    paths_raw = _section(expanded, "paths")
    paths = PathsSettings(
        env_file=_str_field(paths_raw, "env_file", PathsSettings.env_file, path="paths"),
        env_template=_str_field(paths_raw, "env_template", PathsSettings.env_template, path="paths"),
        composer_manifest=_str_field(paths_raw, "composer_manifest", PathsSettings.composer_manifest, path="paths"),
        package_manifest=_str_field(paths_raw, "package_manifest", PathsSettings.package_manifest, path="paths"),
    )

    commands_raw = _section(expanded, "commands")
    commands = CommandsSettings(
        composer=_str_field(commands_raw, "composer", CommandsSettings.composer, path="commands"),
        php=_str_field(commands_raw, "php", CommandsSettings.php, path="commands"),
        node_package_manager=_str_field(
            commands_raw, "node_package_manager", CommandsSettings.node_package_manager, path="commands"
        ),
    )

    logging_raw = _section(expanded, "logging")
    level = _str_field(logging_raw, "level", LoggingSettings.level, path="logging").upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level: {level!r}", path="logging.level")

    return InstallerSettings(
        project_dir=base,
        paths=paths,
        commands=commands,
        logging=LoggingSettings(level=level),
    )
