"""Read-only checks against the project's composer.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .observability import get_logger

LARAVEL_FRAMEWORK = "laravel/framework"
LARAVEL_REVERB = "laravel/reverb"

_log = get_logger("app_installer.project")


def read_composer(path: str | Path) -> dict[str, Any] | None:
    """Parse composer.json; missing or malformed manifests yield None."""

    manifest = Path(path)
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        _log.warning("composer_unreadable", path=str(manifest), error=str(e))
        return None
    if not isinstance(data, dict):
        _log.warning("composer_unreadable", path=str(manifest), error="root is not an object")
        return None
    return data


def declares_package(path: str | Path, package: str, *, include_dev: bool = False) -> bool:
    data = read_composer(path)
    if data is None:
        return False

    sections = ["require", "require-dev"] if include_dev else ["require"]
    for name in sections:
        deps = data.get(name)
        if isinstance(deps, dict) and package in deps:
            return True
    return False


def is_laravel(path: str | Path) -> bool:
    return declares_package(path, LARAVEL_FRAMEWORK)


def has_reverb(path: str | Path) -> bool:
    return declares_package(path, LARAVEL_REVERB, include_dev=True)
