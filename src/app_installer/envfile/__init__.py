"""`.env` file model and store."""

from __future__ import annotations

from .document import EnvDocument, format_value, unquote
from .store import BASIC_ENV_CONTENT, DEFAULT_ENV_FILE, EnvFileStore, EnvInitResult

__all__ = [
    "BASIC_ENV_CONTENT",
    "DEFAULT_ENV_FILE",
    "EnvDocument",
    "EnvFileStore",
    "EnvInitResult",
    "format_value",
    "unquote",
]
