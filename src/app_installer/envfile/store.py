from __future__ import annotations

import enum
import shutil
from pathlib import Path

from ..observability import add_error, get_logger
from .document import EnvDocument, format_value, unquote, validate_key

DEFAULT_ENV_FILE = ".env"
# Bytes that are not valid UTF-8 survive a read/write cycle unchanged.
ENV_ENCODING_ERRORS = "surrogateescape"
BASIC_ENV_CONTENT = "# Environment Configuration\n\n"


class EnvInitResult(str, enum.Enum):
    EXISTING = "existing"
    FROM_TEMPLATE = "from_template"
    BASIC = "basic"
    FAILED = "failed"


class EnvFileStore:
    """Read/upsert access to one `.env` file.

    The store is bound to a default path; every call accepts an explicit
    `path` override. Each upsert reads, mutates and writes the whole file.
    """

    def __init__(self, path: str | Path = DEFAULT_ENV_FILE) -> None:
        self._path = Path(path)
        self._log = get_logger("app_installer.envfile")

    @property
    def path(self) -> Path:
        return self._path

    def _resolve(self, path: str | Path | None) -> Path:
        return Path(path) if path is not None else self._path

    def exists(self, path: str | Path | None = None) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str | Path | None = None) -> EnvDocument:
        target = self._resolve(path)
        if not target.is_file():
            return EnvDocument()
        return EnvDocument.parse(target.read_text(encoding="utf-8", errors=ENV_ENCODING_ERRORS))

    def write(self, document: EnvDocument, path: str | Path | None = None) -> bool:
        target = self._resolve(path)
        try:
            target.write_text(document.render(), encoding="utf-8", errors=ENV_ENCODING_ERRORS)
        except (OSError, UnicodeError) as e:
            self._log.error("env_write_failed", path=str(target), error=str(e))
            add_error(f"write {target}: {e}")
            return False
        return True

    def upsert(
        self,
        key: str,
        value: str,
        *,
        path: str | Path | None = None,
        quote: bool = False,
    ) -> bool:
        """Set `key` to `value`, replacing an existing assignment in place.

        Returns False when the file cannot be read or written.
        """

        validate_key(key)
        raw = format_value(value, force_quote=quote)
        target = self._resolve(path)

        try:
            if not target.exists():
                target.touch()
            document = self.read(target)
        except OSError as e:
            self._log.error("env_read_failed", path=str(target), key=key, error=str(e))
            add_error(f"read {target}: {e}")
            return False

        document.set(key, raw)
        ok = self.write(document, target)
        if ok:
            self._log.info("env_upsert", path=str(target), key=key)
        return ok

    def lookup(
        self,
        key: str,
        default: str | None = None,
        *,
        path: str | Path | None = None,
    ) -> str | None:
        try:
            raw = self.read(path).get(key)
        except OSError as e:
            self._log.warning("env_read_failed", path=str(self._resolve(path)), key=key, error=str(e))
            return default
        if raw is None:
            return default
        return unquote(raw)

    def initialize(
        self,
        *,
        template: str | Path | None = None,
        basic_content: str = BASIC_ENV_CONTENT,
        path: str | Path | None = None,
    ) -> EnvInitResult:
        """Make sure the env file exists.

        An existing file is left untouched. Otherwise the template is copied
        verbatim when present, falling back to a basic file with `basic_content`.
        """

        target = self._resolve(path)
        if target.is_file():
            return EnvInitResult.EXISTING

        if template is not None and Path(template).is_file():
            try:
                shutil.copyfile(template, target)
                self._log.info("env_created_from_template", path=str(target), template=str(template))
                return EnvInitResult.FROM_TEMPLATE
            except OSError as e:
                self._log.warning("env_template_copy_failed", path=str(target), template=str(template), error=str(e))

        try:
            target.write_text(basic_content, encoding="utf-8")
        except OSError as e:
            self._log.error("env_create_failed", path=str(target), error=str(e))
            add_error(f"create {target}: {e}")
            return EnvInitResult.FAILED
        self._log.info("env_created_basic", path=str(target))
        return EnvInitResult.BASIC
