from __future__ import annotations

import base64
import secrets
import string

_DB_PORTS = {
    "pgsql": "5432",
    "sqlsrv": "1433",
}
_ALPHANUMERIC = string.digits + string.ascii_lowercase + string.ascii_uppercase


def default_db_port(connection: str) -> str:
    return _DB_PORTS.get(connection, "3306")


def laravel_debug(app_env: str) -> str:
    return "false" if app_env == "production" else "true"


def vanilla_debug(app_env: str) -> str:
    return "true" if app_env == "development" else "false"


def generate_app_key() -> str:
    """Laravel-compatible APP_KEY, usable before vendor/ is installed."""

    return "base64:" + base64.b64encode(secrets.token_bytes(32)).decode("ascii")


def random_string(length: int = 20) -> str:
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def random_app_id() -> str:
    return str(100_000 + secrets.randbelow(900_000))
