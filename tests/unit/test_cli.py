from __future__ import annotations

import os
from pathlib import Path

import pytest

from app_installer.core.cli import main


def _feed(monkeypatch: pytest.MonkeyPatch, answers: list[str], passwords: tuple[str, ...] = ()) -> list[str]:
    queue = list(answers)
    secrets = list(passwords)

    def fake_input(prompt: str = "") -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    monkeypatch.setattr("getpass.getpass", lambda prompt="": secrets.pop(0))
    return queue


def test_dry_run_install_lists_skipped_commands(tmp_path: Path, monkeypatch, capsys) -> None:
    queue = _feed(monkeypatch, ["", "", "y", "", "", "", "y", "n"], ["pw"])

    code = main(["install", "--project-dir", str(tmp_path), "--dry-run"])

    assert code == 0
    assert queue == []
    out = capsys.readouterr().out
    assert "Skipped commands (dry run):" in out
    assert "  composer install --no-interaction" in out
    assert "DB_PASS=pw" in (tmp_path / ".env").read_text(encoding="utf-8")


def test_setup_declined_returns_one(tmp_path: Path, monkeypatch) -> None:
    _feed(monkeypatch, ["", "", "", "", "", "", "", "sqlite", "n"])

    assert main(["setup", "--project-dir", str(tmp_path), "--dry-run"]) == 1
    assert not (tmp_path / ".env").exists()


def test_missing_settings_file_returns_two(tmp_path: Path, capsys) -> None:
    code = main(["--project-dir", str(tmp_path), "--config", str(tmp_path / "nope.yaml")])

    assert code == 2
    assert "Invalid installer settings" in capsys.readouterr().out


def test_settings_file_drives_commands(tmp_path: Path, monkeypatch, capsys) -> None:
    (tmp_path / "installer.yaml").write_text(
        "commands:\n  composer: /opt/bin/composer\npaths:\n  env_file: .env.local\n",
        encoding="utf-8",
    )
    _feed(monkeypatch, ["", "", "y", "", "", "", "y", ""], ["pw"])

    assert main(["install", "--project-dir", str(tmp_path), "--dry-run"]) == 0
    assert (tmp_path / ".env.local").is_file()
    assert not (tmp_path / ".env").exists()
    assert "  /opt/bin/composer install --no-dev --no-interaction" in capsys.readouterr().out


def test_interrupted_flow_returns_130(tmp_path: Path, monkeypatch) -> None:
    _feed(monkeypatch, [])

    assert main(["setup", "--project-dir", str(tmp_path), "--dry-run"]) == 130


@pytest.mark.skipif(os.name != "posix", reason="uses POSIX shell syntax")
def test_post_install_commands_do_not_inherit_stale_env_values(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("DB_DATABASE", raising=False)
    monkeypatch.delenv("INSTALLER_COMPOSER", raising=False)

    (tmp_path / ".env").write_text(
        "DB_CONNECTION=mysql\nDB_DATABASE=old_db\nINSTALLER_COMPOSER=true\n",
        encoding="utf-8",
    )
    (tmp_path / "installer.yaml").write_text(
        "commands:\n"
        "  composer: ${INSTALLER_COMPOSER}\n"
        "  php: 'printenv DB_DATABASE >> seen.txt || echo unset >> seen.txt; true'\n",
        encoding="utf-8",
    )
    # app settings, connection, DB details, modify files, npm, composer --no-dev
    _feed(monkeypatch, ["", "", "", "", "", "", "", "", "", "", "new_db", "", "", "", ""], ("secret",))

    assert main(["setup", "--project-dir", str(tmp_path)]) == 0

    assert "DB_DATABASE=new_db" in (tmp_path / ".env").read_text(encoding="utf-8")
    assert "DB_DATABASE" not in os.environ
    assert "INSTALLER_COMPOSER" not in os.environ
    assert (tmp_path / "seen.txt").read_text(encoding="utf-8").split() == ["unset"] * 4
