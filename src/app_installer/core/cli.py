from __future__ import annotations

import argparse
from pathlib import Path

from ..envfile import EnvFileStore
from ..flows import GuidedInstaller, QuickSetup
from ..observability import bind_context, configure_logging, get_logger
from ..observability.ids import new_run_id
from ..prompts import TerminalPrompter
from ..tools import CommandExecutor, FakeCommandExecutor, ShellCommandExecutor
from .config import load_settings
from .errors import ConfigError

EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

FLOWS = {
    "install": GuidedInstaller,
    "setup": QuickSetup,
}


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Interactive installer for PHP and Laravel applications")
    p.add_argument(
        "flow",
        nargs="?",
        default="install",
        choices=sorted(FLOWS),
        help="install: guided sections (default); setup: one-pass Laravel setup with summary",
    )
    p.add_argument("--config", default=None, help="installer settings YAML (default: <project-dir>/installer.yaml)")
    p.add_argument("--project-dir", default=".", help="directory holding .env, composer.json and package.json")
    p.add_argument("--log-level", default=None, help="log level (default: from settings, WARNING)")
    p.add_argument("--dry-run", action="store_true", help="do not run composer/npm/artisan, only record them")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    project_dir = Path(args.project_dir).expanduser().resolve()

    configure_logging(level=args.log_level or "WARNING")
    log = get_logger("app_installer.cli")
    bind_context(run_id=new_run_id(), flow=args.flow)

    try:
        settings = load_settings(args.config, project_dir=project_dir, required=args.config is not None)
    except ConfigError as e:
        log.error("settings_invalid", error=str(e))
        print(f"Invalid installer settings: {e}")
        return EXIT_CONFIG_ERROR

    if args.log_level is None:
        configure_logging(level=settings.logging.level)

    executor: CommandExecutor
    if args.dry_run:
        executor = FakeCommandExecutor()
    else:
        executor = ShellCommandExecutor(cwd=str(project_dir))

    flow = FLOWS[args.flow](
        prompter=TerminalPrompter(),
        store=EnvFileStore(settings.env_path),
        executor=executor,
        settings=settings,
    )

    log.info("flow_started", project_dir=str(project_dir), dry_run=args.dry_run)
    try:
        code = flow.run()
    except (KeyboardInterrupt, EOFError):
        print()
        log.warning("flow_interrupted")
        return EXIT_INTERRUPTED

    if isinstance(executor, FakeCommandExecutor) and executor.commands:
        print("Skipped commands (dry run):")
        for command in executor.commands:
            print(f"  {command}")

    log.info("flow_finished", exit_code=code)
    return code
