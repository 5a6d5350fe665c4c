# docker_binary_installer/cli.py
# -*- coding: utf-8 -*-
"""
Command-line entry point.

Exactly one action flag is accepted per invocation: -D downloads the release
archive, -I installs. Anything else prints usage and exits 1.
"""

import argparse
import logging
import subprocess
import sys
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from docker_binary_installer.common.command_utils import log_message
from docker_binary_installer.common.logging_config import setup_logging
from docker_binary_installer.config_loader import load_installer_settings
from docker_binary_installer.config_models import SYMBOLS_DEFAULT, Action, Mirror
from docker_binary_installer.exceptions import InstallerError, UsageError
from docker_binary_installer.installer import DockerBinaryInstaller

PROG = "docker-binary-installer"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _run_fetch(installer: DockerBinaryInstaller) -> None:
    installer.fetch()


def _run_install(installer: DockerBinaryInstaller) -> None:
    installer.install()


ACTION_HANDLERS: Dict[Action, Callable[[DockerBinaryInstaller], None]] = {
    Action.DOWNLOAD: _run_fetch,
    Action.INSTALL: _run_install,
}


class InstallerArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> InstallerArgumentParser:
    parser = InstallerArgumentParser(
        prog=PROG,
        description="Install the Docker Engine static binaries and run them under systemd.",
    )
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "-D",
        dest="action",
        action="store_const",
        const=Action.DOWNLOAD,
        help="Download the release archive into the working directory only.",
    )
    actions.add_argument(
        "-I",
        dest="action",
        action="store_const",
        const=Action.INSTALL,
        help="Download if needed, install the binaries, configure and start docker.",
    )
    parser.add_argument("--docker-version", default=None, help="Docker release to install (e.g. 24.0.5).")
    parser.add_argument(
        "--mirror",
        choices=[m.value for m in Mirror],
        default=None,
        help="Download from the regional (Tsinghua TUNA) mirror or download.docker.com.",
    )
    parser.add_argument("--arch", default=None, help="Override the detected architecture (e.g. x86_64).")
    parser.add_argument("--work-dir", default=None, help="Directory for the downloaded archive.")
    parser.add_argument("--config", default=None, help="YAML configuration file.")
    parser.add_argument("--log-file", default=None, help="Also write JSON log lines to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Raises:
        UsageError: For unknown flags, both -D and -I, or no action at all.
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)
    if parsed_args.action is None:
        raise UsageError("one of -D or -I is required")
    return parsed_args


def main(args: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit status."""
    try:
        parsed_args = parse_args(args)
    except UsageError as e:
        build_parser().print_usage(sys.stderr)
        setup_logging()
        log_message(f"{SYMBOLS_DEFAULT['error']} {e}", "critical", logging.getLogger(PROG))
        return EXIT_FAILURE

    try:
        logger = setup_logging(parsed_args.verbose, log_file_path=parsed_args.log_file)
    except OSError as e:
        # the console handler is installed before the file handler
        log_message(
            f"{SYMBOLS_DEFAULT['critical']} Cannot open log file {parsed_args.log_file}: {e}",
            "critical",
            logging.getLogger(PROG),
        )
        return EXIT_FAILURE
    action = Action(parsed_args.action)

    try:
        settings = load_installer_settings(parsed_args, parsed_args.config, current_logger=logger)
    except ValidationError as e:
        log_message(f"{SYMBOLS_DEFAULT['critical']} Configuration error: {e}", "critical", logger)
        return EXIT_FAILURE
    except (InstallerError, subprocess.CalledProcessError, OSError) as e:
        log_message(f"{SYMBOLS_DEFAULT['critical']} Could not resolve settings: {e}", "critical", logger)
        return EXIT_FAILURE

    installer = DockerBinaryInstaller(settings, logger=logger)
    try:
        ACTION_HANDLERS[action](installer)
    except InstallerError as e:
        log_message(
            f"{settings.symbols.get('critical', '🔥')} Action '{action.value}' failed: {e}",
            "critical",
            logger,
            settings,
        )
        return EXIT_FAILURE

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
