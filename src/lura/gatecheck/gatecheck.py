# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from argparse import ArgumentParser
import logging
import sys

from . import __version__
from .logger import logger, log_config


class CommandLineArguments:
    def __init__(self) -> None:
        from . import cmd_check

        self.parser = ArgumentParser(prog="gatecheck", add_help=True)
        self.parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        self.subparsers = self.parser.add_subparsers(
            required=True,
            title="Commands",
            dest="command",
            description="Execute one of the following commands",
        )
        self.parents_parser = [self._log_level_arguments()]

        self.add_command(
            "check",
            cmd_check.add_arguments,
            cmd_check.run,
            "validate the gateway configuration file",
        )

    def _log_level_arguments(self) -> ArgumentParser:
        parser = ArgumentParser(add_help=False)
        loglevel_parser = parser.add_argument_group("logging")
        loglevel_parser.add_argument("-q", "--quiet", action="store_true")
        loglevel_parser.add_argument("-v", "--verbose", action="store_true")
        loglevel_parser.add_argument(
            "--log-level",
            action="store",
            choices=["debug", "info", "warning", "error"],
            default="info",
        )

        return parser

    def add_command(self, name: str, add_arguments, run_cmd, help) -> None:
        cmd_parser = self.subparsers.add_parser(name, help=help, parents=self.parents_parser)
        add_arguments(cmd_parser)
        cmd_parser.set_defaults(func=run_cmd)

    def run(self, argv: list[str] | None = None) -> None:
        args = self.parser.parse_args(argv)
        if args.verbose:
            log_config.set_console_log_level(logging.DEBUG)
        elif args.quiet:
            log_config.set_console_log_level(logging.ERROR)
        else:
            lvl = logging.getLevelName(args.log_level.upper())
            log_config.set_console_log_level(lvl)

        args.func(args)


def main(argv: list[str] | None = None) -> None:
    """Gatecheck script entrypoint.

    command usage:
     `gatecheck <cmd> [option(s)]`

    e.g. `gatecheck check -c gateway.json --lint --test-routes`
    """
    try:
        CommandLineArguments().run(argv)
    except Exception as e:
        logger.critical(str(e))
        sys.exit(1)
    else:
        sys.exit(0)
