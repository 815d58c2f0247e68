# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from argparse import ArgumentParser, Namespace
import pathlib
import sys

from .check import CheckOptions, check


def add_arguments(parser: ArgumentParser) -> None:
    parser.add_argument(
        "-c", "--config", type=pathlib.Path, action="store", help="path to the configuration file"
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="dump the parsed configuration, repeat to raise the verbosity",
    )
    parser.add_argument(
        "-l", "--lint", action="store_true", help="lint the configuration against its JSON schema"
    )
    # --schema and --online exclusion is enforced by the check itself
    parser.add_argument(
        "-s", "--schema", action="store", default="", help="path or URL of a custom schema"
    )
    parser.add_argument(
        "-o",
        "--online",
        action="store_true",
        help="lint against the hosted schema of the running release line",
    )
    parser.add_argument(
        "-t", "--test-routes", action="store_true", help="start the router to test the routes"
    )
    parser.add_argument(
        "-p", "--port", type=int, default=0, help="listening port used when testing routes"
    )


def options(args: Namespace) -> CheckOptions:
    return CheckOptions(
        config=args.config,
        lint=args.lint,
        schema=args.schema,
        online=args.online,
        debug=args.debug,
        test_routes=args.test_routes,
        port=args.port,
    )


def run(args: Namespace) -> None:
    status = check(options(args))
    if status:
        sys.exit(status)
