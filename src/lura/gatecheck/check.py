# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Configuration check pipeline.

Stages run in sequence, the first failing one ends the check::

    parse -> [lint] -> [dump] -> [test routes] -> Syntax OK!
"""

from dataclasses import dataclass
import json
import pathlib
from typing import Any

from . import __version__
from .config import EMBEDDED_SCHEMA
from .config.loader import SchemeURLLoader, default_loader, load_schema
from .config.source import resolve_schema_source
from .config.validator import compile_schema
from .console import Console, console as _console
from .dumper import Dumper
from .errors import CheckError, InvalidJSON, MissingConfigPath, RawContentUnavailable
from .logger import logger
from .parser import Parser, ServiceConfig
from .router import RouterFactory
from .simulation import run_router


@dataclass
class CheckOptions:
    config: pathlib.Path | None = None
    lint: bool = False
    schema: str = ""
    online: bool = False
    debug: int = 0
    test_routes: bool = False
    port: int = 0
    embedded_schema: str | None = EMBEDDED_SCHEMA
    version: str = __version__


class Checker:
    def __init__(
        self,
        options: CheckOptions,
        parser: Any = None,
        loader: SchemeURLLoader | None = None,
        router_factory: RouterFactory | None = None,
        console: Console = _console,
    ) -> None:
        self._options = options
        self._parser = parser if parser is not None else Parser()
        self._loader = loader
        self._router_factory = router_factory
        self._console = console

    def raw_config(self) -> bytes:
        """Content to lint, as rendered by the parser when it keeps its last source."""
        last_source = getattr(self._parser, "last_source", None)
        try:
            if callable(last_source):
                return last_source()
            return self._options.config.read_bytes()
        except OSError as e:
            raise RawContentUnavailable(f"'{self._options.config}': {e.strerror or e}") from e

    def lint(self) -> None:
        self._console.message("Linting configuration file...")
        data = self.raw_config()
        try:
            raw = json.loads(data)
        except ValueError as e:
            raise InvalidJSON(str(e)) from e

        opts = self._options
        source = resolve_schema_source(opts.schema, opts.online, opts.embedded_schema, opts.version)
        self._console.text(f"Using schema {source.describe()}")

        loader = self._loader if self._loader is not None else default_loader()
        uri, document = load_schema(source, loader)
        compile_schema(uri, document, loader).validate(raw)

    def run(self) -> ServiceConfig:
        opts = self._options
        if not opts.config:
            raise MissingConfigPath()

        self._console.text(f"Parsing configuration file: {opts.config}")
        config = self._parser.parse(opts.config)

        if opts.lint:
            self.lint()

        if opts.debug > 0:
            Dumper(self._console, opts.debug, prefix="Parsed configuration: ").dump(config)

        if opts.test_routes:
            self._console.message("Testing routes...")
            run_router(config, opts.debug, opts.port, self._router_factory)

        return config


def check(options: CheckOptions, **kwargs) -> int:
    """Run the check pipeline and report its outcome.

    :returns: process exit status, 0 on success
    """
    console = kwargs.get("console", _console)
    try:
        Checker(options, **kwargs).run()
    except CheckError as e:
        logger.debug(f"check failed: {type(e).__name__}")
        console.error(e.stage, str(e))
        return 1

    console.success("Syntax OK!")
    return 0
