# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""In-process routing layer.

Routes are registered in one tree per HTTP method with httprouter semantics:
a path segment is static, a named parameter (`:name`) or a trailing catch-all
(`*name`). Registering a route that cannot coexist with the existing ones
raises :class:`RouteConflictError`.
"""

import logging
import re
from typing import Any

from .context import Context
from .proxy import ProxyError, ProxyFactory
from ..parser import METHODS, ServiceConfig

ANY_METHODS = METHODS + ("CONNECT", "TRACE")

HEALTH_PATH = "/__health"
DEBUG_PATH = "/__debug/*param"
ECHO_PATH = "/__echo/*param"

_PARAM = re.compile(r"\{([^{}/]+)\}")


class RouteConflictError(Exception):
    pass


class _Node:
    def __init__(self) -> None:
        self.static: dict[str, "_Node"] = {}
        self.param: tuple[str, "_Node"] | None = None
        self.catch_all: tuple[str, "_Node"] | None = None
        self.handler: Any = None

    def wildcard(self) -> str | None:
        for child in (self.param, self.catch_all):
            if child is not None:
                return child[0]
        return None


def _check_segment(segment: str, path: str) -> None:
    wildcards = sum(segment.count(c) for c in ":*")
    if wildcards > 1:
        raise RouteConflictError(
            f"only one wildcard per path segment is allowed, has: '{segment}' in path '{path}'"
        )
    if wildcards == 1 and segment[0] not in ":*":
        raise RouteConflictError(f"wildcard must start the segment '{segment}' in path '{path}'")
    if segment in (":", "*"):
        raise RouteConflictError(
            f"wildcards must be named with a non-empty name in path '{path}'"
        )


class RouteTree:
    def __init__(self) -> None:
        self._root = _Node()

    def add(self, path: str, handler: Any) -> None:
        if not path.startswith("/"):
            raise RouteConflictError(f"path must begin with '/' in path '{path}'")

        segments = path[1:].split("/")
        node = self._root
        for i, segment in enumerate(segments):
            _check_segment(segment, path)

            if segment.startswith("*"):
                if i != len(segments) - 1:
                    raise RouteConflictError(
                        f"catch-all routes are only allowed at the end of the path in path '{path}'"
                    )
                if node.static or node.param:
                    raise RouteConflictError(
                        f"catch-all wildcard '{segment}' in new path '{path}' "
                        "conflicts with existing children"
                    )
                if node.catch_all is None:
                    node.catch_all = (segment, _Node())
                elif node.catch_all[0] != segment:
                    raise RouteConflictError(
                        f"'{segment}' in new path '{path}' conflicts with "
                        f"existing wildcard '{node.catch_all[0]}'"
                    )
                node = node.catch_all[1]

            elif segment.startswith(":"):
                existing = node.wildcard()
                if existing is not None and existing != segment:
                    raise RouteConflictError(
                        f"'{segment}' in new path '{path}' conflicts with "
                        f"existing wildcard '{existing}'"
                    )
                if node.param is None:
                    node.param = (segment, _Node())
                node = node.param[1]

            else:
                if node.catch_all is not None:
                    raise RouteConflictError(
                        f"'{segment}' in new path '{path}' conflicts with "
                        f"existing wildcard '{node.catch_all[0]}'"
                    )
                node = node.static.setdefault(segment, _Node())

        if node.handler is not None:
            raise RouteConflictError(f"handlers are already registered for path '{path}'")
        node.handler = handler


class Engine:
    def __init__(self) -> None:
        self._trees: dict[str, RouteTree] = {}
        self.routes: list[tuple[str, str]] = []

    def handle(self, method: str, path: str, handler: Any) -> None:
        self._trees.setdefault(method, RouteTree()).add(path, handler)
        self.routes.append((method, path))

    def any(self, path: str, handler: Any) -> None:
        for method in ANY_METHODS:
            self.handle(method, path, handler)


def endpoint_path(path: str) -> str:
    """Convert `{name}` endpoint placeholders into router parameters."""
    return _PARAM.sub(r":\1", path)


class Router:
    def __init__(self, ctx: Context, proxy_factory: ProxyFactory, logger: logging.Logger) -> None:
        self._ctx = ctx
        self._proxy_factory = proxy_factory
        self._logger = logger

    def run(self, config: ServiceConfig) -> Engine:
        """Register every route of the configuration.

        Nothing is served: the run stops once routes are registered or as soon as
        the context is done.
        """
        if not 0 < config.port < 65536:
            raise ValueError(f"invalid listening port {config.port}")

        engine = Engine()
        engine.handle("GET", HEALTH_PATH, "health")
        if config.debug:
            engine.any(DEBUG_PATH, "debug")
        if config.echo:
            engine.any(ECHO_PATH, "echo")

        for endpoint in config.endpoints:
            if self._ctx.done():
                self._logger.warning(f"[SERVICE: Router] stopped: {self._ctx.err()}")
                return engine
            try:
                proxy = self._proxy_factory.new(endpoint, config)
            except ProxyError as e:
                self._logger.error(f"[ENDPOINT: {endpoint.endpoint}] Calling the ProxyFactory: {e}")
                continue
            engine.handle(endpoint.method, endpoint_path(endpoint.endpoint), proxy)

        self._logger.info(f"[SERVICE: Router] {len(engine.routes)} routes, port {config.port}")
        return engine


class RouterFactory:
    def __init__(self, proxy_factory: ProxyFactory, logger: logging.Logger) -> None:
        self._proxy_factory = proxy_factory
        self._logger = logger

    def new_with_context(self, ctx: Context) -> Router:
        return Router(ctx, self._proxy_factory, self._logger)


def default_factory(logger: logging.Logger) -> RouterFactory:
    return RouterFactory(ProxyFactory(logger), logger)
