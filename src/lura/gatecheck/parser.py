# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Gateway configuration parser.

The configuration is a JSON document. `{{ env "NAME" }}` placeholders are
rendered from the environment before decoding and the rendered text is kept,
so that linting sees exactly what was parsed.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
import json
import os
import pathlib
import re
from typing import Any

from .errors import ConfigParseError, RawContentUnavailable
from .logger import logger

SUPPORTED_VERSION = 3
DEFAULT_PORT = 8080
DEFAULT_METHOD = "GET"
METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

_ENV_PLACEHOLDER = re.compile(r'\{\{\s*env\s+"([^"]+)"\s*\}\}')
_PARAM = re.compile(r"\{([^{}/]+)\}")


@dataclass(frozen=True)
class BackendConfig:
    url_pattern: str
    host: tuple[str, ...] = ()
    method: str = ""
    extra_config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EndpointConfig:
    endpoint: str
    method: str = DEFAULT_METHOD
    backend: tuple[BackendConfig, ...] = ()
    timeout: str = ""
    extra_config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ServiceConfig:
    version: int = SUPPORTED_VERSION
    name: str = ""
    port: int = DEFAULT_PORT
    host: tuple[str, ...] = ()
    timeout: str = ""
    debug: bool = False
    echo: bool = False
    endpoints: tuple[EndpointConfig, ...] = ()
    extra_config: Mapping[str, Any] = field(default_factory=dict)


def _object(value: Any, where: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise ConfigParseError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _list(node: Mapping, key: str, where: str) -> list:
    value = node.get(key, [])
    if not isinstance(value, list):
        raise ConfigParseError(f"{where}.{key} must be a list, got {type(value).__name__}")
    return value


def _string(node: Mapping, key: str, where: str, default: str = "") -> str:
    value = node.get(key, default)
    if not isinstance(value, str):
        raise ConfigParseError(f"{where}.{key} must be a string, got {type(value).__name__}")
    return value


def _hosts(node: Mapping, where: str) -> tuple[str, ...]:
    hosts = _list(node, "host", where)
    if not all(isinstance(h, str) for h in hosts):
        raise ConfigParseError(f"{where}.host must be a list of strings")
    return tuple(hosts)


def _backend(endpoint: str, params: set[str], node: Any, where: str) -> BackendConfig:
    node = _object(node, where)
    if "url_pattern" not in node:
        raise ConfigParseError(f"backend of endpoint {endpoint} without url_pattern")
    url_pattern = _string(node, "url_pattern", where)
    for param in _PARAM.findall(url_pattern):
        if param not in params:
            raise ConfigParseError(
                f"undefined output param '{param}' in backend {url_pattern} of endpoint {endpoint}"
            )
    return BackendConfig(
        url_pattern=url_pattern,
        host=_hosts(node, where),
        method=_string(node, "method", where).upper(),
        extra_config=_object(node.get("extra_config", {}), f"{where}.extra_config"),
    )


def _endpoint(node: Any, where: str) -> EndpointConfig:
    node = _object(node, where)
    path = _string(node, "endpoint", where)
    if not path:
        raise ConfigParseError("endpoint without path")

    method = _string(node, "method", where, DEFAULT_METHOD).upper()
    if method not in METHODS:
        raise ConfigParseError(f"unsupported method {method} for endpoint {path}")

    backends = _list(node, "backend", where)
    if not backends:
        raise ConfigParseError(f"no backends defined for endpoint {method} {path}")

    params = set(_PARAM.findall(path))
    return EndpointConfig(
        endpoint=path,
        method=method,
        backend=tuple(
            _backend(path, params, b, f"{where}.backend[{i}]") for i, b in enumerate(backends)
        ),
        timeout=_string(node, "timeout", where),
        extra_config=_object(node.get("extra_config", {}), f"{where}.extra_config"),
    )


def service_config(data: Any) -> ServiceConfig:
    """Build a service config from its decoded JSON form."""
    if not isinstance(data, Mapping):
        raise ConfigParseError("configuration root must be an object")

    version = data.get("version")
    if version != SUPPORTED_VERSION:
        raise ConfigParseError(f"unsupported version: {version} (want: {SUPPORTED_VERSION})")

    port = data.get("port") or DEFAULT_PORT
    if not isinstance(port, int) or isinstance(port, bool):
        raise ConfigParseError(f"port must be an integer, got {type(port).__name__}")

    endpoints = _list(data, "endpoints", "service")
    return ServiceConfig(
        version=version,
        name=_string(data, "name", "service"),
        port=port,
        host=_hosts(data, "service"),
        timeout=_string(data, "timeout", "service"),
        debug=bool(data.get("debug_endpoint", False)),
        echo=bool(data.get("echo_endpoint", False)),
        endpoints=tuple(_endpoint(e, f"endpoints[{i}]") for i, e in enumerate(endpoints)),
        extra_config=_object(data.get("extra_config", {}), "service.extra_config"),
    )


class Parser:
    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ
        self._last_source: bytes | None = None

    def _render(self, text: str) -> str:
        def _env(match: re.Match) -> str:
            name = match.group(1)
            if name not in self._environ:
                raise ConfigParseError(f"undefined environment variable '{name}'")
            return self._environ[name]

        return _ENV_PLACEHOLDER.sub(_env, text)

    def parse(self, path: pathlib.Path | str) -> ServiceConfig:
        path = pathlib.Path(path)
        self._last_source = None
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigParseError(f"'{path}': {e.strerror or e}") from e

        rendered = self._render(text)
        try:
            data = json.loads(rendered)
        except json.JSONDecodeError as e:
            raise ConfigParseError(
                f"'{path}': {e.msg}, line {e.lineno} column {e.colno}"
            ) from e

        config = service_config(data)
        self._last_source = rendered.encode("utf-8")
        logger.debug(f"{path} parsed, {len(config.endpoints)} endpoint(s)")
        return config

    def last_source(self) -> bytes:
        """Return the rendered bytes of the last successfully parsed configuration."""
        if self._last_source is None:
            raise RawContentUnavailable("no configuration parsed")
        return self._last_source
