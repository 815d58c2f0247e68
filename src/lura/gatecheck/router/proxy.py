# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass
import logging

from ..parser import EndpointConfig, ServiceConfig


class ProxyError(Exception):
    pass


@dataclass(frozen=True)
class Proxy:
    """Non serving proxy, holds the resolved upstream of one endpoint."""

    endpoint: str
    method: str
    upstreams: tuple[str, ...]


class ProxyFactory:
    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def new(self, endpoint: EndpointConfig, service: ServiceConfig) -> Proxy:
        if not endpoint.backend:
            raise ProxyError(f"no backends for endpoint {endpoint.endpoint}")

        upstreams = []
        for backend in endpoint.backend:
            hosts = backend.host or service.host
            if not hosts:
                raise ProxyError(f"no hosts defined for backend {backend.url_pattern}")
            upstreams.extend(f"{h.rstrip('/')}{backend.url_pattern}" for h in hosts)

        self._logger.debug(f"proxy {endpoint.method} {endpoint.endpoint} -> {upstreams}")
        return Proxy(endpoint.endpoint, endpoint.method, tuple(upstreams))
