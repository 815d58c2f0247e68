# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from .context import Context
from .engine import Engine, RouteConflictError, RouteTree, Router, RouterFactory, default_factory
from .proxy import Proxy, ProxyError, ProxyFactory

__all__ = [
    "Context",
    "Engine",
    "Proxy",
    "ProxyError",
    "ProxyFactory",
    "RouteConflictError",
    "RouteTree",
    "Router",
    "RouterFactory",
    "default_factory",
]
