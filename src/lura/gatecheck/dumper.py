# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

import json

from rich.errors import MarkupError
from rich.markup import escape
from rich.tree import Tree

from .console import Console
from .errors import DumpError
from .parser import ServiceConfig


class Dumper:
    """Render a parsed configuration as a tree.

    Level 1 shows the service attributes and endpoints, level 2 adds the backends
    and level 3 (or more) the `extra_config` sections.
    """

    def __init__(self, console: Console, level: int, prefix: str = "") -> None:
        self._console = console
        self._level = level
        self._prefix = prefix

    def _extra(self, node: Tree, extra) -> None:
        if self._level < 3 or not extra:
            return
        try:
            rendered = json.dumps(extra, indent=2, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise DumpError(f"extra_config cannot be rendered: {e}") from e
        node.add(f"extra_config: {escape(rendered)}")

    def tree(self, config: ServiceConfig) -> Tree:
        root = Tree(f"{escape(self._prefix)}Service: [b]{escape(config.name or '-')}[/b]")
        root.add(f"version: {config.version}")
        root.add(f"port: {config.port}")
        root.add(f"timeout: {escape(config.timeout or '-')}")
        root.add(f"debug endpoint: {config.debug}")
        root.add(f"echo endpoint: {config.echo}")
        if config.host:
            root.add(f"default hosts: {escape(', '.join(config.host))}")
        self._extra(root, config.extra_config)

        endpoints = root.add(f"{len(config.endpoints)} endpoint(s)")
        for e in config.endpoints:
            node = endpoints.add(f"[b]{e.method}[/b] {escape(e.endpoint)}")
            if e.timeout:
                node.add(f"timeout: {escape(e.timeout)}")
            self._extra(node, e.extra_config)
            if self._level < 2:
                continue
            for b in e.backend:
                backend = node.add(f"backend {escape(b.method or e.method)} {escape(b.url_pattern)}")
                hosts = b.host or config.host
                if hosts:
                    backend.add(f"hosts: {escape(', '.join(hosts))}")
                self._extra(backend, b.extra_config)

        return root

    def dump(self, config: ServiceConfig) -> None:
        try:
            self._console.rich.print(self.tree(config))
        except MarkupError as e:
            raise DumpError(str(e)) from e
