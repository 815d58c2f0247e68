# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from rich.console import Console as _RichConsole
from rich.markup import escape


class Console:
    """Operator facing report.

    Markup is rendered as colors only when rich detects an interactive terminal,
    plain text is emitted otherwise.
    """

    def __init__(self, console: _RichConsole | None = None) -> None:
        self._console = console or _RichConsole(highlight=False, soft_wrap=True)

    @property
    def rich(self) -> _RichConsole:
        return self._console

    def message(self, msg: str) -> None:
        self._console.print(msg)

    def text(self, msg: str) -> None:
        self._console.print(escape(msg))

    def error(self, headline: str, cause: str = "") -> None:
        line = f"[red]{escape(headline)}[/red]"
        if cause:
            line += f"\t{escape(cause)}\n"
        self._console.print(line)

    def success(self, msg: str) -> None:
        self._console.print(f"[green]{escape(msg)}[/green]")


console = Console()
