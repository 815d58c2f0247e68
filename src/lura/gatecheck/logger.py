# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

import logging

from rich.logging import RichHandler

from .console import console


class LogConfig:
    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._console_handler = RichHandler(
            console=console.rich, show_time=False, show_path=False, markup=False
        )
        self._console_handler.setLevel(logging.INFO)
        self._logger.addHandler(self._console_handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_console_log_level(self, level: int) -> None:
        self._console_handler.setLevel(level)


log_config = LogConfig("gatecheck")
logger = log_config.logger


def noop_logger(name: str = "gatecheck.noop") -> logging.Logger:
    """Logger that drops every record, handed to subsystems run for checking only."""
    noop = logging.getLogger(name)
    noop.propagate = False
    noop.disabled = True
    if not noop.handlers:
        noop.addHandler(logging.NullHandler())
    return noop
