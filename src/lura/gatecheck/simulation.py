# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Route registration simulation.

The routing layer is started against the configuration inside a bounded window
to surface route conflicts. Any fault raised while the router is built or
started is turned into a :class:`SimulationFailure`, it never escapes.
"""

from dataclasses import replace
import threading

from .errors import SimulationFailure
from .logger import logger, noop_logger
from .parser import ServiceConfig
from .router import Context, RouterFactory, default_factory

SIMULATION_TIMEOUT = 1.0


def _describe(fault: BaseException) -> str:
    return str(fault) or type(fault).__name__


def simulation_config(config: ServiceConfig, debug: int = 0, port: int = 0) -> ServiceConfig:
    return replace(config, debug=config.debug or debug > 0, port=port or config.port)


def run_router(
    config: ServiceConfig,
    debug: int = 0,
    port: int = 0,
    factory: RouterFactory | None = None,
    timeout: float = SIMULATION_TIMEOUT,
) -> None:
    """Build and start the router on a copy of `config`.

    :param debug: debug level, any positive value turns the debug endpoint on
    :param port: listening port override, 0 keeps the configured one
    :param factory: router factory, defaults to one with a no-op logger
    :param timeout: deadline of the simulated startup, in seconds

    :raises SimulationFailure: the router rejected the configuration
    """
    config = simulation_config(config, debug, port)
    if factory is None:
        factory = default_factory(noop_logger())

    ctx = Context.with_timeout(timeout)
    faults: list[BaseException] = []

    def _run() -> None:
        try:
            factory.new_with_context(ctx).run(config)
        except BaseException as e:
            faults.append(e)

    worker = threading.Thread(target=_run, name="gatecheck-router", daemon=True)
    try:
        worker.start()
        worker.join(timeout)
    finally:
        ctx.cancel()

    if worker.is_alive():
        logger.warning(f"router startup did not complete within {timeout}s, stopped")
        return

    if faults:
        raise SimulationFailure(_describe(faults[0])) from faults[0]
    logger.debug("router started")
