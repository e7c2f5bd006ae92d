"""
scheduler.py

Responsibility: Drives repeated reconciliation cycles — one immediately, then
one per interval measured from the end of the previous cycle — until a stop
event is set. Also exposes shutdown_signal() for process termination.
Does NOT: contain DNS business logic, config reading, or HTTP calls directly
— those are delegated entirely to ReconciliationEngine and its collaborators.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import signal

from config import AppConfig
from services.reconciliation_engine import CycleReport, ReconciliationEngine

logger = logging.getLogger(__name__)


class SchedulerState(str, enum.Enum):
    """Lifecycle of the scheduler loop."""

    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"
    STOPPED = "stopped"


class Scheduler:
    """
    Single-loop scheduler for reconciliation cycles.

    At most one cycle runs at a time. The stop event is only observed at
    cycle boundaries: an in-flight cycle always runs to completion, while a
    stop received during the wait ends the loop without another cycle.

    Collaborators:
        - ReconciliationEngine: runs the actual cycle
        - AppConfig: static configuration passed to every cycle
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        config: AppConfig,
        interval_seconds: float | None = None,
    ) -> None:
        """
        Args:
            engine: The reconciliation engine to drive.
            config: Static configuration handed to each cycle.
            interval_seconds: Seconds between cycles; when given, takes precedence
                over config.interval (which is in minutes).
        """
        self._engine = engine
        self._config = config
        self._interval = interval_seconds if interval_seconds is not None else config.interval_seconds
        self.state = SchedulerState.IDLE
        self.cycles = 0

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    async def run(self, stop: asyncio.Event) -> None:
        """
        Runs cycles until stop is set.

        Args:
            stop: Cancellation signal; typically the event from shutdown_signal().

        Returns:
            None, once the scheduler has reached STOPPED.
        """
        logger.info("Scheduler started — interval: %ss.", self._interval)

        while not stop.is_set():
            await self.run_once()

            if stop.is_set():
                break

            self.state = SchedulerState.WAITING
            logger.debug("Waiting %ss until next check...", self._interval)
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue

        self.state = SchedulerState.STOPPED
        logger.info("Scheduler stopped after %d cycle(s).", self.cycles)

    async def run_once(self) -> CycleReport | None:
        """
        Runs exactly one reconciliation cycle and logs its summary.

        Returns:
            The cycle's CycleReport, or None if the cycle crashed unexpectedly.
        """
        self.state = SchedulerState.RUNNING
        self.cycles += 1
        logger.debug("Reconciliation cycle %d triggered.", self.cycles)

        try:
            report = await self._engine.reconcile(self._config)
        except Exception:
            # NOTE: Domain errors are contained by the engine; anything reaching
            # here is a bug, but it must not take the daemon down.
            logger.exception("Unexpected error during reconciliation cycle %d.", self.cycles)
            return None

        if report.ok:
            logger.info(report.summary())
        else:
            logger.warning(report.summary())
        return report


def shutdown_signal() -> asyncio.Event:
    """
    Returns an event that is set when the process receives SIGINT or SIGTERM.

    Must be called from within a running event loop.

    Returns:
        An asyncio.Event suitable for Scheduler.run().
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _request_stop(signame: str) -> None:
        logger.info("Received %s — shutting down after the current cycle.", signame)
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_stop, sig.name)
        except NotImplementedError:
            # Event loops without signal support (Windows) fall back to signal.signal
            signal.signal(sig, lambda signum, _frame: loop.call_soon_threadsafe(_request_stop, signal.Signals(signum).name))

    return stop
