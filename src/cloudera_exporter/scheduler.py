"""Fixed-interval poll scheduler driving the fetch -> project pipeline."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from cloudera_exporter.errors import AuthError, ConnectError, DecodeError
from cloudera_exporter.health.models import HealthDocument
from cloudera_exporter.metrics.projector import project
from cloudera_exporter.metrics.registry import MetricRegistry

logger = logging.getLogger(__name__)

FetchFn = Callable[[], Awaitable[HealthDocument]]
SleepFn = Callable[[float], Awaitable[None]]


def _error_label(exc: BaseException) -> str:
    if isinstance(exc, AuthError):
        return "auth"
    if isinstance(exc, ConnectError):
        return "connect"
    if isinstance(exc, DecodeError):
        return "decode"
    return "unexpected"


class PollScheduler:
    """Runs one fetch + project cycle immediately, then every *interval* seconds.

    There is a single task, so cycles never overlap. A failed fetch ends the
    cycle and leaves the registry untouched. UnknownServiceError raised by a
    static registry is not a cycle failure: it propagates out of ``run()``.
    """

    def __init__(
        self,
        fetch: FetchFn,
        registry: MetricRegistry,
        interval: float = 10.0,
        include_checks: bool = False,
        sleep: SleepFn | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fetch = fetch
        self._registry = registry
        self._interval = interval
        self._include_checks = include_checks
        self._sleep = sleep or self._wait
        self._clock = clock
        self._stop = asyncio.Event()
        self._running = False
        self.cycles = 0
        self.last_error: str | None = None
        self.last_success: float | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return self._interval

    def stop(self) -> None:
        """Ask ``run()`` to return; interrupts a pending wait."""
        self._stop.set()

    async def _wait(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except TimeoutError:
            pass

    async def run_cycle(self) -> bool:
        """Execute one poll cycle. Returns True if the registry was updated."""
        start = time.monotonic()
        self.cycles += 1
        try:
            document = await self._fetch()
        except (ConnectError, DecodeError) as exc:
            self._record_failure(exc, start)
            logger.warning("Poll cycle %d failed: %s", self.cycles, exc)
            return False
        except Exception as exc:
            self._record_failure(exc, start)
            logger.exception("Poll cycle %d failed unexpectedly", self.cycles)
            return False

        count = project(document, self._registry, include_checks=self._include_checks)
        self.last_error = None
        self.last_success = self._clock()
        self._registry.record_success(self.last_success, time.monotonic() - start)
        logger.debug("Poll cycle %d updated %d services", self.cycles, count)
        return True

    def _record_failure(self, exc: Exception, start: float) -> None:
        self.last_error = str(exc)
        self._registry.record_failure(_error_label(exc), time.monotonic() - start)

    async def run(self) -> None:
        """Poll until ``stop()`` is called."""
        self._running = True
        logger.info("Polling every %.1fs", self._interval)
        try:
            while not self._stop.is_set():
                await self.run_cycle()
                if self._stop.is_set():
                    break
                await self._sleep(self._interval)
        finally:
            self._running = False
            logger.info("Poll scheduler stopped after %d cycles", self.cycles)
