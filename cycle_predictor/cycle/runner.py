"""Async driver for the countdown state machine."""

import asyncio
import time
from collections.abc import Awaitable, Callable

from loguru import logger

from cycle_predictor.config import Settings
from cycle_predictor.cycle.state_machine import (
    CycleState,
    TickResult,
    on_fire_complete,
    on_read_error,
    on_reading,
    validate_countdown,
)
from cycle_predictor.errors import TransientReadError
from cycle_predictor.scraper.base import BaseCountdownSource


class CycleRunner:
    """Reads the countdown once per tick and fires at most once per cycle.

    ``run_scheduler_cycle`` never awaits the firing itself: the prediction and
    any source refresh run as background tasks.
    """

    def __init__(
        self,
        settings: Settings,
        source: BaseCountdownSource,
        on_fire: Callable[[], Awaitable[object]],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.source = source
        self.on_fire = on_fire
        self.clock = clock
        self.state = CycleState(last_reset_at=clock())
        self.fire_count = 0
        self._fire_task: asyncio.Task | None = None
        self._refresh_task: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        return self._fire_task is not None and not self._fire_task.done()

    async def read_countdown(self) -> int:
        try:
            seconds = await asyncio.wait_for(
                self.source.read_countdown_seconds(),
                timeout=self.settings.COUNTDOWN_READ_TIMEOUT,
            )
        except asyncio.TimeoutError as e:
            raise TransientReadError(
                f"countdown read timed out after {self.settings.COUNTDOWN_READ_TIMEOUT}s"
            ) from e
        except TransientReadError:
            raise
        except Exception as e:
            # Any source failure counts toward the refresh threshold
            raise TransientReadError(f"countdown read failed: {type(e).__name__}: {e}") from e
        return validate_countdown(seconds, self.settings)

    async def run_scheduler_cycle(self) -> TickResult:
        """One poll tick."""
        now = self.clock()
        try:
            seconds = await self.read_countdown()
        except TransientReadError as e:
            result = on_read_error(self.state, now, self.settings)
            logger.warning(
                "Countdown read failed ({}/{}): {}",
                result.state.error_count or self.settings.ERROR_THRESHOLD,
                self.settings.ERROR_THRESHOLD, e,
            )
            self.state = result.state
            if result.refresh:
                self._start_refresh()
            return result

        previous = self.state.last_seconds
        result = on_reading(self.state, seconds, now, self.settings, in_flight=self.in_flight)
        self.state = result.state

        if seconds != previous:
            logger.debug("Countdown: {}s", seconds)
        if result.rollover:
            logger.info("New cycle started (countdown {} -> {})", previous, seconds)
        if result.fire:
            self._start_fire(seconds)
        return result

    # ── background work ───────────────────────────────────────────────

    def _start_fire(self, seconds: int) -> None:
        logger.info("Firing prediction at countdown {}s", seconds)
        self.fire_count += 1
        self._fire_task = asyncio.create_task(self._fire(), name="cycle-fire")

    async def _fire(self) -> None:
        try:
            await self.on_fire()
        except asyncio.CancelledError:
            logger.warning("Prediction cancelled")
            raise
        except Exception as e:
            logger.error("Prediction failed: {}: {}", type(e).__name__, e)
        finally:
            self.state = on_fire_complete(self.state)

    def _start_refresh(self) -> None:
        if self._refresh_task is not None and not self._refresh_task.done():
            logger.debug("Source refresh already running")
            return
        logger.warning("Too many countdown errors, requesting source refresh")
        self._refresh_task = asyncio.create_task(self._refresh(), name="source-refresh")

    async def _refresh(self) -> None:
        try:
            await self.source.request_refresh()
            logger.info("Source refresh requested")
        except Exception as e:
            logger.error("Source refresh failed: {}", e)

    # ── shutdown ──────────────────────────────────────────────────────

    async def shutdown(self, grace: float | None = None) -> None:
        """Let an in-flight firing finish within ``grace`` seconds, else cancel it."""
        grace = self.settings.SHUTDOWN_GRACE_SECONDS if grace is None else grace
        for task in (self._fire_task, self._refresh_task):
            if task is None or task.done():
                continue
            done, _ = await asyncio.wait({task}, timeout=grace)
            if not done:
                logger.warning("Cancelling {} on shutdown", task.get_name())
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
