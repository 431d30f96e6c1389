# MIT License (see LICENSE)
"""
Fixed-interval physics loop.

Runs Engine.tick() every `interval_ms` milliseconds, one tick at a time,
and hands each TickResult to a callback (typically a renderer). A tick that
is due while the previous one is still running is skipped rather than
queued. If a tick takes longer than the interval, the interval is raised to
the measured time plus 5 % so the loop settles at a speed the machine can
sustain.
"""
from __future__ import annotations
import logging
import time
from typing import Callable

from .constants import LOOP_SLOWDOWN_FACTOR
from .engine import Engine
from .errors import ConfigError
from .view import TickResult

logger = logging.getLogger(__name__)

FrameCallback = Callable[[TickResult], None]


class PhysicsLoop:
    """
    Serial tick scheduler.

    Usage:
        loop = PhysicsLoop(engine, on_frame=renderer.render)
        loop.run(max_ticks=1000)
    """

    def __init__(
        self,
        engine: Engine,
        on_frame: FrameCallback | None = None,
        interval_ms: int | None = None,
        adaptive: bool = True,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.on_frame = on_frame
        self.interval_ms = engine.loop_speed_ms if interval_ms is None else interval_ms
        if self.interval_ms < 0:
            raise ConfigError(f"interval_ms must be >= 0, got {self.interval_ms}")
        self.adaptive = adaptive
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self.ticks_run = 0
        self.merges_seen = 0

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the loop to return after the current tick."""
        self._running = False

    def set_interval(self, interval_ms: int) -> None:
        if interval_ms < 0:
            raise ConfigError(f"interval_ms must be >= 0, got {interval_ms}")
        self.interval_ms = interval_ms
        self.engine.loop_speed_ms = interval_ms

    def step(self) -> TickResult:
        """Run one tick, deliver it, and adapt the interval if it overran."""
        start = self._clock()
        result = self.engine.tick()
        self.ticks_run += 1
        if result.merge.occurred:
            self.merges_seen += result.merge.count
            logger.info(result.merge.status_text())
        if self.on_frame is not None:
            self.on_frame(result)

        elapsed_ms = (self._clock() - start) * 1e3
        if self.adaptive and elapsed_ms > self.interval_ms:
            slower = int(elapsed_ms * LOOP_SLOWDOWN_FACTOR)
            if slower > self.interval_ms:
                logger.warning(
                    "Tick took %.1f ms (interval %d ms); slowing loop to %d ms",
                    elapsed_ms, self.interval_ms, slower,
                )
                self.set_interval(slower)
        return result

    def run(self, max_ticks: int | None = None) -> int:
        """
        Tick until stop() is called or max_ticks ticks have run.

        Returns:
            Number of ticks run by this call.
        """
        self._running = True
        done = 0
        next_due = self._clock()
        try:
            while self._running and (max_ticks is None or done < max_ticks):
                now = self._clock()
                if now < next_due:
                    self._sleep(next_due - now)
                self.step()
                done += 1
                interval = self.interval_ms / 1e3
                next_due += interval
                # Fell behind: drop the missed slots instead of bursting to catch up
                now = self._clock()
                if next_due < now:
                    skipped = int((now - next_due) // interval) + 1 if interval > 0 else 0
                    if skipped:
                        logger.debug("Skipped %d overdue tick slot(s)", skipped)
                    next_due = now
        finally:
            self._running = False
        return done
