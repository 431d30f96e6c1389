# MIT License (see LICENSE)
"""
Per-phase tick timing.

Engine.tick() wraps each of its phases (forces, integrate, sort, merge,
walls) in profiler.section(name) when a Profiler is attached. Forces are
O(N²) and normally dominate; slowest() makes that easy to confirm.
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """Seconds spent per phase, one sample per tick."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        self.samples.setdefault(name, []).append(dt)

    def total(self) -> float:
        """Seconds across all phases."""
        return sum(sum(times) for times in self.samples.values())

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Returns:
            {phase: {'n', 'mean_ms', 'max_ms', 'total_ms', 'share'}}, where
            share is the phase's fraction of all recorded time.
        """
        grand = self.total()
        out = {}
        for name, times in self.samples.items():
            spent = sum(times)
            out[name] = {
                "n": len(times),
                "mean_ms": 1e3 * spent / len(times),
                "max_ms": 1e3 * max(times),
                "total_ms": 1e3 * spent,
                "share": spent / grand if grand > 0 else 0.0,
            }
        return out

    def slowest(self, count: int = 1) -> list[str]:
        """Phase names ordered by total time spent, largest first."""
        ranked = sorted(self.samples, key=lambda name: sum(self.samples[name]), reverse=True)
        return ranked[:count]

    def clear(self) -> None:
        self.samples.clear()


class Profiler:
    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
