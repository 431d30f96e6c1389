# MIT License (see LICENSE)
"""
Bounded position history (particle trails).

Each particle owns a PositionHistory: a FIFO of its previous positions,
oldest first, never longer than its capacity. The rendering side iterates
it to draw a fading trail; iteration can be restarted any number of times.
"""
from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING, Iterable, Iterator

import numpy as np

if TYPE_CHECKING:
    from .types import Particle


class PositionHistory:
    """
    FIFO buffer of 2D positions with a mutable capacity.

    Appending past capacity evicts the oldest entry. Lowering the capacity
    drops the oldest entries immediately; raising it keeps everything.
    """

    def __init__(self, capacity: int = 0, positions: Iterable[np.ndarray] = ()):
        if capacity < 0:
            raise ValueError(f"History capacity must be >= 0, got {capacity}")
        self._buf: deque[np.ndarray] = deque(
            (np.array(p, dtype=np.float64) for p in positions), maxlen=capacity
        )

    @property
    def capacity(self) -> int:
        return self._buf.maxlen

    def resize(self, capacity: int) -> None:
        """Change the capacity, truncating from the oldest end if needed."""
        if capacity < 0:
            raise ValueError(f"History capacity must be >= 0, got {capacity}")
        if capacity != self._buf.maxlen:
            # deque keeps the rightmost (newest) items when built with a smaller maxlen
            self._buf = deque(self._buf, maxlen=capacity)

    def append(self, position: np.ndarray) -> None:
        self._buf.append(np.array(position, dtype=np.float64))

    def replace(self, positions: Iterable[np.ndarray]) -> None:
        """Replace the contents, keeping at most `capacity` of the newest."""
        self._buf = deque(
            (np.array(p, dtype=np.float64) for p in positions), maxlen=self._buf.maxlen
        )

    def clear(self) -> None:
        self._buf.clear()

    def snapshot(self) -> tuple[tuple[float, float], ...]:
        """Immutable copy of the stored positions, oldest first."""
        return tuple((float(p[0]), float(p[1])) for p in self._buf)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"PositionHistory(capacity={self.capacity}, len={len(self)})"


def record_position(particle: "Particle") -> None:
    """
    Store the particle's current position in its trail.

    Called right before the position update, so the trail holds
    pre-update positions. No-op when history tracking is off.
    """
    if particle.track_history:
        particle.position_history.append(particle.position)
