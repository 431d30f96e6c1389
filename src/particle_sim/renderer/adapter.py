# MIT License (see LICENSE)
"""
Renderer adapters for particle visualization.

The engine has no drawing dependency. Each tick returns a TickResult, and a
renderer consumes it: one begin_frame, one draw_particle per particle
(largest first, so small particles are drawn on top), then end_frame.
Adapters here cover text output, no-op and frame recording; a graphical
front end implements the same interface.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TextIO
import sys

from ..view import ParticleView, TickResult, MergeEvent


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Usage:
        renderer = MyRenderer()
        result = engine.tick()
        renderer.render(result)
    """

    @abstractmethod
    def begin_frame(self, tick: int) -> None:
        """Begin a new frame for the given tick number."""
        ...

    @abstractmethod
    def draw_particle(self, particle: ParticleView) -> None:
        """Draw one particle (and its trail, oldest point faintest)."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def show_status(self, merge: MergeEvent) -> None:
        """Display the merge summary. Ignored by default."""

    def render(self, result: TickResult) -> None:
        """Draw every particle of a tick result, then show its merge status."""
        self.begin_frame(result.tick)
        for view in result.particles:
            self.draw_particle(view)
        self.end_frame()
        if result.merge.occurred:
            self.show_status(result.merge)


class DebugRenderer(RendererAdapter):
    """
    Console/text renderer for development and testing.

    Output:
        === Tick 12 ===
        m=412.3 r=6 @ (401.22, 388.10) v=(0.31, -0.02) rgba=(0, 120, 0, 200)
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: If True, include velocity, colour and trail length.
        """
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, tick: int) -> None:
        self.output.write(f"=== Tick {tick} ===\n")

    def draw_particle(self, particle: ParticleView) -> None:
        x, y = particle.position
        line = f"m={particle.mass:.1f} r={particle.radius} @ ({x:.2f}, {y:.2f})"
        if self.verbose:
            vx, vy = particle.velocity
            line += f" v=({vx:.2f}, {vy:.2f}) rgba={particle.rgba} trail={len(particle.history)}"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()

    def show_status(self, merge: MergeEvent) -> None:
        self.output.write(merge.status_text() + "\n")


class NullRenderer(RendererAdapter):
    """No-op renderer, for headless runs and benchmarks."""

    def begin_frame(self, tick: int) -> None:
        pass

    def draw_particle(self, particle: ParticleView) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records frames for later playback or export.

    Each frame is {'tick': int, 'particles': [ParticleView, ...]}; merge
    status lines are collected in `statuses`.
    """

    def __init__(self):
        self.frames: list[dict] = []
        self.statuses: list[str] = []
        self._current_frame: dict | None = None

    def begin_frame(self, tick: int) -> None:
        self._current_frame = {"tick": tick, "particles": []}

    def draw_particle(self, particle: ParticleView) -> None:
        if self._current_frame is None:
            return
        self._current_frame["particles"].append(particle)

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def show_status(self, merge: MergeEvent) -> None:
        self.statuses.append(merge.status_text())

    def clear(self) -> None:
        self.frames.clear()
        self.statuses.clear()
