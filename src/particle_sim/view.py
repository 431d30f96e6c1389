# MIT License (see LICENSE)
"""
Read-only data handed from the engine to renderers and status displays.

Engine.tick() returns a TickResult: the merge-event summary for the tick
plus an immutable view of every particle. Views are plain values and stay
valid forever; the Particle references inside MergeEvent are only valid
until the next tick.
"""
from __future__ import annotations
from dataclasses import dataclass

from .types import Particle


@dataclass(frozen=True)
class ParticleView:
    """Immutable snapshot of the fields a renderer needs."""
    mass: float
    close_charge: float
    far_charge: float
    position: tuple[float, float]
    velocity: tuple[float, float]
    radius: int
    rgba: tuple[int, int, int, int]
    history: tuple[tuple[float, float], ...]

    @classmethod
    def of(cls, p: Particle) -> "ParticleView":
        return cls(
            mass=p.mass,
            close_charge=p.close_charge,
            far_charge=p.far_charge,
            position=(float(p.position[0]), float(p.position[1])),
            velocity=(float(p.velocity[0]), float(p.velocity[1])),
            radius=p.radius,
            rgba=p.rgba,
            history=p.position_history.snapshot(),
        )


@dataclass(frozen=True)
class MergeEvent:
    """
    Summary of the merges performed in one tick.

    Attributes:
        occurred: At least one merge happened.
        multiple: Some merge combined more than two particles.
        source: Root (largest) particle of the last merge.
        partner: One of the particles absorbed by `source`.
        result: The particle created by the last merge.
        count: Number of merged particles created this tick.
    """
    occurred: bool = False
    multiple: bool = False
    source: Particle | None = None
    partner: Particle | None = None
    result: Particle | None = None
    count: int = 0

    def status_text(self) -> str:
        """One-line human readable description ('' when nothing merged)."""
        if not self.occurred:
            return ""
        text = f"Merging {self.source.short_string()} with {self.partner.short_string()}"
        if self.multiple:
            text += " (et. al.)"
        return text + f". Now: {self.result.short_string()}"


NO_MERGE = MergeEvent()


@dataclass(frozen=True)
class TickResult:
    """What one tick produced: the merge summary and the roster view."""
    tick: int
    merge: MergeEvent
    particles: tuple[ParticleView, ...]
