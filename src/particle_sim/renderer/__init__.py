# MIT License (see LICENSE)
"""
Rendering adapters for visualization.

This subpackage provides:
    - RendererAdapter: Abstract base class consuming a TickResult.
    - DebugRenderer: Text/console output for debugging.
    - NullRenderer: No-op renderer for headless runs.
    - BufferedRenderer: Records frames for playback or export.

Typical usage:
    from particle_sim.renderer import DebugRenderer

    renderer = DebugRenderer()
    renderer.render(engine.tick())
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    NullRenderer,
    BufferedRenderer,
)

__all__ = [
    "RendererAdapter",
    "DebugRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
