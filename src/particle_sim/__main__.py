# MIT License (see LICENSE)
"""
Headless runner.

    python -m particle_sim --particles 50 --average-mass 250 --ticks 500
    python -m particle_sim --load run.json --render debug --ticks 20
"""
from __future__ import annotations
import argparse
import logging
import sys

from .engine import Engine
from .errors import SimulationError
from .logger_setup import setup_logging
from .loop import PhysicsLoop
from .renderer import DebugRenderer, NullRenderer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="particle_sim",
        description="Run the particle simulation without a GUI.",
    )
    parser.add_argument("--particles", type=int, default=None, help="number of particles to generate")
    parser.add_argument("--average-mass", type=float, default=None, help="average generated mass")
    parser.add_argument("--environment-size", type=int, default=None, help="side of the square environment")
    parser.add_argument("--no-merge", action="store_true", help="always bounce on collision")
    parser.add_argument("--no-walls", action="store_true", help="unbounded environment")
    parser.add_argument("--ticks", type=int, default=100, help="number of ticks to run")
    parser.add_argument("--interval-ms", type=int, default=0, help="tick interval (0 = as fast as possible)")
    parser.add_argument("--seed", type=int, default=None, help="random seed for generation")
    parser.add_argument("--load", metavar="PATH", help="load a snapshot instead of generating")
    parser.add_argument("--save", metavar="PATH", help="save a snapshot after the run")
    parser.add_argument("--render", choices=("none", "debug"), default="none")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)

    try:
        engine = Engine(seed=args.seed)
        if args.load:
            engine.load(args.load)

        changes = {}
        if args.environment_size is not None:
            changes["environment_size"] = args.environment_size
        if args.no_merge:
            changes["allow_merge"] = False
        if args.no_walls:
            changes["wall_bounce"] = False
        if changes:
            engine.configure(**changes)

        if not args.load:
            engine.regenerate(args.particles, args.average_mass)

        renderer = DebugRenderer() if args.render == "debug" else NullRenderer()
        loop = PhysicsLoop(engine, on_frame=renderer.render, interval_ms=args.interval_ms, adaptive=False)
        loop.run(max_ticks=args.ticks)
        logger.info(
            "Ran %d tick(s): %d merge(s), %d particle(s) remain",
            loop.ticks_run, loop.merges_seen, len(engine.particles),
        )

        if args.save:
            engine.save(args.save)
    except SimulationError as e:
        logger.error("%s", e)
        return 2
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
