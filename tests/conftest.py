import logging

import pytest

from particle_sim import Engine, EngineConfig, Particle


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """setup_logging() detaches the package logger from root; undo that per test."""
    yield
    logger = logging.getLogger("particle_sim")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def no_forces():
    """Config with all force strengths off, so only collisions and walls act."""
    return EngineConfig(gravity_strength=0.0, close_charge_strength=0.0, far_charge_strength=0.0)


@pytest.fixture
def make_engine():
    """Build an engine holding exactly the given particles."""
    def _make(config: EngineConfig, *particles: Particle) -> Engine:
        engine = Engine(config=config)
        for p in particles:
            engine.add_particle(p)
        return engine
    return _make
