import numpy as np
import pytest

from particle_sim import Engine, EngineConfig, Particle
from particle_sim.history import PositionHistory, record_position


def test_fifo_eviction():
    h = PositionHistory(3)
    for x in range(5):
        h.append(np.array([x, 0.0]))
    assert len(h) == 3
    assert [p[0] for p in h] == [2.0, 3.0, 4.0]


def test_shrinking_truncates_oldest():
    h = PositionHistory(5, [np.array([x, 0.0]) for x in range(5)])
    h.resize(2)
    assert h.capacity == 2
    assert h.snapshot() == ((3.0, 0.0), (4.0, 0.0))
    h.resize(4)
    assert len(h) == 2
    h.resize(0)
    assert len(h) == 0
    h.append(np.array([9.0, 9.0]))
    assert len(h) == 0


def test_iteration_is_restartable():
    h = PositionHistory(3, [np.array([1.0, 1.0]), np.array([2.0, 2.0])])
    assert [tuple(p) for p in h] == [tuple(p) for p in h]


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        PositionHistory(-1)


def test_record_position_respects_track_flag():
    p = Particle(10, position=(1.0, 2.0), history_size=3)
    record_position(p)
    assert len(p.position_history) == 0

    p.track_history = True
    record_position(p)
    p.position[0] = 5.0
    # Stored value is a copy, not a view of the live position
    assert p.position_history.snapshot() == ((1.0, 2.0),)


def test_history_bound_holds_every_tick_and_after_resize():
    cfg = EngineConfig(gravity_strength=0.0, close_charge_strength=0.0, far_charge_strength=0.0,
                       history_trail=True, history_length=5)
    engine = Engine(config=cfg)
    engine.add_particle(Particle(100, position=(100.0, 100.0), velocity=(1.0, 0.0)))
    p = engine.particles[0]

    for _ in range(10):
        engine.tick()
        assert len(p.position_history) <= p.history_size

    # Trail holds the pre-update positions of the last five ticks
    assert p.position_history.snapshot() == tuple((float(x), 100.0) for x in range(105, 110))
    assert p.position[0] == pytest.approx(110.0)

    engine.set_history_length(2)
    assert p.position_history.snapshot() == ((108.0, 100.0), (109.0, 100.0))

    engine.set_history_length(0)
    engine.tick()
    assert len(p.position_history) == 0


def test_trail_disabled_records_nothing():
    cfg = EngineConfig(history_trail=False, history_length=10)
    engine = Engine(config=cfg)
    engine.add_particle(Particle(100, position=(100.0, 100.0), velocity=(1.0, 0.0)))
    for _ in range(3):
        result = engine.tick()
    assert result.particles[0].history == ()
