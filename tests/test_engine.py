import numpy as np
import pytest

from particle_sim import (
    ConfigError,
    Engine,
    EngineConfig,
    Particle,
    TickInProgressError,
)
from particle_sim.core import all_finite, total_mass
from particle_sim.profiler import Profiler, ProfileStats


# =============================================================================
# Generation
# =============================================================================

def test_regenerate_samples_within_bounds():
    engine = Engine(seed=1)
    engine.regenerate(200, 250.0)

    assert len(engine.particles) == 200
    assert engine.number_of_particles == 200
    for p in engine.particles:
        assert 50.0 <= p.mass <= 437.5
        assert -1.0 <= p.close_charge <= 1.0
        assert 0.0 <= p.far_charge <= 1.0
        assert 0.0 <= p.position[0] < 800.0
        assert 0.0 <= p.position[1] < 800.0
        assert np.allclose(p.velocity, 0.0)
        assert p.track_history and p.history_size == 15


def test_regenerate_mass_floor():
    engine = Engine(seed=3)
    engine.regenerate(100, 10.0)
    assert min(p.mass for p in engine.particles) >= 4.0


def test_regenerate_is_deterministic_for_a_seed():
    a, b = Engine(seed=42), Engine(seed=42)
    a.regenerate(30, 100.0)
    b.regenerate(30, 100.0)
    assert [p.mass for p in a.particles] == [p.mass for p in b.particles]
    assert all(np.array_equal(p.position, q.position) for p, q in zip(a.particles, b.particles))


def test_regenerate_defaults_to_last_request():
    engine = Engine(seed=0)
    engine.regenerate(7, 80.0)
    engine.regenerate()
    assert len(engine.particles) == 7
    assert engine.average_mass == 80.0


@pytest.mark.parametrize("count, avg", [(-1, 250.0), (1.5, 250.0), (10, 0.0), (10, -5.0), (10, float("nan"))])
def test_regenerate_rejects_bad_request(count, avg):
    engine = Engine(seed=0)
    engine.regenerate(5, 100.0)
    before = list(engine.particles)
    with pytest.raises(ConfigError):
        engine.regenerate(count, avg)
    assert engine.particles == before


def test_regenerate_zero_particles():
    engine = Engine(seed=0)
    engine.regenerate(0, 100.0)
    assert engine.particles == []
    result = engine.tick()
    assert result.particles == ()


# =============================================================================
# Reset
# =============================================================================

def test_reset_restores_generated_state():
    engine = Engine(seed=5)
    engine.regenerate(20, 250.0)
    initial = [(p.mass, p.position.copy()) for p in engine.particles]

    for _ in range(10):
        engine.tick()
    engine.reset_to_initial()

    assert engine.tick_count == 0
    assert len(engine.particles) == 20
    for p, (m, pos) in zip(engine.particles, initial):
        assert p.mass == m
        assert np.array_equal(p.position, pos)
        assert np.allclose(p.velocity, 0.0)
        assert len(p.position_history) == 0
        assert p.track_history


def test_reset_twice_is_stable():
    engine = Engine(seed=5)
    engine.regenerate(5, 250.0)
    engine.tick()
    engine.reset_to_initial()
    first = [p.mass for p in engine.particles]
    engine.tick()
    engine.reset_to_initial()
    assert [p.mass for p in engine.particles] == first


def test_initial_particles_are_copies():
    engine = Engine(seed=5)
    engine.regenerate(3, 250.0)
    copies = engine.initial_particles
    copies[0].mass = 1.0
    assert engine.initial_particles[0].mass != 1.0


# =============================================================================
# Configuration
# =============================================================================

def test_configure_applies_valid_changes():
    engine = Engine()
    new = engine.configure(gravity_strength=3.0, allow_merge=False)
    assert engine.config is new
    assert new.gravity_strength == 3.0
    assert not new.allow_merge
    assert new.close_charge_strength == EngineConfig().close_charge_strength


@pytest.mark.parametrize(
    "changes",
    [
        {"gravity_strength": float("nan")},
        {"environment_size": 0},
        {"environment_size": 12.5},
        {"history_length": -1},
        {"allow_merge": "yes"},
        {"gravity_strength": 1.0, "wall_bounce": None},
        {"no_such_setting": 1},
    ],
)
def test_configure_rejects_and_leaves_config_unchanged(changes):
    engine = Engine()
    before = engine.config
    with pytest.raises(ConfigError):
        engine.configure(**changes)
    assert engine.config is before


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        EngineConfig(environment_size=-10)


def test_history_settings_reach_every_particle():
    engine = Engine(seed=2)
    engine.regenerate(4, 250.0)
    engine.set_history_length(3)
    assert all(p.history_size == 3 for p in engine.particles)
    engine.set_history_trail(False)
    assert not any(p.track_history for p in engine.particles)


def test_config_dict_round_trip():
    cfg = EngineConfig(gravity_strength=2.0, environment_size=500, history_trail=False)
    assert EngineConfig.from_dict(cfg.to_dict()) == cfg
    assert EngineConfig.from_dict({"environment_size": 300, "unrelated": True}).environment_size == 300


# =============================================================================
# Tick
# =============================================================================

def test_tick_counts_and_returns_views():
    engine = Engine(seed=9)
    engine.regenerate(10, 250.0)
    r1 = engine.tick()
    r2 = engine.tick()
    assert (r1.tick, r2.tick) == (1, 2)
    assert engine.tick_count == 2
    assert len(r2.particles) == len(engine.particles)
    assert r2.particles[0].mass == engine.particles[0].mass


def test_tick_sorts_by_descending_mass(no_forces):
    engine = Engine(config=no_forces.replace(allow_merge=False), seed=4)
    engine.regenerate(40, 250.0)
    engine.tick()
    masses = [p.mass for p in engine.particles]
    assert masses == sorted(masses, reverse=True)


def test_tick_with_one_particle_stays_finite():
    engine = Engine(seed=0)
    engine.regenerate(1, 250.0)
    for _ in range(5):
        engine.tick()
    assert all_finite(engine.particles)
    assert np.allclose(engine.particles[0].velocity, 0.0)


def test_merge_disabled_keeps_both(no_forces, make_engine):
    big = Particle(100, close_charge=-0.5, position=(200.0, 200.0))
    small = Particle(10, close_charge=0.5, position=(202.0, 200.0))
    engine = make_engine(no_forces.replace(allow_merge=False), big, small)
    result = engine.tick()
    assert not result.merge.occurred
    assert len(engine.particles) == 2


def test_long_run_conserves_mass():
    engine = Engine(seed=11)
    engine.regenerate(60, 250.0)
    before = total_mass(engine.particles)
    for _ in range(200):
        engine.tick()
    assert total_mass(engine.particles) == pytest.approx(before)
    assert all_finite(engine.particles)
    assert len(engine.particles) <= 60


def test_tick_while_busy_raises():
    engine = Engine(seed=0)
    engine.regenerate(3, 250.0)
    engine._lock.acquire()
    try:
        with pytest.raises(TickInProgressError):
            engine.tick()
    finally:
        engine._lock.release()
    assert engine.tick_count == 0
    engine.tick()
    assert engine.tick_count == 1


def test_profiler_records_tick_phases():
    profiler = Profiler()
    engine = Engine(seed=0, profiler=profiler)
    engine.regenerate(10, 250.0)
    for _ in range(3):
        engine.tick()
    summary = profiler.stats.summary()
    for name in ("forces", "integrate", "sort", "merge", "walls"):
        assert summary[name]["n"] == 3
    assert abs(sum(s["share"] for s in summary.values()) - 1.0) < 1e-9


def test_profile_stats_summary_and_ranking():
    stats = ProfileStats()
    for dt in (0.003, 0.001):
        stats.add("forces", dt)
    stats.add("walls", 0.001)
    summary = stats.summary()
    assert summary["forces"]["n"] == 2
    assert summary["forces"]["mean_ms"] == pytest.approx(2.0)
    assert summary["forces"]["max_ms"] == pytest.approx(3.0)
    assert summary["forces"]["share"] == pytest.approx(0.8)
    assert stats.slowest(2) == ["forces", "walls"]
    stats.clear()
    assert stats.summary() == {} and stats.slowest() == []


def test_regenerate_rejects_average_mass_beyond_float_range():
    engine = Engine(seed=0)
    with pytest.raises(ConfigError):
        engine.regenerate(5, 10 ** 400)


def test_config_rejects_integers_beyond_float_range():
    with pytest.raises(ConfigError):
        EngineConfig(gravity_strength=10 ** 400)
    with pytest.raises(ConfigError):
        EngineConfig(environment_size=10 ** 400)
    with pytest.raises(ConfigError):
        EngineConfig(merge_mass_ratio_threshold=10 ** 400)


def test_added_particles_join_reset_point_on_request(no_forces):
    engine = Engine(config=no_forces)
    engine.add_particle(Particle(100, position=(50.0, 50.0), velocity=(1.0, 0.0)))
    engine.reset_to_initial()
    assert engine.particles == []

    engine.add_particle(Particle(100, position=(50.0, 50.0), velocity=(1.0, 0.0)))
    engine.add_particle(Particle(20, position=(300.0, 50.0)), as_initial=True)
    for _ in range(4):
        engine.tick()
    engine.reset_to_initial()
    assert sorted(p.mass for p in engine.particles) == [20.0, 100.0]
    heavy = max(engine.particles, key=lambda p: p.mass)
    assert np.allclose(heavy.position, [50.0, 50.0])
