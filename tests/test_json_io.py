import json

import numpy as np
import pytest

from particle_sim import Engine, EngineConfig, Particle, SnapshotError
from particle_sim.io import engine_to_json, load_engine, load_snapshot, snapshot_from_json


def _doc(particles, **top):
    doc = {
        "physics_engine": {
            "gravity_strength": 10.0,
            "close_charge_strength": 1e8,
            "far_charge_strength": 5.0,
            "environment_size": 600,
            "allow_merge": False,
            "wall_bounce": True,
            "particles": particles,
        },
        "number_of_particles": len(particles),
        "average_mass": 100.0,
        "history_trail": True,
        "history_length": 5,
        "physics_loop_speed": 40,
    }
    doc.update(top)
    return doc


def test_save_load_round_trip(tmp_path, make_engine):
    cfg = EngineConfig(gravity_strength=2.5, environment_size=640, wall_bounce=False, history_length=4)
    engine = make_engine(
        cfg,
        Particle(123.5, close_charge=-0.25, far_charge=0.75, position=(10.5, 20.25), velocity=(0.1, -0.2)),
        Particle(7.0, close_charge=0.5, far_charge=0.0, position=(300.0, 1.0)),
    )
    engine.loop_speed_ms = 60
    path = tmp_path / "run.json"
    engine.save(str(path))

    loaded = Engine()
    loaded.load(str(path))

    assert loaded.config == cfg
    assert loaded.loop_speed_ms == 60
    assert len(loaded.particles) == 2
    for a, b in zip(engine.particles, loaded.particles):
        assert a.mass == b.mass
        assert a.close_charge == b.close_charge
        assert a.far_charge == b.far_charge
        assert np.array_equal(a.position, b.position)
        assert np.array_equal(a.velocity, b.velocity)
        assert b.radius == a.radius and b.rgba == a.rgba
        assert b.history_size == 4 and len(b.position_history) == 0


def test_saved_document_layout(make_engine):
    engine = make_engine(EngineConfig(), Particle(50, position=(1.0, 2.0)))
    doc = engine_to_json(engine)
    assert set(doc) == {
        "physics_engine",
        "number_of_particles",
        "average_mass",
        "history_trail",
        "history_length",
        "physics_loop_speed",
    }
    assert doc["physics_engine"]["particles"] == [
        {"mass": 50.0, "close_charge": 0.0, "far_charge": 0.0, "position": [1.0, 2.0], "velocity": [0.0, 0.0]}
    ]
    assert "radius" not in doc["physics_engine"]["particles"][0]
    json.dumps(doc)


def test_load_sets_reset_point(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps(_doc([{"mass": 100, "position": [50, 50], "velocity": [1, 0]}])))
    engine = Engine()
    engine.load(str(path))
    for _ in range(3):
        engine.tick()
    engine.reset_to_initial()
    assert np.allclose(engine.particles[0].position, [50.0, 50.0])
    assert np.allclose(engine.particles[0].velocity, [1.0, 0.0])


def test_charges_are_clamped_on_load():
    snap = snapshot_from_json(_doc([{"mass": 10, "close_charge": 3.0, "far_charge": -2.0}]))
    p = snap.particles[0]
    assert p.close_charge == 1.0
    assert p.far_charge == 0.0


def test_missing_optional_fields_take_defaults():
    snap = snapshot_from_json({"physics_engine": {"particles": [{"mass": 4}]}})
    assert snap.config == EngineConfig()
    assert snap.number_of_particles == 1
    assert np.allclose(snap.particles[0].position, 0.0)


@pytest.mark.parametrize(
    "doc, message",
    [
        ([], "root"),
        ({}, "physics_engine"),
        ({"physics_engine": {"particles": {}}}, "particles"),
        (_doc([{"mass": -1}]), "index 0"),
        (_doc([{"close_charge": 0.1}]), "index 0"),
        (_doc([{"mass": 1}, {"mass": 1, "position": [1]}]), "index 1"),
        (_doc([{"mass": "heavy"}]), "index 0"),
        (_doc([], history_length=-3), "settings"),
        (_doc([], physics_loop_speed=-1), "physics_loop_speed"),
        (_doc([], average_mass=0), "average_mass"),
        (_doc([{"mass": 10 ** 400}]), "index 0"),
        (_doc([{"mass": 1, "velocity": [0, -10 ** 400]}]), "index 0"),
        (_doc([], average_mass=10 ** 400), "average_mass"),
    ],
)
def test_malformed_documents_are_rejected(doc, message):
    with pytest.raises(SnapshotError, match=message):
        snapshot_from_json(doc)


def test_bad_environment_size_is_rejected():
    doc = _doc([])
    doc["physics_engine"]["environment_size"] = 0
    with pytest.raises(SnapshotError):
        snapshot_from_json(doc)


def test_oversized_engine_strength_is_rejected():
    doc = _doc([])
    doc["physics_engine"]["gravity_strength"] = 10 ** 400
    with pytest.raises(SnapshotError, match="settings"):
        snapshot_from_json(doc)


def test_oversized_integer_in_file_is_rejected(tmp_path):
    """Python's json parses huge integer literals exactly; they must not escape as OverflowError."""
    path = tmp_path / "huge.json"
    path.write_text('{"physics_engine": {"particles": [{"mass": 1' + "0" * 400 + "}]}}")
    engine = Engine()
    with pytest.raises(SnapshotError):
        engine.load(str(path))
    assert engine.particles == []


def test_non_utf8_file_is_rejected(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe")
    engine = Engine(seed=1)
    engine.regenerate(3, 250.0)
    before = list(engine.particles)
    with pytest.raises(SnapshotError, match="UTF-8"):
        engine.load(str(path))
    assert engine.particles == before


def test_failed_load_leaves_engine_untouched(tmp_path):
    engine = Engine(seed=1)
    engine.regenerate(5, 250.0)
    before_particles = list(engine.particles)
    before_config = engine.config

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(SnapshotError):
        engine.load(str(bad))

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps(_doc([{"mass": 10}, {"mass": 0}])))
    with pytest.raises(SnapshotError):
        engine.load(str(invalid))

    with pytest.raises(SnapshotError):
        engine.load(str(tmp_path / "missing.json"))

    assert engine.particles == before_particles
    assert engine.config is before_config


def test_snapshot_error_is_a_value_error(tmp_path):
    with pytest.raises(ValueError):
        load_snapshot(str(tmp_path / "nope.json"))


def test_load_engine_builds_a_new_engine(tmp_path):
    path = tmp_path / "s.json"
    path.write_text(json.dumps(_doc([{"mass": 100}, {"mass": 20, "position": [40, 40]}])))
    engine = load_engine(str(path), seed=3)
    assert len(engine.particles) == 2
    assert engine.config.environment_size == 600
    assert not engine.config.allow_merge
    assert engine.loop_speed_ms == 40
