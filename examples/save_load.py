import sys
from particle_sim import Engine
from particle_sim.core import total_mass
from particle_sim.logger_setup import setup_logging

setup_logging()

path = sys.argv[1] if len(sys.argv) > 1 else "snapshot.json"

engine = Engine(seed=7)
engine.regenerate(30, 250.0)
for _ in range(50):
    engine.tick()
engine.save(path)

restored = Engine()
restored.load(path)
print("saved", len(engine.particles), "restored", len(restored.particles))
print("mass", total_mass(engine.particles), total_mass(restored.particles))

# The loaded roster is the new reset point
for _ in range(20):
    restored.tick()
restored.reset_to_initial()
print("after reset:", len(restored.particles), "particles, tick", restored.tick_count)
