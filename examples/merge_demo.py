from particle_sim import Engine, EngineConfig, Particle
from particle_sim.core import total_mass
from particle_sim.renderer import DebugRenderer

# No forces: only the collisions act
engine = Engine(config=EngineConfig(gravity_strength=0.0, close_charge_strength=0.0, far_charge_strength=0.0))

big = Particle(400, close_charge=-0.4, far_charge=0.8, position=(200.0, 400.0), velocity=(1.0, 0.0))
small = Particle(40, close_charge=0.6, far_charge=0.2, position=(240.0, 400.0), velocity=(-1.0, 0.0))
twin_a = Particle(100, position=(500.0, 400.0), velocity=(1.0, 0.2))
twin_b = Particle(100, position=(530.0, 400.0), velocity=(-1.0, 0.2))
for p in (big, small, twin_a, twin_b):
    engine.add_particle(p)

m0 = total_mass(engine.particles)
renderer = DebugRenderer(verbose=False)

for _ in range(40):
    result = engine.tick()
    if result.merge.occurred:
        print(result.merge.status_text())
        renderer.render(result)

print("particles", len(engine.particles), "mass before", m0, "after", total_mass(engine.particles))
print("twins (bounced):", twin_a.velocity, twin_b.velocity)
