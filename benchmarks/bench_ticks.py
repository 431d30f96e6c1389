"""
Microbenchmark: time per tick vs number of particles.
Run:
  python benchmarks/bench_ticks.py
"""
import time
from particle_sim import Engine, EngineConfig
from particle_sim.profiler import Profiler

def run(n: int, ticks: int = 100):
    prof = Profiler()
    # merges off so the roster size stays n for the whole run
    engine = Engine(config=EngineConfig(allow_merge=False), seed=12345, profiler=prof)
    engine.regenerate(n, 250.0)

    # warmup
    for _ in range(10):
        engine.tick()
    prof.stats.clear()

    t0 = time.perf_counter()
    for _ in range(ticks):
        engine.tick()
    t1 = time.perf_counter()

    total = t1 - t0
    per_tick = total / ticks
    return per_tick, prof.stats

if __name__ == "__main__":
    for n in [10, 50, 100, 250, 500]:
        per_tick, stats = run(n)
        summary = stats.summary()
        print(f"N={n:4d}  tick={1e3*per_tick:8.3f} ms  ticks/s={1/per_tick:8.1f}")
        # phases by time spent
        for k in stats.slowest(len(summary)):
            print(f"  {k:10s} {summary[k]['mean_ms']:8.3f} ms  {100*summary[k]['share']:5.1f} %")
        print()
