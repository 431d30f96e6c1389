# MIT License (see LICENSE)
"""
Default values for the particle simulation.

The force strengths are artificial and unitless; they were tuned so that a
few dozen particles with an average mass of ~250 in an 800-unit environment
produce visible orbits, clumping and mergers at a ~75 ms tick interval.
"""
from __future__ import annotations
import math

# Force strengths (G, C, F in the force laws).
DEFAULT_GRAVITY_STRENGTH: float = 15.0
DEFAULT_CLOSE_CHARGE_STRENGTH: float = 150_000_000.0
DEFAULT_FAR_CHARGE_STRENGTH: float = 7.5

# Side length of the square environment, in particle-radius units.
DEFAULT_ENVIRONMENT_SIZE: int = 800

# A bounce completes once the pair is this many combined radii apart.
DEFAULT_BOUNCE_COMPLETE_DIST_FACTOR: float = 1.5
# Colliding particles may merge only when max(m)/min(m) exceeds this.
DEFAULT_MERGE_MASS_RATIO_THRESHOLD: float = 2.5
# Same-sign close charges summing to at least this prevent a merge.
DEFAULT_MERGE_CLOSE_CHARGE_THRESHOLD: float = 0.25

# Generation and trail defaults.
DEFAULT_NUMBER_OF_PARTICLES: int = 50
DEFAULT_AVERAGE_MASS: float = 250.0
DEFAULT_HISTORY_LENGTH: int = 15
DEFAULT_LOOP_SPEED_MS: int = 75

# Mass sampling: N(avg, MASS_SPREAD * avg) clipped to
# [max(MASS_FLOOR, MASS_MIN_FACTOR * avg), MASS_MAX_FACTOR * avg].
MASS_SPREAD: float = 0.55
MASS_FLOOR: float = 4.0
MASS_MIN_FACTOR: float = 0.2
MASS_MAX_FACTOR: float = 1.75

# Display proxies.
RADIUS_DIVISOR: float = 2.0 * math.sqrt(math.pi)
ALPHA_MIN: int = 48
ALPHA_SPAN: int = 207

# Loop speed grows by this factor over the measured tick time when a tick overruns.
LOOP_SLOWDOWN_FACTOR: float = 1.05
