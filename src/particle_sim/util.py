# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

All vectors are numpy arrays of shape (2,) in float64.
"""
from __future__ import annotations
import math

import numpy as np


X_AXIS = np.array([1.0, 0.0], dtype=np.float64)
Y_AXIS = np.array([0.0, 1.0], dtype=np.float64)


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Always copies, so callers never alias a tuple/list or another
    particle's array.
    """
    return np.array(x, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 2D vector."""
    return float(v[0] * v[0] + v[1] * v[1])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 2D vector."""
    return math.sqrt(norm2(v))


def reflect(v: np.ndarray, n: np.ndarray) -> np.ndarray:
    """
    Reflect v across the line perpendicular to the unit normal n.

    v' = v - 2 (v·n) n. With n = (1, 0) the x component flips; with
    n = (0, 1) the y component flips. Magnitude is preserved.
    """
    return v - 2.0 * float(np.dot(v, n)) * n


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(lo, min(x, hi))


def to_list(arr) -> list[float]:
    """Convert numpy array or tuple to a clean list of floats."""
    if isinstance(arr, np.ndarray):
        return arr.tolist()
    return [float(x) for x in arr]
