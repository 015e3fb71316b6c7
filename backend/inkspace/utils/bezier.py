"""Bezier evaluation in the Bernstein basis. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# t = 0.0, 0.1, ..., 1.0
SAMPLES_PER_CURVE = 11


def sample_parameters(count: int = SAMPLES_PER_CURVE) -> NDArray[np.float64]:
    """Evenly spaced curve parameters over [0, 1], both ends included."""
    return np.linspace(0.0, 1.0, count)


def quadratic_points(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    t: NDArray[np.float64] | None = None,
) -> NDArray[np.float64]:
    """B(t) = (1-t)²P0 + 2(1-t)tP1 + t²P2, evaluated at every t. Returns Nx2."""
    if t is None:
        t = sample_parameters()
    t = t[:, None]
    mt = 1.0 - t
    return mt * mt * np.asarray(p0) + 2.0 * mt * t * np.asarray(p1) + t * t * np.asarray(p2)


def cubic_points(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    p3: tuple[float, float],
    t: NDArray[np.float64] | None = None,
) -> NDArray[np.float64]:
    """B(t) = (1-t)³P0 + 3(1-t)²tP1 + 3(1-t)t²P2 + t³P3, evaluated at every t. Returns Nx2."""
    if t is None:
        t = sample_parameters()
    t = t[:, None]
    mt = 1.0 - t
    return (
        mt**3 * np.asarray(p0)
        + 3.0 * mt**2 * t * np.asarray(p1)
        + 3.0 * mt * t**2 * np.asarray(p2)
        + t**3 * np.asarray(p3)
    )
