"""
curve_math.py — Generic curve utilities used by the parcel integrator.

  - LogScale: pressure ↔ height mapping, linear in log-pressure
  - first_intersection: lowest crossing of two piecewise-linear curves
  - zip_pairs: order-preserving pairing of two sequences

Nothing in here knows about atmospheric physics.
"""

import math
from typing import Optional, Sequence

import numpy as np


# ─────────────────────────────────────────────────────────────────────────────
# PIECEWISE-LINEAR HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _strictly_monotonic(values: np.ndarray) -> bool:
    d = np.diff(values)
    return bool(np.all(d > 0) or np.all(d < 0))

def _piecewise_linear(x: float, xs: np.ndarray, ys: np.ndarray) -> float:
    """
    Linear interpolation through (xs, ys), extrapolating from the end segments.
    xs must be strictly increasing. Unlike np.interp, values outside the
    domain are not clamped.
    """
    i = int(np.searchsorted(xs, x))
    i = min(max(i, 1), len(xs) - 1)
    x0, x1 = xs[i - 1], xs[i]
    y0, y1 = ys[i - 1], ys[i]
    return float(y0 + (y1 - y0) * (x - x0) / (x1 - x0))


# ─────────────────────────────────────────────────────────────────────────────
# LOG-PRESSURE SCALE
# ─────────────────────────────────────────────────────────────────────────────

class LogScale:
    """
    Invertible mapping height = f(pressure), linear in ln(p) between samples.

    Calling the scale converts pressure (hPa) to height (m); invert() goes
    the other way. Both directions extrapolate beyond the sampled range.
    """

    def __init__(self, pressures: Sequence[float], heights: Sequence[float]):
        p = np.asarray(pressures, dtype=float)
        z = np.asarray(heights, dtype=float)

        if p.shape != z.shape or p.ndim != 1:
            raise ValueError(f"pressure and height samples must be 1-D and equal length, "
                             f"got {p.shape} and {z.shape}")
        if len(p) < 2:
            raise ValueError("log scale needs at least two samples")
        if np.any(p <= 0):
            raise ValueError("pressures must be strictly positive")
        if not (_strictly_monotonic(p) and _strictly_monotonic(z)):
            raise ValueError("pressures and heights must be strictly monotonic")

        log_p = np.log(p)
        # Forward lookup runs on ascending ln(p), inverse on ascending height
        order_p = np.argsort(log_p)
        order_z = np.argsort(z)
        self._fwd_x, self._fwd_y = log_p[order_p], z[order_p]
        self._inv_x, self._inv_y = z[order_z], log_p[order_z]

    def __call__(self, p: float) -> float:
        return _piecewise_linear(math.log(p), self._fwd_x, self._fwd_y)

    def invert(self, z: float) -> float:
        return math.exp(_piecewise_linear(z, self._inv_x, self._inv_y))

def scale_log(pressures: Sequence[float], heights: Sequence[float]) -> LogScale:
    """Build a LogScale from parallel (pressure, height) samples."""
    return LogScale(pressures, heights)


# ─────────────────────────────────────────────────────────────────────────────
# CURVE INTERSECTION
# ─────────────────────────────────────────────────────────────────────────────

def first_intersection(
    xs_a: Sequence[float],
    ys_a: Sequence[float],
    xs_b: Sequence[float],
    ys_b: Sequence[float],
) -> Optional[tuple]:
    """
    First crossing of curves A and B, scanning from the smallest x.

    Both curves are treated as piecewise linear on their own x-grids, which
    need not match. The scan runs over the union of both grids restricted to
    the overlapping domain. A sample where A == B is returned as-is; otherwise
    the crossing is interpolated inside the first interval where A - B
    changes sign.

    Returns (x, y_a) at the crossing, or None if the curves never meet.
    """
    xa = np.asarray(xs_a, dtype=float)
    ya = np.asarray(ys_a, dtype=float)
    xb = np.asarray(xs_b, dtype=float)
    yb = np.asarray(ys_b, dtype=float)

    if len(xa) == 0 or len(xb) == 0:
        return None

    order_a = np.argsort(xa, kind="stable")
    order_b = np.argsort(xb, kind="stable")
    xa, ya = xa[order_a], ya[order_a]
    xb, yb = xb[order_b], yb[order_b]

    lo = max(xa[0], xb[0])
    hi = min(xa[-1], xb[-1])
    if lo > hi:
        return None

    grid = np.union1d(xa, xb)
    grid = grid[(grid >= lo) & (grid <= hi)]
    if len(grid) == 0:
        return None

    a = np.interp(grid, xa, ya)
    b = np.interp(grid, xb, yb)
    diff = a - b

    if diff[0] == 0:
        return float(grid[0]), float(a[0])

    for i in range(1, len(grid)):
        if diff[i] == 0:
            return float(grid[i]), float(a[i])
        if np.sign(diff[i]) != np.sign(diff[i - 1]):
            frac = diff[i - 1] / (diff[i - 1] - diff[i])
            x = grid[i - 1] + frac * (grid[i] - grid[i - 1])
            y = a[i - 1] + frac * (a[i] - a[i - 1])
            return float(x), float(y)

    return None


# ─────────────────────────────────────────────────────────────────────────────
# PAIRING
# ─────────────────────────────────────────────────────────────────────────────

def zip_pairs(first: Sequence, second: Sequence) -> list:
    """Pair two equal-length numeric sequences into a list of float 2-tuples, in order."""
    if len(first) != len(second):
        raise ValueError(f"cannot pair sequences of length {len(first)} and {len(second)}")
    return [(float(a), float(b)) for a, b in zip(first, second)]
