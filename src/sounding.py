"""
sounding.py — In-memory sounding and surface-parcel containers.

The caller builds these from whatever source it reads; no parsing or unit
conversion happens here. Pressure in hPa, geopotential height in m,
temperature in K.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np


# ─────────────────────────────────────────────────────────────────────────────
# DATA STRUCTURES
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Sounding:
    """
    Vertical profile at a single point and time.
    Index i of level, gh and temp refers to the same physical level.
    Either ordering (surface first or top first) is accepted.
    """
    level: np.ndarray   # hPa
    gh:    np.ndarray   # m
    temp:  np.ndarray   # K

    def __post_init__(self):
        level = np.array(self.level, dtype=float)
        gh    = np.array(self.gh, dtype=float)
        temp  = np.array(self.temp, dtype=float)

        if not (len(level) == len(gh) == len(temp)):
            raise ValueError(
                f"sounding sequences must be index-aligned, got lengths "
                f"level={len(level)} gh={len(gh)} temp={len(temp)}"
            )
        if len(level) < 2:
            raise ValueError("sounding needs at least two levels")

        # private read-only copies; frozen dataclass needs object.__setattr__
        for arr in (level, gh, temp):
            arr.flags.writeable = False
        object.__setattr__(self, "level", level)
        object.__setattr__(self, "gh", gh)
        object.__setattr__(self, "temp", temp)

    @property
    def top_index(self) -> int:
        return int(np.argmax(self.gh))

    @property
    def top_height(self) -> float:
        return float(self.gh[self.top_index])

    @property
    def top_pressure(self) -> float:
        return float(self.level[self.top_index])

    def __len__(self) -> int:
        return len(self.level)


@dataclass(frozen=True)
class SurfaceParcel:
    """Starting state of the lifted parcel."""
    t_k:   float
    p_hpa: float
    td_k:  float
