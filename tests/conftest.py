"""
Synthetic soundings shared by the parcel tests.

Pressure follows p = 1000 * exp(-z / 8000) so the surface (1000 hPa) sits
exactly at z = 0. Temperature is piecewise linear in height, defined by
(layer_top_m, lapse_k_per_km) pairs; a positive lapse cools with height.
"""

import numpy as np
import pytest

from sounding import Sounding, SurfaceParcel

SCALE_HEIGHT = 8000.0


def layered_sounding(layers, t_sfc_k, top_m=12000.0, dz=250.0):
    gh = np.arange(0.0, top_m + dz, dz)
    level = 1000.0 * np.exp(-gh / SCALE_HEIGHT)
    temp = np.empty_like(gh)
    for i, z in enumerate(gh):
        t = t_sfc_k
        base = 0.0
        for layer_top, lapse in layers:
            depth = min(z, layer_top) - base
            if depth <= 0:
                break
            t -= lapse * depth / 1000.0
            base = layer_top
        temp[i] = t
    return Sounding(level=level, gh=gh, temp=temp)


@pytest.fixture
def surface():
    """Warm, moderately moist surface parcel (20 C / 10 C dewpoint at 1000 hPa)."""
    return SurfaceParcel(t_k=293.15, p_hpa=1000.0, td_k=283.15)


@pytest.fixture
def stable_sounding():
    """Standard lapse everywhere; the dry parcel loses buoyancy around 500 m."""
    return layered_sounding([(12000.0, 6.5)], t_sfc_k=291.15)


@pytest.fixture
def capped_sounding():
    """Near-dry-adiabatic boundary layer, moist-unstable mid levels, inversion from 8 km."""
    return layered_sounding([(3000.0, 9.5), (8000.0, 6.5), (12000.0, -10.0)], t_sfc_k=290.15)


@pytest.fixture
def shallow_sounding():
    """Near-dry-adiabatic boundary layer capped by an inversion from 3 km."""
    return layered_sounding([(3000.0, 9.5), (12000.0, -10.0)], t_sfc_k=290.15)


@pytest.fixture
def open_top_sounding():
    """Thin isothermal layer stops dry thermals, steep lapse aloft keeps the cloud buoyant."""
    return layered_sounding([(3000.0, 9.5), (3500.0, 0.0), (12000.0, 8.5)], t_sfc_k=290.15)


@pytest.fixture
def superadiabatic_sounding():
    """Environment cools faster than the dry parcel at every height."""
    return layered_sounding([(12000.0, 12.0)], t_sfc_k=290.15)


@pytest.fixture
def inversion_sounding():
    """Environment warmer than the parcel from the surface up and warming with height."""
    return layered_sounding([(12000.0, -10.0)], t_sfc_k=300.15)
