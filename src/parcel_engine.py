"""
parcel_engine.py — Surface parcel ascent through a sounding.

The parcel is lifted dry-adiabatically from the surface across the full
depth of the sounding. Two curve intersections then locate:

  - cloud base (LCL): dry temperature meets the isohume dewpoint
  - thermal top:      dry temperature meets the environment

If the parcel saturates before it loses buoyancy, the ascent continues
pseudo-adiabatically from cloud base until the moist temperature meets the
environment again (equilibrium level / cloud top).

Pressure in hPa, temperature in K, heights in m.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from curve_math import LogScale, first_intersection, scale_log, zip_pairs
from met_core import (
    dewpoint,
    dry_lapse,
    mixing_ratio,
    moist_gradient_t,
    saturation_vapor_pressure,
    vapor_pressure,
)
from sounding import Sounding

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 100

# (value, pressure) samples ordered from the surface upward
Curve = Tuple[Tuple[float, float], ...]


# ─────────────────────────────────────────────────────────────────────────────
# RESULT TYPES
# ─────────────────────────────────────────────────────────────────────────────

class KeyLevel(NamedTuple):
    height: float   # m
    value:  float   # K


@dataclass(frozen=True)
class ParcelTrajectory:
    dry:              Curve                 # parcel temperature, surface → thermal top
    p_thermal_top:    float
    elev_thermal_top: float
    p_cloud_top:      float
    moist:            Optional[Curve] = None   # parcel temperature, cloud base → cloud top
    isohume:          Optional[Curve] = None   # parcel dewpoint, surface → cloud base
    cloud_base:       Optional[KeyLevel] = None
    equilibrium:      Optional[KeyLevel] = None

    @property
    def saturated(self) -> bool:
        """True when the parcel reached cloud base and the moist ascent ran."""
        return self.moist is not None

    @property
    def open_top(self) -> bool:
        """Saturated ascent that never came back to neutral buoyancy in range."""
        return self.saturated and self.equilibrium is None


# ─────────────────────────────────────────────────────────────────────────────
# ASCENT PHASES
# ─────────────────────────────────────────────────────────────────────────────

def _truncate(curve, p_boundary: float, boundary_point: tuple) -> Curve:
    """Keep samples below the boundary (p > p_boundary) and close with the boundary point."""
    kept = [pt for pt in curve if pt[1] > p_boundary]
    kept.append((float(boundary_point[0]), float(boundary_point[1])))
    return tuple(kept)

def _moist_ascent(
    p_to_el: LogScale,
    cloud_base: KeyLevel,
    end_el: float,
    step_el: float,
) -> tuple:
    """
    Euler integration of the pseudo-adiabat from cloud base, one height step at a time.
    Sampling continues until the first height at or above end_el.
    Returns (heights, pressures, temperatures) lists.
    """
    n = math.ceil(round((end_el - cloud_base.height) / step_el, 9)) + 1

    ghs, pressures, temps = [], [], []
    t = cloud_base.value
    previous_p = p_to_el.invert(cloud_base.height)
    for i in range(n):
        elevation = cloud_base.height + i * step_el
        p = p_to_el.invert(elevation)
        # dp < 0 on ascent, gradient > 0: the parcel cools
        t = t + (p - previous_p) * moist_gradient_t(p, t)
        previous_p = p
        ghs.append(elevation)
        pressures.append(p)
        temps.append(t)

    return ghs, pressures, temps


# ─────────────────────────────────────────────────────────────────────────────
# PARCEL TRAJECTORY
# ─────────────────────────────────────────────────────────────────────────────

def parcel_trajectory(
    sounding: Sounding,
    steps: int,
    sfc_t: float,
    sfc_p: float,
    sfc_dewpoint: float,
    p_to_el: Optional[LogScale] = None,
) -> Optional[ParcelTrajectory]:
    """
    Lift a surface parcel (sfc_t K, sfc_p hPa, sfc_dewpoint K) through the sounding.

    steps sets the height resolution: the ascent from the surface to the top
    of the sounding is sampled at steps + 1 evenly spaced heights.
    p_to_el may pass in a scale already built from the sounding.

    Returns None when the dry parcel never becomes cooler than the
    environment (no convection). A saturated parcel that never reaches an
    equilibrium level is not a failure: its cloud top is reported at the top
    of the sounding.
    """
    if steps < 1:
        raise ValueError(f"steps must be a positive integer, got {steps}")

    m_ratio = mixing_ratio(saturation_vapor_pressure(sfc_dewpoint), sfc_p)

    if p_to_el is None:
        p_to_el = scale_log(sounding.level, sounding.gh)
    min_el = p_to_el(sfc_p)
    max_el = max(min_el, sounding.top_height)
    if max_el <= min_el:
        logger.debug(f"Surface at {min_el:.0f} m is at or above the sounding top; no ascent")
        return None
    step_el = (max_el - min_el) / steps

    # ── DRY PHASE ─────────────────────────────────────────────────────────
    dry_ghs, dry_pressures, dry_temps, dry_dewpoints = [], [], [], []
    for i in range(steps + 1):
        elevation = min_el + i * step_el
        p = p_to_el.invert(elevation)
        dry_ghs.append(elevation)
        dry_pressures.append(p)
        dry_temps.append(dry_lapse(p, sfc_t, sfc_p))
        dry_dewpoints.append(dewpoint(vapor_pressure(p, m_ratio)))

    cloud_base = first_intersection(dry_ghs, dry_temps, dry_ghs, dry_dewpoints)
    thermal_top = first_intersection(dry_ghs, dry_temps, sounding.gh, sounding.temp)

    if thermal_top is None:
        logger.debug("Dry parcel never meets the environment curve; no convection")
        return None
    thermal_top = KeyLevel(*thermal_top)

    moist = None
    isohume = None
    equilibrium = None
    p_cloud_top = sounding.top_pressure

    # ── MOIST PHASE ───────────────────────────────────────────────────────
    if cloud_base is not None and cloud_base[0] < thermal_top.height:
        cloud_base = KeyLevel(*cloud_base)
        logger.debug(
            f"Parcel saturates at {cloud_base.height:.0f} m, below the dry thermal top "
            f"at {thermal_top.height:.0f} m; switching to moist ascent"
        )
        thermal_top = cloud_base
        p_cloud_base = p_to_el.invert(cloud_base.height)

        moist_ghs, moist_pressures, moist_temps = _moist_ascent(
            p_to_el, cloud_base, max_el, step_el
        )

        isohume = _truncate(
            zip_pairs(dry_dewpoints, dry_pressures),
            p_cloud_base,
            (cloud_base.value, p_cloud_base),
        )

        moist = tuple(zip_pairs(moist_temps, moist_pressures))
        el = first_intersection(moist_ghs, moist_temps, sounding.gh, sounding.temp)
        if el is not None:
            equilibrium = KeyLevel(*el)
            p_cloud_top = p_to_el.invert(equilibrium.height)
            moist = _truncate(moist, p_cloud_top, (equilibrium.value, p_cloud_top))
        else:
            logger.debug("No equilibrium level below the sounding top; cloud top left open")
    else:
        cloud_base = None

    # ── FINALIZATION ──────────────────────────────────────────────────────
    p_thermal_top = p_to_el.invert(thermal_top.height)
    dry = _truncate(
        zip_pairs(dry_temps, dry_pressures),
        p_thermal_top,
        (thermal_top.value, p_thermal_top),
    )

    return ParcelTrajectory(
        dry=dry,
        p_thermal_top=p_thermal_top,
        elev_thermal_top=thermal_top.height,
        p_cloud_top=p_cloud_top,
        moist=moist,
        isohume=isohume,
        cloud_base=cloud_base,
        equilibrium=equilibrium,
    )
