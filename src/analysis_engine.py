"""
analysis_engine.py — Convective diagnostics from a lifted surface parcel.

Consumes a Sounding and a SurfaceParcel, runs the parcel trajectory,
and returns a structured ParcelAnalysis: cloud base, thermal top,
cloud top and a coarse convective-mode label.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from curve_math import scale_log
from met_core import k_to_c
from parcel_engine import DEFAULT_STEPS, ParcelTrajectory, parcel_trajectory
from sounding import Sounding, SurfaceParcel

logger = logging.getLogger(__name__)

DEEP_CONVECTION_DEPTH_M = 4000.0   # cloud depth separating cumulus from deep convection


# ─────────────────────────────────────────────────────────────────────────────
# RESULT DATACLASS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ParcelAnalysis:
    convective:         bool  = False

    # Thermal top (top of the dry ascent; equals cloud base when saturated)
    thermal_top_m:      float = 0.0
    thermal_top_hpa:    float = 0.0
    thermal_strength_k: Optional[float] = None   # surface parcel excess over the environment

    # Cloud
    cloud_base_m:       Optional[float] = None
    cloud_base_hpa:     Optional[float] = None
    cloud_base_t_c:     Optional[float] = None
    cloud_top_m:        Optional[float] = None
    cloud_top_hpa:      Optional[float] = None
    cloud_depth_m:      float = 0.0
    open_top:           bool  = False

    convective_mode:    str   = "No Convection"
    trajectory:         Optional[ParcelTrajectory] = None
    fail_modes:         list  = field(default_factory=list)
    notes:              list  = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# CORE ANALYSIS FUNCTION
# ─────────────────────────────────────────────────────────────────────────────

def _env_temperature_at(sounding: Sounding, height_m: float) -> float:
    """Environment temperature (K) at a height, linear between sounding levels."""
    order = np.argsort(sounding.gh)
    gh = sounding.gh[order]
    if height_m < gh[0] or height_m > gh[-1]:
        raise ValueError(f"height {height_m:.0f} m outside the sounding")
    return float(np.interp(height_m, gh, sounding.temp[order]))

def _classify(result: ParcelAnalysis) -> str:
    if not result.convective:
        return "No Convection"
    if result.cloud_base_m is None:
        return "Dry Thermals"
    if result.open_top or result.cloud_depth_m >= DEEP_CONVECTION_DEPTH_M:
        return "Deep Convection"
    return "Cumulus"

def analyze_parcel(
    sounding: Sounding,
    surface: SurfaceParcel,
    steps: int = DEFAULT_STEPS,
) -> ParcelAnalysis:
    """Full parcel analysis of a sounding. Returns ParcelAnalysis."""
    result = ParcelAnalysis()

    try:
        p_to_el = scale_log(sounding.level, sounding.gh)
        traj = parcel_trajectory(sounding, steps, surface.t_k, surface.p_hpa, surface.td_k,
                                 p_to_el=p_to_el)
    except (ValueError, ZeroDivisionError) as e:
        logger.warning(f"Parcel trajectory failed: {e}")
        result.fail_modes.append(f"Parcel trajectory could not be computed ({e}).")
        return result

    if traj is None:
        result.notes.append("No thermal top within the sounding; the surface parcel "
                            "never becomes cooler than the environment.")
        return result

    result.convective = True
    result.trajectory = traj
    result.thermal_top_m = traj.elev_thermal_top
    result.thermal_top_hpa = traj.p_thermal_top

    # ── THERMAL STRENGTH ──────────────────────────────────────────────────
    try:
        sfc_el = p_to_el(surface.p_hpa)
        env_sfc_k = float(_env_temperature_at(sounding, sfc_el))
        result.thermal_strength_k = round(surface.t_k - env_sfc_k, 2)
    except ValueError as e:
        logger.debug(f"Thermal strength error: {e}")
        result.notes.append(
            f"Thermal strength unavailable: surface at {surface.p_hpa:.0f} hPa lies "
            f"outside the sounding."
        )

    # ── CLOUD ─────────────────────────────────────────────────────────────
    if traj.saturated:
        result.cloud_base_m = traj.cloud_base.height
        result.cloud_base_hpa = traj.p_thermal_top
        result.cloud_base_t_c = round(k_to_c(traj.cloud_base.value), 2)
        result.cloud_top_hpa = traj.p_cloud_top
        result.cloud_top_m = p_to_el(traj.p_cloud_top)
        result.cloud_depth_m = max(0.0, result.cloud_top_m - result.cloud_base_m)
        result.open_top = traj.open_top
        if traj.open_top:
            result.notes.append(
                f"No equilibrium level below the sounding top ({traj.p_cloud_top:.0f} hPa); "
                f"cloud top is a lower bound."
            )
    else:
        result.notes.append(
            f"Thermals top out at {traj.elev_thermal_top:.0f} m before reaching saturation."
        )

    result.convective_mode = _classify(result)
    logger.debug(f"Parcel analysis: {result.convective_mode}, "
                 f"thermal top {result.thermal_top_m:.0f} m")
    return result
