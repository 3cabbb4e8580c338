"""
met_core.py — Thermodynamic primitives for parcel ascent.

Scalar functions of pressure and temperature for a single air parcel.
Pressure in hPa, temperature in Kelvin, heights in meters.

References:
  - Bolton 1980 (saturation vapor pressure)
  - Poisson's equation for dry-adiabatic ascent
  - U.S. Standard Atmosphere 1976 (barometric elevation)
"""

import math


# ─────────────────────────────────────────────────────────────────────────────
# CONSTANTS
# ─────────────────────────────────────────────────────────────────────────────

Rd   = 287.0                  # J kg-1 K-1  dry air gas constant
Cpd  = 1005.0                 # J kg-1 K-1  specific heat dry air
Lv   = 2.501e6                # J kg-1      latent heat of vaporization
eps  = 18.01528 / 28.9644     # molecular weight ratio water / dry air
g    = 9.80665                # m s-2       standard gravity
T0   = 273.15                 # K

SAT_P0C = 6.112               # hPa  saturation vapor pressure at 0 C

STD_T0    = 288.15            # K    standard-atmosphere sea-level temperature
STD_P0    = 1013.25           # hPa  standard-atmosphere sea-level pressure
STD_LAPSE = -6.5e-3           # K m-1 standard-atmosphere lapse rate


# ─────────────────────────────────────────────────────────────────────────────
# UNIT HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def c_to_k(t_c: float) -> float:
    return t_c + T0

def k_to_c(t_k: float) -> float:
    return t_k - T0


# ─────────────────────────────────────────────────────────────────────────────
# DRY PROCESSES
# ─────────────────────────────────────────────────────────────────────────────

def dry_lapse(p: float, t0_k: float, p0: float) -> float:
    """Temperature (K) at pressure p of a parcel lifted dry-adiabatically from (t0_k, p0)."""
    return t0_k * (p / p0) ** (Rd / Cpd)

def get_elevation(p: float) -> float:
    """Standard-atmosphere elevation (m) of pressure p (hPa)."""
    return (STD_T0 / STD_LAPSE) * ((p / STD_P0) ** (-STD_LAPSE * Rd / g) - 1.0)


# ─────────────────────────────────────────────────────────────────────────────
# MOISTURE
# ─────────────────────────────────────────────────────────────────────────────

def mixing_ratio(partial_pressure: float, total_pressure: float,
                 molecular_weight_ratio: float = eps) -> float:
    """
    Mixing ratio (kg/kg) of a gas with the given partial pressure.
    Undefined when total_pressure == partial_pressure.
    """
    return molecular_weight_ratio * partial_pressure / (total_pressure - partial_pressure)

def saturation_vapor_pressure(t_k: float) -> float:
    """Bolton (1980) saturation vapor pressure in hPa."""
    t_c = k_to_c(t_k)
    return SAT_P0C * math.exp(17.67 * t_c / (t_c + 243.5))

def _saturation_mixing_ratio(p: float, t_k: float) -> float:
    return mixing_ratio(saturation_vapor_pressure(t_k), p)

def vapor_pressure(p: float, mixing: float) -> float:
    """Water vapor partial pressure (hPa) from total pressure and mixing ratio."""
    return p * mixing / (eps + mixing)

def dewpoint(partial_pressure: float) -> float:
    """
    Dewpoint (K) for a water vapor partial pressure (hPa).
    Inverts saturation_vapor_pressure exactly.
    """
    val = math.log(partial_pressure / SAT_P0C)
    return T0 + 243.5 * val / (17.67 - val)


# ─────────────────────────────────────────────────────────────────────────────
# SATURATED PROCESSES
# ─────────────────────────────────────────────────────────────────────────────

def moist_gradient_t(p: float, t_k: float) -> float:
    """
    Pseudo-adiabatic temperature gradient dT/dp (K/hPa) of a saturated parcel.

    dT/dp = (1/p) * (Rd*T + Lv*rs) / (Cpd + Lv^2 * rs * eps / (Rd * T^2))

    This is a rate; callers integrate it along the ascent.
    """
    rs = _saturation_mixing_ratio(p, t_k)
    numer = Rd * t_k + Lv * rs
    denom = Cpd + (Lv**2 * rs * eps) / (Rd * t_k**2)
    return (1.0 / p) * (numer / denom)
