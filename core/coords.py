from __future__ import annotations
import math

import numpy as np

_TAU = 2.0 * math.pi


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x

def wrap_deg(x: float) -> float:
    """Wrap to [-180, 180)."""
    return (x + 180.0) % 360.0 - 180.0

def lerp(a: float, b: float, t: float) -> float:
    # a*(1-t) + b*t lands exactly on b at t == 1
    return a * (1.0 - t) + b * t

def ease_cubic_out(t: float) -> float:
    t -= 1.0
    return t * t * t + 1.0


# ---------------------------------------------------------------------------
# Geographic rotation (yaw, pitch, roll), same convention as d3.geoRotation:
# spin longitude by yaw, then tilt by pitch around the Y axis and by roll
# around the X axis.
# ---------------------------------------------------------------------------

def rotate_geo(lng_deg: float, lat_deg: float,
               rotation) -> tuple[float, float]:
    """Return the rotated (lambda, phi) in radians, lambda in [-pi, pi]."""
    d_lam, d_phi, d_gam = (math.radians(r) for r in rotation)
    lam = math.radians(lng_deg) + d_lam
    lam = (lam + math.pi) % _TAU - math.pi
    phi = math.radians(lat_deg)
    if d_phi == 0.0 and d_gam == 0.0:
        return lam, phi

    cp, sp = math.cos(d_phi), math.sin(d_phi)
    cg, sg = math.cos(d_gam), math.sin(d_gam)
    cos_phi = math.cos(phi)
    x = math.cos(lam) * cos_phi
    y = math.sin(lam) * cos_phi
    z = math.sin(phi)
    k = z * cp + x * sp
    return (math.atan2(y * cg - k * sg, x * cp - z * sp),
            math.asin(clamp(k * cg + y * sg, -1.0, 1.0)))

def unrotate_geo(lam: float, phi: float, rotation) -> tuple[float, float]:
    """Inverse of rotate_geo: rotated radians -> (lng_deg, lat_deg)."""
    d_lam, d_phi, d_gam = (math.radians(r) for r in rotation)
    if d_phi != 0.0 or d_gam != 0.0:
        cp, sp = math.cos(d_phi), math.sin(d_phi)
        cg, sg = math.cos(d_gam), math.sin(d_gam)
        cos_phi = math.cos(phi)
        x = math.cos(lam) * cos_phi
        y = math.sin(lam) * cos_phi
        z = math.sin(phi)
        k = z * cg - y * sg
        lam = math.atan2(y * cg + z * sg, x * cp + k * sp)
        phi = math.asin(clamp(k * cp - x * sp, -1.0, 1.0))
    lng = wrap_deg(math.degrees(lam - d_lam))
    return lng, math.degrees(phi)

def unrotate_geo_array(lam: np.ndarray, phi: np.ndarray,
                       rotation) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised unrotate_geo for ray-cast grids."""
    d_lam, d_phi, d_gam = (math.radians(r) for r in rotation)
    cp, sp = math.cos(d_phi), math.sin(d_phi)
    cg, sg = math.cos(d_gam), math.sin(d_gam)
    cos_phi = np.cos(phi)
    x = np.cos(lam) * cos_phi
    y = np.sin(lam) * cos_phi
    z = np.sin(phi)
    k = z * cg - y * sg
    lam0 = np.arctan2(y * cg + z * sg, x * cp + k * sp)
    phi0 = np.arcsin(np.clip(k * cp - x * sp, -1.0, 1.0))
    lng = (np.degrees(lam0 - d_lam) + 180.0) % 360.0 - 180.0
    return lng, np.degrees(phi0)
