"""
Projection Adapter - orthographic globe projection.

The whole visible hemisphere maps onto a disc of radius ``scale`` centred in
the viewport. One adapter is built per frame (and per hit-test query) from
the latest rotation, scale and viewport; it is never cached across frames.

  planet   clip_angle = 90  → back hemisphere projects to None
  belt     clip_angle = None → everything projects; callers use
                               facing_longitude() to dim the far side
"""

from __future__ import annotations
import math
from typing import Optional, Tuple

from .coords import rotate_geo, unrotate_geo, wrap_deg
from .types import Rotation, Viewport


class ProjectionAdapter:
    """Orthographic projection with d3-style rotation and optional clip."""

    def __init__(self, rotation: Rotation, scale: float, viewport: Viewport,
                 clip_angle: Optional[float] = 90.0):
        self.rotation   = tuple(rotation)
        self.scale      = float(scale)
        self.viewport   = viewport
        self.cx, self.cy = viewport.center
        self.clip_angle = clip_angle
        self._cos_clip  = (math.cos(math.radians(clip_angle))
                           if clip_angle is not None else None)

    # ------------------------------------------------------------------
    def project_unclipped(self, lat: float, lng: float) -> Tuple[float, float, float]:
        """Return (x, y, depth); depth > 0 on the camera side."""
        lam, phi = rotate_geo(lng, lat, self.rotation)
        cos_phi = math.cos(phi)
        x = self.cx + self.scale * cos_phi * math.sin(lam)
        y = self.cy - self.scale * math.sin(phi)
        return x, y, cos_phi * math.cos(lam)

    def project(self, lat: float, lng: float) -> Optional[Tuple[float, float]]:
        x, y, depth = self.project_unclipped(lat, lng)
        if self._cos_clip is not None and depth <= self._cos_clip:
            return None
        return x, y

    def facing_longitude(self, lat: float, lng: float) -> float:
        """Longitude of the point relative to the view centre, in degrees."""
        lam, _ = rotate_geo(lng, lat, self.rotation)
        return wrap_deg(math.degrees(lam))

    def is_facing(self, lat: float, lng: float) -> bool:
        lon = self.facing_longitude(lat, lng)
        return -90.0 < lon < 90.0

    def project_to_limb(self, lat: float, lng: float) -> Tuple[float, float]:
        """Project, pushing back-facing points out onto the horizon circle."""
        x, y, depth = self.project_unclipped(lat, lng)
        if depth > 0:
            return x, y
        dx, dy = x - self.cx, y - self.cy
        r = math.hypot(dx, dy)
        if r < 1e-9:
            return self.cx + self.scale, self.cy
        k = self.scale / r
        return self.cx + dx * k, self.cy + dy * k

    def spread(self, x: float, y: float, factor: float) -> Tuple[float, float]:
        """Push a screen point radially away from the viewport centre."""
        if factor == 1.0:
            return x, y
        return (self.cx + (x - self.cx) * factor,
                self.cy + (y - self.cy) * factor)

    def invert(self, sx: float, sy: float) -> Optional[Tuple[float, float]]:
        """Screen → (lat, lng) on the visible hemisphere, None off the disc."""
        ox = (sx - self.cx) / self.scale
        oy = -(sy - self.cy) / self.scale
        r2 = ox*ox + oy*oy
        if r2 > 1.0:
            return None
        oz = math.sqrt(1.0 - r2)
        lam = math.atan2(ox, oz)
        phi = math.asin(max(-1.0, min(1.0, oy)))
        lng, lat = unrotate_geo(lam, phi, self.rotation)
        return lat, lng

    @property
    def radius(self) -> float:
        return self.scale
