"""
Render surfaces - the optional 3D globe layer.

SphereSurface ray-casts a lit sphere with numpy, the same way the horizon
renderer builds its ground layer: a coarse ray grid (STEP px per ray), an
RGBA array, ``pygame.image.frombuffer`` and one scale up to full size.
The layer is cached on (rotation, distance, size, material version), so a
still camera costs nothing.

The apparent radius is ``base_scale * base_distance / distance``; with the
engine's ``distance = base_distance * base_scale / scale`` that is exactly
the overlay's orthographic scale, so markers sit on the shaded sphere.

The capability interface and NullSurface live in core.surface;
``create_surface`` picks between the two once.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from core.coords import unrotate_geo_array
from core.errors import SurfaceUnavailableError
from core.surface import NullSurface, RenderSurface
from core.types import BodyConfig, Viewport
from .assets import TextureLoader

LOGGER = logging.getLogger(__name__)

_AMBIENT     = 0.4
_SUN_DIR     = np.array([1500.0, 200.0, 800.0]) / np.linalg.norm([1500.0, 200.0, 800.0])
_SUN_GAIN    = 1.6
_RIM_DIR     = np.array([-1000.0, 0.0, -500.0]) / np.linalg.norm([-1000.0, 0.0, -500.0])
_RIM_COLOR   = np.array([228, 39, 55], dtype=np.float32) / 255.0
_RIM_GAIN    = 0.5

_BASE_COLOR      = (0.02, 0.02, 0.02)    # #050505
_EMISSIVE        = (228 / 255.0, 39 / 255.0, 55 / 255.0)
_TEXTURE_TINT    = 0.2                   # #333333 multiply once a map lands
_TEXTURE_GAIN    = 2.5
_FAILED_COLOR    = (0.1, 0.1, 0.1)       # #1a1a1a when the map fails


@dataclass
class Material:
    color: tuple = _BASE_COLOR
    emissive_intensity: float = 0.05
    albedo: Optional[np.ndarray] = None      # (w, h, 3) 0..1
    height: Optional[np.ndarray] = None      # (w, h) 0..1
    version: int = 0

    def touch(self):
        self.version += 1


@dataclass
class SphereMesh:
    body_id: str
    tag: int
    material: Material = field(default_factory=Material)


class SphereSurface(RenderSurface):

    STEP = 4   # ray grid downscale

    def __init__(self, base_scale: float = 350.0, base_distance: float = 1200.0,
                 loader: Optional[TextureLoader] = None):
        self.base_scale    = base_scale
        self.base_distance = base_distance
        self._loader       = loader or TextureLoader()
        self._created      = False
        self._width        = 0
        self._height       = 0
        self._distance     = base_distance
        self._rot_x        = 0.0
        self._rot_y        = 0.0
        self._mesh: Optional[SphereMesh] = None
        self._mesh_tag     = 0
        self._layer        = None
        self._cache_key    = None

    # -- lifecycle ---------------------------------------------------------
    def create(self, viewport: Viewport):
        import pygame
        if not pygame.display.get_init() or pygame.display.get_surface() is None:
            raise SurfaceUnavailableError("no pygame display to render into")
        self._created = True
        self.resize(viewport.width, viewport.height)

    def destroy(self):
        self.destroy_mesh()
        self._layer     = None
        self._cache_key = None
        self._created   = False

    def resize(self, width: int, height: int):
        self._width, self._height = int(width), int(height)
        self._cache_key = None

    def set_camera_distance(self, distance: float):
        self._distance = max(1e-6, float(distance))

    def set_mesh_rotation(self, x_rad: float, y_rad: float):
        self._rot_x, self._rot_y = x_rad, y_rad

    @property
    def has_mesh(self) -> bool:
        return self._mesh is not None

    @property
    def mesh(self) -> Optional[SphereMesh]:
        return self._mesh

    @property
    def layer(self):
        return self._layer

    # -- mesh --------------------------------------------------------------
    def build_mesh(self, body: BodyConfig):
        self.destroy_mesh()
        self._mesh_tag += 1
        self._mesh = SphereMesh(body.identifier, self._mesh_tag)
        if body.albedo_url:
            self._loader.load(body.albedo_url, 'map', self._mesh_tag)
        if body.height_map_url:
            self._loader.load(body.height_map_url, 'height', self._mesh_tag)

    def destroy_mesh(self):
        if self._mesh is not None:
            m = self._mesh.material
            m.albedo = None
            m.height = None
        self._mesh      = None
        self._cache_key = None

    def _apply_textures(self):
        for res in self._loader.drain():
            mesh = self._mesh
            if mesh is None or res.tag != mesh.tag:
                continue   # mesh was rebuilt since the request
            m = mesh.material
            if res.error is not None:
                LOGGER.error("[TEXTURE ERROR] %s for %s failed: %s",
                             res.kind, mesh.body_id, res.error)
                if res.kind == 'map':
                    m.color = _FAILED_COLOR
                    m.emissive_intensity = 0.15
                    m.touch()
                continue
            LOGGER.info("%s loaded for %s", res.kind, mesh.body_id)
            if res.kind == 'map':
                m.albedo = res.pixels
                m.color = (_TEXTURE_TINT,) * 3
                m.emissive_intensity = 0.02
            else:
                m.height = res.pixels.mean(axis=2)
            m.touch()

    # -- drawing -----------------------------------------------------------
    def clear(self):
        self._layer     = None
        self._cache_key = None

    def render(self):
        if not self._created:
            return
        self._apply_textures()
        if self._mesh is None or self._width <= 0 or self._height <= 0:
            self._layer = None
            return
        key = (round(self._rot_x, 4), round(self._rot_y, 4),
               round(self._distance, 2), self._width, self._height,
               self._mesh.tag, self._mesh.material.version)
        if key != self._cache_key:
            self._layer = self._build()
            self._cache_key = key

    @property
    def apparent_radius(self) -> float:
        return self.base_scale * self.base_distance / self._distance

    def geo_rotation(self):
        """Mesh rotation back in globe terms (yaw, pitch, roll) degrees."""
        return (math.degrees(self._rot_y), -math.degrees(self._rot_x), 0.0)

    def shade(self, W: int, H: int) -> np.ndarray:
        """RGBA (rows, cols, 4) uint8 for a W x H target."""
        S    = self.STEP
        cols = max(1, W // S)
        rows = max(1, H // S)
        R    = self.apparent_radius

        xs_1d = np.arange(cols, dtype=np.float32) * S + S * 0.5
        ys_1d = np.arange(rows, dtype=np.float32) * S + S * 0.5
        gx, gy = np.meshgrid(xs_1d, ys_1d)

        ox = (gx - W / 2.0) / R
        oy = -(gy - H / 2.0) / R
        r2 = ox * ox + oy * oy
        inside = r2 < 1.0

        rgba = np.zeros((rows, cols, 4), dtype=np.uint8)
        if not np.any(inside):
            return rgba

        oz = np.sqrt(np.clip(1.0 - r2, 0.0, 1.0))
        normal = np.stack([ox, oy, oz], axis=-1)

        sun = np.clip(normal @ _SUN_DIR, 0.0, None)
        rim = np.clip(normal @ _RIM_DIR, 0.0, None) + (1.0 - oz) * 0.35
        light = _AMBIENT + _SUN_GAIN * sun

        m = self._mesh.material
        base = np.empty((rows, cols, 3), dtype=np.float32)
        base[:] = np.asarray(m.color, dtype=np.float32)

        if m.albedo is not None or m.height is not None:
            lam = np.arctan2(ox, oz)
            phi = np.arcsin(np.clip(oy, -1.0, 1.0))
            lng, lat = unrotate_geo_array(lam, phi, self.geo_rotation())
            if m.albedo is not None:
                base = np.clip(base * self._sample(m.albedo, lng, lat) * _TEXTURE_GAIN,
                               0.0, 1.0)
            if m.height is not None:
                h = self._sample(m.height, lng, lat)
                light = light * (0.85 + 0.3 * h)

        emissive = np.asarray(_EMISSIVE, dtype=np.float32) * m.emissive_intensity
        color = (base * light[..., None]
                 + _RIM_COLOR * (_RIM_GAIN * rim)[..., None] * 0.2
                 + emissive)
        color = np.clip(color * 255.0, 0, 255).astype(np.uint8)

        for ch in range(3):
            rgba[:, :, ch] = np.where(inside, color[:, :, ch], 0)
        rgba[:, :, 3] = np.where(inside, 255, 0).astype(np.uint8)
        return rgba

    @staticmethod
    def _sample(tex: np.ndarray, lng: np.ndarray, lat: np.ndarray) -> np.ndarray:
        tw, th = tex.shape[0], tex.shape[1]
        u = np.clip(((lng + 180.0) / 360.0 * (tw - 1)).astype(np.int32), 0, tw - 1)
        v = np.clip(((90.0 - lat) / 180.0 * (th - 1)).astype(np.int32), 0, th - 1)
        return tex[u, v]

    def _build(self):
        import pygame

        W, H = self._width, self._height
        rgba = self.shade(W, H)
        rows, cols = rgba.shape[0], rgba.shape[1]

        raw = np.ascontiguousarray(rgba)
        small = pygame.image.frombuffer(raw.tobytes(), (cols, rows), "RGBA")
        small = small.convert_alpha()
        if self.STEP == 1:
            return small
        return pygame.transform.scale(small, (W, H))


def create_surface(enabled: bool = True, base_scale: float = 350.0,
                   base_distance: float = 1200.0) -> RenderSurface:
    """Single selection point between the shaded sphere and the null layer."""
    if not enabled:
        return NullSurface()
    return SphereSurface(base_scale=base_scale, base_distance=base_distance)
