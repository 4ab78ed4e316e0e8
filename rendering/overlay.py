"""
Overlay Painter - the 2D layer drawn over (or instead of) the 3D sphere.

Consumes one FrameSnapshot per frame and paints, back to front:
  starfield → fallback silhouette or belt scatter → markers → small labels
  → large anchored labels.

pygame draw primitives overwrite alpha instead of blending, so translucent
strokes go through a scratch surface that is blitted with a surface alpha.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from core.frame_driver import FrameSnapshot, LabelView, MarkerView
from core.projection import ProjectionAdapter
from core.types import Category

RED      = (228, 39, 55)
WHITE    = (255, 255, 255)
STAR     = (51, 65, 85)          # #334155
DISC     = (18, 18, 18)          # #121212
LABEL_BG = (10, 10, 10, 242)

CATEGORY_COLORS = {
    Category.ICE:      (0, 255, 255),
    Category.AC:       (244, 114, 182),
    Category.ANOMALY:  (239, 68, 68),
    Category.MILITARY: (251, 191, 36),
}
DEFAULT_MARKER_COLOR = (148, 163, 184)

GRATICULE_STEP = 30
BRACKET        = 12


def category_color(category: Category) -> Tuple[int, int, int]:
    return CATEGORY_COLORS.get(category, DEFAULT_MARKER_COLOR)


class OverlayPainter:

    def __init__(self):
        pygame.font.init()
        self._fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}
        self.layer: Optional[pygame.Surface] = None
        self._scratch: Optional[pygame.Surface] = None
        self.frames_painted = 0

    # -- fonts -------------------------------------------------------------
    def _font(self, size: int, bold: bool = False) -> pygame.font.Font:
        key = (size, bold)
        font = self._fonts.get(key)
        if font is None:
            font = pygame.font.SysFont('monospace', size, bold=bold)
            self._fonts[key] = font
        return font

    @property
    def label_font(self) -> pygame.font.Font:
        return self._font(12, bold=True)

    def text_width(self, text: str) -> float:
        """Rendered width of a large-label name; the engine sizes boxes with it."""
        return float(self.label_font.size(text)[0])

    # -- layer management --------------------------------------------------
    def _ensure_layer(self, size: Tuple[int, int]):
        if self.layer is None or self.layer.get_size() != size:
            self.layer = pygame.Surface(size, pygame.SRCALPHA)
            self._scratch = pygame.Surface(size, pygame.SRCALPHA)

    @contextmanager
    def _translucent(self, alpha: float):
        """Draw opaque into the scratch surface, blend it in at ``alpha``."""
        scratch = self._scratch
        scratch.fill((0, 0, 0, 0))
        yield scratch
        scratch.set_alpha(int(255 * max(0.0, min(1.0, alpha))))
        self.layer.blit(scratch, (0, 0))

    def compose(self, target: pygame.Surface, sphere_layer=None):
        """Blit the 3D layer (if any) and then the overlay onto ``target``."""
        target.fill((0, 0, 0))
        if sphere_layer is not None:
            target.blit(sphere_layer, (0, 0))
        if self.layer is not None:
            target.blit(self.layer, (0, 0))

    # -- frame -------------------------------------------------------------
    def paint(self, snap: FrameSnapshot):
        vp = snap.viewport
        self._ensure_layer((vp.width, vp.height))
        self.layer.fill((0, 0, 0, 0))

        self._draw_stars(snap)
        if snap.mode.is_belt:
            self._draw_belt(snap)
        elif snap.draw_silhouette:
            self._draw_silhouette(snap)

        self._draw_markers(snap.markers, snap.pulse)
        for label in snap.labels:
            self._draw_label(label)
        self.frames_painted += 1

    # -- background --------------------------------------------------------
    def _draw_stars(self, snap: FrameSnapshot):
        w, h = snap.viewport.width, snap.viewport.height
        yaw = snap.rotation[0]
        layer = self.layer
        for s in snap.stars:
            x = (s.x - yaw * 2.0) % w
            y = s.y % h
            layer.fill((*STAR, int(255 * s.opacity * 0.3)), (int(x), int(y), 2, 2))

    def _draw_belt(self, snap: FrameSnapshot):
        proj = snap.projection
        size_k = snap.scale * 0.005
        layer = self.layer
        for rock in snap.asteroids:
            x, y, _ = proj.project_unclipped(rock.lat, rock.lng)
            x, y = proj.spread(x, y, rock.spread)
            op = rock.opacity
            if not proj.is_facing(rock.lat, rock.lng):
                op *= 0.3
            side = max(1, int(round(rock.size * size_k)))
            layer.fill((*rock.color, int(255 * op)), (int(x), int(y), side, side))
        pygame.draw.circle(layer, RED, (int(proj.cx), int(proj.cy)), 2)

    def _draw_silhouette(self, snap: FrameSnapshot):
        proj = snap.projection
        center = (int(proj.cx), int(proj.cy))
        radius = int(proj.radius)
        pygame.draw.circle(self.layer, DISC, center, radius)

        if snap.landmass:
            with self._translucent(0.08) as s:
                for ring in snap.landmass:
                    pts = _ring_to_screen(proj, ring)
                    if pts:
                        pygame.draw.polygon(s, RED, pts)

        with self._translucent(0.15) as s:
            for run in graticule_runs(proj):
                if len(run) > 1:
                    pygame.draw.lines(s, RED, False, run, 1)

        with self._translucent(0.4) as s:
            pygame.draw.circle(s, RED, center, radius, 1)

    # -- markers -----------------------------------------------------------
    def _draw_markers(self, markers: Sequence[MarkerView], pulse: float):
        if not markers:
            return
        with self._translucent(0.4 * (1.0 - pulse)) as s:
            for m in markers:
                r = (6 if m.focused else 4) + pulse * 8
                pygame.draw.circle(s, category_color(m.point.category),
                                   (m.x, m.y), r, 1)

        small = self._font(9)
        layer = self.layer
        for m in markers:
            col = category_color(m.point.category)
            pygame.draw.circle(layer, WHITE if m.focused else col,
                               (m.x, m.y), 4 if m.focused else 2.5)
            if m.selected:
                _draw_bracket(layer, m.x, m.y)
            if not m.focused:
                txt = small.render(m.point.name, True, WHITE)
                txt.set_alpha(102)
                layer.blit(txt, (m.x - txt.get_width() / 2, m.y + 12 - txt.get_height() / 2))

    def _draw_label(self, label: LabelView):
        a = label.anchor
        x, y, w, h = a.x, a.y, a.width, a.height
        layer = self.layer

        pygame.draw.line(layer, WHITE, (label.marker_x, label.marker_y + 5), a.attach_point, 1)

        box = [(x, y), (x + w, y), (x + w, y + h - 4), (x + w - 4, y + h),
               (x + 4, y + h), (x, y + h - 4)]
        pygame.draw.polygon(layer, LABEL_BG, box)
        pygame.draw.polygon(layer, RED, box, 1)

        p = label.point
        cx = x + w / 2
        name = self.label_font.render(p.name, True, WHITE)
        layer.blit(name, (cx - name.get_width() / 2, y + 14 - 5 - name.get_height() / 2))
        coords = self._font(8).render(p.coords_label, True, RED)
        layer.blit(coords, (cx - coords.get_width() / 2, y + 14 + 7 - coords.get_height() / 2))
        if p.meta:
            meta = self._font(8).render(p.meta_label, True, WHITE)
            meta.set_alpha(160)
            layer.blit(meta, (cx - meta.get_width() / 2, y + 14 + 17 - meta.get_height() / 2))


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def _draw_bracket(surface, x: float, y: float):
    b = BRACKET
    for sx, sy in ((-1, -1), (1, -1), (-1, 1), (1, 1)):
        corner = (x + sx * b, y + sy * b)
        pygame.draw.lines(surface, RED, False,
                          [(corner[0], corner[1] - sy * 4), corner,
                           (corner[0] - sx * 4, corner[1])], 2)


def _ring_to_screen(proj: ProjectionAdapter, ring) -> List[Tuple[float, float]]:
    """Screen polygon for a (lng, lat) ring; back-facing vertices sit on the limb."""
    pts = []
    any_front = False
    for lng, lat in ring:
        x, y, depth = proj.project_unclipped(lat, lng)
        if depth > 0:
            any_front = True
            pts.append((x, y))
        else:
            pts.append(proj.project_to_limb(lat, lng))
    if not any_front or len(pts) < 3:
        return []
    return pts


def graticule_runs(proj: ProjectionAdapter, step: int = GRATICULE_STEP):
    """Visible polyline runs for meridians and parallels every ``step`` degrees."""
    lines = []
    for lng in range(-180, 180, step):
        lines.append([(float(lat), float(lng)) for lat in range(-80, 81, 2)])
    for lat in range(-90 + step, 90, step):
        lines.append([(float(lat), float(lng)) for lng in range(-180, 181, 3)])

    runs = []
    for line in lines:
        run = []
        for lat, lng in line:
            c = proj.project(lat, lng)
            if c is None:
                if len(run) > 1:
                    runs.append(run)
                run = []
            else:
                run.append(c)
        if len(run) > 1:
            runs.append(run)
    return runs
