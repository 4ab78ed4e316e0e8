"""
Frame Driver - GlobeEngine, the owner of all per-frame state.

One engine instance mediates every read and write of the orientation,
velocity and zoom (GlobeState). Pointer handlers and the frame loop both
go through it; they never run at the same time because everything runs on
the host's single thread.

Per frame (``frame(now_ms)`` runs the scheduler, which runs ``_tick``):
  1. inertia, unless dragging or animating
  2. zoom easing
  3. 3D surface: rotate + set distance + render (planet), or clear (belt)
  4. build a FrameSnapshot and hand it to the painter

Fly-to steps are separate scheduler callbacks that share the same
``animating`` phase flag with the loop.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .decor import generate_asteroid_belt, generate_starfield, make_rng
from .fly_to import FlyToAnimator
from .hit_test import HitTester, Marker, locate
from .label_layout import LabelAnchor, LabelLayout
from .orientation import GlobeState, InertiaController, InteractionPhase, ZoomControl
from .projection import ProjectionAdapter
from .scene_mode import SceneKind, SceneMode, scene_mode_for
from .scheduler import FrameScheduler
from .surface import NullSurface
from .types import BodyConfig, PointOfInterest, Rotation, Viewport

LOGGER = logging.getLogger(__name__)

# bold 12 px monospace, measured
_APPROX_CHAR_WIDTH = 7.2


def approx_text_width(text: str) -> float:
    return len(text) * _APPROX_CHAR_WIDTH


@dataclass
class MarkerView:
    point: PointOfInterest
    x: float
    y: float
    hovered: bool = False
    selected: bool = False

    @property
    def focused(self) -> bool:
        return self.hovered or self.selected


@dataclass
class LabelView:
    point: PointOfInterest
    marker_x: float
    marker_y: float
    anchor: LabelAnchor


@dataclass
class FrameSnapshot:
    """Everything the overlay painter needs for one frame."""
    time_ms: float
    viewport: Viewport
    mode: SceneMode
    projection: ProjectionAdapter
    rotation: Rotation
    scale: float
    surface_active: bool
    draw_silhouette: bool
    pulse: float
    stars: Sequence = ()
    asteroids: Sequence = ()
    landmass: Sequence = ()
    markers: List[MarkerView] = field(default_factory=list)
    labels: List[LabelView] = field(default_factory=list)


class GlobeEngine:
    """Rotation / projection / interaction engine for one globe view."""

    def __init__(self, body: BodyConfig, *,
                 settings: Optional[EngineConfig] = None,
                 surface_factory: Optional[Callable] = None,
                 painter=None,
                 landmass_source=None,
                 rng_factory: Optional[Callable] = None,
                 text_width: Optional[Callable[[str], float]] = None,
                 on_select: Optional[Callable[[PointOfInterest], None]] = None,
                 on_hover_change: Optional[Callable[[bool], None]] = None,
                 interactions_enabled: bool = True):
        self.settings = settings or EngineConfig()
        self.body     = body
        self.mode     = scene_mode_for(body, self.settings)
        self.painter  = painter
        self.on_select       = on_select
        self.on_hover_change = on_hover_change
        self.interactions_enabled = interactions_enabled

        self._surface_factory = surface_factory or NullSurface
        self._landmass_source = landmass_source
        self._rng_factory     = rng_factory or make_rng
        self._text_width      = text_width or approx_text_width

        self.state      = GlobeState()
        self.scheduler  = FrameScheduler()
        self.labels     = LabelLayout(self.settings)
        self.hit_tester = HitTester(self.settings.hit_radius_px)
        self.zoom       = ZoomControl(self.settings)
        self.inertia    = InertiaController(self.settings, self.mode.idle_yaw_velocity)
        self.animator   = FlyToAnimator(self.scheduler, self.settings)

        self.viewport   = Viewport()
        self.surface    = NullSurface()
        self.surface_available = False
        self.mounted    = False

        self.stars: list     = []
        self.asteroids: list = []
        self.landmass: tuple = ()
        self.generation = 0
        self.frame_count = 0

        self._hovered: Optional[PointOfInterest]  = None
        self._selected: Optional[PointOfInterest] = None
        self._loop_handle: Optional[int] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self, viewport: Viewport):
        if self.mounted:
            return
        self.viewport = viewport
        self._select_surface()
        self.mounted = True
        try:
            self._setup_scene()
        except Exception:
            self.unmount()
            raise
        self._start_loop()

    def unmount(self):
        """Cancel the loop and release the surface on every exit path."""
        try:
            self._teardown_scene()
        finally:
            try:
                self.surface.destroy()
            finally:
                self.mounted = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.unmount()
        return False

    def _select_surface(self):
        surface = None
        try:
            surface = self._surface_factory()
            surface.create(self.viewport)
        except Exception as e:
            LOGGER.warning("3D surface unavailable, using 2D fallback: %s", e)
            if surface is not None:
                surface.destroy()
            surface = NullSurface()
        self.surface = surface
        self.surface_available = bool(getattr(surface, "available", False))

    def resize(self, viewport: Viewport):
        if viewport == self.viewport:
            return
        self.viewport = viewport
        w, h = viewport.backing_size
        self.surface.resize(w, h)

    def switch_config(self, body: BodyConfig):
        """Swap configuration; a new identifier means a full scene reset."""
        if body.identifier == self.body.identifier:
            self.body = body
            return
        LOGGER.info("scene switch %s -> %s", self.body.identifier, body.identifier)
        if not self.mounted:
            self.body = body
            self.mode = scene_mode_for(body, self.settings)
            self.inertia.idle_yaw_velocity = self.mode.idle_yaw_velocity
            return
        self._teardown_scene()
        self.body = body
        self._setup_scene()
        self._start_loop()

    def _setup_scene(self):
        self.mode = scene_mode_for(self.body, self.settings)
        self.inertia.idle_yaw_velocity = self.mode.idle_yaw_velocity
        self.state.reset(self.mode.default_rotation,
                         self.settings.default_scale,
                         self.mode.idle_yaw_velocity)
        self.labels.clear()
        self._set_hovered(None)

        rng = self._rng_factory()
        self.stars = generate_starfield(rng, self.settings.star_count)
        self.asteroids = (generate_asteroid_belt(rng, self.settings.asteroid_count)
                          if self.mode.is_belt else [])

        if self.mode.uses_mesh:
            self.surface.build_mesh(self.body)
        else:
            self.surface.clear()

        self.generation += 1
        self.landmass = ()
        if self.body.landmass_url and self._landmass_source is not None:
            self._landmass_source.request(self.body.landmass_url, self.generation)

    def _teardown_scene(self):
        self._stop_loop()
        self.animator.cancel()
        if self.state.dragging:
            self.inertia.end_drag(self.state)
        self.surface.destroy_mesh()
        self.surface.clear()
        self.labels.clear()

    def _start_loop(self):
        if self._loop_handle is None:
            self._loop_handle = self.scheduler.request(self._tick)

    def _stop_loop(self):
        if self._loop_handle is not None:
            self.scheduler.cancel(self._loop_handle)
            self._loop_handle = None

    @property
    def loop_running(self) -> bool:
        return self._loop_handle is not None

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def frame(self, now_ms: float) -> int:
        """Host calls this once per display frame."""
        return self.scheduler.run(now_ms)

    def _tick(self, now_ms: float):
        # re-arm first so nothing below can end the loop
        self._loop_handle = self.scheduler.request(self._tick)
        self.frame_count += 1

        state = self.state
        if state.phase is InteractionPhase.IDLE_DRIFTING:
            self.inertia.step(state)
        self.zoom.ease(state)

        try:
            self._drain_landmass()
            self._render_surface()
            if self.viewport.is_empty or self.painter is None:
                return
            self.painter.paint(self.snapshot(now_ms))
        except Exception:
            LOGGER.exception("frame %d skipped", self.frame_count)

    def _render_surface(self):
        if not self.surface_available:
            return
        if self.mode.uses_mesh and self.surface.has_mesh:
            yaw, pitch, _ = self.state.rotation
            self.surface.set_mesh_rotation(-math.radians(pitch), math.radians(yaw))
            self.surface.set_camera_distance(self.camera_distance)
            self.surface.render()
        else:
            self.surface.clear()

    def _drain_landmass(self):
        if self._landmass_source is None:
            return
        for res in self._landmass_source.poll():
            if res.generation != self.generation:
                LOGGER.debug("dropping stale landmass for generation %d", res.generation)
                continue
            if not res.ok:
                LOGGER.warning("failed to load landmass for fallback view: %s", res.error)
                continue
            self.landmass = res.rings

    @property
    def camera_distance(self) -> float:
        s = self.settings
        return s.base_camera_distance * s.default_scale / self.state.current_scale

    # ------------------------------------------------------------------
    # Projection, markers, snapshot
    # ------------------------------------------------------------------

    def projection(self) -> ProjectionAdapter:
        return ProjectionAdapter(self.state.rotation_tuple(),
                                 self.state.current_scale,
                                 self.viewport,
                                 self.mode.clip_angle)

    def markers(self) -> List[Marker]:
        """Hit-test candidates: configuration points first, then asteroids."""
        spread = self.mode.marker_spread
        out = [Marker(p, spread) for p in self.body.points]
        if self.mode.is_belt:
            out.extend(Marker(a.point, a.spread) for a in self.asteroids)
        return out

    def _drawn_markers(self) -> List[Marker]:
        spread = self.mode.marker_spread
        out = [Marker(p, spread) for p in self.body.points]
        focus = {self.hovered_name, self.selected_name}
        for a in self.asteroids:
            if a.point.name in focus:
                out.append(Marker(a.point, a.spread))
        return out

    def label_size(self, point: PointOfInterest) -> Tuple[float, float]:
        s = self.settings
        width = self._text_width(point.name) + s.label_padding_x
        height = s.label_height + (s.label_meta_height if point.meta else 0.0)
        return width, height

    def snapshot(self, now_ms: float) -> FrameSnapshot:
        proj = self.projection()
        views: List[MarkerView] = []
        for m in self._drawn_markers():
            pos = locate(proj, m, self.mode)
            if pos is None:
                continue
            name = m.point.name
            views.append(MarkerView(m.point, pos[0], pos[1],
                                    hovered=name == self.hovered_name,
                                    selected=name == self.selected_name))

        labels: List[LabelView] = []
        for v in views:
            if not v.focused:
                continue
            w, h = self.label_size(v.point)
            anchor = self.labels.place(v.point.name, v.x, v.y, w, h)
            labels.append(LabelView(v.point, v.x, v.y, anchor))

        period = self.settings.pulse_period_ms
        return FrameSnapshot(
            time_ms=now_ms,
            viewport=self.viewport,
            mode=self.mode,
            projection=proj,
            rotation=self.state.rotation_tuple(),
            scale=self.state.current_scale,
            surface_active=self.surface_available,
            draw_silhouette=(self.mode.kind is SceneKind.PLANET
                             and not self.surface_available),
            pulse=(math.sin(now_ms / period) + 1.0) / 2.0,
            stars=self.stars,
            asteroids=self.asteroids,
            landmass=self.landmass,
            markers=views,
            labels=labels,
        )

    # ------------------------------------------------------------------
    # Hover / selection channels
    # ------------------------------------------------------------------

    @property
    def hovered(self) -> Optional[PointOfInterest]:
        return self._hovered

    @property
    def hovered_name(self) -> Optional[str]:
        return self._hovered.name if self._hovered else None

    @property
    def selected_name(self) -> Optional[str]:
        return self._selected.name if self._selected else None

    def set_selection(self, point: Optional[PointOfInterest]):
        """Owner echoes its selection back; read-only to the engine."""
        self._selected = point

    def _set_hovered(self, point: Optional[PointOfInterest]):
        was_hovering = self._hovered is not None
        self._hovered = point
        if was_hovering != (point is not None) and self.on_hover_change is not None:
            self.on_hover_change(point is not None)

    def find_point_at(self, x: float, y: float) -> Optional[PointOfInterest]:
        if self.viewport.is_empty:
            return None
        anchors: Dict[str, LabelAnchor] = self.labels.active(
            (self.hovered_name, self.selected_name))
        return self.hit_tester.find(x, y, self.markers(), self.projection(),
                                    self.mode, anchors)

    # ------------------------------------------------------------------
    # Pointer / wheel input
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float, now_ms: float):
        if not self.interactions_enabled:
            return
        if self.state.animating:
            self.animator.cancel()
        self.inertia.begin_drag(self.state, x, y, now_ms)

    def pointer_move(self, x: float, y: float, now_ms: float):
        if not self.interactions_enabled:
            return
        if self.state.dragging:
            self.inertia.drag_to(self.state, x, y, now_ms)
        self._set_hovered(self.find_point_at(x, y))

    def pointer_up(self):
        self.inertia.end_drag(self.state)

    def pointer_leave(self):
        self.inertia.end_drag(self.state)

    def click(self, x: float, y: float) -> Optional[PointOfInterest]:
        if not self.interactions_enabled:
            return None
        target = self.find_point_at(x, y)
        if target is not None and self.on_select is not None:
            self.on_select(target)
        return target

    def wheel(self, delta_y: float):
        if not self.interactions_enabled:
            return
        self.zoom.wheel(self.state, delta_y)

    # ------------------------------------------------------------------
    # Imperative control surface
    # ------------------------------------------------------------------

    def set_zoom_percent(self, percent: float):
        self.zoom.set_percent(self.state, percent)

    @property
    def zoom_percent(self) -> float:
        return self.settings.percent_for_scale(self.state.target_scale)

    def fly_to(self, point: PointOfInterest):
        if not self.mode.allows_fly_to:
            return
        self.animator.start(self.state, point, self.mode.idle_yaw_velocity)

    @property
    def rotation(self) -> Rotation:
        return self.state.rotation_tuple()
