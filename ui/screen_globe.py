"""
Globe Screen - Tactical Globe View

Hosts one GlobeEngine: turns pygame events into pointer / wheel calls,
echoes the selection back every frame, composites the 3D layer and the
overlay, and draws the HUD.

Controls
--------
  Drag                  Rotate (release to throw)
  Click                 Select point and fly to it
  Scroll / +/-          Zoom
  TAB / 1-4             Next body / pick body
  F                     Fly to current selection
  I                     Toggle interactions
  ESC                   Quit
"""

import logging
import math
import pygame
from typing import Optional

from .base_screen import BaseScreen
from .components import Button, ZoomSlider
from core.config import EngineConfig
from core.frame_driver import GlobeEngine
from core.types import PointOfInterest, Viewport
from rendering.assets import LandmassSource
from core.decor import make_rng
from rendering.overlay import OverlayPainter, category_color
from rendering.surface import create_surface

LOGGER = logging.getLogger(__name__)

WHEEL_NOTCH = 100.0
ZOOM_KEY_STEP = 10.0


class GlobeScreen(BaseScreen):
    """Interactive globe with HUD."""

    def __init__(self, state_manager, settings: Optional[EngineConfig] = None,
                 enable_3d: bool = True, seed: Optional[int] = None):
        super().__init__("GLOBE")
        self.state_manager = state_manager
        self.settings = settings or EngineConfig()
        self.enable_3d = enable_3d
        self.seed = seed

        self.engine: Optional[GlobeEngine] = None
        self.painter: Optional[OverlayPainter] = None
        self._landmass: Optional[LandmassSource] = None

        # Drag vs click
        self._press_pos = None
        self._click_moved = False

        self._create_controls()

    # -----------------------------------------------------------------------
    # Setup
    # -----------------------------------------------------------------------

    def _create_controls(self):
        self.body_buttons = []
        for i, body in enumerate(self.state_manager.get_state().bodies):
            self.body_buttons.append(
                Button(0, 12, 120, 24, body.display_name,
                       callback=lambda i=i: self._select_body(i)))
        self.buttons = {
            'fly': Button(0, 0, 110, 24, "FLY TO", callback=self._fly_to_selection),
            'lock': Button(0, 0, 110, 24, "LOCK INPUT", callback=self._toggle_interactions),
        }
        self.slider = ZoomSlider(20, 0, 200, on_change=self._set_zoom)

    def _layout(self, W: int, H: int):
        x = W - 12
        for btn in reversed(self.body_buttons):
            x -= btn.rect.width
            btn.rect.topleft = (x, 12)
            x -= 6
        self.buttons['fly'].rect.topleft = (W - 122, H - 70)
        self.buttons['lock'].rect.topleft = (W - 238, H - 70)
        self.slider.rect.topleft = (20, H - 64)

    def _make_engine(self) -> GlobeEngine:
        self.painter = OverlayPainter()
        self._landmass = LandmassSource()
        state = self.state_manager.get_state()
        s = self.settings
        return GlobeEngine(
            state.body,
            settings=s,
            surface_factory=lambda: create_surface(self.enable_3d, s.default_scale,
                                                   s.base_camera_distance),
            painter=self.painter,
            landmass_source=self._landmass,
            rng_factory=lambda: make_rng(self.seed),
            text_width=self.painter.text_width,
            on_select=self._on_select,
            on_hover_change=self.state_manager.set_hovering,
            interactions_enabled=state.interactions_enabled,
        )

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def on_enter(self):
        super().on_enter()
        display = pygame.display.get_surface()
        W, H = display.get_size() if display else (0, 0)
        self._layout(W, H)
        self.engine = self._make_engine()
        self.engine.mount(Viewport(W, H))
        for i, btn in enumerate(self.body_buttons):
            btn.state.active = i == self.state_manager.get_state().body_index
        LOGGER.info("globe mounted (%s)", "3D" if self.engine.surface_available else "2D")

    def on_exit(self):
        super().on_exit()
        if self.engine is not None:
            self.engine.unmount()
            self.engine = None

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def _on_select(self, point: PointOfInterest):
        self.state_manager.select_point(point)
        self.engine.fly_to(point)

    def _select_body(self, index: int):
        self._show_body(self.state_manager.select_body(index))

    def _cycle_body(self):
        self._show_body(self.state_manager.cycle_body())

    def _show_body(self, body):
        if body is None or self.engine is None:
            return
        self.engine.switch_config(body)
        active = self.state_manager.get_state().body_index
        for i, btn in enumerate(self.body_buttons):
            btn.state.active = i == active

    def _fly_to_selection(self):
        selected = self.state_manager.get_state().selected
        if selected is not None and self.engine is not None:
            self.engine.fly_to(selected)

    def _toggle_interactions(self):
        enabled = self.state_manager.toggle_interactions()
        self.buttons['lock'].state.active = not enabled

    def _set_zoom(self, percent: float):
        if self.engine is not None:
            self.engine.set_zoom_percent(percent)

    # -----------------------------------------------------------------------
    # Input
    # -----------------------------------------------------------------------

    def handle_input(self, events) -> Optional[str]:
        engine = self.engine
        if engine is None:
            return None
        now = pygame.time.get_ticks()
        mp = pygame.mouse.get_pos()
        for btn in self.body_buttons: btn.update(mp)
        for btn in self.buttons.values(): btn.update(mp)

        for event in events:
            if event.type == pygame.KEYDOWN:
                k = event.key
                if   k == pygame.K_ESCAPE: return 'QUIT'
                elif k == pygame.K_TAB:    self._cycle_body()
                elif pygame.K_1 <= k <= pygame.K_9: self._select_body(k - pygame.K_1)
                elif k == pygame.K_f: self._fly_to_selection()
                elif k == pygame.K_i: self._toggle_interactions()
                elif k in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    self._set_zoom(engine.zoom_percent + ZOOM_KEY_STEP)
                elif k in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self._set_zoom(engine.zoom_percent - ZOOM_KEY_STEP)

            elif event.type == pygame.MOUSEWHEEL:
                engine.wheel(-event.y * WHEEL_NOTCH)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                consumed = (any(b.handle_event(event) for b in self.body_buttons) or
                            any(b.handle_event(event) for b in self.buttons.values()) or
                            self.slider.handle_event(event))
                if not consumed:
                    self._press_pos = event.pos
                    self._click_moved = False
                    engine.pointer_down(event.pos[0], event.pos[1], now)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                for b in self.body_buttons: b.handle_event(event)
                for b in self.buttons.values(): b.handle_event(event)
                self.slider.handle_event(event)
                if self._press_pos is not None:
                    engine.pointer_up()
                    if not self._click_moved:
                        engine.click(event.pos[0], event.pos[1])
                    self._press_pos = None

            elif event.type == pygame.MOUSEMOTION:
                if self.slider.handle_event(event):
                    continue
                if self._press_pos is not None:
                    dx = event.pos[0] - self._press_pos[0]
                    dy = event.pos[1] - self._press_pos[1]
                    if math.hypot(dx, dy) > self.settings.click_threshold_px:
                        self._click_moved = True
                engine.pointer_move(event.pos[0], event.pos[1], now)

            elif event.type == pygame.WINDOWLEAVE:
                engine.pointer_leave()
                self._press_pos = None

        return None

    # -----------------------------------------------------------------------
    # Update
    # -----------------------------------------------------------------------

    def update(self, dt: float):
        engine = self.engine
        if engine is None:
            return
        display = pygame.display.get_surface()
        if display is not None:
            W, H = display.get_size()
            if (W, H) != (engine.viewport.width, engine.viewport.height):
                engine.resize(Viewport(W, H))
                self._layout(W, H)

        state = self.state_manager.get_state()
        engine.set_selection(state.selected)
        engine.interactions_enabled = state.interactions_enabled
        engine.frame(pygame.time.get_ticks())
        if not self.slider.dragging:
            self.slider.value = engine.zoom_percent

    # -----------------------------------------------------------------------
    # Render
    # -----------------------------------------------------------------------

    def render(self, surface: pygame.Surface):
        engine = self.engine
        if engine is None:
            surface.fill(self.theme.colors.BG_DARK)
            return
        W, H = surface.get_width(), surface.get_height()
        self.painter.compose(surface, engine.surface.layer)

        self._draw_hud(surface, W, H)
        self._draw_info_panel(surface, W, H)

        for btn in self.body_buttons: btn.draw(surface)
        for btn in self.buttons.values(): btn.draw(surface)
        self.slider.draw(surface)
        self.draw_footer(surface, pygame.Rect(10, H - 30, W - 20, 22),
                         "[DRAG] Rotate  [CLICK] Select  [WHEEL] Zoom  "
                         "[TAB/1-4] Body  [F] Fly  [I] Lock  [ESC] Quit")

    def _draw_hud(self, surface, W, H):
        engine = self.engine
        c = self.theme.colors
        fonts = self.theme.fonts
        body = engine.body

        mode = "3D" if engine.surface_available else "2D"
        self.theme.draw_text(surface, fonts.tiny(), 20, 14,
                             f"SYSTEM.HUD // {body.display_name}", c.ACCENT_RED)
        self.theme.draw_text(surface, fonts.title(), 20, 30,
                             f"{body.display_name} [{mode}]", c.FG_PRIMARY)
        y = 58
        if not engine.surface_available:
            self.theme.draw_text(surface, fonts.tiny(), 20, y,
                                 "ENGINE_FALLBACK_ACTIVE", c.WARNING)
            y += 16

        yaw, pitch, _ = engine.rotation
        self.theme.draw_text(surface, fonts.tiny(), 20, y,
                             f"ROT {yaw:7.1f} {pitch:6.1f}  SCALE {engine.state.current_scale:6.0f}",
                             c.FG_DIM)
        y += 16

        mx, my = pygame.mouse.get_pos()
        geo = engine.projection().invert(mx, my)
        if geo is not None and not engine.mode.is_belt:
            self.theme.draw_text(surface, fonts.tiny(), 20, y,
                                 f"CURSOR {geo[0]:6.1f} // {geo[1]:6.1f}", c.FG_DIM)
            y += 16

        if not self.state_manager.get_state().interactions_enabled:
            self.theme.draw_text(surface, fonts.tiny(), 20, y, "INPUT LOCKED", c.ERROR)

        if self.state_manager.get_state().hovering:
            pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_HAND)
        else:
            pygame.mouse.set_cursor(pygame.SYSTEM_CURSOR_ARROW)

    def _draw_info_panel(self, surface, W, H):
        point = self.state_manager.get_state().selected
        if point is None:
            return
        pw, ph = 260, 96 + 16 * len(point.meta)
        rect = pygame.Rect(W - pw - 12, 48, pw, ph)
        self.theme.draw_panel(surface, rect, title="TARGET LOCK")

        fs = self.theme.fonts.small()
        ft = self.theme.fonts.tiny()
        c = self.theme.colors
        fy = rect.y + 26

        def row(text, col=c.FG_DIM, font=ft):
            nonlocal fy
            self.theme.draw_text(surface, font, rect.x + 10, fy, text, col)
            fy += 16

        row(point.name, c.FG_PRIMARY, fs)
        fy += 2
        row(f"COORD  {point.coords_label}")
        row(f"CLASS  {point.category.value}", category_color(point.category))
        for key, value in point.meta:
            row(f"{key:<6} {value}")
