"""
UI Components - HUD controls for the globe screen

- Button: clickable body selector / action button with hover and press states
- ZoomSlider: horizontal 0..100 track driving the globe zoom
"""

import pygame
from typing import Optional, Callable, Tuple
from dataclasses import dataclass
from .theme import get_theme


@dataclass
class ButtonState:
    """Button state"""
    hovered: bool = False
    pressed: bool = False
    active: bool = False      # latched, e.g. the current body


class Button:
    """
    Interactive button component

    Square-cornered tactical button; ``state.active`` keeps it lit.
    """

    def __init__(self, x: int, y: int, width: int, height: int,
                 text: str, callback: Optional[Callable] = None):
        """
        Initialize button

        Args:
            x, y: Position
            width, height: Size
            text: Button text
            callback: Function to call when clicked
        """
        self.rect = pygame.Rect(x, y, width, height)
        self.text = text
        self.callback = callback
        self.state = ButtonState()
        self.enabled = True
        self.theme = get_theme()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle input event

        Returns:
            True if the event was consumed by the button
        """
        if not self.enabled:
            return False

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.state.pressed = True
                return True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.state.pressed and self.rect.collidepoint(event.pos):
                self.state.pressed = False
                if self.callback:
                    self.callback()
                return True
            self.state.pressed = False

        return False

    def update(self, mouse_pos: Tuple[int, int]):
        self.state.hovered = self.enabled and self.rect.collidepoint(mouse_pos)

    def draw(self, surface: pygame.Surface):
        c = self.theme.colors
        if not self.enabled:
            fg, border = c.BUTTON_DISABLED, c.BORDER_NORMAL
        elif self.state.pressed:
            fg, border = c.BUTTON_PRESSED, c.ACCENT_RED
        elif self.state.active or self.state.hovered:
            fg, border = c.BUTTON_HOVER, c.BORDER_FOCUS
        else:
            fg, border = c.BUTTON_NORMAL, c.BORDER_NORMAL

        bg = c.ACCENT_RED_DIM if self.state.active else c.BG_PANEL
        pygame.draw.rect(surface, bg, self.rect)
        pygame.draw.rect(surface, border, self.rect, 1)

        font = self.theme.fonts.small()
        self.theme.draw_text(surface, font,
                             self.rect.centerx,
                             self.rect.centery - font.get_height() // 2,
                             self.text, fg, align='center')


class ZoomSlider:
    """
    Horizontal zoom control

    Reports 0..100 through ``on_change`` while the knob is dragged or the
    track is clicked. ``value`` is set back from the engine each frame so
    wheel zoom moves the knob too.
    """

    KNOB_W = 8

    def __init__(self, x: int, y: int, width: int, height: int = 16,
                 on_change: Optional[Callable[[float], None]] = None,
                 value: float = 0.0):
        self.rect = pygame.Rect(x, y, width, height)
        self.on_change = on_change
        self.value = value
        self.dragging = False
        self.theme = get_theme()

    def value_at(self, x: float) -> float:
        span = max(1, self.rect.width - self.KNOB_W)
        v = (x - self.rect.x - self.KNOB_W / 2) / span * 100.0
        return max(0.0, min(100.0, v))

    def _set_from(self, x: float):
        self.value = self.value_at(x)
        if self.on_change:
            self.on_change(self.value)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.dragging = True
                self._set_from(event.pos[0])
                return True
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self._set_from(event.pos[0])
            return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = False
            return True
        return False

    def draw(self, surface: pygame.Surface):
        c = self.theme.colors
        r = self.rect
        mid = r.centery
        pygame.draw.line(surface, c.ACCENT_SLATE, (r.x, mid), (r.right, mid), 1)

        span = r.width - self.KNOB_W
        kx = r.x + int(span * self.value / 100.0)
        pygame.draw.line(surface, c.ACCENT_RED, (r.x, mid), (kx, mid), 2)
        pygame.draw.rect(surface, c.ACCENT_RED, (kx, r.y, self.KNOB_W, r.height))

        self.theme.draw_text(surface, self.theme.fonts.tiny(),
                             r.right + 8, r.y,
                             f"ZOOM {self.value:5.1f}%", c.FG_DIM)
