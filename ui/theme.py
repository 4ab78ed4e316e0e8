"""
UI Theme - Tactical HUD Style

Black field, signal red accents, slate secondaries, monospaced type.
Marker category colours are owned by the overlay painter.
"""

import pygame
from typing import Tuple
from dataclasses import dataclass


class Colors:
    """Tactical palette"""

    BG_DARK = (0, 0, 0)
    BG_PANEL = (10, 10, 10)

    FG_PRIMARY = (228, 228, 231)
    FG_DIM = (148, 163, 184)
    FG_DARK = (71, 85, 105)

    ACCENT_RED = (228, 39, 55)
    ACCENT_RED_DIM = (127, 29, 29)
    ACCENT_SLATE = (51, 65, 85)
    ACCENT_AMBER = (251, 191, 36)

    BUTTON_NORMAL = FG_DIM
    BUTTON_HOVER = ACCENT_RED
    BUTTON_PRESSED = FG_PRIMARY
    BUTTON_DISABLED = FG_DARK

    BORDER_NORMAL = ACCENT_SLATE
    BORDER_FOCUS = ACCENT_RED

    WARNING = ACCENT_AMBER
    ERROR = ACCENT_RED


@dataclass
class FontConfig:
    family: str = "Consolas"
    size_title: int = 22
    size_small: int = 13
    size_tiny: int = 11


class Fonts:
    """
    Monospaced fonts, loaded once.

    Tries the configured family and a couple of common monospace faces,
    then pygame's bundled font.
    """

    _fonts: dict = {}
    _config = FontConfig()

    @classmethod
    def initialize(cls, config: FontConfig = None):
        if config is not None:
            cls._config = config
        pygame.font.init()
        c = cls._config

        family = next((f for f in (c.family, "Courier New", "monospace")
                       if pygame.font.match_font(f)), None)
        if family is not None:
            cls._fonts = {
                'title': pygame.font.SysFont(family, c.size_title, bold=True),
                'small': pygame.font.SysFont(family, c.size_small),
                'tiny': pygame.font.SysFont(family, c.size_tiny),
            }
        else:
            cls._fonts = {
                'title': pygame.font.Font(None, c.size_title + 6),
                'small': pygame.font.Font(None, c.size_small + 4),
                'tiny': pygame.font.Font(None, c.size_tiny + 4),
            }

    @classmethod
    def get(cls, size: str) -> pygame.font.Font:
        if not cls._fonts:
            cls.initialize()
        return cls._fonts[size]

    @classmethod
    def title(cls) -> pygame.font.Font:
        return cls.get('title')

    @classmethod
    def small(cls) -> pygame.font.Font:
        return cls.get('small')

    @classmethod
    def tiny(cls) -> pygame.font.Font:
        return cls.get('tiny')


class Theme:

    def __init__(self):
        self.colors = Colors()
        self.fonts = Fonts()
        self.border_width = 1

    def draw_panel(self, surface: pygame.Surface, rect: pygame.Rect,
                   title: str = "",
                   border: Tuple[int, int, int] = None):
        """
        Translucent panel with a 1 px border and an optional red title.

        Args:
            surface: Target surface
            rect: Panel rectangle
            title: Title drawn in the top-left corner
            border: Border colour (None = BORDER_NORMAL)
        """
        panel = pygame.Surface(rect.size, pygame.SRCALPHA)
        panel.fill((*self.colors.BG_PANEL, 210))
        surface.blit(panel, rect.topleft)
        pygame.draw.rect(surface, border or self.colors.BORDER_NORMAL,
                         rect, self.border_width)
        if title:
            self.draw_text(surface, self.fonts.small(), rect.x + 10, rect.y + 6,
                           title, self.colors.ACCENT_RED)

    def draw_text(self, surface: pygame.Surface, font: pygame.font.Font,
                  x: int, y: int, text: str, color: Tuple[int, int, int],
                  align: str = 'left'):
        rendered = font.render(text, True, color)
        if align == 'center':
            x -= rendered.get_width() // 2
        elif align == 'right':
            x -= rendered.get_width()
        surface.blit(rendered, (x, y))


_theme = None

def get_theme() -> Theme:
    global _theme
    if _theme is None:
        _theme = Theme()
        _theme.fonts.initialize()
    return _theme
