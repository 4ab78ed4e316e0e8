"""
UI Module - Tactical HUD theme, components and the globe screen
"""
from .theme import get_theme, Colors, Fonts
from .base_screen import BaseScreen
from .components import Button, ZoomSlider

__all__ = [
    "get_theme", "Colors", "Fonts",
    "BaseScreen",
    "Button", "ZoomSlider",
]
