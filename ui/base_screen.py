"""
Base Screen Class

Every screen registered with the StateManager implements these hooks.
"""

import pygame
from abc import ABC, abstractmethod
from typing import Optional
from .theme import get_theme


class BaseScreen(ABC):

    def __init__(self, screen_name: str):
        self.screen_name = screen_name
        self.active = False
        self.theme = get_theme()

    @abstractmethod
    def on_enter(self):
        """Acquire per-screen resources (engines, surfaces)."""
        self.active = True

    @abstractmethod
    def on_exit(self):
        """Release everything acquired in on_enter."""
        self.active = False

    @abstractmethod
    def handle_input(self, events: list[pygame.event.Event]) -> Optional[str]:
        """
        Handle this frame's events

        Returns:
            Name of screen to switch to, 'QUIT', or None to stay
        """

    @abstractmethod
    def update(self, dt: float):
        pass

    @abstractmethod
    def render(self, surface: pygame.Surface):
        pass

    def draw_footer(self, surface: pygame.Surface, rect: pygame.Rect,
                    controls: str):
        """Key hints along the bottom edge."""
        self.theme.draw_panel(surface, rect)
        self.theme.draw_text(surface, self.theme.fonts.tiny(),
                             rect.x + 10, rect.y + 6,
                             controls, self.theme.colors.FG_DIM)
