"""
Application State Manager

Owns the selection and the active body (the engine only reads them) and
handles screen registration, lifecycle and back navigation.
"""

from __future__ import annotations
import logging
import pygame
from typing import Optional, Dict, List
from dataclasses import dataclass, field

from core.types import BodyConfig, PointOfInterest

LOGGER = logging.getLogger(__name__)


@dataclass
class AppState:
    """Global application state"""
    bodies: List[BodyConfig] = field(default_factory=list)
    body_index: int = 0

    # Selection is owned here and echoed to the engine every frame
    selected: Optional[PointOfInterest] = None

    # Fed by the engine's hover channel
    hovering: bool = False

    interactions_enabled: bool = True

    @property
    def body(self) -> Optional[BodyConfig]:
        if not self.bodies:
            return None
        return self.bodies[self.body_index]


class StateManager:
    """
    Manages application state and screen navigation

    Responsibilities:
    - Screen registration and lifecycle
    - Navigation between screens
    - Selection / active body ownership
    - Screen stack for back navigation
    """

    def __init__(self, bodies: List[BodyConfig]):
        self.state = AppState(bodies=list(bodies))
        self.screens: Dict[str, 'BaseScreen'] = {}
        self.current_screen: Optional[str] = None
        self.screen_stack: list[str] = []
        self.quit_requested = False

    def register_screen(self, name: str, screen: 'BaseScreen'):
        self.screens[name] = screen
        LOGGER.debug("registered screen %s", name)

    def switch_to(self, screen_name: str, push_stack: bool = True):
        """
        Switch to a screen

        Args:
            screen_name: Name of screen to switch to
            push_stack: If True, push current screen to stack (for back nav)
        """
        if screen_name not in self.screens:
            LOGGER.warning("screen %r not registered", screen_name)
            return

        if self.current_screen:
            if push_stack:
                self.screen_stack.append(self.current_screen)
            self.screens[self.current_screen].on_exit()

        self.current_screen = screen_name
        self.screens[screen_name].on_enter()
        LOGGER.info("switched to screen %s", screen_name)

    def go_back(self) -> bool:
        """
        Go back to previous screen

        Returns:
            True if went back, False if no previous screen
        """
        if not self.screen_stack:
            return False
        previous = self.screen_stack.pop()
        self.switch_to(previous, push_stack=False)
        return True

    def update(self, dt: float):
        if self.current_screen:
            self.screens[self.current_screen].update(dt)

    def render(self, surface: pygame.Surface):
        if self.current_screen:
            self.screens[self.current_screen].render(surface)

    def handle_input(self, events: list[pygame.event.Event]):
        if not self.current_screen:
            return

        next_screen = self.screens[self.current_screen].handle_input(events)

        # "QUIT" is reserved: it ends the main loop
        if next_screen == 'QUIT':
            if not self.go_back():
                self.quit_requested = True
        elif next_screen:
            self.switch_to(next_screen)

    def shutdown(self):
        """Exit the active screen so it can release its resources."""
        if self.current_screen:
            self.screens[self.current_screen].on_exit()
            self.current_screen = None

    # -- selection / body --------------------------------------------------

    def get_state(self) -> AppState:
        return self.state

    def select_point(self, point: Optional[PointOfInterest]):
        self.state.selected = point
        if point is not None:
            LOGGER.info("selected %s (%.1f, %.1f)", point.name, point.lat, point.lng)

    def set_hovering(self, hovering: bool):
        self.state.hovering = hovering

    def select_body(self, index: int) -> Optional[BodyConfig]:
        """Make body ``index`` active; the selection does not survive a switch."""
        if not 0 <= index < len(self.state.bodies):
            return None
        if index != self.state.body_index:
            self.state.body_index = index
            self.state.selected = None
        return self.state.body

    def cycle_body(self, step: int = 1) -> Optional[BodyConfig]:
        n = len(self.state.bodies)
        if n == 0:
            return None
        return self.select_body((self.state.body_index + step) % n)

    def toggle_interactions(self) -> bool:
        self.state.interactions_enabled = not self.state.interactions_enabled
        return self.state.interactions_enabled
