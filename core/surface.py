"""
Surface capability the engine drives.

The engine only talks to a RenderSurface; concrete 3D layers live in
``rendering.surface``. NullSurface is the stand-in whenever no 3D layer
can be had.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .types import BodyConfig, Viewport


class RenderSurface(ABC):
    """Capability the engine needs from a 3D collaborator."""

    available = True

    @abstractmethod
    def create(self, viewport: Viewport): ...

    @abstractmethod
    def destroy(self): ...

    @abstractmethod
    def resize(self, width: int, height: int): ...

    @abstractmethod
    def set_camera_distance(self, distance: float): ...

    @abstractmethod
    def set_mesh_rotation(self, x_rad: float, y_rad: float): ...

    @abstractmethod
    def build_mesh(self, body: BodyConfig): ...

    @abstractmethod
    def destroy_mesh(self): ...

    @abstractmethod
    def render(self): ...

    @abstractmethod
    def clear(self): ...

    @property
    def has_mesh(self) -> bool:
        return False

    @property
    def layer(self):
        """pygame.Surface to blit under the overlay, or None."""
        return None


class NullSurface(RenderSurface):
    """No 3D layer: every call is accepted and ignored."""

    available = False

    def create(self, viewport): pass
    def destroy(self): pass
    def resize(self, width, height): pass
    def set_camera_distance(self, distance): pass
    def set_mesh_rotation(self, x_rad, y_rad): pass
    def build_mesh(self, body): pass
    def destroy_mesh(self): pass
    def render(self): pass
    def clear(self): pass
