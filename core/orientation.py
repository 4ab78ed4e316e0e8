"""
Orientation state, inertia and zoom.

GlobeState is the single mutable record shared by pointer handlers and the
frame loop. The engine owns it and hands it to the controllers below; no
controller keeps a reference between calls.

Phases
------
  IDLE_DRIFTING  inertia runs every frame
  DRAGGING       rotation follows the pointer, inertia suspended
  ANIMATING      a fly-to owns the rotation, inertia suspended
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .config import EngineConfig
from .types import Rotation


class InteractionPhase(Enum):
    IDLE_DRIFTING = "idle-drifting"
    DRAGGING      = "dragging"
    ANIMATING     = "animating"


@dataclass(slots=True)
class DragSnapshot:
    start_x: float
    start_y: float
    start_rotation: Rotation
    last_x: float
    last_y: float
    last_time_ms: float
    # finite-difference estimate from the latest move, deg/frame
    throw_yaw: float = 0.0
    throw_pitch: float = 0.0


@dataclass(slots=True)
class GlobeState:
    rotation: List[float] = field(default_factory=lambda: [0.0, -30.0, 0.0])
    current_scale: float = 350.0
    target_scale: float = 350.0
    velocity_yaw: float = 0.0
    velocity_pitch: float = 0.0
    phase: InteractionPhase = InteractionPhase.IDLE_DRIFTING
    drag: Optional[DragSnapshot] = None

    @property
    def dragging(self) -> bool:
        return self.phase is InteractionPhase.DRAGGING

    @property
    def animating(self) -> bool:
        return self.phase is InteractionPhase.ANIMATING

    @property
    def yaw(self) -> float:
        return self.rotation[0]

    @property
    def pitch(self) -> float:
        return self.rotation[1]

    def rotation_tuple(self) -> Rotation:
        return (self.rotation[0], self.rotation[1], self.rotation[2])

    def reset(self, rotation: Rotation, scale: float, idle_yaw_velocity: float):
        self.rotation       = list(rotation)
        self.current_scale  = scale
        self.target_scale   = scale
        self.velocity_yaw   = idle_yaw_velocity
        self.velocity_pitch = 0.0
        self.phase          = InteractionPhase.IDLE_DRIFTING
        self.drag           = None


class InertiaController:
    """Drag tracking, throw on release and per-frame decay."""

    def __init__(self, settings: EngineConfig, idle_yaw_velocity: float):
        self.settings = settings
        self.idle_yaw_velocity = idle_yaw_velocity

    def begin_drag(self, state: GlobeState, x: float, y: float, now_ms: float):
        state.drag = DragSnapshot(
            start_x=x, start_y=y,
            start_rotation=state.rotation_tuple(),
            last_x=x, last_y=y, last_time_ms=now_ms,
        )
        state.velocity_yaw   = 0.0
        state.velocity_pitch = 0.0
        state.phase = InteractionPhase.DRAGGING

    def drag_to(self, state: GlobeState, x: float, y: float, now_ms: float):
        drag = state.drag
        if drag is None or not state.dragging:
            return
        s = self.settings.drag_sensitivity
        y0, p0, r0 = drag.start_rotation
        # absolute, so the result depends only on the cumulative offset
        state.rotation = [y0 + (x - drag.start_x) * s,
                          p0 - (y - drag.start_y) * s,
                          r0]

        elapsed = max(1.0, now_ms - drag.last_time_ms)
        k = self.settings.throw_gain * self.settings.throw_reference_ms / elapsed
        drag.throw_yaw, drag.throw_pitch = self._cap(
            (x - drag.last_x) * k, -(y - drag.last_y) * k)
        drag.last_x, drag.last_y, drag.last_time_ms = x, y, now_ms

    def end_drag(self, state: GlobeState):
        if not state.dragging:
            return
        drag = state.drag
        if drag is not None:
            state.velocity_yaw   = drag.throw_yaw
            state.velocity_pitch = drag.throw_pitch
        state.drag  = None
        state.phase = InteractionPhase.IDLE_DRIFTING

    def step(self, state: GlobeState):
        """One idle frame: apply velocity, then decay it."""
        if state.phase is not InteractionPhase.IDLE_DRIFTING:
            return
        state.rotation[0] += state.velocity_yaw
        state.rotation[1] += state.velocity_pitch
        state.velocity_pitch *= self.settings.pitch_decay
        base = self.idle_yaw_velocity
        state.velocity_yaw = (state.velocity_yaw - base) * self.settings.yaw_decay + base

    def _cap(self, vy: float, vp: float) -> Tuple[float, float]:
        limit = self.settings.max_throw_velocity
        mag = math.hypot(vy, vp)
        if mag <= limit:
            return vy, vp
        k = limit / mag
        return vy * k, vp * k


class ZoomControl:
    """Wheel / programmatic zoom on the target, eased current scale."""

    def __init__(self, settings: EngineConfig):
        self.settings = settings

    def wheel(self, state: GlobeState, delta_y: float):
        state.target_scale = self.settings.clamp_scale(
            state.target_scale - delta_y * self.settings.wheel_sensitivity)

    def set_percent(self, state: GlobeState, percent: float):
        state.target_scale = self.settings.scale_for_percent(percent)

    def ease(self, state: GlobeState):
        gap = state.target_scale - state.current_scale
        if abs(gap) > self.settings.zoom_snap:
            state.current_scale += gap * self.settings.zoom_ease
        else:
            state.current_scale = state.target_scale
        state.current_scale = self.settings.clamp_scale(state.current_scale)
