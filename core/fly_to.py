from __future__ import annotations
from typing import Optional

from .config import EngineConfig
from .coords import clamp, ease_cubic_out, lerp
from .orientation import GlobeState, InteractionPhase
from .scheduler import FrameScheduler
from .types import PointOfInterest, Rotation


class FlyToAnimator:
    """
    Eased, wall-clock timed re-centring of the view on a point.

    The step runs on the shared FrameScheduler. The first step fixes t0, so
    the duration does not depend on the frame rate. While it runs the state
    phase is ANIMATING, which keeps inertia off.
    """

    def __init__(self, scheduler: FrameScheduler, settings: EngineConfig):
        self._scheduler = scheduler
        self.duration_ms = settings.fly_duration_ms
        self._state: Optional[GlobeState] = None
        self._handle: Optional[int] = None
        self._start: Rotation = (0.0, 0.0, 0.0)
        self._target: Rotation = (0.0, 0.0, 0.0)
        self._t0: Optional[float] = None
        self._idle_yaw_velocity = 0.0
        self.target_point: Optional[PointOfInterest] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, state: GlobeState, point: PointOfInterest,
              idle_yaw_velocity: float):
        # a second request restarts from wherever the view is now
        self._cancel_step()
        self._state  = state
        self._start  = state.rotation_tuple()
        self._target = (-point.lng, -point.lat, 0.0)
        self._t0     = None
        self._idle_yaw_velocity = idle_yaw_velocity
        self.target_point = point

        state.drag = None
        state.velocity_yaw   = 0.0
        state.velocity_pitch = 0.0
        state.phase = InteractionPhase.ANIMATING
        self._handle = self._scheduler.request(self._step)

    def cancel(self):
        """Abort without snapping; the state returns to idle drift."""
        was_active = self.active
        self._cancel_step()
        if was_active and self._state is not None and self._state.animating:
            self._state.phase = InteractionPhase.IDLE_DRIFTING
        self._state = None
        self.target_point = None

    def _cancel_step(self):
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _step(self, now_ms: float):
        state = self._state
        if state is None:
            self._handle = None
            return
        if self._t0 is None:
            self._t0 = now_ms
        progress = clamp((now_ms - self._t0) / self.duration_ms, 0.0, 1.0)
        t = ease_cubic_out(progress)
        state.rotation = [lerp(a, b, t) for a, b in zip(self._start, self._target)]

        if progress < 1.0:
            self._handle = self._scheduler.request(self._step)
            return

        self._handle = None
        state.phase = InteractionPhase.IDLE_DRIFTING
        state.velocity_yaw   = self._idle_yaw_velocity
        state.velocity_pitch = 0.0
        self._state = None
        self.target_point = None
