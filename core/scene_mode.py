from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import EngineConfig
from .types import BodyConfig, Rotation

PLANET_FALLBACK_ROTATION: Rotation = (0.0, -30.0, 0.0)
BELT_DEFAULT_ROTATION: Rotation    = (0.0, -20.0, 0.0)


class SceneKind(Enum):
    PLANET = "planet"
    BELT   = "belt"


@dataclass(frozen=True)
class SceneMode:
    """Everything that differs between a rotatable planet and the belt."""
    kind: SceneKind
    clip_angle: Optional[float]
    marker_spread: float
    idle_yaw_velocity: float
    default_rotation: Rotation

    @property
    def is_belt(self) -> bool:
        return self.kind is SceneKind.BELT

    @property
    def allows_fly_to(self) -> bool:
        return self.kind is SceneKind.PLANET

    @property
    def uses_mesh(self) -> bool:
        return self.kind is SceneKind.PLANET

    @property
    def culls_back_face(self) -> bool:
        return self.kind is SceneKind.PLANET


def scene_mode_for(body: BodyConfig, settings: EngineConfig) -> SceneMode:
    if body.is_belt:
        return SceneMode(
            kind=SceneKind.BELT,
            clip_angle=None,
            marker_spread=settings.belt_spread,
            idle_yaw_velocity=0.0,
            default_rotation=BELT_DEFAULT_ROTATION,
        )
    if body.points:
        first = body.points[0]
        rotation = (-first.lng, -first.lat, 0.0)
    else:
        rotation = PLANET_FALLBACK_ROTATION
    return SceneMode(
        kind=SceneKind.PLANET,
        clip_angle=90.0,
        marker_spread=1.0,
        idle_yaw_velocity=settings.idle_yaw_velocity,
        default_rotation=rotation,
    )
