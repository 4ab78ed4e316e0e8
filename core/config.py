"""
Engine tunables.

Every constant the interaction engine depends on lives in EngineConfig so a
scene can be retuned from a JSON file (``--config`` on the command line)
without touching code. Defaults:

  * zoom        scale 100..2000, start 350, 10 % easing per frame
  * drag        0.25 deg per pixel, throw 0.2 deg per pixel per 16 ms
  * inertia     pitch x0.92 per frame, yaw relaxes x0.95 toward 0.05 deg/frame
  * fly-to      1500 ms ease-out cubic
  * hit-test    15 px marker radius
  * labels      20 % easing, 25 px below the marker
"""

from __future__ import annotations
import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Mapping

from .coords import clamp
from .errors import ConfigError


@dataclass
class EngineConfig:
    # Zoom
    min_scale: float = 100.0
    max_scale: float = 2000.0
    default_scale: float = 350.0
    zoom_ease: float = 0.1
    zoom_snap: float = 0.1
    wheel_sensitivity: float = 0.5

    # Drag / throw
    drag_sensitivity: float = 0.25
    throw_gain: float = 0.2
    throw_reference_ms: float = 16.0
    max_throw_velocity: float = 20.0

    # Inertia
    pitch_decay: float = 0.92
    yaw_decay: float = 0.95
    idle_yaw_velocity: float = 0.05

    # Fly-to
    fly_duration_ms: float = 1500.0

    # Hit testing and labels
    hit_radius_px: float = 15.0
    label_ease: float = 0.2
    label_offset_y: float = 25.0
    label_padding_x: float = 24.0
    label_height: float = 28.0
    label_meta_height: float = 10.0

    # Scene
    belt_spread: float = 2.2
    base_camera_distance: float = 1200.0
    star_count: int = 400
    asteroid_count: int = 300
    pulse_period_ms: float = 400.0
    click_threshold_px: float = 3.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.min_scale <= 0 or self.min_scale >= self.max_scale:
            raise ConfigError(
                f"scale bounds must satisfy 0 < min < max, got "
                f"{self.min_scale}..{self.max_scale}")
        if not self.min_scale <= self.default_scale <= self.max_scale:
            raise ConfigError(
                f"default_scale {self.default_scale} outside "
                f"{self.min_scale}..{self.max_scale}")
        for name in ("zoom_ease", "label_ease", "pitch_decay", "yaw_decay"):
            v = getattr(self, name)
            if not 0.0 < v <= 1.0:
                raise ConfigError(f"{name} must be in (0, 1], got {v}")
        if self.fly_duration_ms <= 0:
            raise ConfigError("fly_duration_ms must be positive")

    # ------------------------------------------------------------------
    def clamp_scale(self, scale: float) -> float:
        return clamp(scale, self.min_scale, self.max_scale)

    def scale_for_percent(self, percent: float) -> float:
        """Map a 0..100 zoom percentage linearly onto the scale range."""
        p = clamp(float(percent), 0.0, 100.0)
        return self.min_scale + (p / 100.0) * (self.max_scale - self.min_scale)

    def percent_for_scale(self, scale: float) -> float:
        span = self.max_scale - self.min_scale
        return clamp((scale - self.min_scale) / span * 100.0, 0.0, 100.0)

    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"unknown engine settings: {', '.join(unknown)}")
        values = {}
        for key, raw in data.items():
            typ = int if known[key].type in (int, "int") else float
            try:
                values[key] = typ(raw)
            except (TypeError, ValueError):
                raise ConfigError(f"{key}: expected a number, got {raw!r}") from None
        return cls(**values)

    @classmethod
    def from_json(cls, path) -> "EngineConfig":
        path = Path(path)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot read engine settings {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be an object")
        return cls.from_mapping(data)

    def to_dict(self) -> dict:
        return asdict(self)
