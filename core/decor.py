"""
Decorative fields - starfield and asteroid belt.

Regenerated on every mount and scene switch from a numpy Generator, so a
fixed seed gives a reproducible sky (tests, screenshots). Stars are never
hit-tested; asteroids double as low-priority points of interest in belt
mode.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .types import Category, PointOfInterest

ASTEROID_RED   = (228, 39, 55)
ASTEROID_SLATE = (51, 65, 85)

STARFIELD_WIDTH  = 2000.0
STARFIELD_HEIGHT = 1000.0


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


@dataclass(frozen=True, slots=True)
class Star:
    x: float
    y: float
    opacity: float


@dataclass(frozen=True, slots=True)
class Asteroid:
    lng: float
    lat: float
    spread: float     # radial exaggeration, 1.0 .. 2.5
    size: float       # 1 .. 4, multiplied by scale * 0.005 on screen
    color: tuple
    opacity: float
    point: PointOfInterest


def generate_starfield(rng: np.random.Generator, count: int = 400) -> List[Star]:
    xs = rng.random(count) * STARFIELD_WIDTH
    ys = rng.random(count) * STARFIELD_HEIGHT
    op = rng.random(count)
    return [Star(float(x), float(y), float(o)) for x, y, o in zip(xs, ys, op)]


def generate_asteroid_belt(rng: np.random.Generator,
                           count: int = 300) -> List[Asteroid]:
    lng    = rng.random(count) * 360.0 - 180.0
    lat    = rng.random(count) * 40.0 - 20.0
    spread = 1.0 + rng.random(count) * 1.5
    size   = rng.random(count) * 3.0 + 1.0
    red    = rng.random(count) > 0.8
    op     = rng.random(count)

    rocks = []
    for i in range(count):
        name = f"AST-{i + 1:04d}"
        point = PointOfInterest(
            name=name,
            lat=round(float(lat[i]), 3),
            lng=round(float(lng[i]), 3),
            category=Category.DEBRIS,
            meta=(("R", f"{spread[i]:.2f}"),),
        )
        rocks.append(Asteroid(
            lng=point.lng, lat=point.lat,
            spread=float(spread[i]),
            size=float(size[i]),
            color=ASTEROID_RED if red[i] else ASTEROID_SLATE,
            opacity=float(op[i]),
            point=point,
        ))
    return rocks
