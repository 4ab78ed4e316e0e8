from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# (yaw, pitch, roll) in degrees
Rotation = Tuple[float, float, float]

BELT_IDENTIFIER = "belt"


class Category(Enum):
    """Marker category; drives the marker colour."""
    STANDARD = "STANDARD"
    ICE      = "ICE"
    AC       = "AC"
    ANOMALY  = "ANOMALY"
    MILITARY = "MILITARY"
    DEBRIS   = "DEBRIS"

    @classmethod
    def parse(cls, value) -> "Category":
        if isinstance(value, Category):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.STANDARD


@dataclass(frozen=True, slots=True)
class PointOfInterest:
    name: str
    lat: float
    lng: float
    category: Category = Category.STANDARD
    # (key, value) pairs shown under the coordinates in the large label
    meta: Tuple[Tuple[str, str], ...] = ()

    @property
    def coords_label(self) -> str:
        return f"{self.lat:.1f} // {self.lng:.1f}"

    @property
    def meta_label(self) -> str:
        return "  ".join(f"{k}: {v}" for k, v in self.meta)


@dataclass(frozen=True, slots=True)
class BodyConfig:
    identifier: str
    display_name: str
    points: Tuple[PointOfInterest, ...] = ()
    albedo_url: Optional[str] = None
    height_map_url: Optional[str] = None
    landmass_url: Optional[str] = None

    @property
    def is_belt(self) -> bool:
        return self.identifier == BELT_IDENTIFIER

    @property
    def texture_urls(self) -> Tuple[str, ...]:
        return tuple(u for u in (self.albedo_url, self.height_map_url) if u)


@dataclass(frozen=True, slots=True)
class Viewport:
    width: int = 0
    height: int = 0
    device_pixel_ratio: float = 1.0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    @property
    def backing_size(self) -> Tuple[int, int]:
        """Pixel size of the backing surface once the device ratio is applied."""
        return (int(self.width * self.device_pixel_ratio),
                int(self.height * self.device_pixel_ratio))
