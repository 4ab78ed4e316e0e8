"""
Body Configurations

Built-in scenes (Earth, Moon, Mars and the asteroid belt) plus a loader
for the same shape from JSON:

    {
      "bodies": [
        {"id": "earth", "name": "TERRA",
         "albedo_url": "...", "height_map_url": "...", "landmass_url": "...",
         "points": [{"name": "New York", "lat": 40.7, "lng": -74.0,
                     "category": "STANDARD", "meta": {"POP": "8.3M"}}]}
      ]
    }

The first point of a planet sets its opening orientation.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from core.errors import ConfigError
from core.types import BELT_IDENTIFIER, BodyConfig, Category, PointOfInterest

THREEJS_TEXTURES = "https://threejs.org/examples/textures/planets"
NATURAL_EARTH_LAND = ("https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
                      "master/geojson/ne_110m_land.geojson")

# Format: (name, lat, lng, category, meta)
EARTH_POINTS = [
    ("New York", 40.7, -74.0, "STANDARD", {"POP": "8.3M"}),
    ("London", 51.5, -0.1, "STANDARD", {"POP": "8.9M"}),
    ("Tokyo", 35.7, 139.7, "STANDARD", {"POP": "14M"}),
    ("Svalbard Vault", 78.2, 15.6, "ICE", {"SEC": "T4"}),
    ("McMurdo Station", -77.8, 166.7, "ICE", {}),
    ("Diego Garcia", -7.3, 72.4, "MILITARY", {"SEC": "T5"}),
    ("Pine Gap", -23.8, 133.7, "MILITARY", {}),
    ("Tunguska", 60.9, 101.9, "ANOMALY", {"EVT": "1908"}),
    ("Arecibo", 18.3, -66.8, "AC", {}),
    ("Sao Paulo", -23.5, -46.6, "STANDARD", {}),
    ("Nairobi", -1.3, 36.8, "STANDARD", {}),
]

MOON_POINTS = [
    ("Tranquility Base", 0.67, 23.47, "STANDARD", {"YR": "1969"}),
    ("Shackleton Crater", -89.9, 0.0, "ICE", {"H2O": "CONF"}),
    ("Tycho", -43.3, -11.2, "ANOMALY", {}),
    ("Copernicus", 9.6, -20.1, "STANDARD", {}),
    ("Mare Imbrium", 32.8, -15.6, "STANDARD", {}),
    ("Chang'e 4", -45.4, 177.6, "AC", {}),
]

MARS_POINTS = [
    ("Jezero Crater", 18.4, 77.5, "STANDARD", {}),
    ("Olympus Mons", 18.65, -133.8, "STANDARD", {"ALT": "21.9KM"}),
    ("Planum Boreum", 85.0, 0.0, "ICE", {}),
    ("Cydonia", 40.7, -9.5, "ANOMALY", {}),
    ("Gale Crater", -5.4, 137.8, "AC", {}),
    ("Valles Marineris", -13.9, -59.2, "STANDARD", {}),
]

BELT_POINTS = [
    ("Ceres", 5.0, 40.0, "STANDARD", {"D": "940KM"}),
    ("Vesta", -8.0, 150.0, "STANDARD", {"D": "525KM"}),
    ("Pallas", 15.0, -90.0, "ANOMALY", {}),
    ("Hygiea", -3.0, -20.0, "ICE", {}),
    ("Psyche", 2.0, -150.0, "MILITARY", {"FE": "HIGH"}),
]


def _points(rows) -> tuple:
    return tuple(PointOfInterest(name, lat, lng, Category.parse(cat),
                                 tuple((str(k), str(v)) for k, v in meta.items()))
                 for name, lat, lng, cat, meta in rows)


def builtin_bodies() -> List[BodyConfig]:
    return [
        BodyConfig("earth", "TERRA", _points(EARTH_POINTS),
                   albedo_url=f"{THREEJS_TEXTURES}/earth_atmos_2048.jpg",
                   landmass_url=NATURAL_EARTH_LAND),
        BodyConfig("moon", "LUNA", _points(MOON_POINTS),
                   albedo_url=f"{THREEJS_TEXTURES}/moon_1024.jpg"),
        BodyConfig("mars", "MARS", _points(MARS_POINTS)),
        BodyConfig(BELT_IDENTIFIER, "ASTEROID BELT", _points(BELT_POINTS)),
    ]


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------

def point_from_mapping(data: Mapping[str, Any]) -> PointOfInterest:
    if not isinstance(data, Mapping):
        raise ConfigError(f"point must be an object, got {data!r}")
    try:
        name = str(data["name"])
        lat = float(data["lat"])
        lng = float(data["lng"])
    except KeyError as e:
        raise ConfigError(f"point is missing {e.args[0]!r}") from None
    except (TypeError, ValueError) as e:
        raise ConfigError(f"point {data.get('name')!r}: {e}") from None
    if not -90.0 <= lat <= 90.0:
        raise ConfigError(f"point {name!r}: latitude {lat} out of range")
    if not -180.0 <= lng <= 180.0:
        raise ConfigError(f"point {name!r}: longitude {lng} out of range")
    meta = data.get("meta") or {}
    if not isinstance(meta, Mapping):
        raise ConfigError(f"point {name!r}: meta must be an object")
    return PointOfInterest(name, lat, lng,
                           Category.parse(data.get("category", "STANDARD")),
                           tuple((str(k), str(v)) for k, v in meta.items()))


def body_from_mapping(data: Mapping[str, Any]) -> BodyConfig:
    if not isinstance(data, Mapping) or "id" not in data:
        raise ConfigError("body is missing 'id'")
    ident = str(data["id"])
    points = tuple(point_from_mapping(p) for p in data.get("points", []))
    names = [p.name for p in points]
    if len(set(names)) != len(names):
        raise ConfigError(f"body {ident!r}: point names must be unique")
    return BodyConfig(
        identifier=ident,
        display_name=str(data.get("name", ident.upper())),
        points=points,
        albedo_url=data.get("albedo_url"),
        height_map_url=data.get("height_map_url"),
        landmass_url=data.get("landmass_url"),
    )


def bodies_from_mapping(data: Any) -> List[BodyConfig]:
    rows: Iterable = data.get("bodies", []) if isinstance(data, Mapping) else data
    if not isinstance(rows, list) or not rows:
        raise ConfigError("expected a non-empty list of bodies")
    bodies = [body_from_mapping(b) for b in rows]
    ids = [b.identifier for b in bodies]
    if len(set(ids)) != len(ids):
        raise ConfigError("body ids must be unique")
    return bodies


def load_bodies(path) -> List[BodyConfig]:
    """Load body configurations from a JSON file."""
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read bodies from {path}: {e}") from e
    return bodies_from_mapping(data)
