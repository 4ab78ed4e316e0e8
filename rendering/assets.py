"""
Background asset loading - textures and landmass polygons.

Loads run on daemon threads and post their outcome to a queue. The frame
loop drains the queue on the main thread (``drain`` / ``poll``), so the
render loop never blocks and tolerates "not loaded yet" indefinitely.

Sources may be local paths or http(s) URLs (fetched with requests).
Landmass data is GeoJSON: FeatureCollection / Feature / Polygon /
MultiPolygon, coordinates as (lng, lat).
"""

from __future__ import annotations
import io
import json
import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import requests

from core.errors import AssetLoadError, GeometryFetchError

LOGGER = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 20.0

Ring = Tuple[Tuple[float, float], ...]   # ((lng, lat), ...)


def _is_remote(url: str) -> bool:
    return url.lower().startswith(("http://", "https://"))


def _fetch_bytes(url: str) -> bytes:
    resp = requests.get(url, timeout=HTTP_TIMEOUT_S)
    resp.raise_for_status()
    return resp.content


# ---------------------------------------------------------------------------
# Textures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextureResult:
    tag: int
    kind: str                        # 'map' | 'height'
    url: str
    pixels: Optional[np.ndarray]     # (w, h, 3) float32 0..1
    error: Optional[Exception] = None


def read_texture(url: str) -> np.ndarray:
    """Decode an image into a (w, h, 3) float array in 0..1."""
    import pygame
    try:
        if _is_remote(url):
            data = _fetch_bytes(url)
            img = pygame.image.load(io.BytesIO(data), Path(url).name)
        else:
            img = pygame.image.load(str(url))
    except (requests.RequestException, pygame.error, OSError) as e:
        raise AssetLoadError(url, str(e)) from e
    rgb = pygame.surfarray.array3d(img)
    return (rgb.astype(np.float32) / 255.0)


class TextureLoader:

    def __init__(self):
        self._results: "queue.Queue[TextureResult]" = queue.Queue()
        self._threads: List[threading.Thread] = []

    def load(self, url: str, kind: str, tag: int) -> threading.Thread:
        t = threading.Thread(target=self._worker, args=(url, kind, tag),
                             name=f"texture-{kind}", daemon=True)
        self._threads = [old for old in self._threads if old.is_alive()]
        self._threads.append(t)
        t.start()
        return t

    def _worker(self, url: str, kind: str, tag: int):
        try:
            pixels = read_texture(url)
        except AssetLoadError as e:
            self._results.put(TextureResult(tag, kind, url, None, e))
            return
        self._results.put(TextureResult(tag, kind, url, pixels))

    def drain(self) -> List[TextureResult]:
        out = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except queue.Empty:
                return out

    def join(self, timeout: Optional[float] = None):
        for t in self._threads:
            t.join(timeout)
        self._threads = [t for t in self._threads if t.is_alive()]


# ---------------------------------------------------------------------------
# Landmass geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LandmassResult:
    generation: int
    url: str
    rings: Tuple[Ring, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_geojson(data) -> Tuple[Ring, ...]:
    """Flatten GeoJSON polygons into outer rings of (lng, lat)."""
    if not isinstance(data, dict) or "type" not in data:
        raise GeometryFetchError("not a GeoJSON object")

    rings: List[Ring] = []

    def add_polygon(coords: Sequence):
        if not coords:
            return
        outer = coords[0]
        if len(outer) >= 3:
            rings.append(tuple((float(p[0]), float(p[1])) for p in outer))

    def visit(obj):
        kind = obj.get("type")
        if kind == "FeatureCollection":
            for f in obj.get("features", []):
                visit(f)
        elif kind == "Feature":
            geom = obj.get("geometry")
            if geom:
                visit(geom)
        elif kind == "GeometryCollection":
            for g in obj.get("geometries", []):
                visit(g)
        elif kind == "Polygon":
            add_polygon(obj.get("coordinates", []))
        elif kind == "MultiPolygon":
            for poly in obj.get("coordinates", []):
                add_polygon(poly)

    try:
        visit(data)
    except (TypeError, ValueError, IndexError) as e:
        raise GeometryFetchError(f"malformed GeoJSON: {e}") from e
    return tuple(rings)


def read_landmass(url: str) -> Tuple[Ring, ...]:
    try:
        if _is_remote(url):
            data = json.loads(_fetch_bytes(url))
        else:
            with open(url, 'r') as f:
                data = json.load(f)
    except (requests.RequestException, OSError, json.JSONDecodeError) as e:
        raise GeometryFetchError(f"{url}: {e}") from e
    return parse_geojson(data)


class LandmassSource:
    """Fetches landmass rings; results carry the requesting generation."""

    def __init__(self, reader=read_landmass):
        self._reader = reader
        self._results: "queue.Queue[LandmassResult]" = queue.Queue()
        self._threads: List[threading.Thread] = []

    def request(self, url: str, generation: int) -> threading.Thread:
        t = threading.Thread(target=self._worker, args=(url, generation),
                             name="landmass", daemon=True)
        self._threads = [old for old in self._threads if old.is_alive()]
        self._threads.append(t)
        t.start()
        return t

    def _worker(self, url: str, generation: int):
        try:
            rings = self._reader(url)
        except GeometryFetchError as e:
            self._results.put(LandmassResult(generation, url, (), e))
            return
        self._results.put(LandmassResult(generation, url, rings))

    def poll(self) -> List[LandmassResult]:
        out = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except queue.Empty:
                return out

    def join(self, timeout: Optional[float] = None):
        for t in self._threads:
            t.join(timeout)
        self._threads = [t for t in self._threads if t.is_alive()]
