import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from core.config import EngineConfig
from core.types import BodyConfig, Category, PointOfInterest, Viewport
from core.decor import make_rng
from core.surface import RenderSurface


class FakeSurface(RenderSurface):
    """Records every call the engine makes on the 3D layer."""

    def __init__(self, fail_create: bool = False):
        self.fail_create = fail_create
        self.calls = []
        self.mesh_body = None
        self.distance = None
        self.mesh_rotation = None
        self.renders = 0
        self.clears = 0
        self.destroyed = False

    def create(self, viewport):
        self.calls.append("create")
        if self.fail_create:
            from core.errors import SurfaceUnavailableError
            raise SurfaceUnavailableError("no context")

    def destroy(self):
        self.calls.append("destroy")
        self.destroyed = True
        self.mesh_body = None

    def resize(self, width, height):
        self.calls.append(("resize", width, height))

    def set_camera_distance(self, distance):
        self.distance = distance

    def set_mesh_rotation(self, x_rad, y_rad):
        self.mesh_rotation = (x_rad, y_rad)

    def build_mesh(self, body):
        self.calls.append(("build_mesh", body.identifier))
        self.mesh_body = body.identifier

    def destroy_mesh(self):
        self.calls.append("destroy_mesh")
        self.mesh_body = None

    def render(self):
        self.renders += 1

    def clear(self):
        self.clears += 1

    @property
    def has_mesh(self):
        return self.mesh_body is not None


class RecordingPainter:

    def __init__(self, fail: bool = False):
        self.snapshots = []
        self.fail = fail

    def paint(self, snap):
        if self.fail:
            raise RuntimeError("paint failed")
        self.snapshots.append(snap)

    @property
    def last(self):
        return self.snapshots[-1]


class FakeLandmassSource:

    def __init__(self):
        self.requests = []
        self.pending = []

    def request(self, url, generation):
        self.requests.append((url, generation))

    def poll(self):
        out, self.pending = self.pending, []
        return out


@pytest.fixture
def settings():
    return EngineConfig()


@pytest.fixture
def viewport():
    return Viewport(800, 600)


@pytest.fixture
def earth():
    return BodyConfig("earth", "TERRA", (
        PointOfInterest("New York", 40.7, -74.0, Category.STANDARD, (("POP", "8.3M"),)),
        PointOfInterest("London", 51.5, -0.1),
        PointOfInterest("Tokyo", 35.7, 139.7, Category.ICE),
    ), landmass_url="land.geojson")


@pytest.fixture
def mars():
    return BodyConfig("mars", "MARS", (
        PointOfInterest("Olympus Mons", 18.65, -133.8),
    ))


@pytest.fixture
def belt():
    return BodyConfig("belt", "ASTEROID BELT", (
        PointOfInterest("Ceres", 5.0, 40.0),
        PointOfInterest("Vesta", -8.0, 150.0),
    ))


@pytest.fixture
def fake_surface():
    return FakeSurface()


@pytest.fixture
def painter():
    return RecordingPainter()


@pytest.fixture
def landmass():
    return FakeLandmassSource()


@pytest.fixture
def make_engine(settings, fake_surface, painter, landmass):
    from core.frame_driver import GlobeEngine

    def _make(body, **kw):
        kw.setdefault("settings", settings)
        kw.setdefault("surface_factory", lambda: fake_surface)
        kw.setdefault("painter", painter)
        kw.setdefault("landmass_source", landmass)
        kw.setdefault("rng_factory", lambda: make_rng(1234))
        return GlobeEngine(body, **kw)

    return _make
