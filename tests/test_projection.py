import math

import pytest

from core.coords import rotate_geo, unrotate_geo, wrap_deg
from core.projection import ProjectionAdapter
from core.types import Viewport


VP = Viewport(800, 600)


def test_view_centre_projects_to_viewport_centre():
    proj = ProjectionAdapter((74.0, -40.0, 0.0), 350, VP)
    x, y = proj.project(40.0, -74.0)
    assert x == pytest.approx(400.0, abs=1e-6)
    assert y == pytest.approx(300.0, abs=1e-6)


def test_north_is_up():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 350, VP)
    _, y = proj.project(30.0, 0.0)
    assert y < 300.0
    x, _ = proj.project(0.0, 30.0)
    assert x > 400.0


def test_back_hemisphere_is_clipped():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 350, VP)
    assert proj.project(0.0, 180.0) is None
    assert proj.project(0.0, 120.0) is None
    assert proj.project(0.0, 60.0) is not None


def test_unclipped_projection_reports_depth():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 350, VP, clip_angle=None)
    assert proj.project(0.0, 180.0) is not None
    _, _, depth = proj.project_unclipped(0.0, 180.0)
    assert depth < 0


@pytest.mark.parametrize("rotation", [
    (0.0, 0.0, 0.0),
    (74.0, -40.0, 0.0),
    (-130.0, 25.0, 0.0),
    (200.0, -80.0, 0.0),
])
def test_visibility_agrees_with_facing_test(rotation):
    proj = ProjectionAdapter(rotation, 350, VP)
    for lat in range(-80, 81, 20):
        for lng in range(-180, 180, 15):
            lam, phi = rotate_geo(lng, lat, rotation)
            depth = math.cos(phi) * math.cos(lam)
            if abs(depth) < 1e-6:
                continue
            if proj.project(lat, lng) is not None:
                assert proj.is_facing(lat, lng), (lat, lng)


def test_facing_longitude_is_wrapped():
    proj = ProjectionAdapter((170.0, 0.0, 0.0), 350, VP)
    lon = proj.facing_longitude(0.0, 30.0)
    assert -180.0 <= lon < 180.0
    assert lon == pytest.approx(wrap_deg(200.0))


def test_spread_pushes_away_from_centre():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 350, VP)
    assert proj.spread(500.0, 300.0, 2.2) == pytest.approx((620.0, 300.0))
    assert proj.spread(500.0, 300.0, 1.0) == (500.0, 300.0)


def test_project_to_limb_keeps_back_points_on_horizon():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 350, VP)
    x, y = proj.project_to_limb(10.0, 150.0)
    assert math.hypot(x - 400.0, y - 300.0) == pytest.approx(350.0)


@pytest.mark.parametrize("rotation", [(0.0, 0.0, 0.0), (74.0, -40.0, 0.0), (-20.0, 35.0, 0.0)])
def test_invert_round_trips_visible_points(rotation):
    proj = ProjectionAdapter(rotation, 350, VP)
    lat, lng = -rotation[1] + 5.0, -rotation[0] + 10.0
    x, y = proj.project(lat, lng)
    back = proj.invert(x, y)
    assert back[0] == pytest.approx(lat, abs=1e-6)
    assert wrap_deg(back[1] - lng) == pytest.approx(0.0, abs=1e-6)


def test_invert_off_disc_is_none():
    proj = ProjectionAdapter((0.0, 0.0, 0.0), 100, VP)
    assert proj.invert(0.0, 0.0) is None


def test_unrotate_inverts_rotate():
    rotation = (33.0, -47.0, 0.0)
    lam, phi = rotate_geo(-120.0, 12.0, rotation)
    lng, lat = unrotate_geo(lam, phi, rotation)
    assert lng == pytest.approx(-120.0)
    assert lat == pytest.approx(12.0)
