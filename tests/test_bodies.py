import json

import pytest

from catalogs.bodies import (body_from_mapping, bodies_from_mapping, builtin_bodies,
                             load_bodies, point_from_mapping)
from core.errors import ConfigError
from core.types import Category


def test_builtin_bodies():
    bodies = builtin_bodies()
    ids = [b.identifier for b in bodies]
    assert ids == ["earth", "moon", "mars", "belt"]
    earth = bodies[0]
    assert earth.points[0].name == "New York"
    assert earth.albedo_url.endswith("earth_atmos_2048.jpg")
    assert earth.landmass_url.endswith(".geojson")
    assert bodies[2].texture_urls == ()
    assert bodies[3].is_belt
    for b in bodies:
        names = [p.name for p in b.points]
        assert len(names) == len(set(names))


def test_point_from_mapping():
    p = point_from_mapping({"name": "X", "lat": "10", "lng": -20,
                            "category": "ice", "meta": {"A": 1}})
    assert (p.lat, p.lng) == (10.0, -20.0)
    assert p.category is Category.ICE
    assert p.meta == (("A", "1"),)
    assert p.meta_label == "A: 1"
    assert p.coords_label == "10.0 // -20.0"


def test_unknown_category_falls_back_to_standard():
    p = point_from_mapping({"name": "X", "lat": 0, "lng": 0, "category": "???"})
    assert p.category is Category.STANDARD


@pytest.mark.parametrize("data, message", [
    ({"lat": 0, "lng": 0}, "missing 'name'"),
    ({"name": "X", "lat": 91, "lng": 0}, "latitude"),
    ({"name": "X", "lat": 0, "lng": 181}, "longitude"),
    ({"name": "X", "lat": "north", "lng": 0}, "'X'"),
    ({"name": "X", "lat": 0, "lng": 0, "meta": [1]}, "meta"),
    ("X", "must be an object"),
])
def test_bad_points_rejected(data, message):
    with pytest.raises(ConfigError, match=message):
        point_from_mapping(data)


def test_body_defaults_and_duplicates():
    body = body_from_mapping({"id": "io"})
    assert body.display_name == "IO"
    assert body.points == ()
    with pytest.raises(ConfigError, match="unique"):
        body_from_mapping({"id": "io", "points": [
            {"name": "A", "lat": 0, "lng": 0},
            {"name": "A", "lat": 1, "lng": 1},
        ]})
    with pytest.raises(ConfigError, match="'id'"):
        body_from_mapping({"name": "nameless"})


def test_bodies_from_mapping_shapes():
    assert [b.identifier for b in bodies_from_mapping([{"id": "a"}])] == ["a"]
    assert [b.identifier for b in bodies_from_mapping({"bodies": [{"id": "b"}]})] == ["b"]
    with pytest.raises(ConfigError, match="non-empty"):
        bodies_from_mapping({"bodies": []})
    with pytest.raises(ConfigError, match="ids must be unique"):
        bodies_from_mapping([{"id": "a"}, {"id": "a"}])


def test_load_bodies(tmp_path):
    path = tmp_path / "bodies.json"
    path.write_text(json.dumps({"bodies": [
        {"id": "earth", "name": "TERRA", "landmass_url": "land.geojson",
         "points": [{"name": "Home", "lat": 1.5, "lng": 2.5}]},
        {"id": "belt"},
    ]}))
    earth, belt = load_bodies(path)
    assert earth.landmass_url == "land.geojson"
    assert earth.points[0].name == "Home"
    assert belt.is_belt


def test_load_bodies_unreadable(tmp_path):
    with pytest.raises(ConfigError, match="cannot read"):
        load_bodies(tmp_path / "nope.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ConfigError):
        load_bodies(bad)
