from core.types import Category
from core.decor import (ASTEROID_RED, ASTEROID_SLATE, generate_asteroid_belt,
                             generate_starfield, make_rng)


def test_starfield_count_and_ranges():
    stars = generate_starfield(make_rng(1), 50)
    assert len(stars) == 50
    for s in stars:
        assert 0 <= s.x < 2000
        assert 0 <= s.y < 1000
        assert 0 <= s.opacity < 1


def test_seeded_generation_is_reproducible():
    a = generate_asteroid_belt(make_rng(42), 20)
    b = generate_asteroid_belt(make_rng(42), 20)
    assert a == b
    assert generate_starfield(make_rng(42), 5) == generate_starfield(make_rng(42), 5)


def test_asteroids_are_points_of_interest():
    rocks = generate_asteroid_belt(make_rng(3), 300)
    assert len(rocks) == 300
    assert rocks[0].point.name == "AST-0001"
    assert rocks[-1].point.name == "AST-0300"
    for r in rocks:
        assert -180 <= r.lng <= 180
        assert -20 <= r.lat <= 20
        assert 1.0 <= r.spread < 2.5
        assert 1.0 <= r.size < 4.0
        assert r.color in (ASTEROID_RED, ASTEROID_SLATE)
        assert r.point.category is Category.DEBRIS
        assert (r.point.lat, r.point.lng) == (r.lat, r.lng)
