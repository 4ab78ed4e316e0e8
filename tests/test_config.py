import json

import pytest

from core.config import EngineConfig
from core.errors import ConfigError


def test_defaults_are_valid():
    cfg = EngineConfig()
    assert cfg.default_scale == 350.0
    assert cfg.scale_for_percent(0) == 100.0
    assert cfg.scale_for_percent(100) == 2000.0


def test_percent_is_clamped():
    cfg = EngineConfig()
    assert cfg.scale_for_percent(150) == 2000.0
    assert cfg.scale_for_percent(-5) == 100.0
    assert cfg.percent_for_scale(cfg.scale_for_percent(25)) == pytest.approx(25.0)


def test_clamp_scale():
    cfg = EngineConfig()
    assert cfg.clamp_scale(5000) == 2000.0
    assert cfg.clamp_scale(10) == 100.0


def test_from_mapping_coerces_numbers():
    cfg = EngineConfig.from_mapping({"fly_duration_ms": "900", "star_count": 12.0})
    assert cfg.fly_duration_ms == 900.0
    assert cfg.star_count == 12
    assert isinstance(cfg.star_count, int)


def test_unknown_key_rejected():
    with pytest.raises(ConfigError, match="unknown engine settings: warp"):
        EngineConfig.from_mapping({"warp": 9})


def test_non_numeric_rejected():
    with pytest.raises(ConfigError, match="hit_radius_px"):
        EngineConfig.from_mapping({"hit_radius_px": "wide"})


@pytest.mark.parametrize("kw", [
    {"min_scale": 0},
    {"min_scale": 500, "max_scale": 400},
    {"default_scale": 50},
    {"zoom_ease": 0},
    {"yaw_decay": 1.5},
    {"fly_duration_ms": 0},
])
def test_invalid_values_rejected(kw):
    with pytest.raises(ConfigError):
        EngineConfig(**kw)


def test_from_json(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"belt_spread": 3.0, "hit_radius_px": 20}))
    cfg = EngineConfig.from_json(path)
    assert cfg.belt_spread == 3.0
    assert cfg.hit_radius_px == 20.0


def test_from_json_errors(tmp_path):
    with pytest.raises(ConfigError, match="cannot read"):
        EngineConfig.from_json(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="top level"):
        EngineConfig.from_json(bad)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        EngineConfig(min_scale=-1)


def test_to_dict_round_trips_through_mapping():
    cfg = EngineConfig(belt_spread=1.5)
    assert EngineConfig.from_mapping(cfg.to_dict()) == cfg
