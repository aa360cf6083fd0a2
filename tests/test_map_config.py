import pytest

from tacmap import create_app
from tacmap.generation import MapConfig, MapGenerationError


def test_defaults():
    cfg = MapConfig.resolve()
    assert cfg == MapConfig(width=50, height=50, pattern="random", seed=None, max_expansion_rounds=None, enable_metrics=True)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MAP_WIDTH", "64")
    monkeypatch.setenv("MAP_HEIGHT", "40")
    monkeypatch.setenv("MAP_CORRIDOR_PATTERN", "grid")
    monkeypatch.setenv("MAP_SEED", "99")
    monkeypatch.setenv("MAP_MAX_EXPANSION_ROUNDS", "7")
    monkeypatch.setenv("MAP_ENABLE_GENERATION_METRICS", "no")
    cfg = MapConfig.resolve()
    assert (cfg.width, cfg.height, cfg.pattern, cfg.seed) == (64, 40, "grid", 99)
    assert cfg.max_expansion_rounds == 7
    assert cfg.enable_metrics is False


@pytest.mark.parametrize("raw,expected", [("0", False), ("false", False), ("", False), ("1", True), ("yes", True)])
def test_boolean_env_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("MAP_ENABLE_GENERATION_METRICS", raw)
    assert MapConfig.resolve().enable_metrics is expected


def test_blank_optional_env_means_unset(monkeypatch):
    monkeypatch.setenv("MAP_SEED", "")
    assert MapConfig.resolve().seed is None


def test_bad_integer_env_raises(monkeypatch):
    monkeypatch.setenv("MAP_WIDTH", "wide")
    with pytest.raises(MapGenerationError) as exc:
        MapConfig.resolve()
    assert exc.value.field == "width"


def test_app_config_beats_environment(monkeypatch):
    monkeypatch.setenv("MAP_WIDTH", "64")
    app = create_app({"MAP_WIDTH": 80, "MAP_CORRIDOR_PATTERN": "star"})
    with app.app_context():
        cfg = MapConfig.resolve()
    assert cfg.width == 80
    assert cfg.pattern == "star"


def test_create_app_reads_environment(monkeypatch):
    monkeypatch.setenv("MAP_HEIGHT", "33")
    monkeypatch.setenv("MAP_ENABLE_GENERATION_METRICS", "0")
    app = create_app()
    assert app.config["MAP_HEIGHT"] == 33
    assert app.config["MAP_ENABLE_GENERATION_METRICS"] is False
    assert app.config["MAP_SEED"] is None


def test_explicit_overrides_win(app_context, monkeypatch):
    app_context.config["MAP_WIDTH"] = 80
    cfg = MapConfig.resolve(width=20, height=None, seed=5)
    assert cfg.width == 20
    assert cfg.height == 50
    assert cfg.seed == 5


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        MapConfig.resolve(depth=3)
