import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from flask import current_app, has_app_context

from .errors import MapGenerationError

# Config keys shared by the environment and Flask app.config
ENV_KEYS = {
    'MAP_WIDTH': 'width',
    'MAP_HEIGHT': 'height',
    'MAP_CORRIDOR_PATTERN': 'pattern',
    'MAP_SEED': 'seed',
    'MAP_MAX_EXPANSION_ROUNDS': 'max_expansion_rounds',
    'MAP_ENABLE_GENERATION_METRICS': 'enable_metrics',
}

_INT_FIELDS = {'width', 'height', 'seed', 'max_expansion_rounds'}
_OPTIONAL_FIELDS = {'seed', 'max_expansion_rounds'}


@dataclass
class MapConfig:
    width: int = 50
    height: int = 50
    pattern: str = "random"
    seed: Optional[int] = None
    max_expansion_rounds: Optional[int] = None
    enable_metrics: bool = True

    @classmethod
    def resolve(cls, **overrides) -> "MapConfig":
        """Defaults, then environment, then Flask app config, then ``overrides``.

        Overrides that are None are ignored so callers can forward optional
        arguments untouched.
        """
        cfg = cls()
        for env_key, attr in ENV_KEYS.items():
            if env_key in os.environ:
                cfg = replace(cfg, **{attr: _parse(attr, os.environ.get(env_key, ''), env_key)})
        if has_app_context():
            app_cfg = current_app.config
            for env_key, attr in ENV_KEYS.items():
                if env_key in app_cfg:
                    cfg = replace(cfg, **{attr: _coerce(attr, app_cfg.get(env_key), env_key)})
        known = {f.name for f in fields(cls)}
        for name, value in overrides.items():
            if name not in known:
                raise TypeError(f"unknown map config option {name!r}")
            if value is not None:
                cfg = replace(cfg, **{name: value})
        return cfg


def _parse(attr: str, raw: str, source: str):
    if attr == 'enable_metrics':
        return raw.lower() not in {'0', 'false', 'no', ''}
    if attr in _OPTIONAL_FIELDS and raw.strip() == '':
        return None
    if attr in _INT_FIELDS:
        try:
            return int(raw)
        except ValueError:
            raise MapGenerationError(attr, f"{source} must be an integer, got {raw!r}", "config") from None
    return raw


def _coerce(attr: str, value, source: str):
    if isinstance(value, str):
        return _parse(attr, value, source)
    if attr == 'enable_metrics':
        return bool(value)
    return value


__all__ = ["MapConfig", "ENV_KEYS"]
