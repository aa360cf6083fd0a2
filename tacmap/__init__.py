"""
project: tacmap
module: __init__.py
License: MIT

Seeded tactical map generation.

Exposes the generation engine (see ``tacmap.generation``) and a small Flask
application factory used by hosts that embed the generator and want to drive
its defaults through app config. Configuration is sourced from environment
variables (optionally loaded from a local ``.env``) with defaults suitable for
a 50x50 board.
"""

import os

from dotenv import load_dotenv
from flask import Flask

# Load .env if present so MAP_* defaults can be supplied without exporting
# shell variables during development.
load_dotenv()

__version__ = "0.4.0"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in {"0", "false", "no", ""}


def create_app(overrides=None) -> Flask:
    """Build a Flask app carrying map generation defaults in ``app.config``.

    Keys mirror the environment variables read by ``MapConfig.resolve`` so a
    host can override any of them per application.
    """
    app = Flask(__name__)
    seed_raw = os.getenv("MAP_SEED")
    rounds_raw = os.getenv("MAP_MAX_EXPANSION_ROUNDS")
    app.config.update(
        MAP_WIDTH=int(os.getenv("MAP_WIDTH", "50")),
        MAP_HEIGHT=int(os.getenv("MAP_HEIGHT", "50")),
        MAP_CORRIDOR_PATTERN=os.getenv("MAP_CORRIDOR_PATTERN", "random"),
        MAP_SEED=int(seed_raw) if seed_raw not in (None, "") else None,
        MAP_MAX_EXPANSION_ROUNDS=int(rounds_raw) if rounds_raw not in (None, "") else None,
        MAP_ENABLE_GENERATION_METRICS=_env_flag("MAP_ENABLE_GENERATION_METRICS", "1"),
    )
    if overrides:
        app.config.update(overrides)
    return app


__all__ = ["create_app", "__version__"]
