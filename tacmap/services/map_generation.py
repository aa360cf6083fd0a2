"""Building-oriented map generation service.

Hosts describe a scenario as buildings, each holding named rooms with a size
label ("small" .. "huge"). This module flattens that description into the
room list the generator expects, normalizes user supplied seeds and runs a
generation pass. It is intentionally stateless: every call builds its own
generator so concurrent requests never share a PRNG.
"""

from __future__ import annotations

import hashlib
import random
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from tacmap.generation import Cell, Coord, MapConfig, MapGenerator, PlacedRoom, Room
from tacmap.generation.errors import InvalidRoomError, MapGenerationError
from tacmap.logging_utils import get_logger

log = get_logger("tacmap.services.map_generation")

ROOM_SIZE_MAP = {
    "small": 3,
    "medium": 5,
    "big": 7,
    "large": 9,
    "huge": 11,
}
DEFAULT_ROOM_SIZE = ROOM_SIZE_MAP["medium"]

# Seeds stay inside the range an unseeded SeededRandom would draw from.
MAX_SEED = 2 ** 31 - 1


class MapGenerationResult(NamedTuple):
    grid: List[List[int]]
    cells: List[List[Cell]]
    rooms: List[PlacedRoom]
    seed: int


def room_size(label: Optional[str]) -> int:
    """Map a size label to a footprint side; unknown or missing labels are medium."""
    if not label:
        return DEFAULT_ROOM_SIZE
    return ROOM_SIZE_MAP.get(str(label).strip().lower(), DEFAULT_ROOM_SIZE)


def rooms_from_buildings(buildings: Iterable[Dict[str, Any]]) -> List[Room]:
    rooms: List[Room] = []
    for building in buildings or []:
        building_name = building.get("name")
        if not building_name:
            raise InvalidRoomError("building", "building name must be a non-empty string", "name")
        for entry in building.get("rooms") or []:
            name = entry.get("name")
            if not name:
                raise InvalidRoomError("name", f"room in {building_name!r} has no name", "name")
            rooms.append(Room(size=room_size(entry.get("size")), name=f"{building_name} - {name}"))
    return rooms


def coerce_seed(value) -> int:
    """Convert a provided seed (int or str) into a generator seed.

    None or blank strings draw a fresh seed; digit strings are parsed; any
    other string is hashed so the same text always yields the same map.
    """
    if value is None:
        return random.randint(1, MAX_SEED - 1)
    if isinstance(value, bool):
        raise MapGenerationError("seed", "seed must be an integer or string", "seed")
    if isinstance(value, int):
        return value % MAX_SEED
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return random.randint(1, MAX_SEED - 1)
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % MAX_SEED
    raise MapGenerationError("seed", f"unsupported seed value {value!r}", "seed")


def default_dimensions() -> Tuple[int, int]:
    cfg = MapConfig.resolve()
    return cfg.width, cfg.height


def default_start(width: int, height: int) -> Coord:
    return Coord(width // 2, height // 2)


def generate_map(
    buildings: Iterable[Dict[str, Any]],
    seed=None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    pattern: Optional[str] = None,
    starting_point=None,
) -> MapGenerationResult:
    """Generate a map for ``buildings`` and return grid, cells, placements and seed.

    Unspecified options fall back to ``MapConfig.resolve()`` (environment and
    Flask app config). A configured seed is used only when ``seed`` is None.
    """
    buildings = list(buildings or [])
    cfg = MapConfig.resolve(width=width, height=height, pattern=pattern)
    raw_seed = seed if seed is not None else cfg.seed
    resolved_seed = coerce_seed(raw_seed)
    rooms = rooms_from_buildings(buildings)
    generator = MapGenerator(
        cfg.width,
        cfg.height,
        cfg.pattern,
        resolved_seed,
        max_expansion_rounds=cfg.max_expansion_rounds,
        enable_metrics=cfg.enable_metrics,
    )
    start = starting_point if starting_point is not None else default_start(cfg.width, cfg.height)
    grid = generator.generate_map(rooms, start)
    log.debug(event="service_map_generated", seed=resolved_seed, buildings=len(buildings), rooms=len(rooms))
    return MapGenerationResult(grid, generator.get_cells(), generator.placed_rooms, resolved_seed)


__all__ = [
    "ROOM_SIZE_MAP",
    "MapGenerationResult",
    "room_size",
    "rooms_from_buildings",
    "coerce_seed",
    "default_dimensions",
    "default_start",
    "generate_map",
]
