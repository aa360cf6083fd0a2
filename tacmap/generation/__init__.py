"""Public map generation interface.

Seeded corridor synthesis, room placement and the orchestrating generator.
"""

from .config import MapConfig
from .corridors import CORRIDOR_PATTERNS, CorridorGenerator
from .errors import InvalidRoomError, MapGenerationError
from .generator import MapGenerator
from .rooms import RoomPlacer
from .seeded_random import SeededRandom
from .types import (
    CARVED,
    SIDE,
    SOLID,
    THROUGH,
    Cell,
    CellContent,
    Coord,
    Corridor,
    PlacedRoom,
    Room,
)  # noqa: F401

__all__ = [
    "MapGenerator",
    "MapConfig",
    "CorridorGenerator",
    "RoomPlacer",
    "SeededRandom",
    "MapGenerationError",
    "InvalidRoomError",
    "CORRIDOR_PATTERNS",
    "Cell",
    "CellContent",
    "Coord",
    "Corridor",
    "PlacedRoom",
    "Room",
    "SOLID",
    "CARVED",
    "THROUGH",
    "SIDE",
]
