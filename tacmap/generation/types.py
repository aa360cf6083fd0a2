"""Value types shared by the generation phases."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Tuple

from .errors import InvalidRoomError

# Cell states
SOLID = 0
CARVED = 1

# Corridor directions
UP = "up"
RIGHT = "right"
DOWN = "down"
LEFT = "left"
DIRECTIONS: Tuple[str, ...] = (UP, RIGHT, DOWN, LEFT)
DIRECTION_MOVES = {UP: (0, -1), RIGHT: (1, 0), DOWN: (0, 1), LEFT: (-1, 0)}
OPPOSITE = {UP: DOWN, DOWN: UP, LEFT: RIGHT, RIGHT: LEFT}
HORIZONTAL = frozenset((LEFT, RIGHT))

# Placement connection types
THROUGH = "through"
SIDE = "side"

Grid = List[List[int]]


class Coord(NamedTuple):
    x: int
    y: int


def as_coord(value: Any) -> Coord:
    """Accept a Coord, an ``{"x":..,"y":..}`` mapping or an (x, y) pair."""
    if isinstance(value, Coord):
        return value
    if isinstance(value, dict):
        return Coord(int(value["x"]), int(value["y"]))
    x, y = value
    return Coord(int(x), int(y))


def move(point: Coord, direction: str, distance: int) -> Coord:
    dx, dy = DIRECTION_MOVES[direction]
    return Coord(point.x + dx * distance, point.y + dy * distance)


def is_parallel(a: str, b: str) -> bool:
    return (a in HORIZONTAL) == (b in HORIZONTAL)


def perpendicular_directions(direction: str) -> Tuple[str, str]:
    return (LEFT, RIGHT) if direction in (UP, DOWN) else (UP, DOWN)


def path_cells(start: Coord, end: Coord) -> Tuple[Coord, ...]:
    """Manhattan-stepped path from start to end: x first, then y, both inclusive."""
    cells = []
    x, y = start
    while x != end.x:
        cells.append(Coord(x, y))
        x += 1 if x < end.x else -1
    while y != end.y:
        cells.append(Coord(x, y))
        y += 1 if y < end.y else -1
    cells.append(Coord(end.x, end.y))
    return tuple(cells)


def carve_cell(grid: Grid, cell: Coord) -> None:
    if 0 <= cell.y < len(grid):
        row = grid[cell.y]
        if 0 <= cell.x < len(row):
            row[cell.x] = CARVED


@dataclass(frozen=True)
class Corridor:
    start: Coord
    end: Coord
    direction: str
    cells: Tuple[Coord, ...]


@dataclass
class Room:
    size: int
    name: str
    center: Optional[Coord] = None

    @property
    def half_size(self) -> int:
        return self.size // 2

    @classmethod
    def coerce(cls, value: Any) -> "Room":
        """Fresh Room from a Room or a ``{"size":..,"name":..}`` mapping.

        The input is never mutated, so callers may reuse room lists across
        generators.
        """
        if isinstance(value, Room):
            size, name = value.size, value.name
        elif isinstance(value, dict):
            size, name = value.get("size"), value.get("name")
        else:
            raise InvalidRoomError("room", f"unsupported room value {value!r}", "type")
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidRoomError("size", f"room size must be a positive integer, got {size!r}", "size")
        if not isinstance(name, str) or not name:
            raise InvalidRoomError("name", "room name must be a non-empty string", "name")
        return cls(size=size, name=name)


@dataclass(frozen=True)
class PlacedRoom:
    room: Room
    position: Coord
    connection_type: str
    corridor_index: int
    connection_point: Coord
    forced: bool = False

    def contains(self, x: int, y: int) -> bool:
        half = self.room.half_size
        return abs(x - self.position.x) <= half and abs(y - self.position.y) <= half


class CellContent:
    __slots__ = ("position", "location", "blocker")

    def __init__(self, position: Coord, location: str, blocker: bool):
        self.position = position
        self.location = location
        self.blocker = blocker

    def to_dict(self):
        return {
            "position": {"x": self.position.x, "y": self.position.y},
            "location": self.location,
            "blocker": self.blocker,
        }

    def __eq__(self, other):
        if not isinstance(other, CellContent):
            return NotImplemented
        return (self.position, self.location, self.blocker) == (other.position, other.location, other.blocker)


class Cell:
    """Exported view of one grid cell and the rooms that own it."""

    __slots__ = ("position", "locations", "elements", "content")

    def __init__(self, position: Coord, locations: List[str], blocker: bool):
        self.position = position
        self.locations = locations
        self.elements: List[Any] = []
        self.content = CellContent(position, locations[0] if locations else "", blocker)

    def to_dict(self):
        return {
            "position": {"x": self.position.x, "y": self.position.y},
            "locations": list(self.locations),
            "elements": list(self.elements),
            "content": self.content.to_dict(),
        }

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Cell(position={tuple(self.position)}, locations={self.locations}, blocker={self.content.blocker})"
