"""Corridor network synthesis.

Builds the connective skeleton rooms are later hung on. Every corridor is a
straight run clamped into the padded interior of the grid; parallel corridors
keep ``MIN_CORRIDOR_DISTANCE`` cells apart on the perpendicular axis so rooms
have space to sit between them. The network can be grown after the fact
(extension, branching, long corridors) when room placement runs out of space.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from ..logging_utils import get_logger
from .errors import MapGenerationError
from .seeded_random import SeededRandom
from .types import (
    DIRECTIONS,
    DOWN,
    HORIZONTAL,
    OPPOSITE,
    RIGHT,
    Coord,
    Corridor,
    Grid,
    as_coord,
    carve_cell,
    is_parallel,
    move,
    path_cells,
    perpendicular_directions,
)

log = get_logger("tacmap.generation.corridors")

CORRIDOR_PATTERNS = ("random", "star", "grid", "linear")

CORRIDOR_PADDING = 5
MIN_CORRIDOR_DISTANCE = 3
DEFAULT_CORRIDOR_LENGTH_FACTOR = 0.25
CORRIDOR_LENGTH_VARIANCE = 0.6
CORRIDOR_MID_POINT_MIN = 0.2
CORRIDOR_MID_POINT_MAX = 0.8
MINIMAL_CORRIDOR_LENGTH = 5
EXTENSION_LENGTH = 15
LONG_CORRIDOR_ATTEMPTS = 3


def validate_pattern(pattern: str) -> str:
    if pattern not in CORRIDOR_PATTERNS:
        raise MapGenerationError(
            "pattern", f"unknown corridor pattern {pattern!r}; expected one of {', '.join(CORRIDOR_PATTERNS)}", "pattern"
        )
    return pattern


def _padding(dim: int) -> int:
    # Shrink on small grids so at least one coordinate stays usable.
    return max(0, min(CORRIDOR_PADDING, (dim - 1) // 2))


class CorridorGenerator:
    def __init__(self, width: int, height: int, rng: Optional[SeededRandom] = None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else SeededRandom()
        self._pad_x = _padding(width)
        self._pad_y = _padding(height)
        self._corridors: List[Corridor] = []

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------
    def generate_corridors(self, room_count: int, pattern: str, starting_point=None) -> List[Corridor]:
        """Build a fresh network sized for ``room_count`` rooms.

        ``starting_point`` defaults to the grid center. The returned list is a
        copy; later growth does not change it.
        """
        validate_pattern(pattern)
        self._corridors = []
        center = as_coord(starting_point) if starting_point is not None else self._map_center()
        count = max(2, math.ceil(room_count * 0.8))
        avg_length = min(self.width, self.height) * DEFAULT_CORRIDOR_LENGTH_FACTOR

        if pattern == "random":
            self._generate_random(count, avg_length, center)
        elif pattern == "star":
            self._generate_star(count, avg_length, center)
        elif pattern == "grid":
            self._generate_grid(count, avg_length, center)
        else:
            self._generate_linear(count, avg_length, center)

        if not self._corridors:
            self._add_fallback_corridor(center)
        log.debug(event="corridors_generated", pattern=pattern, rooms=room_count, corridors=len(self._corridors))
        return list(self._corridors)

    def extend_corridor(self, index: int) -> bool:
        """Lengthen corridor ``index`` along its own direction.

        When the corridor cannot grow in place (boundary or spacing) a
        perpendicular corridor is started from its end instead. Returns True
        when the network changed; an invalid index is a no-op.
        """
        if not 0 <= index < len(self._corridors):
            return False
        corridor = self._corridors[index]
        extra = []
        for step in range(1, EXTENSION_LENGTH + 1):
            point = move(corridor.end, corridor.direction, step)
            if not self._inside(point):
                break
            extra.append(point)
        if extra and self._respects_spacing(extra, corridor.direction, skip_index=index):
            self._corridors[index] = replace(corridor, end=extra[-1], cells=corridor.cells + tuple(extra))
            return True
        direction = self._choice(perpendicular_directions(corridor.direction))
        return self._add_corridor(corridor.end, direction, EXTENSION_LENGTH)

    def add_new_corridor_branch(self) -> bool:
        """Attach a perpendicular corridor to a random mid-span cell of the network."""
        base = self._random_corridor()
        if base is None:
            return self._add_fallback_corridor(self._map_center())
        branch_point = self._random_mid_point(base)
        direction = self._choice(perpendicular_directions(base.direction))
        length = min(self.width, self.height) // 6 + 10
        return self._add_corridor(branch_point, direction, length)

    def add_long_corridors(self) -> int:
        """Grow up to ``LONG_CORRIDOR_ATTEMPTS`` long corridors off corridor ends."""
        length = min(self.width, self.height) // 3
        added = 0
        for _ in range(LONG_CORRIDOR_ATTEMPTS):
            candidates = [c for c in self._corridors if self._can_extend(c, length)]
            if not candidates:
                break
            corridor = candidates[self.rng.next_int(len(candidates))]
            directions = [
                d
                for d in DIRECTIONS
                if d != OPPOSITE[corridor.direction]
                and self._inside(move(corridor.end, d, length))
                and self._respects_spacing(path_cells(corridor.end, move(corridor.end, d, length)), d)
            ]
            if not directions:
                continue
            if self._add_corridor(corridor.end, self._choice(directions), length):
                added += 1
        return added

    def get_corridors(self) -> List[Corridor]:
        return list(self._corridors)

    def load_corridors(self, corridors: Iterable[Corridor]) -> None:
        self._corridors = list(corridors)

    def carve_corridors(self, grid: Grid) -> None:
        for corridor in self._corridors:
            for cell in corridor.cells:
                carve_cell(grid, cell)

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------
    def _generate_random(self, count: int, avg_length: float, center: Coord) -> None:
        self._add_corridor(center, self._choice(DIRECTIONS), self._random_length(avg_length))
        for _ in range(1, count):
            base = self._random_corridor()
            if base is None:
                continue
            point = base.cells[self.rng.next_int(len(base.cells))]
            direction = self._choice(perpendicular_directions(base.direction))
            self._add_corridor(point, direction, self._random_length(avg_length))

    def _generate_star(self, count: int, avg_length: float, center: Coord) -> None:
        for direction in DIRECTIONS[: min(count, 4)]:
            length = int(avg_length * (0.8 + self.rng.next_float() * 0.4))
            self._add_corridor(center, direction, length)

    def _generate_grid(self, count: int, avg_length: float, center: Coord) -> None:
        span = int(avg_length)
        origin = self._clamp(center)
        self._add_corridor_direct(Coord(origin.x - span, origin.y), Coord(origin.x + span, origin.y), RIGHT)
        self._add_corridor_direct(Coord(origin.x, origin.y - span), Coord(origin.x, origin.y + span), DOWN)
        spacing = max(MIN_CORRIDOR_DISTANCE, span)
        offset = spacing
        while len(self._corridors) < count:
            in_range = False
            for sign in (-1, 1):
                y = origin.y + sign * offset
                if self._pad_y <= y <= self.height - 1 - self._pad_y and len(self._corridors) < count:
                    in_range = True
                    self._add_corridor_direct(Coord(origin.x - span, y), Coord(origin.x + span, y), RIGHT)
                x = origin.x + sign * offset
                if self._pad_x <= x <= self.width - 1 - self._pad_x and len(self._corridors) < count:
                    in_range = True
                    self._add_corridor_direct(Coord(x, origin.y - span), Coord(x, origin.y + span), DOWN)
            if not in_range:
                break
            offset += spacing

    def _generate_linear(self, count: int, avg_length: float, center: Coord) -> None:
        half = int(max(0, min(avg_length * count, self.width - 10)) // 2)
        if self._add_corridor_direct(Coord(center.x - half, center.y), Coord(center.x + half, center.y), RIGHT):
            return
        half = int(max(0, min(avg_length * count, self.height - 10)) // 2)
        self._add_corridor_direct(Coord(center.x, center.y - half), Coord(center.x, center.y + half), DOWN)

    def _add_fallback_corridor(self, center: Coord) -> bool:
        length = min(10, min(self.width, self.height) // 4)
        for direction in DIRECTIONS:
            if self._add_corridor(center, direction, length):
                return True
        # Last resort: a short horizontal run through the middle row, unchecked.
        y = self._clamp(Coord(0, self.height // 2)).y
        start = Coord(self._pad_x, y)
        end = Coord(min(self._pad_x + 10, self.width - 1 - self._pad_x), y)
        self._corridors.append(Corridor(start, end, RIGHT, path_cells(start, end)))
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _add_corridor(self, start: Coord, direction: str, length: int) -> bool:
        return self._add_corridor_direct(start, move(start, direction, length), direction)

    def _add_corridor_direct(self, start: Coord, end: Coord, direction: str) -> bool:
        start = self._clamp(start)
        end = self._clamp(end)
        if start == end:
            end = self._clamp(move(start, direction, MINIMAL_CORRIDOR_LENGTH))
            if start == end:
                return False
        cells = path_cells(start, end)
        if not self._respects_spacing(cells, direction):
            return False
        self._corridors.append(Corridor(start, end, direction, cells))
        return True

    def _respects_spacing(self, cells: Sequence[Coord], direction: str, skip_index: Optional[int] = None) -> bool:
        """Parallel corridors stay MIN_CORRIDOR_DISTANCE apart on the perpendicular axis."""
        horizontal = direction in HORIZONTAL
        proposed = {c.y if horizontal else c.x for c in cells}
        for index, corridor in enumerate(self._corridors):
            if index == skip_index or not is_parallel(direction, corridor.direction):
                continue
            existing = {c.y if horizontal else c.x for c in corridor.cells}
            if any(abs(a - b) < MIN_CORRIDOR_DISTANCE for a in proposed for b in existing):
                return False
        return True

    def _can_extend(self, corridor: Corridor, length: int) -> bool:
        return any(
            d != OPPOSITE[corridor.direction] and self._inside(move(corridor.end, d, length)) for d in DIRECTIONS
        )

    def _inside(self, point: Coord) -> bool:
        return (
            self._pad_x <= point.x <= self.width - 1 - self._pad_x
            and self._pad_y <= point.y <= self.height - 1 - self._pad_y
        )

    def _clamp(self, point: Coord) -> Coord:
        x = max(self._pad_x, min(self.width - 1 - self._pad_x, point.x))
        y = max(self._pad_y, min(self.height - 1 - self._pad_y, point.y))
        return Coord(x, y)

    def _map_center(self) -> Coord:
        return Coord(self.width // 2, self.height // 2)

    def _choice(self, options: Sequence[str]) -> str:
        return options[self.rng.next_int(len(options))]

    def _random_corridor(self) -> Optional[Corridor]:
        if not self._corridors:
            return None
        return self._corridors[self.rng.next_int(len(self._corridors))]

    def _random_mid_point(self, corridor: Corridor) -> Coord:
        n = len(corridor.cells)
        low = int(n * CORRIDOR_MID_POINT_MIN)
        high = int(n * CORRIDOR_MID_POINT_MAX)
        index = min(n - 1, low + self.rng.next_int(high - low + 1))
        return corridor.cells[index]

    def _random_length(self, avg_length: float) -> int:
        variance = 0.7 + self.rng.next_float() * CORRIDOR_LENGTH_VARIANCE
        return int(avg_length * variance)


__all__ = ["CorridorGenerator", "CORRIDOR_PATTERNS", "validate_pattern"]
