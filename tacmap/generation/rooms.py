"""Room placement along the corridor network.

Rooms are resolved strictly in the order given: each room is placed (or
force-placed) before the next is considered, so earlier rooms get first
choice of corridor slots. Placement never fails; a room that finds no clean
slot after the bounded expansion rounds is force-placed at the least
conflicting in-bounds position.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from ..logging_utils import get_logger
from .corridors import CorridorGenerator
from .types import (
    SIDE,
    THROUGH,
    Coord,
    Corridor,
    Grid,
    PlacedRoom,
    Room,
    carve_cell,
    move,
    path_cells,
    perpendicular_directions,
)

log = get_logger("tacmap.generation.rooms")

# Expansion cap scales with grid area: one round per AREA_PER_EXPANSION_ROUND
# cells, clamped to [MIN_EXPANSION_ROUNDS, MAX_EXPANSION_ROUNDS].
AREA_PER_EXPANSION_ROUND = 500
MIN_EXPANSION_ROUNDS = 2
MAX_EXPANSION_ROUNDS = 12

# Solid cells required between two room footprints
ROOM_GAP = 1


def default_expansion_rounds(width: int, height: int) -> int:
    return max(MIN_EXPANSION_ROUNDS, min(MAX_EXPANSION_ROUNDS, (width * height) // AREA_PER_EXPANSION_ROUND))


class RoomPlacer:
    def __init__(
        self,
        width: int,
        height: int,
        corridor_generator: CorridorGenerator,
        max_expansion_rounds: Optional[int] = None,
    ):
        self.width = width
        self.height = height
        self.corridor_generator = corridor_generator
        if max_expansion_rounds is None:
            max_expansion_rounds = default_expansion_rounds(width, height)
        self.max_expansion_rounds = max(0, max_expansion_rounds)
        self._placements: List[PlacedRoom] = []
        self._cursor: Tuple[int, int] = (0, 0)
        self._extension_cursor = 0

    def place_all_rooms(self, rooms: List[Room], corridors: List[Corridor], metrics: Optional[Dict] = None) -> List[PlacedRoom]:
        """Place every room, growing the corridor network when needed.

        ``corridors`` becomes the generator's working network so that
        expansion builds on exactly what the caller handed in. Each room's
        ``center`` is set to its placed position.
        """
        self._placements = []
        self._cursor = (0, 0)
        self._extension_cursor = 0
        self.corridor_generator.load_corridors(corridors)
        working = self.corridor_generator.get_corridors()

        for room in rooms:
            placement, working = self._place_room(room, working, metrics)
            room.center = placement.position
            self._placements.append(placement)
            if metrics is not None:
                metrics['rooms_placed'] += 1
                if placement.forced:
                    metrics['placements_forced'] += 1
                elif placement.connection_type == THROUGH:
                    metrics['placements_through'] += 1
                else:
                    metrics['placements_side'] += 1
        return list(self._placements)

    def get_placements(self) -> List[PlacedRoom]:
        return list(self._placements)

    def carve_rooms(self, grid: Grid) -> None:
        for placement in self._placements:
            half = placement.room.half_size
            px, py = placement.position
            for y in range(py - half, py + half + 1):
                for x in range(px - half, px + half + 1):
                    carve_cell(grid, Coord(x, y))

    def carve_room_connections(self, grid: Grid) -> None:
        """Carve connectors for side placements; through placements need none."""
        for placement in self._placements:
            if placement.connection_type != SIDE:
                continue
            for cell in path_cells(placement.connection_point, placement.position):
                carve_cell(grid, cell)

    # ------------------------------------------------------------------
    # Per-room resolution
    # ------------------------------------------------------------------
    def _place_room(self, room: Room, corridors: List[Corridor], metrics: Optional[Dict]) -> Tuple[PlacedRoom, List[Corridor]]:
        tried: Set[Tuple[Coord, str]] = set()
        placement = self._scan(room, corridors, tried, stepped=True)
        if placement is None:
            placement = self._scan(room, corridors, tried)

        rounds = 0
        while placement is None and rounds < self.max_expansion_rounds:
            rounds += 1
            for expand in (self._extend, self._branch, self._add_long):
                expand(corridors, metrics)
                corridors = self.corridor_generator.get_corridors()
                placement = self._scan(room, corridors, tried)
                if placement is not None:
                    break
        if metrics is not None:
            metrics['expansion_rounds'] += rounds
        if rounds:
            log.debug(event="room_expansion", room=room.name, rounds=rounds, corridors=len(corridors))

        if placement is None:
            placement = self._force_place(room, corridors)
            log.warn(
                event="room_force_placed",
                room=room.name,
                size=room.size,
                x=placement.position.x,
                y=placement.position.y,
            )
        return placement, corridors

    def _scan(self, room: Room, corridors: List[Corridor], tried: Set[Tuple[Coord, str]], stepped: bool = False) -> Optional[PlacedRoom]:
        if not corridors:
            return None
        count = len(corridors)
        if stepped:
            start_index, start_pos = self._cursor[0] % count, self._cursor[1]
            step = max(2, room.size // 3)
        else:
            start_index, start_pos, step = 0, 0, 1
        for offset in range(count):
            corridor_index = (start_index + offset) % count
            corridor = corridors[corridor_index]
            first = start_pos if offset == 0 else 0
            for cell_index in range(first, len(corridor.cells), step):
                cell = corridor.cells[cell_index]
                key = (cell, corridor.direction)
                if key in tried:
                    continue
                tried.add(key)
                placement = self._placement_at(room, corridor_index, cell, corridor.direction)
                if placement is not None:
                    self._cursor = self._next_cursor(corridor_index, cell_index, room, corridors)
                    return placement
        return None

    def _placement_at(self, room: Room, corridor_index: int, cell: Coord, direction: str) -> Optional[PlacedRoom]:
        half = room.half_size
        if self._fits(cell, half):
            return PlacedRoom(room, cell, THROUGH, corridor_index, cell)
        for side in perpendicular_directions(direction):
            position = move(cell, side, half + 2)
            if self._fits(position, half):
                return PlacedRoom(room, position, SIDE, corridor_index, cell)
        return None

    def _next_cursor(self, corridor_index: int, cell_index: int, room: Room, corridors: List[Corridor]) -> Tuple[int, int]:
        position = cell_index + max(3, math.ceil(room.size / 2) + 1)
        if position >= len(corridors[corridor_index].cells):
            return ((corridor_index + 1) % len(corridors), 0)
        return (corridor_index, position)

    # ------------------------------------------------------------------
    # Expansion steps
    # ------------------------------------------------------------------
    def _extend(self, corridors: List[Corridor], metrics: Optional[Dict]) -> None:
        index = self._extension_cursor % len(corridors) if corridors else 0
        self._extension_cursor += 1
        if self.corridor_generator.extend_corridor(index) and metrics is not None:
            metrics['corridor_extensions'] += 1

    def _branch(self, corridors: List[Corridor], metrics: Optional[Dict]) -> None:
        if self.corridor_generator.add_new_corridor_branch() and metrics is not None:
            metrics['corridor_branches'] += 1

    def _add_long(self, corridors: List[Corridor], metrics: Optional[Dict]) -> None:
        self.corridor_generator.add_long_corridors()
        if metrics is not None:
            metrics['long_corridor_passes'] += 1

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------
    def _in_border(self, center: Coord, half: int) -> bool:
        return (
            center.x - half >= 1
            and center.x + half <= self.width - 2
            and center.y - half >= 1
            and center.y + half <= self.height - 2
        )

    def _violation(self, center: Coord, half: int) -> int:
        """Cells short of the required gap, summed over already placed rooms."""
        total = 0
        for placement in self._placements:
            required = half + placement.room.half_size + ROOM_GAP + 1
            apart = max(abs(center.x - placement.position.x), abs(center.y - placement.position.y))
            if apart < required:
                total += required - apart
        return total

    def _fits(self, center: Coord, half: int) -> bool:
        return self._in_border(center, half) and self._violation(center, half) == 0

    # ------------------------------------------------------------------
    # Terminal fallback
    # ------------------------------------------------------------------
    def _force_place(self, room: Room, corridors: List[Corridor]) -> PlacedRoom:
        half = room.half_size
        distance, nearest = self._corridor_distances(corridors)
        low_x, high_x = 1 + half, self.width - 2 - half
        low_y, high_y = 1 + half, self.height - 2 - half

        if low_x > high_x or low_y > high_y:
            # Footprint cannot fit inside the border at all; center it.
            position = Coord(self.width // 2, self.height // 2)
        else:
            position = None
            best_key = None
            for y in range(low_y, high_y + 1):
                for x in range(low_x, high_x + 1):
                    key = (self._violation(Coord(x, y), half), distance[y][x])
                    if best_key is None or key < best_key:
                        best_key, position = key, Coord(x, y)
                if best_key == (0, 0):
                    break

        link = nearest[position.y][position.x] if 0 <= position.y < self.height and 0 <= position.x < self.width else None
        if link is None:
            return PlacedRoom(room, position, THROUGH, 0, position, forced=True)
        connection_point, corridor_index = link
        connection_type = THROUGH if connection_point == position else SIDE
        return PlacedRoom(room, position, connection_type, corridor_index, connection_point, forced=True)

    def _corridor_distances(self, corridors: List[Corridor]):
        """Multi-source BFS: distance to, and identity of, the nearest corridor cell."""
        unreached = self.width + self.height
        distance = [[unreached] * self.width for _ in range(self.height)]
        nearest: List[List[Optional[Tuple[Coord, int]]]] = [[None] * self.width for _ in range(self.height)]
        queue = deque()
        for corridor_index, corridor in enumerate(corridors):
            for cell in corridor.cells:
                if 0 <= cell.x < self.width and 0 <= cell.y < self.height and nearest[cell.y][cell.x] is None:
                    distance[cell.y][cell.x] = 0
                    nearest[cell.y][cell.x] = (cell, corridor_index)
                    queue.append(cell)
        while queue:
            cx, cy = queue.popleft()
            for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
                nx, ny = cx + dx, cy + dy
                if 0 <= nx < self.width and 0 <= ny < self.height and nearest[ny][nx] is None:
                    distance[ny][nx] = distance[cy][cx] + 1
                    nearest[ny][nx] = nearest[cy][cx]
                    queue.append(Coord(nx, ny))
        return distance, nearest


__all__ = ["RoomPlacer", "default_expansion_rounds"]
