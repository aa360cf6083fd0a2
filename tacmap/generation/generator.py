"""Map generation orchestrator.

One ``generate_map`` call runs the whole pass: corridors, room placement,
carving and trimming. The grid is a single buffer owned here and handed to
the carve steps; nothing else keeps a reference to it between passes.
"""
from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

from ..logging_utils import get_logger
from .config import MapConfig
from .corridors import CorridorGenerator, validate_pattern
from .errors import MapGenerationError
from .metrics import init_metrics
from .rooms import RoomPlacer
from .seeded_random import SeededRandom
from .types import SOLID, Cell, Coord, Corridor, Grid, PlacedRoom, Room, as_coord

log = get_logger("tacmap.generation")


def _validate_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise MapGenerationError(name, f"{name} must be a positive integer, got {value!r}", "dimension")
    return value


class MapGenerator:
    def __init__(
        self,
        width: int = 50,
        height: int = 50,
        pattern: str = "random",
        seed: Optional[int] = None,
        *,
        max_expansion_rounds: Optional[int] = None,
        enable_metrics: bool = True,
    ):
        self.width = _validate_dimension("width", width)
        self.height = _validate_dimension("height", height)
        self.pattern = validate_pattern(pattern)
        self.seed = seed
        self.enable_metrics = enable_metrics
        self.rng = SeededRandom(seed)
        self.corridor_generator = CorridorGenerator(self.width, self.height, self.rng)
        self.room_placer = RoomPlacer(self.width, self.height, self.corridor_generator, max_expansion_rounds)
        self._grid: Grid = self._empty_grid()
        self._corridors: List[Corridor] = []
        self._placed_rooms: List[PlacedRoom] = []
        self._offset = Coord(0, 0)
        self._owners: Dict[Coord, List[str]] = {}
        self._metrics: Dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: MapConfig) -> "MapGenerator":
        return cls(
            config.width,
            config.height,
            config.pattern,
            config.seed,
            max_expansion_rounds=config.max_expansion_rounds,
            enable_metrics=config.enable_metrics,
        )

    # ------------------------------------------------------------------
    # Generation pass
    # ------------------------------------------------------------------
    def generate_map(self, rooms: Iterable[Any], starting_point=None) -> Grid:
        """Generate a map for ``rooms`` (``Room`` objects or ``{"size", "name"}`` dicts).

        Rooms are copied; the caller's objects are left untouched. Returns the
        trimmed grid, ``grid[y][x]`` with 1 for carved cells. An empty room
        list returns the full-size all-zero grid.
        """
        self._reset()
        room_list = [Room.coerce(value) for value in (rooms or [])]
        if not room_list:
            return self._grid
        start = as_coord(starting_point) if starting_point is not None else Coord(self.width // 2, self.height // 2)

        if self.enable_metrics:
            started = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter()
                r = fn(*a, **k)
                phase_times[label] = int((time.perf_counter() - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        metrics = self._metrics if self.enable_metrics else None
        corridors = _phase('corridors', self.corridor_generator.generate_corridors, len(room_list), self.pattern, start)
        self._placed_rooms = _phase('placement', self.room_placer.place_all_rooms, room_list, corridors, metrics)
        self._corridors = self.corridor_generator.get_corridors()
        _phase('carve', self._carve)
        _phase('trim', self._trim)
        _phase('index', self._build_owner_index)

        if self.enable_metrics:
            self._metrics['rooms_requested'] = len(room_list)
            self._metrics['corridors_initial'] = len(corridors)
            self._metrics['corridors_final'] = len(self._corridors)
            self._metrics['cells_carved'] = sum(sum(row) for row in self._grid)
            self._metrics['trim_offset_x'] = self._offset.x
            self._metrics['trim_offset_y'] = self._offset.y
            self._metrics['runtime_ms'] = int((time.perf_counter() - started) * 1000)
            self._metrics['phase_ms'] = phase_times

        log.info(
            event="map_generated",
            seed=self.rng.get_seed(),
            pattern=self.pattern,
            rooms=len(room_list),
            forced=sum(1 for p in self._placed_rooms if p.forced),
            corridors=len(self._corridors),
            width=self.grid_width,
            height=self.grid_height,
        )
        return self._grid

    def _reset(self) -> None:
        self.rng.reset()
        self._grid = self._empty_grid()
        self._corridors = []
        self._placed_rooms = []
        self._offset = Coord(0, 0)
        self._owners = {}
        self._metrics = init_metrics() if self.enable_metrics else {}

    def _empty_grid(self) -> Grid:
        return [[SOLID] * self.width for _ in range(self.height)]

    def _carve(self) -> None:
        # Corridors, rooms, connectors; every step only sets cells to 1.
        self.corridor_generator.carve_corridors(self._grid)
        self.room_placer.carve_rooms(self._grid)
        self.room_placer.carve_room_connections(self._grid)

    def _trim(self) -> None:
        """Crop to the carved bounding box plus a one-cell margin, clipped to the grid."""
        rows = [y for y, row in enumerate(self._grid) if any(row)]
        if not rows:
            return
        cols = [x for x in range(self.width) if any(self._grid[y][x] for y in rows)]
        min_x, max_x = max(0, cols[0] - 1), min(self.width - 1, cols[-1] + 1)
        min_y, max_y = max(0, rows[0] - 1), min(self.height - 1, rows[-1] + 1)
        self._grid = [row[min_x:max_x + 1] for row in self._grid[min_y:max_y + 1]]
        self._offset = Coord(min_x, min_y)
        self._placed_rooms = [
            replace(
                p,
                position=Coord(p.position.x - min_x, p.position.y - min_y),
                connection_point=Coord(p.connection_point.x - min_x, p.connection_point.y - min_y),
            )
            for p in self._placed_rooms
        ]

    def _build_owner_index(self) -> None:
        owners: Dict[Coord, List[str]] = {}
        for placement in self._placed_rooms:
            half = placement.room.half_size
            px, py = placement.position
            for y in range(max(0, py - half), min(self.grid_height, py + half + 1)):
                for x in range(max(0, px - half), min(self.grid_width, px + half + 1)):
                    owners.setdefault(Coord(x, y), []).append(placement.room.name)
        self._owners = owners

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    def get_cells(self) -> List[List[Cell]]:
        """Cell records for the current grid, row-major like ``grid``."""
        cells = []
        for y, row in enumerate(self._grid):
            cells.append([
                Cell(Coord(x, y), list(self._owners.get(Coord(x, y), ())), value == SOLID)
                for x, value in enumerate(row)
            ])
        return cells

    def get_seed(self) -> Optional[int]:
        return self.seed

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def placed_rooms(self) -> List[PlacedRoom]:
        """Placements translated into the trimmed frame."""
        return list(self._placed_rooms)

    @property
    def corridors(self) -> List[Corridor]:
        """Final corridor network, in the untrimmed frame (add ``-offset`` to compare)."""
        return list(self._corridors)

    @property
    def offset(self) -> Coord:
        return self._offset

    @property
    def metrics(self) -> Dict[str, Any]:
        return self._metrics

    @property
    def grid_width(self) -> int:
        return len(self._grid[0]) if self._grid else 0

    @property
    def grid_height(self) -> int:
        return len(self._grid)


__all__ = ["MapGenerator"]
