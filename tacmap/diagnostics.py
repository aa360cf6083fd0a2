"""Structural checks for a finished generation pass.

Used by ``scripts/diagnose_seeds.py`` and the test suite to sweep seeds for
placement regressions without eyeballing grids.
"""
from __future__ import annotations

from itertools import combinations
from typing import Any, Dict, Sequence

from tacmap.generation import MapGenerator


def analyze(generator: MapGenerator, rooms: Sequence[Any]) -> Dict[str, Any]:
    """Return a summary of structural issues for the generator's last pass.

    Keys:
      placed / expected   placement count vs. input room count
      overlaps            (name, name) pairs of non-forced rooms closer than
                          their half sizes allow
      out_of_bounds       rooms whose footprint leaves the one-cell border
                          (rooms too large to fit at all are skipped)
      uncovered_rooms     rooms with a footprint cell left solid (same skip)
      margin_ok           carved region sits at most one cell from each edge
    """
    grid = generator.grid
    placed = generator.placed_rooms
    height = len(grid)
    width = len(grid[0]) if grid else 0

    overlaps = []
    for a, b in combinations(placed, 2):
        if a.forced or b.forced:
            continue
        distance = abs(a.position.x - b.position.x) + abs(a.position.y - b.position.y)
        if distance < a.room.half_size + b.room.half_size + 1:
            overlaps.append((a.room.name, b.room.name))

    out_of_bounds = []
    uncovered = []
    for p in placed:
        half = p.room.half_size
        fits = 2 * half + 1 <= min(generator.width, generator.height) - 2
        x0, x1 = p.position.x - half, p.position.x + half
        y0, y1 = p.position.y - half, p.position.y + half
        if fits and (x0 < 1 or y0 < 1 or x1 > width - 2 or y1 > height - 2):
            out_of_bounds.append(p.room.name)
        covered = all(
            0 <= y < height and 0 <= x < width and grid[y][x] == 1
            for y in range(y0, y1 + 1)
            for x in range(x0, x1 + 1)
        )
        if fits and not covered:
            uncovered.append(p.room.name)

    return {
        "placed": len(placed),
        "expected": len(rooms),
        "overlaps": overlaps,
        "out_of_bounds": out_of_bounds,
        "uncovered_rooms": uncovered,
        "margin_ok": _margin_ok(grid),
    }


def _margin_ok(grid) -> bool:
    rows = [y for y, row in enumerate(grid) if any(row)]
    if not rows:
        return True
    cols = [x for x in range(len(grid[0])) if any(grid[y][x] for y in rows)]
    return rows[0] <= 1 and cols[0] <= 1 and rows[-1] >= len(grid) - 2 and cols[-1] >= len(grid[0]) - 2


def has_issues(report: Dict[str, Any]) -> bool:
    return bool(
        report["placed"] != report["expected"]
        or report["overlaps"]
        or report["out_of_bounds"]
        or report["uncovered_rooms"]
        or not report["margin_ok"]
    )


__all__ = ["analyze", "has_issues"]
