import importlib.util
import os
from dataclasses import replace

import pytest

from tacmap.diagnostics import analyze, has_issues
from tacmap.generation import Coord, MapGenerator
from map_test_utils import SCENARIO_ROOMS, SCENARIO_START, make_rooms

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.mark.parametrize("pattern", ["random", "star", "grid", "linear"])
@pytest.mark.parametrize("seed", [12345, 292372, 730727])
def test_generated_maps_have_no_structural_issues(pattern, seed):
    rooms = make_rooms(6, 5)
    gen = MapGenerator(50, 50, pattern, seed)
    gen.generate_map(rooms, (25, 25))
    report = analyze(gen, rooms)
    assert report["placed"] == report["expected"] == 6
    assert report["overlaps"] == []
    assert report["out_of_bounds"] == []
    assert report["uncovered_rooms"] == []
    assert report["margin_ok"] is True
    assert not has_issues(report)


def test_empty_pass_is_clean():
    gen = MapGenerator(20, 20, "random", 1)
    gen.generate_map([], None)
    report = analyze(gen, [])
    assert report["placed"] == report["expected"] == 0
    assert not has_issues(report)


def test_detects_overlap_and_missing_room():
    gen = MapGenerator(50, 50, "random", 12345)
    gen.generate_map(SCENARIO_ROOMS, SCENARIO_START)
    first, second = gen.placed_rooms[:2]
    # Force a collision by moving the second room onto the first.
    gen._placed_rooms[1] = replace(second, position=Coord(first.position.x, first.position.y))
    report = analyze(gen, SCENARIO_ROOMS + [{"size": 3, "name": "Ghost"}])
    assert (first.room.name, second.room.name) in report["overlaps"]
    assert report["expected"] == report["placed"] + 1
    assert has_issues(report)


def _load_script():
    path = os.path.join(ROOT_DIR, "scripts", "diagnose_seeds.py")
    spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_diagnose_script_reports_ok(monkeypatch, capsys):
    from tacmap import logging_utils

    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.CURRENT_LEVEL)
    mod = _load_script()
    code = mod.main(["--pattern", "random", "--rooms", "4", "101", "202"])
    out = capsys.readouterr().out
    assert code == 0
    assert '"seed": 101' in out and '"seed": 202' in out
