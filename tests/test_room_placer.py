import pytest

from tacmap.generation import SIDE, THROUGH, Coord, Corridor, CorridorGenerator, Room, RoomPlacer, SeededRandom
from tacmap.generation.metrics import init_metrics
from tacmap.generation.rooms import default_expansion_rounds
from tacmap.generation.types import RIGHT, path_cells

from map_test_utils import footprint, out_of_border, overlapping_pairs


def _corridor(start, end, direction=RIGHT):
    start, end = Coord(*start), Coord(*end)
    return Corridor(start, end, direction, path_cells(start, end))


def _placer(width=50, height=50, seed=1, **kw):
    cg = CorridorGenerator(width, height, SeededRandom(seed))
    return RoomPlacer(width, height, cg, **kw)


def _rooms(count, size):
    return [Room(size=size, name=f"Room{i + 1}") for i in range(count)]


def test_default_expansion_cap_scales_with_area():
    assert default_expansion_rounds(50, 50) == 5
    assert default_expansion_rounds(10, 10) == 2
    assert default_expansion_rounds(200, 200) == 12


def test_first_room_takes_first_corridor_slot():
    placer = _placer()
    corridor = _corridor((5, 25), (44, 25))
    placed = placer.place_all_rooms(_rooms(2, 5), [corridor])
    assert placed[0].position == Coord(5, 25)
    assert placed[0].connection_type == THROUGH
    assert placed[0].corridor_index == 0
    # Cursor skips past the first room; next slot with a one-cell gap is x=11.
    assert placed[1].position == Coord(11, 25)
    assert placed[1].connection_type == THROUGH


def test_rooms_resolved_in_input_order():
    placer = _placer()
    corridor = _corridor((5, 25), (44, 25))
    rooms = [Room(size=5, name="Alpha"), Room(size=5, name="Beta"), Room(size=5, name="Gamma")]
    placed = placer.place_all_rooms(rooms, [corridor])
    assert [p.room.name for p in placed] == ["Alpha", "Beta", "Gamma"]
    xs = [p.position.x for p in placed]
    assert xs == sorted(xs)


def test_place_all_rooms_sets_room_centers():
    placer = _placer()
    rooms = _rooms(3, 5)
    placed = placer.place_all_rooms(rooms, [_corridor((5, 25), (44, 25))])
    for room, p in zip(rooms, placed):
        assert room.center == p.position
        assert p.room is room


def test_side_placement_next_to_border_corridor():
    placer = _placer()
    corridor = _corridor((10, 2), (30, 2))
    placed = placer.place_all_rooms(_rooms(1, 5), [corridor])
    p = placed[0]
    assert p.connection_type == SIDE
    assert p.position == Coord(10, 6)
    assert p.connection_point == Coord(10, 2)
    assert not p.forced


def test_connections_carved_only_for_side_rooms():
    placer = _placer()
    placer.place_all_rooms(_rooms(1, 5), [_corridor((10, 2), (30, 2))])
    grid = [[0] * 50 for _ in range(50)]
    placer.carve_room_connections(grid)
    carved = {(x, y) for y, row in enumerate(grid) for x, v in enumerate(row) if v}
    assert carved == {(10, y) for y in range(2, 7)}


def test_through_rooms_leave_grid_unchanged_on_connection_carve():
    placer = _placer()
    placed = placer.place_all_rooms(_rooms(3, 5), [_corridor((5, 25), (44, 25))])
    assert all(p.connection_type == THROUGH for p in placed)
    grid = [[0] * 50 for _ in range(50)]
    placer.carve_room_connections(grid)
    assert all(v == 0 for row in grid for v in row)


def test_carve_rooms_stamps_footprints():
    placer = _placer()
    placed = placer.place_all_rooms(_rooms(2, 6), [_corridor((5, 25), (44, 25))])
    grid = [[0] * 50 for _ in range(50)]
    placer.carve_rooms(grid)
    carved = {(x, y) for y, row in enumerate(grid) for x, v in enumerate(row) if v}
    expected = set().union(*(footprint(p) for p in placed))
    assert carved == expected
    # Even sizes use the odd footprint 2*floor(size/2)+1.
    assert len(footprint(placed[0])) == 49


def test_placements_do_not_overlap_and_respect_border():
    placer = _placer(seed=5)
    cg = placer.corridor_generator
    corridors = cg.generate_corridors(8, "random", (25, 25))
    placed = placer.place_all_rooms(_rooms(8, 5), corridors)
    assert len(placed) == 8
    assert overlapping_pairs(placed) == []
    assert out_of_border(placed, 50, 50) == []


def test_expansion_grows_supplied_network():
    placer = _placer(seed=3)
    seed_corridor = _corridor((25, 25), (25, 25))
    metrics = init_metrics()
    placed = placer.place_all_rooms(_rooms(4, 7), [seed_corridor], metrics)
    corridors = placer.corridor_generator.get_corridors()
    assert len(placed) == 4
    assert corridors[0].start == Coord(25, 25)
    assert metrics['expansion_rounds'] >= 1
    assert metrics['corridor_extensions'] >= 1
    assert metrics['rooms_placed'] == 4


def test_ten_large_rooms_from_single_cell_corridor():
    placer = _placer(seed=12345)
    placed = placer.place_all_rooms(_rooms(10, 7), [_corridor((25, 25), (25, 25))])
    assert len(placed) == 10
    assert [p.room.name for p in placed] == [f"Room{i + 1}" for i in range(10)]
    assert overlapping_pairs(placed) == []
    assert out_of_border(placed, 50, 50) == []


def test_force_placement_picks_nearest_clean_spot():
    placer = _placer(max_expansion_rounds=0)
    metrics = init_metrics()
    placed = placer.place_all_rooms(_rooms(2, 7), [_corridor((25, 25), (25, 25))], metrics)
    first, second = placed
    assert first.position == Coord(25, 25) and not first.forced
    assert second.forced
    assert second.position == Coord(25, 17)
    assert second.connection_type == SIDE
    assert second.connection_point == Coord(25, 25)
    assert metrics['placements_forced'] == 1
    assert metrics['placements_through'] == 1


def test_force_placement_without_corridors():
    placer = _placer(max_expansion_rounds=0)
    placed = placer.place_all_rooms(_rooms(1, 5), [])
    p = placed[0]
    assert p.forced
    assert out_of_border(placed, 50, 50) == []


def test_room_larger_than_grid_is_centered():
    placer = _placer(width=10, height=10)
    placed = placer.place_all_rooms([Room(size=11, name="Hall")], [_corridor((5, 5), (5, 5))])
    p = placed[0]
    assert p.forced
    assert p.position == Coord(5, 5)
    assert p.connection_type == THROUGH


def test_get_placements_returns_copy():
    placer = _placer()
    placer.place_all_rooms(_rooms(2, 5), [_corridor((5, 25), (44, 25))])
    snapshot = placer.get_placements()
    snapshot.clear()
    assert len(placer.get_placements()) == 2


@pytest.mark.parametrize("seed", [1, 42, 9001])
def test_crowded_grid_still_places_every_room(seed):
    placer = _placer(width=30, height=30, seed=seed)
    corridors = placer.corridor_generator.generate_corridors(12, "random", (15, 15))
    placed = placer.place_all_rooms(_rooms(12, 7), corridors)
    assert len(placed) == 12
    assert overlapping_pairs(placed) == []
    assert out_of_border(placed, 30, 30) == []
