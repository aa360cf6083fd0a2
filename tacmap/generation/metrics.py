from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_requested': 0,
        'rooms_placed': 0,
        'placements_through': 0,
        'placements_side': 0,
        'placements_forced': 0,
        'expansion_rounds': 0,
        'corridor_extensions': 0,
        'corridor_branches': 0,
        'long_corridor_passes': 0,
        'corridors_initial': 0,
        'corridors_final': 0,
        'cells_carved': 0,
        'trim_offset_x': 0,
        'trim_offset_y': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
