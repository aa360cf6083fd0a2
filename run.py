"""tacmap CLI entry point.

Generates a seeded tactical map and prints where each room landed. Accepts
configuration via flags and MAP_* environment variables, with optional .env
loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from tacmap import __version__
from tacmap import logging_utils
from tacmap.generation import CORRIDOR_PATTERNS, MapConfig, MapGenerationError, MapGenerator

_color_init()  # pragma: no cover
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _room_arg(text: str) -> dict:
    name, sep, size = text.rpartition(":")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME:SIZE, got {text!r}")
    try:
        return {"name": name, "size": int(size)}
    except ValueError:
        raise argparse.ArgumentTypeError(f"room size must be an integer, got {size!r}") from None


def _point_arg(text: str) -> dict:
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y, got {text!r}") from None
    return {"x": x, "y": y}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    tacmap map generator

    Generate a seeded grid map: a corridor network with square rooms hung on
    it. Configuration can be provided via CLI flags or environment variables.
    If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          MAP_WIDTH                       Grid width (default: 50)
          MAP_HEIGHT                      Grid height (default: 50)
          MAP_CORRIDOR_PATTERN            random|star|grid|linear (default: random)
          MAP_SEED                        Fixed seed (default: random)
          MAP_MAX_EXPANSION_ROUNDS        Placement expansion cap (default: area based)
          MAP_ENABLE_GENERATION_METRICS   0/1 (default: 1)

        Examples:
          # Three rooms on the default board with a fixed seed
          python run.py generate --seed 12345 --room Room1:5 --room Room2:7 --room Room3:6

          # Grid pattern, custom start, JSON output
          python run.py generate --pattern grid --start 20,20 --room Hall:9 --json

          # Load variables from .env then generate
          python run.py --env-file .env generate --room Office:5
        """
    )

    parser = argparse.ArgumentParser(
        prog="tacmap",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tacmap {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a map and print the room placements",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a map from a list of rooms",
    )
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width (default: env MAP_WIDTH or 50)")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height (default: env MAP_HEIGHT or 50)")
    gen_parser.add_argument(
        "--pattern",
        choices=CORRIDOR_PATTERNS,
        default=None,
        help="Corridor pattern (default: env MAP_CORRIDOR_PATTERN or random)",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed (default: env MAP_SEED or random)")
    gen_parser.add_argument(
        "--room",
        dest="rooms",
        action="append",
        type=_room_arg,
        default=[],
        metavar="NAME:SIZE",
        help="Room to place; repeat for more rooms, order is placement order",
    )
    gen_parser.add_argument(
        "--start",
        type=_point_arg,
        default=None,
        metavar="X,Y",
        help="Corridor starting point (default: grid center)",
    )
    gen_parser.add_argument("--json", action="store_true", help="Print a JSON summary instead of the banner")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args([*argv, "generate"])
    return args


def _summary(gen: MapGenerator) -> dict:
    return {
        "seed": gen.rng.get_seed(),
        "pattern": gen.pattern,
        "width": gen.grid_width,
        "height": gen.grid_height,
        "offset": {"x": gen.offset.x, "y": gen.offset.y},
        "rooms": [
            {
                "name": p.room.name,
                "size": p.room.size,
                "position": {"x": p.position.x, "y": p.position.y},
                "connection": p.connection_type,
                "forced": p.forced,
            }
            for p in gen.placed_rooms
        ],
        "metrics": gen.metrics,
    }


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)

    previous_level = logging_utils.CURRENT_LEVEL
    if args.json:
        # Keep stdout a single JSON document
        logging_utils.set_level("error")
    try:
        cfg = MapConfig.resolve(width=args.width, height=args.height, pattern=args.pattern, seed=args.seed)
        gen = MapGenerator.from_config(cfg)
        gen.generate_map(args.rooms, args.start)
    except MapGenerationError as e:
        print(f"[ERROR] {e.field}: {e.message}", file=sys.stderr)
        return 2
    finally:
        logging_utils.CURRENT_LEVEL = previous_level

    summary = _summary(gen)
    if args.json:
        print(json.dumps(summary, indent=2, default=str))
        return 0

    title = f"{Fore.CYAN}{Style.BRIGHT}Tactical Map Generated{Style.RESET_ALL}" if _COLOR_ENABLED else "Tactical Map Generated"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    size_text = f"{summary['width']}x{summary['height']}"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Seed:'):12} {value(summary['seed'])}",
        f"  {label('Pattern:'):12} {value(summary['pattern'])}",
        f"  {label('Size:'):12} {value(size_text)}",
        f"  {label('Rooms:'):12} {value(len(summary['rooms']))}",
        divider,
    ]
    for room in summary["rooms"]:
        pos = room["position"]
        flag = " (forced)" if room["forced"] else ""
        lines.append(f"  {room['name']:<24} ({pos['x']:>3},{pos['y']:>3})  {room['connection']}{flag}")
    if not summary["rooms"]:
        lines.append("  No rooms requested; pass --room NAME:SIZE.")
    lines.append("")
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
