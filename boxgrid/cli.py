"""Command-line checks for layout JSON files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from boxgrid.core.geometry import find_free_position, normalize_box
from boxgrid.core.models import Layout
from boxgrid.core.validation import validate_layout
from boxgrid.infra.config import load_default_env_files, load_editor_settings
from boxgrid.infra.logging import setup_logging
from boxgrid.layouts.schema import layout_to_payload, payload_to_layout

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_MALFORMED = 2


def _load_layout(path: Path) -> Layout:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return payload_to_layout(payload)


def _cmd_validate(layout: Layout) -> int:
    result = validate_layout(layout)
    if result.is_valid:
        print(f"{layout.name}: valid ({len(layout.boxes)} boxes)")
        return EXIT_OK
    for error in result.errors:
        print(error)
    return EXIT_INVALID


def _cmd_free(layout: Layout, width: int, height: int) -> int:
    position = find_free_position(width, height, layout.boxes)
    if position is None:
        print(f"no free {width}x{height} area")
        return EXIT_INVALID
    print(f"{position.x} {position.y}")
    return EXIT_OK


def _cmd_normalize(layout: Layout) -> int:
    normalized = Layout(name=layout.name, boxes=tuple(normalize_box(box) for box in layout.boxes))
    print(json.dumps(layout_to_payload(normalized), indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boxgrid", description="Inspect 24x24 box layouts.")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Report bounds, uniqueness and collision errors.")
    validate.add_argument("path", type=Path)

    free = sub.add_parser("free", help="Find the first free position for a box size.")
    free.add_argument("path", type=Path)
    free.add_argument("--width", type=int, default=None, help="Defaults to BOXGRID_DEFAULT_BOX_WIDTH.")
    free.add_argument("--height", type=int, default=None, help="Defaults to BOXGRID_DEFAULT_BOX_HEIGHT.")

    normalize = sub.add_parser("normalize", help="Print the layout with every box normalized.")
    normalize.add_argument("path", type=Path)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_default_env_files(override_existing=False)
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        layout = _load_layout(args.path)
    except FileNotFoundError:
        print(f"file not found: {args.path}", file=sys.stderr)
        return EXIT_MALFORMED
    except (json.JSONDecodeError, ValueError) as exc:
        logger.debug("layout_load_failed path=%s", args.path, exc_info=True)
        print(f"malformed layout: {exc}", file=sys.stderr)
        return EXIT_MALFORMED

    if args.command == "validate":
        return _cmd_validate(layout)
    if args.command == "free":
        settings = load_editor_settings()
        width = args.width if args.width is not None else settings.default_box_width
        height = args.height if args.height is not None else settings.default_box_height
        return _cmd_free(layout, width, height)
    return _cmd_normalize(layout)
