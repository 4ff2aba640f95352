"""Editor configuration and env loading."""

from __future__ import annotations

import math
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from boxgrid.core.models import GRID_SIZE, MIN_BOX_SIZE, MIN_DIMENSION


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    if not math.isfinite(value) or value < 0:
        return default
    return value


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Immutable interaction and editor tuning."""

    min_box_size: int = MIN_BOX_SIZE
    drag_threshold_px: float = 5.0
    default_box_width: int = 4
    default_box_height: int = 3
    handle_radius_px: float = 6.0


def load_editor_settings() -> EditorSettings:
    """Load editor settings from ``BOXGRID_*`` env vars; bad values fall back to defaults."""
    defaults = EditorSettings()
    return EditorSettings(
        min_box_size=_bounded(_int("BOXGRID_MIN_BOX_SIZE", defaults.min_box_size), defaults.min_box_size),
        drag_threshold_px=_float("BOXGRID_DRAG_THRESHOLD_PX", defaults.drag_threshold_px),
        default_box_width=_bounded(
            _int("BOXGRID_DEFAULT_BOX_WIDTH", defaults.default_box_width), defaults.default_box_width
        ),
        default_box_height=_bounded(
            _int("BOXGRID_DEFAULT_BOX_HEIGHT", defaults.default_box_height), defaults.default_box_height
        ),
        handle_radius_px=_float("BOXGRID_HANDLE_RADIUS_PX", defaults.handle_radius_px),
    )


def _bounded(value: int, default: int) -> int:
    if MIN_DIMENSION <= value <= GRID_SIZE:
        return value
    return default


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load ``.env.boxgrid`` then ``.env.boxgrid.local``; later files win."""
    to_load = tuple(paths) if paths is not None else (".env.boxgrid", ".env.boxgrid.local")
    for path in to_load:
        load_env_file(path, override_existing=override_existing)
