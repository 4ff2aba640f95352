"""Unique titles and ids for newly created boxes."""

from __future__ import annotations

import re
from collections.abc import Iterable

from boxgrid.core.models import Box

DEFAULT_TITLE_BASE = "Box"
UNTITLED = "Untitled"
_MAX_ATTEMPTS = 10_000
_NON_SLUG = re.compile(r"[^a-zA-Z0-9]+")


def title_key(title: str) -> str:
    """Comparison key for the title uniqueness rule."""
    return title.strip().lower()


def unique_title(base: str, existing: Iterable[str]) -> str:
    """Return ``base`` or the first ``"base N"`` not already taken."""
    taken = {title_key(title) for title in existing}
    if title_key(base) not in taken:
        return base
    for counter in range(1, _MAX_ATTEMPTS):
        candidate = f"{base} {counter}"
        if title_key(candidate) not in taken:
            return candidate
    raise RuntimeError(f"Could not derive a unique title from {base!r}.")


def next_box_title(boxes: Iterable[Box]) -> str:
    """Default title for the next box, ``"Box N"`` with N = count + 1."""
    titles = [box.title for box in boxes]
    return unique_title(f"{DEFAULT_TITLE_BASE} {len(titles) + 1}", titles)


def layout_slug(name: str) -> str:
    """Alphanumeric slug of a layout name, used as the id prefix."""
    slug = _NON_SLUG.sub("", name)
    return slug or "layout"


def generate_box_id(layout_name: str, boxes: Iterable[Box]) -> str:
    """Return ``<slug>-box-N`` with the smallest free N above the box count."""
    ids = {box.id for box in boxes}
    prefix = f"{layout_slug(layout_name)}-box-"
    index = len(ids) + 1
    while f"{prefix}{index}" in ids:
        index += 1
    return f"{prefix}{index}"
