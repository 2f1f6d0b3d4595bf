"""Shelf-based bin packing into a canvas that grows from `initial_size` up to `max_size`.

Sprites are placed tallest first (then widest; ties keep global order). Each
sprite goes onto the first shelf with enough remaining width, otherwise onto a
new shelf opened below the lowest one. When a pass cannot place every sprite
the canvas grows and the whole pass is repeated; at `max_size` the build fails.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import AtlasOverflowError
from .geometry import Rect, Vec2

_module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackedSprite:
    global_index: int
    rect_in_atlas: Rect


@dataclass(frozen=True)
class PackResult:
    size: Vec2
    packed: tuple[PackedSprite, ...]
    attempts: int


@dataclass
class _Shelf:
    y: int
    height: int
    right: int


def placement_order(sizes: Sequence[Vec2]) -> list[int]:
    return sorted(range(len(sizes)), key=lambda index: (-sizes[index].y, -sizes[index].x))


def _place_all(
    sizes: Sequence[Vec2],
    order: Sequence[int],
    canvas: Vec2,
    padding: Vec2,
) -> tuple[dict[int, Vec2], int | None]:
    """One placement pass; returns (positions, None) or (partial, first failing index)."""

    shelves: list[_Shelf] = []
    positions: dict[int, Vec2] = {}

    for index in order:
        width, height = sizes[index]
        position: Vec2 | None = None

        for shelf in shelves:
            x = shelf.right + padding.x
            if height <= shelf.height and x + width <= canvas.x:
                position = Vec2(x, shelf.y)
                shelf.right = x + width
                break

        if position is None:
            y = shelves[-1].y + shelves[-1].height + padding.y if shelves else 0
            if width > canvas.x or y + height > canvas.y:
                return positions, index
            shelves.append(_Shelf(y=y, height=height, right=width))
            position = Vec2(0, y)

        positions[index] = position

    return positions, None


def _grow(canvas: Vec2, max_size: Vec2, needed: Vec2) -> Vec2 | None:
    """Next canvas size after a failed pass, or None when already at `max_size`."""

    if needed.x > canvas.x:
        grow_width = True
    elif needed.y > canvas.y:
        grow_width = False
    else:
        grow_width = canvas.x <= canvas.y

    if grow_width and canvas.x >= max_size.x:
        grow_width = False
    elif not grow_width and canvas.y >= max_size.y:
        grow_width = True

    if grow_width:
        if canvas.x >= max_size.x:
            return None
        return Vec2(min(max(canvas.x * 2, needed.x), max_size.x), canvas.y)
    if canvas.y >= max_size.y:
        return None
    return Vec2(canvas.x, min(max(canvas.y * 2, needed.y), max_size.y))


def pack_sprites(
    sizes: Sequence[Vec2],
    *,
    initial_size: Vec2,
    max_size: Vec2,
    padding: Vec2,
    logger: logging.Logger | None = None,
) -> PackResult:
    """
    Place rectangles of `sizes` (indexed by global index) without overlap.

    Canvas growth is logged at DEBUG to `logger` (default: this module's logger).

    Raises:
        AtlasOverflowError: if no placement exists within `max_size` for this heuristic.
    """

    for index, size in enumerate(sizes):
        if not size.fits_within(max_size):
            raise AtlasOverflowError(
                sprite_count=len(sizes), max_size=max_size, global_index=index, sprite_size=size
            )

    logger = logger or _module_logger
    order = placement_order(sizes)
    canvas = initial_size
    attempts = 0
    while True:
        attempts += 1
        positions, failed = _place_all(sizes, order, canvas, padding)
        if failed is None:
            break

        next_canvas = _grow(canvas, max_size, sizes[failed])
        if next_canvas is None:
            raise AtlasOverflowError(
                sprite_count=len(sizes),
                max_size=max_size,
                global_index=failed,
                sprite_size=sizes[failed],
            )
        logger.debug(
            "Sprite #%d (%dx%d) does not fit %dx%d; growing canvas to %dx%d",
            failed,
            sizes[failed].x,
            sizes[failed].y,
            canvas.x,
            canvas.y,
            next_canvas.x,
            next_canvas.y,
        )
        canvas = next_canvas

    packed = tuple(
        PackedSprite(index, Rect(positions[index], size)) for index, size in enumerate(sizes)
    )
    return PackResult(size=canvas, packed=packed, attempts=attempts)
