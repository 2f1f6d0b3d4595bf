"""Expand texture entries into the ordered sprite rectangles they describe."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .errors import GeometryError
from .geometry import ZERO, Rect, Vec2
from .manifest import HeterogeneousSheet, HomogeneousSheet, Manifest, NoSpriteSheet, SpriteSheet, TextureEntry


@dataclass(frozen=True)
class Sprite:
    source_path: str
    entry_index: int
    rect_in_source: Rect
    global_index: int


def _grid_rects(sheet: HomogeneousSheet, image_size: Vec2, *, path: str, entry_index: int) -> list[Rect]:
    if sheet.columns <= 0 or sheet.rows <= 0:
        raise GeometryError(
            f"homogeneous sheet needs columns > 0 and rows > 0 (got columns={sheet.columns}, rows={sheet.rows})",
            path=path,
            entry_index=entry_index,
        )
    if sheet.tile_size.x <= 0 or sheet.tile_size.y <= 0:
        raise GeometryError(
            f"homogeneous sheet needs tile_size > 0 (got {sheet.tile_size.x}x{sheet.tile_size.y})",
            path=path,
            entry_index=entry_index,
        )

    step_x = sheet.tile_size.x + sheet.padding.x
    step_y = sheet.tile_size.y + sheet.padding.y
    region = Rect(
        sheet.offset,
        Vec2(
            sheet.columns * sheet.tile_size.x + (sheet.columns - 1) * sheet.padding.x,
            sheet.rows * sheet.tile_size.y + (sheet.rows - 1) * sheet.padding.y,
        ),
    )
    if not region.within(image_size):
        raise GeometryError(
            "grid region exceeds source image bounds",
            path=path,
            entry_index=entry_index,
            rect=region,
            image_size=image_size,
        )

    return [
        Rect(Vec2(sheet.offset.x + column * step_x, sheet.offset.y + row * step_y), sheet.tile_size)
        for row in range(sheet.rows)
        for column in range(sheet.columns)
    ]


def _listed_rects(sheet: HeterogeneousSheet, image_size: Vec2, *, path: str, entry_index: int) -> list[Rect]:
    if not sheet.rects:
        raise GeometryError("heterogeneous sheet needs at least one rect", path=path, entry_index=entry_index)

    for rect in sheet.rects:
        if rect.width <= 0 or rect.height <= 0:
            raise GeometryError(
                "rect size must be > 0",
                path=path,
                entry_index=entry_index,
                rect=rect,
                image_size=image_size,
            )
        if not rect.within(image_size):
            raise GeometryError(
                "rect exceeds source image bounds",
                path=path,
                entry_index=entry_index,
                rect=rect,
                image_size=image_size,
            )
    return list(sheet.rects)


def sheet_rects(sheet: SpriteSheet, image_size: Vec2, *, path: str, entry_index: int) -> list[Rect]:
    """Return the sub-rectangles of `sheet` over an image of `image_size`, in variant order."""

    if isinstance(sheet, NoSpriteSheet):
        return [Rect(ZERO, image_size)]
    if isinstance(sheet, HomogeneousSheet):
        return _grid_rects(sheet, image_size, path=path, entry_index=entry_index)
    if isinstance(sheet, HeterogeneousSheet):
        return _listed_rects(sheet, image_size, path=path, entry_index=entry_index)
    raise TypeError(f"Unknown sprite sheet type: {type(sheet).__name__}")


def resolve_sprites(
    entry: TextureEntry,
    image_size: Vec2,
    *,
    entry_index: int,
    start_index: int = 0,
) -> list[Sprite]:
    rects = sheet_rects(entry.sprite_sheet, image_size, path=entry.path, entry_index=entry_index)
    return [
        Sprite(entry.path, entry_index, rect, start_index + offset)
        for offset, rect in enumerate(rects)
    ]


def resolve_manifest(manifest: Manifest, image_sizes: Sequence[Vec2]) -> list[Sprite]:
    """Flatten every entry into one sprite list; position in the list is the global index."""

    if len(image_sizes) != len(manifest.textures):
        raise ValueError(
            f"Expected {len(manifest.textures)} image sizes, got {len(image_sizes)}"
        )

    sprites: list[Sprite] = []
    for entry_index, (entry, image_size) in enumerate(zip(manifest.textures, image_sizes)):
        sprites.extend(
            resolve_sprites(entry, image_size, entry_index=entry_index, start_index=len(sprites))
        )
    return sprites
