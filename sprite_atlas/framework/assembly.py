from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd
from PIL import Image

from .formats import PixelFormat
from .geometry import Rect, Vec2
from .images import SourceImage, pixels_to_pil
from .packing import PackedSprite
from .slicing import Sprite

SPRITE_TABLE_COLUMNS: list[str] = ["index", "x", "y", "width", "height"]


@dataclass(frozen=True)
class AtlasArtifact:
    """The finished atlas: pixels, canvas size and the sprite index -> rect table."""

    pixel_buffer: bytes
    size: Vec2
    format: PixelFormat
    packed_sprites: tuple[PackedSprite, ...]
    source_dependencies: frozenset[str]

    def __len__(self) -> int:
        return len(self.packed_sprites)

    def rect(self, global_index: int) -> Rect:
        return self.packed_sprites[global_index].rect_in_atlas

    def to_image(self) -> Image.Image:
        return pixels_to_pil(self.pixel_buffer, self.size, self.format)

    def layout(self) -> dict[str, Any]:
        """JSON-ready description of the atlas layout."""

        return {
            "size": [self.size.x, self.size.y],
            "format": self.format.name,
            "sprites": [
                {"index": packed.global_index, **packed.rect_in_atlas.to_dict()}
                for packed in self.packed_sprites
            ],
            "dependencies": sorted(self.source_dependencies),
        }

    def sprite_table(self) -> pd.DataFrame:
        rows = [
            {
                "index": packed.global_index,
                "x": packed.rect_in_atlas.x,
                "y": packed.rect_in_atlas.y,
                "width": packed.rect_in_atlas.width,
                "height": packed.rect_in_atlas.height,
            }
            for packed in self.packed_sprites
        ]
        return pd.DataFrame(rows, columns=SPRITE_TABLE_COLUMNS)


def blit(
    canvas: bytearray,
    canvas_width: int,
    source: SourceImage,
    source_rect: Rect,
    destination: Vec2,
) -> None:
    """Copy `source_rect` of `source` into `canvas` at `destination`, row by row."""

    pixel_size = source.format.pixel_size
    row_bytes = source_rect.width * pixel_size
    for row in range(source_rect.height):
        src_begin = ((source_rect.y + row) * source.width + source_rect.x) * pixel_size
        dst_begin = ((destination.y + row) * canvas_width + destination.x) * pixel_size
        canvas[dst_begin : dst_begin + row_bytes] = source.data[src_begin : src_begin + row_bytes]


def assemble_atlas(
    size: Vec2,
    fmt: PixelFormat,
    sprites: Sequence[Sprite],
    packed: Sequence[PackedSprite],
    images: Sequence[SourceImage],
) -> AtlasArtifact:
    """
    Composite every sprite into a zeroed canvas of `size`.

    `images` is indexed by entry index and must already be in `fmt`; `packed`
    is indexed by global index. No validation happens here.
    """

    canvas = bytearray(size.x * size.y * fmt.pixel_size)
    for sprite in sprites:
        blit(
            canvas,
            size.x,
            images[sprite.entry_index],
            sprite.rect_in_source,
            packed[sprite.global_index].rect_in_atlas.offset,
        )

    return AtlasArtifact(
        pixel_buffer=bytes(canvas),
        size=size,
        format=fmt,
        packed_sprites=tuple(packed),
        source_dependencies=frozenset(sprite.source_path for sprite in sprites),
    )
