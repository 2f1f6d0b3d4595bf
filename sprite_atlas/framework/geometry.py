from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Vec2(NamedTuple):
    """Unsigned 2D integer vector used for positions, sizes and paddings."""

    x: int
    y: int

    @property
    def width(self) -> int:
        return self.x

    @property
    def height(self) -> int:
        return self.y

    def fits_within(self, other: "Vec2") -> bool:
        return self.x <= other.x and self.y <= other.y


ZERO = Vec2(0, 0)


@dataclass(frozen=True)
class Rect:
    offset: Vec2
    size: Vec2

    @property
    def x(self) -> int:
        return self.offset.x

    @property
    def y(self) -> int:
        return self.offset.y

    @property
    def width(self) -> int:
        return self.size.x

    @property
    def height(self) -> int:
        return self.size.y

    @property
    def right(self) -> int:
        return self.offset.x + self.size.x

    @property
    def bottom(self) -> int:
        return self.offset.y + self.size.y

    def intersects(self, other: "Rect") -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def within(self, bounds: Vec2) -> bool:
        return self.right <= bounds.x and self.bottom <= bounds.y

    def to_dict(self) -> dict[str, list[int]]:
        return {
            "offset": [self.x, self.y],
            "size": [self.width, self.height],
            "min": [self.x, self.y],
            "max": [self.right, self.bottom],
        }

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"
