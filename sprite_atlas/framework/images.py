from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from PIL import Image

from .formats import PIXEL_FORMATS, PixelFormat
from .geometry import Vec2

ImageLoader = Callable[[str], "SourceImage"]

# Pillow modes whose raw bytes map onto a named format without conversion.
_MODE_FORMATS: dict[str, str] = {
    "L": "r8unorm",
    "LA": "rg8unorm",
    "RGBA": "rgba8unorm_srgb",
    "I;16": "r16unorm",
    "F": "r32float",
}


@dataclass(frozen=True)
class SourceImage:
    """A decoded, read-only pixel buffer in a named pixel format (rows top to bottom)."""

    data: bytes
    width: int
    height: int
    format: PixelFormat

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid image size: {self.width}x{self.height}")
        expected = self.width * self.height * self.format.pixel_size
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer has {len(self.data)} bytes; {self.width}x{self.height} "
                f"{self.format.name} needs {expected}"
            )

    @property
    def size(self) -> Vec2:
        return Vec2(self.width, self.height)

    @property
    def stride(self) -> int:
        return self.width * self.format.pixel_size

    @classmethod
    def from_pil(cls, image: Image.Image) -> "SourceImage":
        format_name = _MODE_FORMATS.get(image.mode)
        if format_name is None:
            image = image.convert("RGBA")
            format_name = _MODE_FORMATS["RGBA"]
        width, height = image.size
        return cls(image.tobytes(), width, height, PIXEL_FORMATS[format_name])

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "SourceImage":
        with Image.open(path) as image:
            image.load()
            return cls.from_pil(image)

    def to_pil(self) -> Image.Image:
        return pixels_to_pil(self.data, self.size, self.format)


def pixels_to_pil(data: bytes, size: Vec2, fmt: PixelFormat) -> Image.Image:
    mode = fmt.pil_mode
    if mode is None:
        raise ValueError(f"Pixel format {fmt.name} cannot be represented as a Pillow image")
    image = Image.frombytes(mode, (size.x, size.y), bytes(data))
    if fmt.channels == "BGRA":
        blue, green, red, alpha = image.split()
        image = Image.merge("RGBA", (red, green, blue, alpha))
    return image


def directory_loader(base_dir: str | os.PathLike[str]) -> ImageLoader:
    """Return a loader resolving manifest texture paths relative to `base_dir`."""

    base = os.fspath(base_dir)

    def load(path: str) -> SourceImage:
        resolved = path if os.path.isabs(path) else os.path.join(base, path)
        return SourceImage.open(resolved)

    return load
