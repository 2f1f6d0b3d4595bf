"""Named pixel formats and the channel-remapping conversion between them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from PIL import Image

from .errors import ManifestError
from .geometry import Vec2

FormatKind = Literal["unorm", "float"]

DEFAULT_FORMAT_NAME = "rgba8unorm_srgb"

_PIL_MODES_8BIT: dict[int, str] = {1: "L", 2: "LA", 4: "RGBA"}


@dataclass(frozen=True)
class PixelFormat:
    """A texel layout: channel order, bytes per channel and colour space."""

    name: str
    channels: str
    channel_bytes: int = 1
    kind: FormatKind = "unorm"
    srgb: bool = False

    @property
    def pixel_size(self) -> int:
        return len(self.channels) * self.channel_bytes

    @property
    def is_8bit_unorm(self) -> bool:
        return self.kind == "unorm" and self.channel_bytes == 1

    @property
    def pil_mode(self) -> str | None:
        """Pillow mode holding this format's bytes verbatim, if one exists."""
        if self.is_8bit_unorm:
            return _PIL_MODES_8BIT.get(len(self.channels))
        if self.name == "r16unorm":
            return "I;16"
        if self.name == "r32float":
            return "F"
        return None

    def __str__(self) -> str:
        return self.name


PIXEL_FORMATS: dict[str, PixelFormat] = {
    fmt.name: fmt
    for fmt in (
        PixelFormat("r8unorm", "R"),
        PixelFormat("rg8unorm", "RG"),
        PixelFormat("rgba8unorm", "RGBA"),
        PixelFormat("rgba8unorm_srgb", "RGBA", srgb=True),
        PixelFormat("bgra8unorm", "BGRA"),
        PixelFormat("bgra8unorm_srgb", "BGRA", srgb=True),
        PixelFormat("r16unorm", "R", channel_bytes=2),
        PixelFormat("rgba16unorm", "RGBA", channel_bytes=2),
        PixelFormat("r32float", "R", channel_bytes=4, kind="float"),
        PixelFormat("rgba32float", "RGBA", channel_bytes=4, kind="float"),
    )
}


def resolve_format(name: str, *, key_path: str = "configuration.format") -> PixelFormat:
    normalized = (name or "").strip().lower()
    fmt = PIXEL_FORMATS.get(normalized)
    if fmt is None:
        allowed = ", ".join(sorted(PIXEL_FORMATS))
        raise ManifestError(
            f"Unknown pixel format for {key_path}: {name!r} (expected one of: {allowed})",
            key_path=key_path,
        )
    return fmt


def can_convert(source: PixelFormat, target: PixelFormat) -> bool:
    if source == target:
        return True
    return source.is_8bit_unorm and target.is_8bit_unorm


def convert_pixels(data: bytes, size: Vec2, source: PixelFormat, target: PixelFormat) -> bytes:
    """
    Remap `data` from `source` to `target` channel layout.

    Channels present in both formats are copied; a missing alpha channel is
    filled with 255 and any other missing channel with 0. sRGB and linear
    variants share their bytes (reinterpretation, no transfer function).
    """

    if source == target:
        return data
    if not can_convert(source, target):
        raise ValueError(f"No conversion defined: {source.name} -> {target.name}")
    if source.channels == target.channels:
        return data

    width, height = size
    image = Image.frombytes(source.pil_mode, (width, height), bytes(data))
    bands = dict(zip(source.channels, image.split()))

    out_bands = []
    for channel in target.channels:
        band = bands.get(channel)
        if band is None:
            band = Image.new("L", (width, height), 255 if channel == "A" else 0)
        out_bands.append(band)
    return Image.merge(target.pil_mode, out_bands).tobytes()
