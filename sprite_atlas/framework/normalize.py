from __future__ import annotations

from .errors import FormatMismatchError, UnsupportedConversionError
from .formats import PixelFormat, can_convert, convert_pixels
from .images import SourceImage


def normalize_image(
    image: SourceImage,
    target: PixelFormat,
    *,
    auto_convert: bool,
    path: str,
    entry_index: int,
) -> SourceImage:
    """Return `image` in the `target` format; an image already in it is returned as is."""

    if image.format == target:
        return image

    error_context = {
        "path": path,
        "entry_index": entry_index,
        "source_format": image.format.name,
        "target_format": target.name,
    }
    if not auto_convert:
        raise FormatMismatchError(**error_context)
    if not can_convert(image.format, target):
        raise UnsupportedConversionError(**error_context)

    data = convert_pixels(image.data, image.size, image.format, target)
    return SourceImage(data, image.width, image.height, target)
