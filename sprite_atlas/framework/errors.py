"""Error taxonomy for atlas builds.

Every failure aborts the whole build; no partial artifact is ever returned.
Each error keeps the context needed for a useful diagnostic as attributes.
"""

from __future__ import annotations

from .geometry import Rect, Vec2


class AtlasError(Exception):
    """Base class for every failure raised while building an atlas."""


class ManifestError(AtlasError, ValueError):
    """The manifest (or its configuration) is structurally invalid."""

    def __init__(self, message: str, *, key_path: str | None = None):
        super().__init__(message)
        self.key_path = key_path


class GeometryError(AtlasError, ValueError):
    """A sprite-sheet description does not fit its source image."""

    def __init__(
        self,
        message: str,
        *,
        path: str,
        entry_index: int,
        rect: Rect | None = None,
        image_size: Vec2 | None = None,
    ):
        location = f"texture #{entry_index} ({path})"
        details = [message]
        if rect is not None:
            details.append(f"rect={rect}")
        if image_size is not None:
            details.append(f"image={image_size.x}x{image_size.y}")
        super().__init__(f"{location}: {'; '.join(details)}")
        self.path = path
        self.entry_index = entry_index
        self.rect = rect
        self.image_size = image_size


class _FormatError(AtlasError):
    reason = "format error"

    def __init__(self, *, path: str, entry_index: int, source_format: str, target_format: str):
        super().__init__(
            f"texture #{entry_index} ({path}): {self.reason}: {source_format} -> {target_format}"
        )
        self.path = path
        self.entry_index = entry_index
        self.source_format = source_format
        self.target_format = target_format


class FormatMismatchError(_FormatError):
    """Formats differ and automatic conversion is disabled."""

    reason = "format differs from atlas format and auto_format_conversion is disabled"


class UnsupportedConversionError(_FormatError):
    """No channel mapping exists between the two formats."""

    reason = "no conversion defined"


class AtlasOverflowError(AtlasError):
    """The sprites cannot be packed within `max_size`."""

    def __init__(
        self,
        *,
        sprite_count: int,
        max_size: Vec2,
        global_index: int | None = None,
        sprite_size: Vec2 | None = None,
    ):
        message = f"Could not pack {sprite_count} sprite(s) within max_size {max_size.x}x{max_size.y}"
        if global_index is not None and sprite_size is not None:
            message += f" (first unplaced: sprite #{global_index}, {sprite_size.x}x{sprite_size.y})"
        super().__init__(message)
        self.sprite_count = sprite_count
        self.max_size = max_size
        self.global_index = global_index
        self.sprite_size = sprite_size
