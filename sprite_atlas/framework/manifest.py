"""Typed manifest model, defaults, and parsing from an already-deserialized mapping.

Document shape (YAML shown; JSON works the same):

    configuration:            # optional, every key defaulted
      initial_size: [256, 256]
      max_size: [2048, 2048]
      padding: [0, 0]
      format: rgba8unorm_srgb
      auto_format_conversion: true
      always_pack: true
    textures:                 # mandatory, non-empty
      - path: hero.png        # sprite_sheet omitted -> whole image
      - path: tiles.png
        sprite_sheet:
          homogeneous: {tile_size: [16, 16], columns: 4, rows: 2, padding: [1, 1], offset: [0, 0]}
      - path: props.png
        sprite_sheet:
          heterogeneous:
            - [[0, 0], [32, 16]]
            - {offset: [32, 0], size: [8, 8]}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from sprite_atlas.foundation.config_namespace import ConfigNamespace, parse_pair

from .errors import ManifestError
from .formats import DEFAULT_FORMAT_NAME, PIXEL_FORMATS, PixelFormat, resolve_format
from .geometry import ZERO, Rect, Vec2

DEFAULT_INITIAL_SIZE = Vec2(256, 256)
DEFAULT_MAX_SIZE = Vec2(2048, 2048)


@dataclass(frozen=True)
class Configuration:
    initial_size: Vec2 = DEFAULT_INITIAL_SIZE
    max_size: Vec2 = DEFAULT_MAX_SIZE
    padding: Vec2 = ZERO
    format: PixelFormat = PIXEL_FORMATS[DEFAULT_FORMAT_NAME]
    auto_format_conversion: bool = True
    # False: a single-texture manifest is returned as its own atlas, unpacked.
    always_pack: bool = True

    def __post_init__(self) -> None:
        if self.initial_size.x <= 0 or self.initial_size.y <= 0:
            raise ManifestError(
                f"configuration.initial_size must be > 0 in both dimensions (got {tuple(self.initial_size)})",
                key_path="configuration.initial_size",
            )
        if not self.initial_size.fits_within(self.max_size):
            raise ManifestError(
                "configuration.max_size must be >= initial_size in both dimensions "
                f"(initial_size={tuple(self.initial_size)}, max_size={tuple(self.max_size)})",
                key_path="configuration.max_size",
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_size": list(self.initial_size),
            "max_size": list(self.max_size),
            "padding": list(self.padding),
            "format": self.format.name,
            "auto_format_conversion": self.auto_format_conversion,
            "always_pack": self.always_pack,
        }


@dataclass(frozen=True)
class NoSpriteSheet:
    """The whole source image is a single sprite."""


@dataclass(frozen=True)
class HomogeneousSheet:
    """A uniform grid of `columns` x `rows` tiles."""

    tile_size: Vec2
    columns: int
    rows: int
    padding: Vec2 = ZERO
    offset: Vec2 = ZERO


@dataclass(frozen=True)
class HeterogeneousSheet:
    """An explicit list of rectangles, in declared order."""

    rects: tuple[Rect, ...]


SpriteSheet = Union[NoSpriteSheet, HomogeneousSheet, HeterogeneousSheet]


def sprite_count(sheet: SpriteSheet) -> int:
    if isinstance(sheet, NoSpriteSheet):
        return 1
    if isinstance(sheet, HomogeneousSheet):
        return sheet.columns * sheet.rows
    if isinstance(sheet, HeterogeneousSheet):
        return len(sheet.rects)
    raise TypeError(f"Unknown sprite sheet type: {type(sheet).__name__}")


@dataclass(frozen=True)
class TextureEntry:
    path: str
    sprite_sheet: SpriteSheet = field(default_factory=NoSpriteSheet)


@dataclass(frozen=True)
class Manifest:
    textures: tuple[TextureEntry, ...]
    configuration: Configuration = field(default_factory=Configuration)

    def __post_init__(self) -> None:
        if not self.textures:
            raise ManifestError("Manifest must contain at least one texture entry", key_path="textures")

    @property
    def sprite_count(self) -> int:
        return sum(sprite_count(entry.sprite_sheet) for entry in self.textures)

    @property
    def paths(self) -> frozenset[str]:
        return frozenset(entry.path for entry in self.textures)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, defaults: Mapping[str, Any] | None = None) -> "Manifest":
        return parse_manifest(data, defaults=defaults)


def read_configuration_fields(ns: ConfigNamespace) -> dict[str, Any]:
    """Typed `Configuration` keyword arguments; checks keys and types, not cross-field rules."""

    format_name = ns.get_str("format", default=DEFAULT_FORMAT_NAME)
    fields = {
        "initial_size": Vec2(*ns.get_pair("initial_size", default=tuple(DEFAULT_INITIAL_SIZE))),
        "max_size": Vec2(*ns.get_pair("max_size", default=tuple(DEFAULT_MAX_SIZE))),
        "padding": Vec2(*ns.get_pair("padding", default=tuple(ZERO))),
        "format": resolve_format(str(format_name), key_path=ns.key_path("format")),
        "auto_format_conversion": ns.get_bool("auto_format_conversion", default=True),
        "always_pack": ns.get_bool("always_pack", default=True),
    }
    ns.assert_consumed()
    return fields


def parse_configuration(ns: ConfigNamespace) -> Configuration:
    return Configuration(**read_configuration_fields(ns))


def _parse_rect(raw: Any, path: str) -> Rect:
    if isinstance(raw, Mapping):
        ns = ConfigNamespace(raw, path=path)
        rect = Rect(Vec2(*ns.get_pair("offset")), Vec2(*ns.get_pair("size")))
        ns.assert_consumed()
        return rect
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return Rect(Vec2(*parse_pair(raw[0], f"{path}.offset")), Vec2(*parse_pair(raw[1], f"{path}.size")))
    raise TypeError(f"{path} must be an [offset, size] pair or an offset/size mapping")


def parse_sprite_sheet(raw: Any, path: str) -> SpriteSheet:
    if raw is None:
        return NoSpriteSheet()
    if isinstance(raw, str):
        if raw.strip().lower() == "none":
            return NoSpriteSheet()
        raise ValueError(f"{path} must be none, or a mapping with a homogeneous/heterogeneous key (got {raw!r})")
    if not isinstance(raw, Mapping) or len(raw) != 1:
        raise ValueError(f"{path} must be a mapping with exactly one of: none, homogeneous, heterogeneous")

    ((tag, body),) = raw.items()
    kind = str(tag).strip().lower()
    variant_path = f"{path}.{kind}"

    if kind == "none":
        if body not in (None, {}):
            raise ValueError(f"{variant_path} takes no parameters")
        return NoSpriteSheet()

    if kind == "homogeneous":
        if not isinstance(body, Mapping):
            raise TypeError(f"{variant_path} must be a mapping (type={type(body).__name__})")
        ns = ConfigNamespace(body, path=variant_path)
        sheet = HomogeneousSheet(
            tile_size=Vec2(*ns.get_pair("tile_size")),
            columns=ns.get_int("columns", min_value=0),
            rows=ns.get_int("rows", min_value=0),
            padding=Vec2(*ns.get_pair("padding", default=tuple(ZERO))),
            offset=Vec2(*ns.get_pair("offset", default=tuple(ZERO))),
        )
        ns.assert_consumed()
        return sheet

    if kind == "heterogeneous":
        if not isinstance(body, (list, tuple)):
            raise TypeError(f"{variant_path} must be a list of rects (type={type(body).__name__})")
        return HeterogeneousSheet(tuple(_parse_rect(item, f"{variant_path}[{idx}]") for idx, item in enumerate(body)))

    raise ValueError(f"Unknown sprite sheet kind under {path}: {tag!r} (expected none, homogeneous, heterogeneous)")


def _parse_entry(raw: Any, path: str) -> TextureEntry:
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, Mapping):
        raise TypeError(f"{path} must be a mapping (type={type(raw).__name__})")
    ns = ConfigNamespace(raw, path=path)
    texture_path = ns.get_str("path")
    sheet = parse_sprite_sheet(ns.get_raw("sprite_sheet", default=None), f"{path}.sprite_sheet")
    ns.assert_consumed()
    return TextureEntry(path=str(texture_path), sprite_sheet=sheet)


def parse_manifest(data: Mapping[str, Any], *, defaults: Mapping[str, Any] | None = None) -> Manifest:
    """
    Build a `Manifest` from a deserialized document.

    `defaults` is a configuration mapping merged under the document's own
    `configuration` key by key: built-in defaults < `defaults` < manifest values.

    Raises:
        ManifestError: for any structural problem, with the offending key path.
    """

    if not isinstance(data, Mapping):
        raise ManifestError(f"Manifest must be a mapping (type={type(data).__name__})")

    try:
        root = ConfigNamespace(data, path="")
        raw_configuration = root.get_raw("configuration", default=None)
        if raw_configuration is not None and not isinstance(raw_configuration, Mapping):
            raise TypeError(f"configuration must be a mapping (type={type(raw_configuration).__name__})")
        # Vectors are single values: a manifest key replaces the default whole.
        merged = {**(defaults or {}), **(raw_configuration or {})}
        configuration = parse_configuration(ConfigNamespace(merged, path="configuration"))

        raw_textures = root.get_raw("textures")
        if not isinstance(raw_textures, (list, tuple)):
            raise TypeError(f"textures must be a list (type={type(raw_textures).__name__})")
        textures = tuple(_parse_entry(item, f"textures[{idx}]") for idx, item in enumerate(raw_textures))
        root.assert_consumed()
    except ManifestError:
        raise
    except (TypeError, ValueError) as exc:
        raise ManifestError(str(exc)) from exc

    return Manifest(textures=textures, configuration=configuration)
