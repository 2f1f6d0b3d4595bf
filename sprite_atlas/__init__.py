"""Build sprite atlases from declarative manifests."""

from sprite_atlas.framework.assembly import AtlasArtifact
from sprite_atlas.framework.errors import (
    AtlasError,
    AtlasOverflowError,
    FormatMismatchError,
    GeometryError,
    ManifestError,
    UnsupportedConversionError,
)
from sprite_atlas.framework.formats import PIXEL_FORMATS, PixelFormat, resolve_format
from sprite_atlas.framework.geometry import Rect, Vec2
from sprite_atlas.framework.images import SourceImage, directory_loader
from sprite_atlas.framework.manifest import (
    Configuration,
    HeterogeneousSheet,
    HomogeneousSheet,
    Manifest,
    NoSpriteSheet,
    TextureEntry,
    parse_manifest,
)
from sprite_atlas.framework.packing import PackedSprite
from sprite_atlas.framework.pipeline import build_atlas
from sprite_atlas.framework.slicing import Sprite

__all__ = [
    "PIXEL_FORMATS",
    "AtlasArtifact",
    "AtlasError",
    "AtlasOverflowError",
    "Configuration",
    "FormatMismatchError",
    "GeometryError",
    "HeterogeneousSheet",
    "HomogeneousSheet",
    "Manifest",
    "ManifestError",
    "NoSpriteSheet",
    "PackedSprite",
    "PixelFormat",
    "Rect",
    "SourceImage",
    "Sprite",
    "TextureEntry",
    "UnsupportedConversionError",
    "Vec2",
    "build_atlas",
    "directory_loader",
    "parse_manifest",
    "resolve_format",
]
