"""The synchronous build pipeline: load -> resolve -> normalize -> pack -> assemble.

Each call owns its buffers and shares no mutable state, so independent builds
may run on separate threads. Any failure aborts the build before the atlas
canvas is allocated.
"""

from __future__ import annotations

from .assembly import AtlasArtifact, assemble_atlas
from .images import ImageLoader, SourceImage
from .manifest import Manifest
from .normalize import normalize_image
from .packing import PackedSprite, pack_sprites
from .runtime import BuildContext
from .slicing import Sprite, resolve_manifest


def _single_image_artifact(sprites: list[Sprite], image: SourceImage) -> AtlasArtifact:
    return AtlasArtifact(
        pixel_buffer=image.data,
        size=image.size,
        format=image.format,
        packed_sprites=tuple(PackedSprite(sprite.global_index, sprite.rect_in_source) for sprite in sprites),
        source_dependencies=frozenset(sprite.source_path for sprite in sprites),
    )


def build_atlas(
    manifest: Manifest,
    load_image: ImageLoader,
    *,
    ctx: BuildContext | None = None,
) -> AtlasArtifact:
    """
    Build the atlas described by `manifest`.

    `load_image` maps a texture path to its decoded `SourceImage`; it is called
    once per texture entry, in manifest order.

    Raises:
        GeometryError, FormatMismatchError, UnsupportedConversionError,
        AtlasOverflowError: see `sprite_atlas.framework.errors`.
    """

    ctx = ctx or BuildContext.create()
    config = manifest.configuration
    entries = manifest.textures
    ctx.logger.debug("Configuration: %s", config.to_dict())

    images = ctx.run_stage(
        "load",
        lambda: [load_image(entry.path) for entry in entries],
        textures=len(entries),
    )
    sprites = ctx.run_stage(
        "resolve",
        lambda: resolve_manifest(manifest, [image.size for image in images]),
    )
    normalized = ctx.run_stage(
        "normalize",
        lambda: [
            normalize_image(
                image,
                config.format,
                auto_convert=config.auto_format_conversion,
                path=entry.path,
                entry_index=entry_index,
            )
            for entry_index, (entry, image) in enumerate(zip(entries, images))
        ],
        format=config.format.name,
    )

    if len(entries) == 1 and not config.always_pack:
        ctx.logger.info("Single texture with always_pack disabled; using %s as the atlas", entries[0].path)
        return _single_image_artifact(sprites, normalized[0])

    result = ctx.run_stage(
        "pack",
        lambda: pack_sprites(
            [sprite.rect_in_source.size for sprite in sprites],
            initial_size=config.initial_size,
            max_size=config.max_size,
            padding=config.padding,
            logger=ctx.logger,
        ),
        sprites=len(sprites),
    )
    ctx.logger.info(
        "Packed %d sprite(s) into %dx%d after %d attempt(s)",
        len(sprites),
        result.size.x,
        result.size.y,
        result.attempts,
    )

    return ctx.run_stage(
        "assemble",
        lambda: assemble_atlas(result.size, config.format, sprites, result.packed, normalized),
    )
