from __future__ import annotations

import os
from dataclasses import dataclass

from sprite_atlas.foundation.config_io import load_config, load_yaml_mapping
from sprite_atlas.foundation.logging_utils import close_logger, setup_operational_logger
from sprite_atlas.framework.assembly import AtlasArtifact
from sprite_atlas.framework.errors import ManifestError
from sprite_atlas.framework.images import directory_loader
from sprite_atlas.framework.manifest import Manifest, parse_manifest
from sprite_atlas.framework.pipeline import build_atlas
from sprite_atlas.framework.runtime import BuildContext, generate_build_id

from .config import ToolConfig
from .export import write_atlas


@dataclass(frozen=True)
class PackOutcome:
    build_id: str
    artifact: AtlasArtifact
    paths: dict[str, str]
    steps: list[dict]


def read_manifest(path: str, *, defaults: dict | None = None) -> Manifest:
    """Read a YAML or JSON manifest file into a `Manifest`."""

    try:
        data = load_yaml_mapping(path)
    except ValueError as exc:
        raise ManifestError(str(exc)) from exc
    return parse_manifest(data, defaults=defaults)


def run_pack(
    manifest_path: str,
    *,
    output_dir: str | None = None,
    name: str | None = None,
    config_path: str | None = None,
    layout_format: str | None = None,
    build_id: str | None = None,
) -> PackOutcome:
    cfg_dict, cfg_meta = load_config(config_path=config_path)
    tool_cfg = ToolConfig.from_dict(cfg_dict)

    build_id = build_id or generate_build_id()
    logger, _log_file = setup_operational_logger(build_id, tool_cfg.log_path)
    try:
        paths = cfg_meta.get("paths") or []
        if paths:
            logger.info("Loaded config (%s) from %s", cfg_meta.get("mode"), ", ".join(paths))
        else:
            logger.info("No config file found; using built-in defaults")

        manifest_path = os.path.abspath(manifest_path)
        manifest_dir = os.path.dirname(manifest_path)
        logger.info("Reading manifest %s", manifest_path)
        manifest = read_manifest(manifest_path, defaults=dict(tool_cfg.atlas_defaults))
        logger.info(
            "Manifest has %d texture(s), %d sprite(s)",
            len(manifest.textures),
            manifest.sprite_count,
        )

        ctx = BuildContext(build_id=build_id, logger=logger)
        artifact = build_atlas(manifest, directory_loader(manifest_dir), ctx=ctx)

        out_dir = output_dir or tool_cfg.output_path or manifest_dir
        out_name = name or os.path.splitext(os.path.basename(manifest_path))[0]
        written = write_atlas(
            artifact,
            out_dir,
            out_name,
            layout_format=layout_format or tool_cfg.layout_format,
        )
        logger.info("Wrote atlas image to %s", written["image"])
        logger.info("Wrote atlas layout to %s", written["layout"])
        return PackOutcome(build_id=build_id, artifact=artifact, paths=written, steps=list(ctx.steps))
    except Exception as exc:
        logger.error("Build %s failed: %s", build_id, exc)
        raise
    finally:
        close_logger(logger)
