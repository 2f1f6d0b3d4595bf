from __future__ import annotations

import json
import os

from sprite_atlas.framework.assembly import AtlasArtifact


def write_atlas(
    artifact: AtlasArtifact,
    out_dir: str,
    name: str,
    *,
    layout_format: str = "json",
) -> dict[str, str]:
    """Write `<name>.png` plus the layout (`<name>.json` or `<name>.csv`); returns the paths."""

    if not name or not name.strip():
        raise ValueError("name must be a non-empty string")
    if layout_format not in ("json", "csv"):
        raise ValueError(f"Unsupported layout format: {layout_format!r}")

    os.makedirs(out_dir, exist_ok=True)
    image_path = os.path.join(out_dir, f"{name}.png")
    layout_path = os.path.join(out_dir, f"{name}.{layout_format}")

    artifact.to_image().save(image_path, format="PNG")

    if layout_format == "csv":
        artifact.sprite_table().to_csv(layout_path, index=False)
    else:
        with open(layout_path, "w", encoding="utf-8") as handle:
            json.dump(artifact.layout(), handle, indent=2)
            handle.write("\n")

    return {"image": image_path, "layout": layout_path}
