"""Atlas building core.

Leaf-first:

- `geometry`, `errors`, `formats`: value types, error taxonomy, pixel formats
- `manifest`: typed manifest model, defaults and parsing from a mapping
- `slicing`: sprite-sheet descriptions -> ordered sprite rectangles
- `normalize`: source images -> the atlas pixel format
- `packing`: shelf bin packing with bounded canvas growth
- `assembly`: compositing into the final `AtlasArtifact`
- `pipeline`: `build_atlas`, the stages above in sequence

Nothing here reads files except `images.SourceImage.open`/`directory_loader`,
which the pipeline only reaches through an injected loader.
"""
