"""Command-line application layer: tool config, manifest files on disk, atlas export."""
