from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sprite_atlas", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    pack = sub.add_parser("pack", help="Pack a manifest into an atlas image and layout")
    pack.add_argument("manifest", help="Path to a YAML or JSON manifest")
    pack.add_argument("-o", "--output-dir", default=None, help="Directory for the atlas files")
    pack.add_argument("--name", default=None, help="Base name of the output files (default: manifest name)")
    pack.add_argument("--config", default=None, help="Tool config file (overrides SPRITE_ATLAS_CONFIG)")
    pack.add_argument("--layout-format", choices=("json", "csv"), default=None)

    sub.add_parser("list-formats", help="List supported pixel formats")

    return parser


def _list_formats() -> None:
    from .framework.formats import PIXEL_FORMATS

    for fmt in PIXEL_FORMATS.values():
        colour = "srgb" if fmt.srgb else "linear"
        print(f"{fmt.name:<18} channels={fmt.channels:<5} bytes/pixel={fmt.pixel_size:<3} {colour}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "list-formats":
        _list_formats()
        return 0

    if args.command == "pack":
        from .app.pack import run_pack
        from .framework.errors import AtlasError

        try:
            outcome = run_pack(
                args.manifest,
                output_dir=args.output_dir,
                name=args.name,
                config_path=args.config,
                layout_format=args.layout_format,
            )
        except (AtlasError, OSError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2

        size = outcome.artifact.size
        print(f"{outcome.paths['image']} ({size.x}x{size.y}, {len(outcome.artifact)} sprites)")
        print(outcome.paths["layout"])
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
