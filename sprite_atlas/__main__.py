from __future__ import annotations

import sys

from sprite_atlas.cli import main

raise SystemExit(main(sys.argv[1:]))
