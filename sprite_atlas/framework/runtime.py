from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def generate_build_id() -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{timestamp}_{uuid.uuid4().hex[:8]}"


@dataclass
class BuildContext:
    """Per-build state: identity, logger and the record of executed stages."""

    build_id: str
    logger: logging.Logger
    steps: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def create(cls, logger: logging.Logger | None = None, build_id: str | None = None) -> "BuildContext":
        build_id = build_id or generate_build_id()
        return cls(build_id=build_id, logger=logger or logging.getLogger("sprite_atlas.build"))

    def run_stage(self, name: str, fn: Callable[[], T], **meta: Any) -> T:
        """Run one pipeline stage, logging it and appending a step record."""

        tokens = ", ".join(f"{key}={value}" for key, value in meta.items())
        self.logger.info("Stage: %s%s", name, f" ({tokens})" if tokens else "")
        started = time.perf_counter()
        try:
            result = fn()
        except Exception as exc:
            self.logger.error("Stage failed: %s (%s)", name, exc)
            raise
        duration_ms = round((time.perf_counter() - started) * 1000.0, 3)
        self.steps.append({"name": name, "duration_ms": duration_ms, "meta": dict(meta)})
        self.logger.info("Completed stage %s (duration_ms=%s)", name, duration_ms)
        return result
