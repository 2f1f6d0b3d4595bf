from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from sprite_atlas.foundation.config_namespace import ConfigNamespace
from sprite_atlas.framework.manifest import read_configuration_fields

LayoutFormat = Literal["json", "csv"]
LAYOUT_FORMATS: tuple[str, ...] = ("json", "csv")


@dataclass(frozen=True)
class ToolConfig:
    """Settings for the command line tool (not part of any manifest)."""

    output_path: str | None = None
    log_path: str | None = None
    layout_format: LayoutFormat = "json"
    atlas_defaults: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(cfg: Mapping[str, Any]) -> "ToolConfig":
        """
        Parse and validate the tool configuration.

        Raises:
            ValueError: unknown keys, wrong types, or invalid `atlas_defaults`.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        try:
            ns = ConfigNamespace(cfg, path="")
            output_path = ns.get_str("output_path", default=None)
            log_path = ns.get_str("log_path", default=None)
            layout_format = ns.get_str("layout_format", default="json", choices=LAYOUT_FORMATS)
            atlas_defaults = ns.get_raw("atlas_defaults", default=None) or {}
            if not isinstance(atlas_defaults, Mapping):
                raise TypeError(
                    f"atlas_defaults must be a mapping (type={type(atlas_defaults).__name__})"
                )
            ns.assert_consumed()
            read_configuration_fields(ConfigNamespace(dict(atlas_defaults), path="atlas_defaults"))
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

        return ToolConfig(
            output_path=output_path,
            log_path=log_path,
            layout_format=layout_format,  # type: ignore[arg-type]
            atlas_defaults=dict(atlas_defaults),
        )
