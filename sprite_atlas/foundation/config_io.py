from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

import yaml

CONFIG_ENV_VAR = "SPRITE_ATLAS_CONFIG"
CONFIG_FILE_NAME = "sprite_atlas.yaml"
LOCAL_OVERLAY_FILE_NAME = "sprite_atlas.local.yaml"


def load_yaml_mapping(path: str) -> dict[str, Any]:
    """Read a YAML (or JSON) document that must contain a mapping at the top level."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"File must contain a YAML mapping: {path}")
    return dict(payload)


def deep_merge(base: Any, overlay: Any, *, path: str) -> Any:
    if overlay is None:
        return None

    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, overlay_value in overlay.items():
            next_path = f"{path}.{key}" if path else str(key)
            if key in base:
                merged[key] = deep_merge(base[key], overlay_value, path=next_path)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(base, (list, tuple)):
        if not isinstance(overlay, (list, tuple)):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is list but overlay is {type(overlay).__name__}"
            )
        return list(overlay)

    if isinstance(overlay, Mapping):
        raise ValueError(
            f"Invalid config overlay merge at {path}: base is {type(base).__name__} but overlay is {type(overlay).__name__}"
        )

    return overlay


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    env_var: str | None = CONFIG_ENV_VAR,
    start_dir: str | os.PathLike[str] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load the tool configuration, returning (cfg, meta).

    Lookup order:
      1) explicit `config_path` (single file, no local overlay)
      2) the `env_var` environment variable (single file, no local overlay)
      3) `sprite_atlas.yaml` in `start_dir` (default: cwd), with an optional
         `sprite_atlas.local.yaml` overlay merged on top
      4) nothing found: empty config, built-in defaults apply
    """

    explicit_path = None
    if config_path is not None:
        explicit_path = str(config_path).strip() or None
    elif env_var:
        raw_env = os.environ.get(str(env_var), "")
        explicit_path = raw_env.strip() or None

    if explicit_path:
        expanded = os.path.abspath(os.path.expandvars(os.path.expanduser(explicit_path)))
        cfg = load_yaml_mapping(expanded)
        meta = {
            "mode": "env" if config_path is None else "explicit",
            "paths": [expanded],
            "env_var": env_var,
        }
        return cfg, meta

    config_directory = os.path.abspath(os.fspath(start_dir) if start_dir else os.getcwd())
    base_config_path = os.path.join(config_directory, CONFIG_FILE_NAME)
    local_overlay_path = os.path.join(config_directory, LOCAL_OVERLAY_FILE_NAME)

    if not os.path.exists(base_config_path):
        return {}, {"mode": "defaults", "paths": [], "env_var": env_var}

    cfg = load_yaml_mapping(base_config_path)
    loaded_paths = [base_config_path]
    mode = "base"

    if os.path.exists(local_overlay_path):
        overlay = load_yaml_mapping(local_overlay_path)
        cfg = deep_merge(cfg, overlay, path="")
        loaded_paths.append(local_overlay_path)
        mode = "base+local"

    meta = {"mode": mode, "paths": loaded_paths, "env_var": env_var}
    return cfg, meta
