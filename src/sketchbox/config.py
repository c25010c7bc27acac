from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/Pictures/sketchbox",
    "paint": {
        "background": 0xFFAA0000,
        "width": 500,
        "height": 800,
        "line_width": 5,
        "drag_period_ms": 10,
        "tool_contexts": 3,
        "max_colors": 9,
        "history_depth": 0,
        "min_zoom": -10,
        "max_zoom": 10,
        "png_compression": 4,
        "jpeg_quality": 90,
        "radial_inner_radius": 40,
        "radial_outer_radius": 225,
        "palette": [0xFF000000, 0xFFFFFFFF],
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("SKETCHBOX_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("~/.config/sketchbox/config.yaml").expanduser(),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config


def paint_setting(config: Dict[str, Any], key: str) -> Any:
    paint = config.get("paint", {})
    if key in paint:
        return paint[key]
    return DEFAULT_CONFIG["paint"][key]
