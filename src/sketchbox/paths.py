from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_data_root(config: Dict[str, Any]) -> Path:
    root = config.get("data_root", "~/Pictures/sketchbox")
    return Path(root).expanduser().resolve()


def ensure_directories(data_root: Path) -> Dict[str, Path]:
    paint_dir = data_root / "paint"
    paint_dir.mkdir(parents=True, exist_ok=True)
    return {
        "paint": paint_dir,
    }


def default_output_path(config: Dict[str, Any]) -> Path:
    dirs = ensure_directories(get_data_root(config))
    return dirs["paint"] / "untitled.png"
