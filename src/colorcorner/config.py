from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/colorcorner",
    "log_level": "INFO",
    "window": {
        "width": 1280,
        "height": 800,
        "fullscreen": False,
    },
    "editor": {
        "max_history": 50,
        "debounce_ms": 300,
        "color": "#000000",
        "brush_size": 5,
        "tolerance": 30,
        "brush_sizes": [2, 5, 10, 20],
        "tolerances": [0, 15, 30, 60, 100],
        "palette": [
            "#000000",
            "#FFFFFF",
            "#DC143C",
            "#FF7F00",
            "#FFD700",
            "#228B22",
            "#008080",
            "#1E90FF",
            "#4169E1",
            "#8A2BE2",
            "#FF69B4",
            "#D2691E",
            "#696969",
            "#00BFFF",
            "#9ACD32",
            "#FF6347",
        ],
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
    env_path = os.environ.get("COLORCORNER_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("~/.config/colorcorner/config.yaml").expanduser(),
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
