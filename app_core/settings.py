"""Helpers for loading and working with global toolbox settings."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Any

DEFAULT_SETTINGS: Dict[str, Any] = {
    "export_dir": "exports",
    "preview_size": [800, 500],
    "export_base_size": [800, 500],
    "wall_tile": {
        "field_of_view": 60.0,
        "camera_height": 1000.0,
        "horizon_fraction": 0.5,
        "road_width": 2000.0,
        "side": 1,
        "start_depth": 2000.0,
        "segment_length": 4000.0,
        "wall_height": 1500.0,
        "show_ground": True,
        "export_scale": 1,
        "stripes": "0: #78350f\n0.4: #92400e\n0.8: #b45309",
    },
}


def load_settings(settings_path: Path | None = None) -> Dict[str, Any]:
    """Load the settings file if it exists, otherwise return defaults.

    Nested sections are merged key by key so a settings file only needs to
    list the values it overrides.
    """
    data: Dict[str, Any] = {
        key: dict(value) if isinstance(value, dict) else value for key, value in DEFAULT_SETTINGS.items()
    }
    if settings_path and settings_path.exists():
        try:
            loaded = json.loads(settings_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Failed to parse settings file {settings_path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise RuntimeError(f"Settings file {settings_path} must contain a JSON object")
        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key].update(value)
            else:
                data[key] = value
    return data


def size_setting(settings: Dict[str, Any], key: str) -> tuple[int, int]:
    """Read a ``[width, height]`` entry, falling back to the default on bad values."""
    raw = settings.get(key, DEFAULT_SETTINGS[key])
    try:
        width, height = (int(v) for v in raw)
    except (TypeError, ValueError):
        width, height = DEFAULT_SETTINGS[key]
    if width <= 0 or height <= 0:
        width, height = DEFAULT_SETTINGS[key]
    return width, height


__all__ = ["DEFAULT_SETTINGS", "load_settings", "size_setting"]
