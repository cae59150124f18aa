"""Render configuration loaded from the user's settings file.

Settings are stored in a JSON file in the OS-appropriate config directory.
Everything in the file is optional; missing or invalid entries fall back to
the defaults in EditorConstants.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

APP_NAME = "termedit"

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class RenderConfig:
    """Immutable layout and color settings passed into each render."""
    status_fg: RGB = EditorConstants.STATUS_FG_COLOR
    status_bg: RGB = EditorConstants.STATUS_BG_COLOR
    help_text: str = EditorConstants.HELP_TEXT
    modified_flag: str = EditorConstants.MODIFIED_FLAG


def settings_path() -> Path:
    """Return the path of the user settings file."""
    return Path(platformdirs.user_config_dir(APP_NAME)) / "settings.json"


def default_log_path() -> Path:
    """Return the default log file path."""
    return Path(platformdirs.user_log_dir(APP_NAME)) / f"{APP_NAME}.log"


def _parse_rgb(key: str, value: Any) -> Optional[RGB]:
    if (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
    ):
        return (value[0], value[1], value[2])
    logger.warning(f"Setting {key} must be three integers in 0..255, ignoring")
    return None


def parse_render_config(data: Dict[str, Any]) -> RenderConfig:
    """Build a RenderConfig from a settings dict, skipping invalid entries."""
    overrides: Dict[str, Any] = {}

    for key in ('status_fg', 'status_bg'):
        if key in data:
            rgb = _parse_rgb(key, data[key])
            if rgb is not None:
                overrides[key] = rgb

    for key in ('help_text', 'modified_flag'):
        if key in data:
            if isinstance(data[key], str):
                overrides[key] = data[key]
            else:
                logger.warning(f"Setting {key} must be a string, ignoring")

    return replace(RenderConfig(), **overrides)


def load_render_config(path: Optional[Path] = None) -> RenderConfig:
    """Load render settings from disk.

    Args:
        path: Settings file to read. Defaults to settings_path().

    Returns:
        The configured RenderConfig, or the defaults if the file doesn't
        exist or can't be read.
    """
    path = path or settings_path()
    if not path.exists():
        return RenderConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return RenderConfig()

    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return RenderConfig()

    return parse_render_config(data)
