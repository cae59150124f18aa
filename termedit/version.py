from __future__ import annotations

import importlib.metadata

DIST_NAME = "termedit"


def get_version_string() -> str:
    """Return the installed distribution version, or 'unknown'."""
    try:
        return importlib.metadata.version(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"
