from __future__ import annotations

import os
import platform
import sys
from importlib import metadata

_DISTRIBUTION = "sponsortally"
_DEPENDENCIES = ("cappa", "httpx", "loguru", "rich")


def _version(distribution: str) -> str:
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def get_version() -> str:
    """Get the current version of sponsortally."""
    return _version(_DISTRIBUTION)


def print_debug_info() -> str:
    """Return debug/environment information."""
    lines = [
        f"- __System__: {platform.platform()}",
        f"- __Python__: {platform.python_implementation()} {platform.python_version()} ({sys.executable})",
        f"- __Configuration directory__: `{os.getenv('XDG_CONFIG_HOME', '~/.config')}/sponsortally`",
        f"- __GitHub token in environment__: {'yes' if os.getenv('GITHUB_TOKEN') else 'no'}",
        "- __Installed packages__:",
        *(f"  - `{dist}` v{_version(dist)}" for dist in (_DISTRIBUTION, *_DEPENDENCIES)),
    ]
    return "\n".join(lines)
