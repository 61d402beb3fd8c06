from __future__ import annotations

import os
from pathlib import Path

GITHUB_GRAPHQL_API = "https://api.github.com/graphql"
PAGE_SIZE = 100

DEFAULT_CONF_DIR = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "sponsortally"
DEFAULT_CONF_PATH = DEFAULT_CONF_DIR / "config.toml"
