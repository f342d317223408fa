from __future__ import annotations

import os
import sys
from pathlib import Path


def _default_app_data_dir() -> Path:
    if sys.platform == "win32":
        base = os.getenv("APPDATA")
        if not base:
            base = Path.home() / "AppData" / "Roaming"
        return Path(base) / "doc2md"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "doc2md"
    base = os.getenv("XDG_DATA_HOME")
    if not base:
        base = Path.home() / ".local" / "share"
    return Path(base) / "doc2md"


def data_dir() -> Path:
    env_dir = os.getenv("DOC2MD_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    return _default_app_data_dir()


def logs_dir() -> Path:
    return data_dir() / "logs"


def default_config_path() -> Path:
    return data_dir() / "config.json"


__all__ = [
    "data_dir",
    "logs_dir",
    "default_config_path",
    "_default_app_data_dir",
]
