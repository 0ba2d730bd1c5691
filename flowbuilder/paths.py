"""
Where the flow builder looks for its settings files.

config.json and .env are read from the settings home: FLOWBUILDER_HOME when
set, otherwise the directory holding app.py (or the bundled executable).
"""

import os
import sys
from pathlib import Path

HOME_ENV_VAR = "FLOWBUILDER_HOME"


def get_app_dir() -> Path:
    home = os.getenv(HOME_ENV_VAR)
    if home:
        return Path(home).expanduser()
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(__file__).resolve().parent.parent


def get_config_path() -> Path:
    return get_app_dir() / "config.json"


def get_env_path() -> Path:
    return get_app_dir() / ".env"
