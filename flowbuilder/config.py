"""
Configuration management for the flow builder.

Handles persistent configuration including:
- Server host/port for the NiceGUI app
- Log level
- Whether a new session starts with the demo flow

Settings are resolved in this order:
1. Environment variable (a .env file next to the project is loaded first)
2. Stored in config.json
3. Built-in default
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from flowbuilder.paths import get_config_path, get_env_path

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "FLOWBUILDER_HOST": "127.0.0.1",
    "FLOWBUILDER_PORT": 8080,
    "FLOWBUILDER_LOG_LEVEL": "INFO",
    "FLOWBUILDER_SEED_DEMO": True,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            return {}
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def ensure_env_loaded(env_path: Optional[Path] = None) -> bool:
    """
    Load the .env file into the environment without overriding variables
    that are already set.

    Returns True if a .env file was found and loaded.
    """
    env_path = env_path or get_env_path()
    if env_path.exists():
        return load_dotenv(env_path, override=False)
    return False


def get_setting(name: str, config: Optional[dict] = None) -> Any:
    """
    Get a raw setting value.

    Priority:
    1. Environment variable `name`
    2. config.json key `name`
    3. DEFAULTS
    """
    env_value = os.environ.get(name)
    if env_value is not None and env_value != "":
        return env_value

    if config is None:
        config = load_config()
    if name in config:
        return config[name]

    return DEFAULTS.get(name)


def get_bool_setting(name: str, config: Optional[dict] = None) -> bool:
    value = get_setting(name, config)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def get_int_setting(name: str, config: Optional[dict] = None) -> int:
    value = get_setting(name, config)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid integer for {name}: {value!r}, using default")
        return int(DEFAULTS[name])


def get_server_settings(config: Optional[dict] = None) -> Dict[str, Any]:
    """Collect the settings app.py needs to start the server."""
    if config is None:
        config = load_config()
    return {
        "host": str(get_setting("FLOWBUILDER_HOST", config)),
        "port": get_int_setting("FLOWBUILDER_PORT", config),
        "log_level": str(get_setting("FLOWBUILDER_LOG_LEVEL", config)).upper(),
        "seed_demo": get_bool_setting("FLOWBUILDER_SEED_DEMO", config),
    }


def set_setting(name: str, value: Any, config_path: Optional[Path] = None) -> None:
    """Persist a setting to config.json."""
    config = load_config(config_path)
    config[name] = value
    save_config(config, config_path)
