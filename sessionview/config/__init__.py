"""Configuration for sessionview.

Settings come from a YAML file (``SESSIONVIEW_CONFIG_PATH`` or
``~/.sessionview/sessionview.yml``). A ``.env`` file is loaded first so that
``${VAR}`` references in the YAML can resolve against it.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from sessionview.config.loader import DEFAULT_CONFIG_PATH, load_app_config
from sessionview.config.schema import AppConfig

_env_path = os.getenv("SESSIONVIEW_ENV_PATH")
load_dotenv(Path(_env_path).expanduser() if _env_path else Path.cwd() / ".env")


def config_path() -> Path:
    """Resolve the config file location from the environment."""
    env_path = os.getenv("SESSIONVIEW_CONFIG_PATH")
    return Path(env_path or DEFAULT_CONFIG_PATH).expanduser()


def get_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from ``path`` or the environment-selected file."""
    return load_app_config(path if path is not None else config_path())


__all__ = ["AppConfig", "config_path", "get_config"]
