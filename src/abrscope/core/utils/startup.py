import logging
import os
import platform
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "abrscope"
DATA_DIR_ENV = "ABRSCOPE_DATA_DIR"


def get_appdata_dir() -> Path:
    """
    Get the application data directory.
    Override:       ABRSCOPE_DATA_DIR, used as-is.
    Portable Mode:  'data' folder next to a frozen executable, if it exists.
    Standard Mode:  OS standard AppData location.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        path = Path(override).expanduser()
    elif getattr(sys, 'frozen', False) and (Path(sys.executable).parent / "data").exists():
        path = Path(sys.executable).parent / "data"
    else:
        path = _platform_dir()

    path.mkdir(parents=True, exist_ok=True)
    return path


def _platform_dir() -> Path:
    system = platform.system()
    if system == "Windows":
        base = os.environ.get("APPDATA")
        return Path(base) / APP_NAME if base else Path.home() / APP_NAME
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / APP_NAME


def get_config_file() -> Path:
    """Get the configuration file path"""
    return get_appdata_dir() / "config.json"


def get_cache_file() -> Path:
    """Get the HTTP cache database path"""
    return get_appdata_dir() / "http_cache.sqlite"


def get_log_file() -> Path:
    """Get the log file path"""
    log_dir = get_appdata_dir() / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir / "abrscope.log"
