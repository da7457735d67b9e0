import json
import logging
from pathlib import Path
from typing import Any, Optional

from abrscope import __version__
from abrscope.core.utils.startup import get_appdata_dir, get_config_file

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for abrscope"""

    DEFAULT_CONFIG = {
        "version": __version__,
        # HTTP
        "timeout": 10,
        "user_agent": f"abrscope/{__version__}",
        # 0 disables the response cache
        "cache_ttl_seconds": 30,
        # Parsing / output
        "validate_on_parse": True,
        "export_format": "text",
        "show_segments": False,
        "max_rows": 50,
        "debug_mode": False,
    }

    EXPORT_FORMATS = ("json", "csv", "text")

    def __init__(self, config_file: Optional[Path] = None):
        self.appdata_dir = config_file.parent if config_file else get_appdata_dir()
        self.config_file = config_file or get_config_file()
        self.config = self._load_config()

    def _load_config(self) -> dict:
        if not self.config_file.exists():
            logger.info("Creating default configuration...")
            self._create_default_config()
            return self.DEFAULT_CONFIG.copy()

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)

            if not isinstance(config, dict):
                raise ValueError("top-level JSON value is not an object")

            # Fill any keys added since the file was written
            for key, value in self.DEFAULT_CONFIG.items():
                if key not in config:
                    config[key] = value

            logger.debug(f"Configuration loaded from {self.config_file}")
            return config

        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Failed to parse config file: {e}")
            self._create_default_config()
            return self.DEFAULT_CONFIG.copy()

        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            return self.DEFAULT_CONFIG.copy()

    def _create_default_config(self):
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.DEFAULT_CONFIG, f, indent=2)
            logger.info(f"Default configuration created at {self.config_file}")
        except OSError as e:
            logger.error(f"Failed to create config file: {e}")

    def save(self) -> bool:
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2)
            logger.debug("Configuration saved")
            return True
        except OSError as e:
            logger.error(f"Failed to save config: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        self.config[key] = value
        return self.save()

    def get_all(self) -> dict:
        return self.config.copy()

    def get_value(self, key: str) -> Any:
        return self.config.get(key)

    def set_value(self, key: str, value: str) -> bool:
        """Store ``value``, coerced to the type of the current or default value."""
        existing = self.config.get(key, self.DEFAULT_CONFIG.get(key))
        if existing is not None:
            try:
                if isinstance(existing, bool):
                    value = value.lower() in ('true', '1', 'yes')
                elif isinstance(existing, int):
                    value = int(value)
                elif isinstance(existing, float):
                    value = float(value)
            except (ValueError, AttributeError):
                logger.warning(f"Could not convert '{value}' for '{key}', storing as text")
        self.config[key] = value
        return self.save()

    def timeout(self) -> float:
        return float(self.get('timeout', self.DEFAULT_CONFIG['timeout']))

    def user_agent(self) -> str:
        return self.get('user_agent') or self.DEFAULT_CONFIG['user_agent']

    def cache_ttl_seconds(self) -> int:
        return int(self.get('cache_ttl_seconds', self.DEFAULT_CONFIG['cache_ttl_seconds']))

    def validate_on_parse(self) -> bool:
        return bool(self.get('validate_on_parse', True))

    def export_format(self) -> str:
        value = self.get('export_format')
        if value in self.EXPORT_FORMATS:
            return value
        return self.DEFAULT_CONFIG['export_format']

    def show_segments(self) -> bool:
        return bool(self.get('show_segments', False))

    def max_rows(self) -> int:
        return int(self.get('max_rows', self.DEFAULT_CONFIG['max_rows']))

    def debug_mode(self) -> bool:
        return bool(self.get('debug_mode', False))

    def get_config_file_path(self) -> str:
        return str(self.config_file)
