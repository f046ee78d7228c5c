"""YAML configuration for ShotSolve, layered over built-in defaults."""

import copy
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "shotsolve" / "config.yaml"

DEFAULTS: Dict[str, Any] = {
    "capture": {
        "provider": "mss",
        "monitor_id": 1,
        "settle_delay_seconds": 0.1,
    },
    "queue": {
        "max_size": 5,
        "thumbnail_width": 128,
        "thumbnail_height": 72,
    },
    "provider": {
        "api_url": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4o",
        "max_tokens": 4000,
        "jpeg_quality": 70,
        "timeout_seconds": None,
    },
    "solver": {
        "default_language": "python",
        "languages": ["python", "javascript", "java", "c++", "go", "ruby", "swift"],
    },
    "logging": {
        "level": "WARNING",
        "log_to_file": False,
        "log_file": "~/.config/shotsolve/logs/shotsolve.log",
        "log_to_console": True,
        "console_colors": True,
    },
}


class ConfigurationError(Exception):
    """The configuration file is missing, unreadable or malformed."""
    pass


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Reads and writes the ShotSolve YAML configuration.

    Every load returns the full configuration tree: values missing from
    the file fall back to ``DEFAULTS``. The last loaded tree is kept in
    ``self.config`` for ``get`` and ``save_to_file``.
    """

    def __init__(self):
        self.config: Optional[Dict[str, Any]] = None

    def load_from_file(self, config_path: str) -> Dict[str, Any]:
        """Load a YAML file and merge it over the defaults.

        Args:
            config_path: File to read (``~`` is expanded)

        Returns:
            Complete configuration dictionary

        Raises:
            ConfigurationError: If the file is absent, unreadable, not
                YAML, or not a mapping at the top level
        """
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")

        try:
            loaded = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{path} is not valid YAML: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e

        loaded = loaded or {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"{path} must contain a mapping, got {type(loaded).__name__}"
            )

        self.config = _merge(DEFAULTS, loaded)
        logger.info(f"Loaded configuration from {path}")
        return self.config

    def load_defaults(self) -> Dict[str, Any]:
        self.config = copy.deepcopy(DEFAULTS)
        logger.debug("Using built-in configuration defaults")
        return self.config

    def load(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load the given file, else the user config file, else defaults.

        Args:
            config_path: Explicit config file path (optional)

        Returns:
            Complete configuration dictionary
        """
        if config_path:
            return self.load_from_file(config_path)
        if DEFAULT_CONFIG_PATH.exists():
            return self.load_from_file(str(DEFAULT_CONFIG_PATH))
        return self.load_defaults()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``provider.model``.

        Returns ``default`` when nothing is loaded or the key is absent.
        """
        node: Any = self.config or {}
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def save_to_file(self, config_path: str) -> None:
        """Write the loaded configuration as YAML.

        Args:
            config_path: Destination file; parent directories are created

        Raises:
            ConfigurationError: If nothing is loaded or the write fails
        """
        if not self.config:
            raise ConfigurationError("Nothing to save, no configuration loaded")

        path = Path(config_path).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(self.config, default_flow_style=False, sort_keys=False))
        except OSError as e:
            raise ConfigurationError(f"Cannot write {path}: {e}") from e
        logger.info(f"Saved configuration to {path}")
