"""Configuration management for kumorfm.

Settings live in a YAML file whose sections mirror the package layout:
``client`` (prediction service), ``graph`` (build defaults), ``data``
(where graphs are saved) and ``api`` (HTTP server).
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "KUMORFM_CONFIG"
DEFAULT_CONFIG_FILE = "config.yml"

DEFAULTS: Dict[str, Any] = {
    "client": {
        "base_url": "https://api.kumorfm.ai",
        "timeout": 30,  # seconds
        "api_key": None,  # falls back to KUMO_API_KEY
    },
    "graph": {
        "infer_metadata": True,
    },
    "data": {
        "graphs_dir": "./data/graphs",
    },
    "api": {
        "host": "0.0.0.0",
        "port": 8000,
        "cors_origins": ["*"],
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into sections."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration manager for kumorfm.

    Example:
        >>> config = Config.from_yaml("config.yml")
        >>> config.get("client.timeout")
        30
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """Initialize configuration.

        Args:
            config_dict: Full configuration dictionary; defaults when None
        """
        if config_dict is None:
            config_dict = copy.deepcopy(DEFAULTS)
        self._config = config_dict

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Config:
        """Load a YAML file on top of the defaults.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(yaml_path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        logger.info(f"Loading config from {path}")
        overrides = yaml.safe_load(path.read_text()) or {}
        return cls(_deep_merge(copy.deepcopy(DEFAULTS), overrides))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"api.port"``."""
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a dotted key, creating intermediate sections."""
        *parents, leaf = key.split(".")
        node = self._config
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    def save(self, yaml_path: str | Path) -> None:
        """Write the configuration to a YAML file, creating parent directories."""
        path = Path(yaml_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Saving config to {path}")
        path.write_text(yaml.safe_dump(self._config, default_flow_style=False, sort_keys=False))

    def __repr__(self) -> str:
        return f"Config({self._config})"


_global_config: Optional[Config] = None


def _load_or_default(path: Path, source: str) -> Optional[Config]:
    try:
        return Config.from_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {source} ({path}): {e}")
        return None


def get_config() -> Config:
    """Return the global configuration, loading it on first use.

    Resolution order: the file named by KUMORFM_CONFIG, then ./config.yml,
    then built-in defaults.
    """
    global _global_config
    if _global_config is not None:
        return _global_config

    config = None
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        if Path(env_path).exists():
            config = _load_or_default(Path(env_path), CONFIG_ENV_VAR)
        else:
            logger.warning(f"{CONFIG_ENV_VAR} points to missing file {env_path}")

    if config is None and Path(DEFAULT_CONFIG_FILE).exists():
        config = _load_or_default(Path(DEFAULT_CONFIG_FILE), DEFAULT_CONFIG_FILE)

    _global_config = config or Config()
    return _global_config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration; None resets it."""
    global _global_config
    _global_config = config


def load_config(yaml_path: str | Path) -> Config:
    """Load a YAML file and install it as the global configuration."""
    config = Config.from_yaml(yaml_path)
    set_config(config)
    return config
