"""
Configuration loader — reads ~/.gh-shorthand.yml into a ShorthandConfig.

Reads YAML, validates against the Pydantic schema, and returns a typed
config. The path can be overridden with ``--config`` or the
``GH_SHORTHAND_CONFIG`` environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from shorthand.core.models.config import ShorthandConfig

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_FILE = "~/.gh-shorthand.yml"
CONFIG_ENV_VAR = "GH_SHORTHAND_CONFIG"


class ConfigError(Exception):
    """Raised when the shorthand configuration is invalid or missing."""


def default_config_path() -> Path:
    """Resolve the config path from the environment, else the default."""
    return Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE).expanduser()


def parse_config(raw: str, source: str = "<string>") -> ShorthandConfig:
    """Validate a YAML document into a ShorthandConfig.

    Raises:
        ConfigError: If the YAML or its contents are invalid.
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}") from e

    # An empty file is an empty config
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {source}, got {type(data).__name__}")

    try:
        return ShorthandConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def load_config(path: Path | None = None) -> ShorthandConfig:
    """Load and validate the shorthand configuration.

    Args:
        path: Explicit config path. If None, uses :func:`default_config_path`.

    Returns:
        Validated ShorthandConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = default_config_path()
    path = path.expanduser()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    config = parse_config(raw, source=str(path))
    logger.info(
        "Loaded config with %d repo and %d user shorthands",
        len(config.repos),
        len(config.users),
    )
    return config
