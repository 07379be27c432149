"""Configuration file loading and runtime overrides.

Settings come from three layers, lowest precedence first: the defaults in
``Constants``, an optional YAML config file, and CLI flags.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, converter)
_CONFIG_KEYS = {
    "registry_url": ("REGISTRY_URL", str),
    "connect_timeout": ("CONNECT_TIMEOUT", float),
    "request_timeout": ("REQUEST_TIMEOUT", float),
    "channel_size": ("RESULT_CHANNEL_SIZE", int),
    "user_agent": ("USER_AGENT", str),
}


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Settings dict; the ``cratescout`` section when the file has one.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def apply_settings(settings: Dict[str, Any]) -> None:
    """Copy recognized settings onto Constants; unknown or invalid values are logged and skipped."""
    for key, value in settings.items():
        target = _CONFIG_KEYS.get(key)
        if target is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, convert = target
        try:
            setattr(Constants, attr, convert(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for %s: %r", key, value)


def apply_config_overrides(args) -> None:
    """Apply the config file, then CLI flags (CLI has highest precedence)."""
    apply_settings(load_config(getattr(args, "CONFIG", None)))
    if getattr(args, "REGISTRY_URL", None):
        Constants.REGISTRY_URL = args.REGISTRY_URL
    if getattr(args, "CHANNEL_SIZE", None) is not None:
        Constants.RESULT_CHANNEL_SIZE = int(args.CHANNEL_SIZE)
