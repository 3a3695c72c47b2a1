#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Config Loader

- Loads the optional YAML run configuration (labels, output format)
- Validates structure into frozen pydantic models before returning
- Provides consistent logging for config load operations
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from bigip_sd.exceptions import ConfigError
from bigip_sd.models.schemas import RunConfig
from bigip_sd.utils.logger import get_logger


def load_config(path: str, logger: Optional[Any] = None) -> Dict[str, Any]:
    """
    Load a YAML config file with structured logging.

    Args:
        path: Path to config file
        logger: Optional logger; if None, uses default config logger

    Returns:
        Parsed configuration dict
    """
    log = logger or get_logger("bigip_sd.config_loader")

    config_path = Path(path)
    if not config_path.exists():
        log.error("Config file not found: %s", config_path)
        raise ConfigError("config_missing", f"Config file not found: {path}", {"path": str(path)})

    try:
        with config_path.open("r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        log.error("Failed to parse YAML config %s: %s", config_path, e)
        raise ConfigError("config_invalid_yaml", f"Invalid YAML in {path}: {e}", {"path": str(path)}) from e
    except (OSError, UnicodeDecodeError) as e:
        log.error("Failed to read config %s: %s", config_path, e)
        raise ConfigError("config_unreadable", f"Failed to read config {path}: {e}", {"path": str(path)}) from e

    if not isinstance(config, dict):
        raise ConfigError("config_not_mapping", f"Config file {path} must contain a mapping", {"path": str(path)})

    log.info("Loaded config file: %s", config_path)
    log.debug("Config contents: %s", config)
    return config


def load_run_config(path: Optional[str] = None, logger: Optional[Any] = None) -> RunConfig:
    """Build the immutable run configuration; defaults apply when no path is given."""
    if not path:
        return RunConfig()
    raw = load_config(path, logger)
    try:
        return RunConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError("config_invalid", f"Invalid configuration in {path}: {e}", {"path": str(path)}) from e
