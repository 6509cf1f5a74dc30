# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.

"""
Config file support for perftop.

This module handles loading persistent settings from ~/.perftop.conf.
Supports both YAML and INI formats.

Priority order: CLI args > ~/.perftop.conf > hardcoded defaults
"""

import configparser
import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.perftop.conf")

# Mapping of config field names to their expected Python types
_CONFIG_FIELD_TYPES: Dict[str, type] = {
    "smt_factor": float,
    "batch_mode": bool,
    "delay": float,
    "iterations": int,
    "system": str,
    "cpu_types": str,
    "format": str,
    "log_level": str,
    "log_file": str,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_BOOL_TRUE_VALUES = frozenset(("true", "yes", "1", "on"))
_BOOL_FALSE_VALUES = frozenset(("false", "no", "0", "off"))


def _parse_bool(value: str) -> bool:
    """Parse a boolean value from a string representation."""
    lower = value.lower()
    if lower in _BOOL_TRUE_VALUES:
        return True
    if lower in _BOOL_FALSE_VALUES:
        return False
    raise ValueError(f"Cannot parse '{value}' as a boolean. Use true/false, yes/no, 1/0, or on/off.")


def _parse_log_level(value: str) -> str:
    """Normalize a logging level name to upper case and check it is supported."""
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid value for config field 'log_level': {value!r}. Use one of: {', '.join(LOG_LEVELS)}.")
    return level


def _coerce_field(key: str, raw_value: Any) -> Any:
    """Coerce a raw config value to the expected type for the given field name."""
    if key not in _CONFIG_FIELD_TYPES:
        return raw_value
    if key == "log_level":
        return _parse_log_level(str(raw_value))
    field_type = _CONFIG_FIELD_TYPES[key]
    if isinstance(raw_value, field_type):
        return raw_value
    try:
        if field_type is bool:
            return _parse_bool(str(raw_value))
        return field_type(raw_value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Invalid value for config field '{key}': expected {field_type.__name__}, got {raw_value!r}") from exc


def load_ini_config(path: str) -> Dict[str, Any]:
    """
    Load and parse an INI-format config file.

    Supports ``=`` and ``:`` as key-value delimiters. Settings are read from
    the ``[default]`` section.

    Args:
        path: Path to the INI config file.

    Returns:
        Dictionary of config values.

    Raises:
        ValueError: On parse errors or invalid field values.
    """
    parser = configparser.ConfigParser(allow_no_value=True, delimiters=("=", ":"))
    try:
        read_files = parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ValueError(f"Invalid config file '{path}': {exc}") from exc

    if not read_files:
        raise ValueError(f"Config file '{path}' could not be read.")

    result: Dict[str, Any] = {}

    if parser.has_section("default"):
        for key, raw_value in parser.items("default"):
            if key not in _CONFIG_FIELD_TYPES:
                logger.warning("Unknown config key '%s' in [default] section of '%s'; ignoring.", key, path)
                continue
            if raw_value is None:
                logger.warning("Config key '%s' has no value in '%s'; ignoring.", key, path)
                continue
            result[key] = _coerce_field(key, raw_value)

    return result


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load and parse a YAML-format config file.

    Uses ``yaml.safe_load`` to prevent arbitrary code execution.

    Args:
        path: Path to the YAML config file.

    Returns:
        Dictionary of config values.

    Raises:
        ValueError: On parse errors or invalid file content.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file '{path}': {exc}") from exc
    except OSError as exc:
        raise ValueError(f"Cannot read config file '{path}': {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file '{path}' must contain a YAML mapping at the top level, got {type(data).__name__}.")

    result: Dict[str, Any] = {}

    default_section = data.get("default") or {}
    if not isinstance(default_section, dict):
        raise ValueError(f"The 'default' section in '{path}' must be a YAML mapping.")
    for key, value in default_section.items():
        if key not in _CONFIG_FIELD_TYPES:
            logger.warning("Unknown config key '%s' in 'default' section of '%s'; ignoring.", key, path)
            continue
        if value is None:
            continue
        result[key] = _coerce_field(key, value)

    return result


def _is_yaml_file(path: str) -> bool:
    """
    Heuristically determine whether a config file uses YAML or INI format.

    INI files begin with a ``[section]`` header on the first non-blank,
    non-comment (``#`` or ``;``) line.  Anything else is treated as YAML.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                stripped = line.strip()
                if stripped and not stripped.startswith(("#", ";")):
                    return not stripped.startswith("[")
    except OSError:
        return False
    return False


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load persistent settings from a config file.

    Auto-detects whether the file uses YAML or INI format.
    Returns an empty dict if the config file does not exist.

    Args:
        path: Path to the config file.  Defaults to ``~/.perftop.conf``.

    Returns:
        Dictionary of config values.

    Raises:
        ValueError: If the file exists but cannot be parsed.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        return {}

    if _is_yaml_file(path):
        logger.debug("Loading YAML config from '%s'.", path)
        return load_yaml_config(path)

    logger.debug("Loading INI config from '%s'.", path)
    return load_ini_config(path)
