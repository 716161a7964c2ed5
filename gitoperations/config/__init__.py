"""Configuration management for gitoperations."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from gitoperations.errors import InvalidConfigError

from .settings import DEFAULT_TRACE_PREFIX, GitSettings, Settings, TraceSettings

# Singleton instance
_settings: Optional[Settings] = None

CONFIG_DIR = Path.home() / ".gitoperations"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${ENV_VAR} syntax in strings."""
    if isinstance(value, str):
        pattern = r"\$\{([^}]+)\}"
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value if value else None
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigError(str(path), f"malformed YAML: {e}") from e
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise InvalidConfigError(str(path), "top level must be a mapping")
    return content


def _drop_unset(config: dict) -> dict:
    """Remove keys whose values expanded to nothing so defaults apply."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _drop_unset(value)
        elif value is not None:
            result[key] = value
    return result


def load_settings(config_path: Optional[Path] = None, force_reload: bool = False) -> Settings:
    """
    Load settings with priority: config file > env vars > defaults.

    Args:
        config_path: Optional path to a custom config file
        force_reload: Force reload even if settings are cached

    Returns:
        Settings instance
    """
    global _settings

    if _settings is not None and not force_reload:
        return _settings

    path = config_path or CONFIG_FILE
    config = _drop_unset(_expand_env_vars(_load_yaml_file(path)) or {})

    try:
        # File values are init arguments, so they win over env vars.
        _settings = Settings(**config)
    except ValidationError as e:
        raise InvalidConfigError(str(path), str(e)) from e

    return _settings


def get_settings() -> Settings:
    """Get the current settings instance, loading if necessary."""
    if _settings is None:
        return load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_TRACE_PREFIX",
    "GitSettings",
    "Settings",
    "TraceSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "CONFIG_DIR",
    "CONFIG_FILE",
]
