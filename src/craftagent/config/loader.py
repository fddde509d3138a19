"""
Configuration loader for CraftAgent.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.craftagent/config.yaml)
3. Explicit config file (--config)
4. Environment variables (CRAFTAGENT_*)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, get_args, get_origin

import yaml
from pydantic import BaseModel, ValidationError

from craftagent.config.merger import deep_merge, set_nested_value
from craftagent.config.schema import Config
from craftagent.exceptions import ConfigurationError
from craftagent.storage.paths import get_global_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRAFTAGENT_"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file does not exist).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return content


def apply_env_overrides(
    config: dict[str, Any], environ: Optional[dict[str, str]] = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Variables follow the pattern ``CRAFTAGENT_<SECTION>_<KEY>=<value>``;
    the first underscore separates the section, so
    ``CRAFTAGENT_AGENT_MAX_STEPS`` sets ``agent.max_steps``.

    Args:
        config: Configuration dictionary.
        environ: Environment to read (defaults to os.environ).

    Returns:
        Configuration with environment overrides applied.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        # CRAFTAGENT_HOME relocates the home directory, it is not a setting
        if key == f"{ENV_PREFIX}HOME":
            continue

        section, _, name = key[len(ENV_PREFIX) :].lower().partition("_")
        if not name:
            continue

        logger.debug(f"Config override from {key}")
        config = set_nested_value(
            config, f"{section}.{name}", _parse_env_value(value, _field_annotation(section, name))
        )

    return config


def _field_annotation(section: str, name: str) -> Any:
    """Type annotation of ``Config.<section>.<name>``, or None for unknown keys."""
    section_field = Config.model_fields.get(section)
    if section_field is None:
        return None
    model = section_field.annotation
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        return None
    field = model.model_fields.get(name)
    return field.annotation if field is not None else None


def _parse_env_value(value: str, annotation: Any = None) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Known settings follow their annotation: list fields always get a list
    (``"combat"`` becomes ``["combat"]``) and string fields keep the raw
    text. Anything else is parsed to its natural type.

    Args:
        value: String value from environment.
        annotation: Type of the target setting, if known.

    Returns:
        Parsed value (int, float, bool, list, or string).
    """
    if get_origin(annotation) is list:
        return [item.strip() for item in value.split(",") if item.strip()]
    if annotation is str or str in get_args(annotation):
        return value

    # Integer
    if re.match(r"^-?\d+$", value):
        return int(value)

    # Float
    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    # Boolean
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    # List (comma-separated)
    if "," in value:
        return [item.strip() for item in value.split(",") if item.strip()]

    return value


def load_config(
    config_path: Optional[Path] = None,
    skip_global: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        config_path: Explicit config file, merged over the global one.
        skip_global: Skip ~/.craftagent/config.yaml.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid or an explicit file is missing.
    """
    config_dict = Config().model_dump()

    if not skip_global:
        global_path = get_global_config_path()
        if global_path.exists():
            config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        config_dict = deep_merge(config_dict, load_yaml_file(config_path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Optional[Config] = None


def get_config(config_path: Optional[Path] = None, reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Uses a cached instance. Use reload=True to force refresh.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config(config_path)

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
