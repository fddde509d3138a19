"""
Configuration merger for CraftAgent.

Implements deep merge with dotted-path helpers.
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Merge rules:
    - Scalar values and lists: override replaces base
    - Dicts: recursive deep merge
    - null/None value: key is reset to its default

    Args:
        base: Base configuration dictionary.
        override: Override configuration dictionary.

    Returns:
        Merged configuration dictionary.

    Examples:
        >>> deep_merge({"llm": {"model": "a", "temperature": 1.0}}, {"llm": {"model": "b"}})
        {'llm': {'model': 'b', 'temperature': 1.0}}
    """
    result = base.copy()

    for key, value in override.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def set_nested_value(config: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """
    Set a value by dotted path, creating intermediate dicts.

    Returns:
        New configuration dictionary (input is not modified).
    """
    parts = path.split(".")
    result = config.copy()

    current = result
    for part in parts[:-1]:
        child = current.get(part)
        child = child.copy() if isinstance(child, dict) else {}
        current[part] = child
        current = child

    current[parts[-1]] = value
    return result
