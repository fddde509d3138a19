"""
Path utilities for CraftAgent.

Provides consistent path resolution for configuration and per-bot data.
"""

import os
from pathlib import Path


def get_craftagent_home() -> Path:
    """
    Get the CraftAgent home directory.

    Resolution order:
    1. CRAFTAGENT_HOME environment variable
    2. Default: ~/.craftagent

    Returns:
        Path to the CraftAgent home directory.
    """
    env_home = os.environ.get("CRAFTAGENT_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".craftagent"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.craftagent/config.yaml
    """
    return get_craftagent_home() / "config.yaml"


def get_bots_dir() -> Path:
    """
    Get the directory holding per-bot data.

    Returns:
        Path to ~/.craftagent/bots/
    """
    return get_craftagent_home() / "bots"


def expand_path(path: str | Path) -> Path:
    """
    Expand a path string, handling ~ and environment variables.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded and resolved Path.
    """
    path = os.path.expanduser(os.path.expandvars(str(path)))
    return Path(path).resolve()


def ensure_directory(path: Path, mode: int = 0o755) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path.
        mode: Permission mode for created directories.

    Returns:
        The path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True, mode=mode)
    return path
