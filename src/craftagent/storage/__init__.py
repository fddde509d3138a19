"""Storage utilities for CraftAgent."""

from craftagent.storage.paths import (
    ensure_directory,
    expand_path,
    get_bots_dir,
    get_craftagent_home,
    get_global_config_path,
)

__all__ = [
    "ensure_directory",
    "expand_path",
    "get_bots_dir",
    "get_craftagent_home",
    "get_global_config_path",
]
