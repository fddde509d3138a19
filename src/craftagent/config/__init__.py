"""Configuration schema and loading."""

from craftagent.config.loader import (
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_yaml_file,
)
from craftagent.config.merger import deep_merge, set_nested_value
from craftagent.config.schema import (
    AgentSettings,
    CoalescerConfig,
    Config,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
)

__all__ = [
    "AgentSettings",
    "CoalescerConfig",
    "Config",
    "LLMConfig",
    "LoggingConfig",
    "MemoryConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
