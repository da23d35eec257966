"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging and console output (Loguru, Rich)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

from .config import (
    Config,
    ApiConfig,
    StreamsConfig,
    CacheConfig,
    PlayerConfig,
    LoggingConfig,
    load_config,
    parse_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    ensure_directories,
)
from .output import get_console, log, setup_loguru

__all__ = [
    "Config",
    "ApiConfig",
    "StreamsConfig",
    "CacheConfig",
    "PlayerConfig",
    "LoggingConfig",
    "load_config",
    "parse_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "ensure_directories",
    "get_console",
    "log",
    "setup_loguru",
]
