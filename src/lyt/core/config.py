"""
Configuration management for Lyt
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from loguru import logger


@dataclass
class ApiConfig:
    """Configuration for the DR radio API."""

    base_url: str = "https://api.dr.dk/radio/v4"
    timeout_seconds: float = 30.0
    user_agent: str = "Lyt/1.0 (Python)"


@dataclass
class StreamsConfig:
    """Configuration for live stream fallbacks.

    Both fields are overrides; the built-in DR table and base apply when unset.
    """

    fallback_base: Optional[str] = None
    fallback_urls: Dict[str, str] = field(default_factory=dict)  # slug -> url


@dataclass
class CacheConfig:
    """Configuration for the in-memory schedule cache."""

    ttl_seconds: int = 600  # 10 minutes

    def validate(self) -> None:
        """Validate cache configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.ttl_seconds <= 0:
            raise ValueError(
                f"Invalid cache ttl_seconds: {self.ttl_seconds}. Must be positive"
            )


@dataclass
class PlayerConfig:
    """Configuration for the mpv streaming engine."""

    mpv_socket_path: Optional[str] = None
    volume: int = 70
    poll_interval: float = 0.5  # Seconds between mpv status polls


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/lyt/lyt.log
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False


@dataclass
class Config:
    """Main configuration object."""

    api: ApiConfig = field(default_factory=ApiConfig)
    streams: StreamsConfig = field(default_factory=StreamsConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "lyt"
    return Path.home() / ".config" / "lyt"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/lyt (or ~/.config/lyt)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "lyt"
    return Path.home() / ".local" / "share" / "lyt"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Lyt Configuration

[api]
# DR radio API base URL
base_url = "https://api.dr.dk/radio/v4"

# Request timeout in seconds
timeout_seconds = 30.0

[streams]
# Base used to synthesize a live stream URL for channels missing from the table
# fallback_base = "https://live-icy.gss.dr.dk/AAC"

# Per-channel overrides (slug = url), merged over the built-in table
[streams.fallback_urls]
# p1 = "https://live-icy.gss.dr.dk/AACP1"

[cache]
# How long fetched schedules stay fresh, in seconds
ttl_seconds = 600

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/lyt-mpv-socket"

# Default volume (0-100)
volume = 70

# Seconds between mpv status polls
poll_interval = 0.5

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/lyt/lyt.log)
# log_file = "/path/to/custom/lyt.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, falling back to defaults per key."""
    config = Config()

    if "api" in toml_data:
        api_data = toml_data["api"]
        config.api = ApiConfig(
            base_url=api_data.get("base_url", config.api.base_url).rstrip("/"),
            timeout_seconds=float(
                api_data.get("timeout_seconds", config.api.timeout_seconds)
            ),
            user_agent=api_data.get("user_agent", config.api.user_agent),
        )

    if "streams" in toml_data:
        streams_data = toml_data["streams"]
        fallback_base = streams_data.get("fallback_base")
        config.streams = StreamsConfig(
            fallback_base=fallback_base.rstrip("/") if fallback_base else None,
            fallback_urls={
                str(slug).lower(): str(url)
                for slug, url in streams_data.get("fallback_urls", {}).items()
            },
        )

    if "cache" in toml_data:
        cache_data = toml_data["cache"]
        config.cache = CacheConfig(
            ttl_seconds=int(cache_data.get("ttl_seconds", config.cache.ttl_seconds)),
        )
        config.cache.validate()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=int(player_data.get("volume", config.player.volume)),
            poll_interval=float(
                player_data.get("poll_interval", config.player.poll_interval)
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Apply LYT_* environment variables on top of file configuration."""
    base_url = os.environ.get("LYT_API_BASE_URL")
    if base_url:
        config.api.base_url = base_url.rstrip("/")

    log_level = os.environ.get("LYT_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - LYT_API_BASE_URL
    - LYT_LOG_LEVEL
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
        config = parse_config(toml_data)
    except (tomllib.TOMLDecodeError, ValueError, TypeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration")
        config = Config()

    return _apply_env_overrides(config)


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
