"""
Configuration management for Lofi Radio
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class ApiConfig:
    """Configuration for the remote track/station catalog."""

    base_url: str = ""  # Empty means use the built-in sample catalog
    api_key: str = ""
    request_timeout: float = 30.0
    resource_timeout: float = 60.0
    page_size: int = 20


@dataclass
class PlayerConfig:
    """Configuration for music player settings."""

    mpv_socket_path: Optional[str] = None
    volume: float = 0.8  # 0.0 - 1.0
    skip_interval: float = 15.0
    restart_threshold: float = 3.0  # previous() restarts the track after this many seconds

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"Invalid volume: {self.volume}. Must be between 0.0 and 1.0")
        if self.skip_interval <= 0:
            raise ValueError(f"Invalid skip_interval: {self.skip_interval}")


@dataclass
class FocusConfig:
    """Configuration for the focus timer."""

    tick_interval: float = 1.0
    completion_grace: float = 3.0
    default_preset: str = "Pomodoro"


@dataclass
class FavoritesConfig:
    """Configuration for favorites limits."""

    free_tier_limit: int = 25


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/lofi-radio/lofi-radio.log)
    )
    console_output: bool = False  # Also output to console (for debugging)


@dataclass
class NotificationsConfig:
    """Configuration for desktop notifications."""

    enabled: bool = True


@dataclass
class Config:
    """Main configuration object."""

    api: ApiConfig = field(default_factory=ApiConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    focus: FocusConfig = field(default_factory=FocusConfig)
    favorites: FavoritesConfig = field(default_factory=FavoritesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "lofi-radio"
    return Path.home() / ".config" / "lofi-radio"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/lofi-radio (or ~/.config/lofi-radio)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "lofi-radio"
    return Path.home() / ".local" / "share" / "lofi-radio"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Lofi Radio Configuration

[api]
# Catalog API endpoint (leave empty to use the built-in sample catalog)
base_url = ""

# Request timeout and overall resource timeout in seconds
request_timeout = 30.0
resource_timeout = 60.0

# Tracks per page
page_size = 20

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/lofi-mpv-socket"

# Default volume (0.0-1.0)
volume = 0.8

# Seconds to skip forward/backward
skip_interval = 15.0

[focus]
# Seconds between timer ticks
tick_interval = 1.0

# Seconds to show the completed state before clearing the timer
completion_grace = 3.0

# Preset used when none is given
default_preset = "Pomodoro"

[favorites]
# Favorites cap for the free tier (premium is unlimited)
free_tier_limit = 25

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/lofi-radio/lofi-radio.log)
# log_file = "/path/to/custom/lofi-radio.log"

# Also output logs to console (useful for debugging)
console_output = false

[notifications]
# Enable desktop notifications
enabled = true
""".strip()


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - LOFI_API_BASE_URL
    - LOFI_API_KEY
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
        config = Config()
        _apply_env_overrides(config)
        return config

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        config = Config()

        if "api" in toml_data:
            api_data = toml_data["api"]
            config.api = ApiConfig(
                base_url=api_data.get("base_url", config.api.base_url),
                api_key=api_data.get("api_key", config.api.api_key),
                request_timeout=float(
                    api_data.get("request_timeout", config.api.request_timeout)
                ),
                resource_timeout=float(
                    api_data.get("resource_timeout", config.api.resource_timeout)
                ),
                page_size=int(api_data.get("page_size", config.api.page_size)),
            )

        if "player" in toml_data:
            player_data = toml_data["player"]
            config.player = PlayerConfig(
                mpv_socket_path=player_data.get("mpv_socket_path"),
                volume=float(player_data.get("volume", config.player.volume)),
                skip_interval=float(
                    player_data.get("skip_interval", config.player.skip_interval)
                ),
                restart_threshold=float(
                    player_data.get(
                        "restart_threshold", config.player.restart_threshold
                    )
                ),
            )
            try:
                config.player.validate()
            except ValueError as e:
                logger.warning(f"Invalid player configuration: {e}. Using defaults.")
                config.player = PlayerConfig()

        if "focus" in toml_data:
            focus_data = toml_data["focus"]
            config.focus = FocusConfig(
                tick_interval=float(
                    focus_data.get("tick_interval", config.focus.tick_interval)
                ),
                completion_grace=float(
                    focus_data.get("completion_grace", config.focus.completion_grace)
                ),
                default_preset=focus_data.get(
                    "default_preset", config.focus.default_preset
                ),
            )

        if "favorites" in toml_data:
            favorites_data = toml_data["favorites"]
            config.favorites = FavoritesConfig(
                free_tier_limit=int(
                    favorites_data.get(
                        "free_tier_limit", config.favorites.free_tier_limit
                    )
                ),
            )

        if "logging" in toml_data:
            logging_data = toml_data["logging"]
            log_file = logging_data.get("log_file")
            if log_file:
                log_file = str(Path(log_file).expanduser())
            config.logging = LoggingConfig(
                level=logging_data.get("level", config.logging.level).upper(),
                log_file=log_file,
                console_output=logging_data.get(
                    "console_output", config.logging.console_output
                ),
            )

        if "notifications" in toml_data:
            notifications_data = toml_data["notifications"]
            config.notifications = NotificationsConfig(
                enabled=notifications_data.get(
                    "enabled", config.notifications.enabled
                ),
            )

        _apply_env_overrides(config)
        return config

    except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
        logger.warning(
            f"Error loading configuration from {config_path}: {e}. Using default configuration."
        )
        return Config()


def _apply_env_overrides(config: Config) -> None:
    """Override API settings with environment variables if present."""
    base_url = os.environ.get("LOFI_API_BASE_URL")
    api_key = os.environ.get("LOFI_API_KEY")

    if base_url:
        config.api.base_url = base_url
    if api_key:
        config.api.api_key = api_key


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
