"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + .env)
- Database operations (SQLite)
- Console management (Rich) and logging (loguru)
- Bounded image cache

The core layer has no dependencies on the domain layer.
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    ensure_directories,
)

# Database
from .database import (
    get_database_path,
    get_db_connection,
    init_database,
    migrate_database,
)

# Console
from .console import get_console, safe_print, print_table

# Errors
from .exceptions import (
    LofiRadioError,
    InvalidStreamLocatorError,
    RendererError,
    CatalogFetchError,
    NoSessionError,
)

# Cache
from .image_cache import ImageCache

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "ensure_directories",
    # Database
    "get_database_path",
    "get_db_connection",
    "init_database",
    "migrate_database",
    # Console
    "get_console",
    "safe_print",
    "print_table",
    # Errors
    "LofiRadioError",
    "InvalidStreamLocatorError",
    "RendererError",
    "CatalogFetchError",
    "NoSessionError",
    # Cache
    "ImageCache",
]
