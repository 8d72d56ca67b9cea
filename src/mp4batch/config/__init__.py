"""Configuration management for mp4batch.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (MP4BATCH_*)
3. Config file (~/.mp4batch/config.toml)
4. Default values (lowest priority)
"""

from mp4batch.config.env import EnvReader
from mp4batch.config.loader import (
    ConfigError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from mp4batch.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from mp4batch.config.models import (
    EncodeConfig,
    FormatProfile,
    LoggingConfig,
    Mp4batchConfig,
)
from mp4batch.config.profiles import (
    ProfileError,
    ProfileNotFoundError,
    get_profiles_directory,
    list_profiles,
    load_profile,
)

__all__ = [
    # Models
    "EncodeConfig",
    "FormatProfile",
    "LoggingConfig",
    "Mp4batchConfig",
    # Loader
    "ConfigError",
    "EnvReader",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
    # Profiles
    "ProfileError",
    "ProfileNotFoundError",
    "get_profiles_directory",
    "list_profiles",
    "load_profile",
]
