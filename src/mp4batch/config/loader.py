"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (MP4BATCH_*)
3. Config file (~/.mp4batch/config.toml)
4. Default values

Environment variables:
- MP4BATCH_CONFIG_PATH: Path to config file (overrides default location)
- MP4BATCH_DATA_DIR: Path to data directory (overrides ~/.mp4batch/)
- MP4BATCH_FORMATS: Default output specification string
- MP4BATCH_OUTPUT_DIR: Directory outputs are written to
- MP4BATCH_LOG_LEVEL: Log level (debug, info, warning, error)
- MP4BATCH_LOG_FILE: Log file path
- MP4BATCH_LOG_FORMAT: Log format (text, json)
- MP4BATCH_LOG_INCLUDE_STDERR: Also log to stderr when a log file is set
- MP4BATCH_LOG_MAX_BYTES: Log rotation threshold in bytes
- MP4BATCH_LOG_BACKUP_COUNT: Number of rotated log files to keep

Example config.toml:

    [encode]
    formats = "enc=aom,q=18,p=anime;enc=x264,ext=mp4"

    [logging]
    level = "debug"
    file = "~/.mp4batch/logs/mp4batch.log"
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import Any

from mp4batch.config.env import EnvReader
from mp4batch.config.models import EncodeConfig, LoggingConfig, Mp4batchConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".mp4batch"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigError(Exception):
    """Configuration file is unreadable or holds invalid values."""


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by MP4BATCH_CONFIG_PATH environment variable;
    otherwise config.toml inside the data directory.
    """
    reader = env_reader or EnvReader()
    return reader.get_path("MP4BATCH_CONFIG_PATH") or (
        get_data_dir(reader) / DEFAULT_CONFIG_FILE.name
    )


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the mp4batch data directory.

    This is the base directory for the configuration file and the
    profiles directory. Can be overridden by MP4BATCH_DATA_DIR.

    Returns:
        Path to the data directory (~/.mp4batch/ by default).
    """
    reader = env_reader or EnvReader()
    return reader.get_path("MP4BATCH_DATA_DIR") or DEFAULT_CONFIG_DIR


def _load_toml_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Results are cached with mtime-based invalidation. Use
    clear_config_cache() to force a reload regardless of mtime.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        if path in _config_cache:
            cached_config, cached_mtime = _config_cache[path]
            if current_mtime == cached_mtime:
                return cached_config

        result = _load_toml_file(path)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache.

    Call this if the config file may have changed and you need
    a fresh load. Primarily useful for testing.
    """
    with _config_cache_lock:
        _config_cache.clear()


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _optional_path(value: Any) -> Path | None:
    if not value:
        return None
    return Path(value).expanduser()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    formats: str | None = None,
    output_dir: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
) -> Mp4batchConfig:
    """Get mp4batch configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MP4BATCH_CONFIG_PATH).
        formats: CLI override for the default specification string.
        output_dir: CLI override for the output directory.
        env_reader: Optional EnvReader for testing (uses os.environ if None).

    Returns:
        Mp4batchConfig with merged configuration.

    Raises:
        ConfigError: If the config file cannot be parsed or a merged value
            fails validation.
    """
    reader = env_reader or EnvReader()
    if config_path is None:
        config_path = get_default_config_path(reader)
    file_config = load_config_file(config_path)

    logging_file = _section(file_config, "logging")
    encode_file = _section(file_config, "encode")

    try:
        logging_config = LoggingConfig(
            level=reader.get_str(
                "MP4BATCH_LOG_LEVEL", logging_file.get("level", "info")
            ),
            file=(
                reader.get_path("MP4BATCH_LOG_FILE")
                or _optional_path(logging_file.get("file"))
            ),
            format=reader.get_str(
                "MP4BATCH_LOG_FORMAT", logging_file.get("format", "text")
            ),
            include_stderr=reader.get_bool(
                "MP4BATCH_LOG_INCLUDE_STDERR",
                logging_file.get("include_stderr", False),
            ),
            max_bytes=reader.get_int(
                "MP4BATCH_LOG_MAX_BYTES", logging_file.get("max_bytes", 10_485_760)
            ),
            backup_count=reader.get_int(
                "MP4BATCH_LOG_BACKUP_COUNT", logging_file.get("backup_count", 5)
            ),
        )
        encode_config = EncodeConfig(
            # An explicit empty --formats selects the single default output
            formats=(
                formats
                if formats is not None
                else reader.get_str("MP4BATCH_FORMATS") or encode_file.get("formats")
            ),
            output_dir=(
                output_dir
                if output_dir is not None
                else reader.get_path("MP4BATCH_OUTPUT_DIR")
                or _optional_path(encode_file.get("output_dir"))
            ),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    return Mp4batchConfig(logging=logging_config, encode=encode_config)
