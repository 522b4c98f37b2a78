"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path

from clio.config.defaults import (
    DATA_DIR_MODE,
    DEFAULT_CONFIG_TOML,
    ENV_DEBUG,
    ENV_OPENAI_API_KEY,
    get_config_path,
)
from clio.config.schema import ClioConfig
from clio.exceptions import ConfigError, ConfigValidationError

# Global config instance (singleton)
_config: ClioConfig | None = None


def load_config(
    config_path: Path | None = None,
    *,
    create_if_missing: bool = False,
) -> ClioConfig:
    """Load configuration from TOML file and environment variables.

    A missing file is not an error: defaults apply.

    Args:
        config_path: Path to config file. If None, uses default.
        create_if_missing: Write the default config if the file doesn't exist.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigError: If configuration cannot be loaded.
        ConfigValidationError: If configuration is invalid.
    """
    path = config_path or get_config_path()

    if not path.exists():
        if not create_if_missing:
            return _apply_env_overrides(ClioConfig())
        write_default_config(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    try:
        config = ClioConfig.model_validate(data)
    except ValueError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e

    return _apply_env_overrides(config)


def write_default_config(path: Path | None = None) -> Path:
    """Write the default configuration file.

    Args:
        path: Destination. If None, uses the default config path.

    Returns:
        The path written.
    """
    path = path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG_TOML)
    except OSError as e:
        raise ConfigError(f"Failed to write config to {path}: {e}") from e
    return path


def _apply_env_overrides(config: ClioConfig) -> ClioConfig:
    """Apply environment variable overrides to configuration."""
    debug = os.environ.get(ENV_DEBUG)
    if debug:
        config.debug = debug.lower() in ("1", "true", "yes")

    openai_key = os.environ.get(ENV_OPENAI_API_KEY)
    if openai_key and not config.professor.openai.key:
        config.professor.openai.key = openai_key

    return config


def ensure_data_dir(config: ClioConfig) -> Path:
    """Create the data directory if needed.

    Returns:
        The data directory path.

    Raises:
        ConfigError: If the directory cannot be created.
    """
    path = config.data_dir
    try:
        path.mkdir(mode=DATA_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"invalid base directory {path}: {e}") from e
    return path


def get_config() -> ClioConfig:
    """Get the current configuration (singleton).

    Loads config on first access, caches for subsequent calls.

    Returns:
        Current configuration.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (mainly for testing)."""
    global _config
    _config = None
