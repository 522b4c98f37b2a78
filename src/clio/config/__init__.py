"""Configuration management."""

from clio.config.loader import (
    ensure_data_dir,
    get_config,
    load_config,
    reset_config,
    write_default_config,
)
from clio.config.schema import ClioConfig, ProfessorType

__all__ = [
    "ClioConfig",
    "ProfessorType",
    "ensure_data_dir",
    "get_config",
    "load_config",
    "reset_config",
    "write_default_config",
]
