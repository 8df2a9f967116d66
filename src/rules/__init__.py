"""Configuration for documentation generation."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    DocsConfig,
    InfoConfig,
    ServerConfig,
    load_config,
    resolve_input_dirs,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DocsConfig",
    "InfoConfig",
    "ServerConfig",
    "load_config",
    "resolve_input_dirs",
    "resolve_output_dir",
]
