"""Configuration package for Doubt Desk."""

from doubtdesk.config.app_config import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    RewardsConfig,
    ServerConfig,
    ViewsConfig,
    clear_config_cache,
    load_app_config,
)
from doubtdesk.config.logging_setup import configure_logging

__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "RewardsConfig",
    "ServerConfig",
    "ViewsConfig",
    "clear_config_cache",
    "load_app_config",
    "configure_logging",
]
