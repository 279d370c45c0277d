"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from doubtdesk.config.app_config import load_app_config

    config = load_app_config()
    reward = config.rewards.practice_correct_points
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment override for the config file location
CONFIG_ENV = "DOUBTDESK_CONFIG"


@dataclass
class DatabaseConfig:
    """SQLite location."""

    path: str = "db/doubtdesk.db"


@dataclass
class RewardsConfig:
    """Points awarded by the practice review engine."""

    practice_correct_points: int = 100


@dataclass
class ViewsConfig:
    """Read projection settings."""

    leaderboard_size: int = 5


@dataclass
class AuthConfig:
    """Token settings for the authentication collaborator."""

    secret_env: str = "DOUBTDESK_JWT_SECRET"
    token_ttl_minutes: int = 60
    algorithm: str = "HS256"

    def get_secret(self) -> str:
        """Get signing secret from environment variable."""
        secret = os.environ.get(self.secret_env)
        if not secret:
            logger.warning("auth.secret_missing", env=self.secret_env)
            return "doubtdesk-dev-secret-change-me"
        return secret


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    rewards: RewardsConfig = field(default_factory=RewardsConfig)
    views: ViewsConfig = field(default_factory=ViewsConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "info"


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {"path": "db/doubtdesk.db"},
        "rewards": {"practice_correct_points": 100},
        "views": {"leaderboard_size": 5},
        "auth": {
            "secret_env": "DOUBTDESK_JWT_SECRET",
            "token_ttl_minutes": 60,
            "algorithm": "HS256",
        },
        "server": {
            "host": "127.0.0.1",
            "port": 3000,
            "cors_origins": ["*"],
        },
        "logging": {"level": "info"},
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    db_data = data.get("database") or {}
    rewards_data = data.get("rewards") or {}
    views_data = data.get("views") or {}
    auth_data = data.get("auth") or {}
    server_data = data.get("server") or {}
    logging_data = data.get("logging") or {}

    return AppConfig(
        database=DatabaseConfig(path=db_data.get("path", "db/doubtdesk.db")),
        rewards=RewardsConfig(
            practice_correct_points=int(
                rewards_data.get("practice_correct_points", 100)
            ),
        ),
        views=ViewsConfig(
            leaderboard_size=int(views_data.get("leaderboard_size", 5)),
        ),
        auth=AuthConfig(
            secret_env=auth_data.get("secret_env", "DOUBTDESK_JWT_SECRET"),
            token_ttl_minutes=int(auth_data.get("token_ttl_minutes", 60)),
            algorithm=auth_data.get("algorithm", "HS256"),
        ),
        server=ServerConfig(
            host=server_data.get("host", "127.0.0.1"),
            port=int(server_data.get("port", 3000)),
            cors_origins=list(server_data.get("cors_origins", ["*"])),
        ),
        log_level=str(logging_data.get("level", "info")),
    )


def _config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    return Path(override) if override else CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]
    config_path = _config_path()

    if config_path.exists():
        logger.debug("loading_app_config", source=str(config_path))
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
