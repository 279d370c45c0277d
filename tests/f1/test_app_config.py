"""Tests for app configuration (F1).

Tests the configuration loading, defaults and caching.
"""

from doubtdesk.config.app_config import (
    AppConfig,
    AuthConfig,
    clear_config_cache,
    load_app_config,
)


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_defaults_without_file(self):
        """Falls back to defaults when no config file exists."""
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.rewards.practice_correct_points == 100
        assert config.views.leaderboard_size == 5
        assert config.database.path == "db/doubtdesk.db"
        assert config.server.port == 3000

    def test_loads_yaml_file(self, tmp_path):
        """Reads data/config/app_config_v1.yaml relative to the cwd."""
        config_dir = tmp_path / "data" / "config"
        config_dir.mkdir(parents=True)
        (config_dir / "app_config_v1.yaml").write_text(
            "rewards:\n  practice_correct_points: 50\n"
            "views:\n  leaderboard_size: 3\n"
        )

        config = load_app_config(force_reload=True)
        assert config.rewards.practice_correct_points == 50
        assert config.views.leaderboard_size == 3
        # Unspecified sections keep defaults
        assert config.server.host == "127.0.0.1"

    def test_env_override_path(self, tmp_path, monkeypatch):
        """DOUBTDESK_CONFIG points at another file."""
        custom = tmp_path / "custom.yaml"
        custom.write_text("database:\n  path: other/place.db\n")
        monkeypatch.setenv("DOUBTDESK_CONFIG", str(custom))

        config = load_app_config(force_reload=True)
        assert config.database.path == "other/place.db"

    def test_empty_file_uses_defaults(self, tmp_path):
        config_dir = tmp_path / "data" / "config"
        config_dir.mkdir(parents=True)
        (config_dir / "app_config_v1.yaml").write_text("")

        config = load_app_config(force_reload=True)
        assert config.rewards.practice_correct_points == 100

    def test_config_is_cached(self):
        first = load_app_config()
        second = load_app_config()
        assert first is second

    def test_clear_cache_reloads(self):
        first = load_app_config()
        clear_config_cache()
        second = load_app_config()
        assert first is not second


class TestAuthConfig:
    def test_secret_from_env(self, monkeypatch):
        monkeypatch.setenv("MY_SECRET", "s3cr3t")
        auth = AuthConfig(secret_env="MY_SECRET")
        assert auth.get_secret() == "s3cr3t"

    def test_secret_fallback(self, monkeypatch):
        monkeypatch.delenv("MISSING_SECRET", raising=False)
        auth = AuthConfig(secret_env="MISSING_SECRET")
        assert auth.get_secret()
