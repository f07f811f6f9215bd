# Tests for config.py: sources, environment lookup, caching.
# Created: 2026-10-19

import json

import pytest

from spotauth.config import (
    DEFAULT_ACCOUNTS_URL,
    DEFAULT_CALLBACK_URL,
    EnvironmentConfig,
    Settings,
    get_config_dir,
    get_config_path,
    get_settings,
)
from spotauth.errors import ConfigurationError, UnknownEnvironmentError


def _write_config(config_dir, data):
    (config_dir / "config.json").write_text(json.dumps(data))


class TestConfigPaths:
    def test_override_from_env(self, isolated_config):
        assert get_config_dir() == isolated_config
        assert get_config_path() == isolated_config / "config.json"

    def test_default_location(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SPOTAUTH_CONFIG_DIR")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / ".spotauth"


class TestSettingsSources:
    def test_defaults(self):
        settings = Settings.load()
        assert settings.default_environment == "default"
        assert settings.callback_url == DEFAULT_CALLBACK_URL
        assert settings.accounts_url == DEFAULT_ACCOUNTS_URL
        assert settings.scopes == []
        assert settings.environments == {}

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_CLIENT_ID", "env-id")
        monkeypatch.setenv("SPOTAUTH_SCOPES", "user-read-email playlist-read-private")
        settings = Settings.load()
        assert settings.client_id == "env-id"
        assert settings.scopes == ["user-read-email", "playlist-read-private"]

    def test_comma_separated_scopes(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_SCOPES", "a,b")
        assert Settings.load().scopes == ["a", "b"]

    def test_config_file(self, isolated_config):
        _write_config(
            isolated_config,
            {
                "client_id": "file-id",
                "environments": {
                    "prod": {
                        "client_id": "prod-id",
                        "client_secret": "prod-secret",
                        "callback_url": "http://localhost:9000/cb",
                        "scopes": ["user-read-email"],
                    }
                },
            },
        )
        settings = Settings.load()
        assert settings.client_id == "file-id"
        prod = settings.environments["prod"]
        assert isinstance(prod, EnvironmentConfig)
        assert prod.client_secret == "prod-secret"
        assert prod.callback_url == "http://localhost:9000/cb"

    def test_env_overrides_file(self, isolated_config, monkeypatch):
        _write_config(isolated_config, {"client_id": "file-id"})
        monkeypatch.setenv("SPOTAUTH_CLIENT_ID", "env-id")
        assert Settings.load().client_id == "env-id"

    def test_dotenv_file(self, isolated_config):
        (isolated_config / ".env").write_text("SPOTAUTH_CLIENT_ID=dotenv-id\n")
        assert Settings.load().client_id == "dotenv-id"

    def test_malformed_config_file(self, isolated_config):
        (isolated_config / "config.json").write_text("{not json")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            Settings.load()

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_HTTP_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            Settings.load()

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_LOG_LEVEL", "debug")
        assert Settings.load().log_level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigurationError):
            Settings.load()


class TestGetEnvironment:
    def test_default_from_top_level_fields(self):
        settings = Settings(
            client_id="cid",
            client_secret="secret",
            scopes=["a"],
            http_timeout=5.0,
        )
        env = settings.get_environment()
        assert env.client_id == "cid"
        assert env.client_secret == "secret"
        assert env.scopes == ["a"]
        assert env.callback_url == DEFAULT_CALLBACK_URL
        assert env.http_timeout == 5.0
        assert env.token_url == "https://accounts.spotify.com/api/token"

    def test_named(self):
        settings = Settings(environments={"dev": {"client_id": "dev-id"}})
        assert settings.get_environment("dev").client_id == "dev-id"

    def test_named_inherits_top_level_timeout(self):
        settings = Settings(
            http_timeout=3.0,
            environments={"dev": {"client_id": "dev-id"}},
        )
        assert settings.get_environment("dev").http_timeout == 3.0
        assert settings.environments["dev"].http_timeout == 15.0

    def test_named_keeps_own_timeout(self):
        settings = Settings(
            http_timeout=3.0,
            environments={"dev": {"client_id": "dev-id", "http_timeout": 30}},
        )
        assert settings.get_environment("dev").http_timeout == 30.0

    def test_named_inherits_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("SPOTAUTH_HTTP_TIMEOUT", "4")
        settings = Settings(environments={"dev": {"client_id": "dev-id"}})
        assert settings.get_environment("dev").http_timeout == 4.0

    def test_named_default_entry_wins(self):
        settings = Settings(
            client_id="top",
            environments={"default": {"client_id": "entry"}},
        )
        assert settings.get_environment().client_id == "entry"

    def test_configured_default_environment(self):
        settings = Settings(
            default_environment="dev",
            environments={"dev": {"client_id": "dev-id"}},
        )
        assert settings.get_environment().client_id == "dev-id"

    def test_unknown(self):
        with pytest.raises(UnknownEnvironmentError, match="staging"):
            Settings(client_id="cid").get_environment("staging")

    def test_missing_client_id(self):
        with pytest.raises(ConfigurationError, match="client_id"):
            Settings().get_environment()


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("SPOTAUTH_CLIENT_ID", "first")
    first = get_settings()
    monkeypatch.setenv("SPOTAUTH_CLIENT_ID", "second")
    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings().client_id == "second"
