# Configuration: per-environment client records loaded from ~/.spotauth/config.json
# and SPOTAUTH_* environment variables.
# Created: 2026-10-19

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
)

from spotauth.errors import ConfigurationError, UnknownEnvironmentError

DEFAULT_ENVIRONMENT = "default"
DEFAULT_CALLBACK_URL = "http://127.0.0.1:8888/callback"
DEFAULT_ACCOUNTS_URL = "https://accounts.spotify.com"


def get_config_dir() -> Path:
    """Get the config directory, honouring SPOTAUTH_CONFIG_DIR."""
    override = os.environ.get("SPOTAUTH_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".spotauth"


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


def _split_scopes(value: Any) -> Any:
    if isinstance(value, str):
        return value.replace(",", " ").split()
    return value


class EnvironmentConfig(BaseModel):
    """Read-only client settings for one named environment."""

    client_id: str = ""
    client_secret: str | None = None
    callback_url: str = DEFAULT_CALLBACK_URL
    scopes: list[str] = Field(default_factory=list)
    accounts_url: str = DEFAULT_ACCOUNTS_URL
    http_timeout: float = 15.0

    @field_validator("scopes", mode="before")
    @classmethod
    def _scopes(cls, value: Any) -> Any:
        return _split_scopes(value)

    @property
    def token_url(self) -> str:
        return f"{self.accounts_url.rstrip('/')}/api/token"


class Settings(BaseSettings):
    """spotauth settings.

    Precedence: constructor arguments, SPOTAUTH_* variables, ``.env``,
    then the JSON config file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPOTAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_environment: str = DEFAULT_ENVIRONMENT
    log_level: str = "INFO"
    http_timeout: float = 15.0

    # Fields backing the "default" environment
    client_id: str = ""
    client_secret: str | None = None
    callback_url: str = DEFAULT_CALLBACK_URL
    scopes: Annotated[list[str], NoDecode] = Field(default_factory=list)
    accounts_url: str = DEFAULT_ACCOUNTS_URL

    environments: dict[str, EnvironmentConfig] = Field(default_factory=dict)

    @field_validator("scopes", mode="before")
    @classmethod
    def _scopes(cls, value: Any) -> Any:
        return _split_scopes(value)

    @field_validator("log_level")
    @classmethod
    def _log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=get_config_path()),
        )

    @classmethod
    def load(cls) -> Settings:
        """Load settings from the config file and environment.

        Raises:
            ConfigurationError: Unreadable config file or invalid value.
        """
        try:
            return cls()
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {get_config_path()}: {e}") from e
        except (ValidationError, SettingsError) as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    def get_environment(self, name: str | None = None) -> EnvironmentConfig:
        """Look up the client record for ``name``.

        ``default`` resolves to an entry of that name when one is configured,
        otherwise to the top-level fields.
        """
        name = name or self.default_environment
        if name in self.environments:
            env = self.environments[name]
            if "http_timeout" not in env.model_fields_set:
                env = env.model_copy(update={"http_timeout": self.http_timeout})
        elif name == DEFAULT_ENVIRONMENT:
            env = EnvironmentConfig(
                client_id=self.client_id,
                client_secret=self.client_secret,
                callback_url=self.callback_url,
                scopes=list(self.scopes),
                accounts_url=self.accounts_url,
                http_timeout=self.http_timeout,
            )
        else:
            raise UnknownEnvironmentError(name)

        if not env.client_id:
            raise ConfigurationError(
                f"No client_id configured for environment '{name}'. "
                f"Set SPOTAUTH_CLIENT_ID or add it to {get_config_path()}."
            )
        return env


@lru_cache
def get_settings() -> Settings:
    """Cached settings; call ``get_settings.cache_clear()`` to reload."""
    return Settings.load()
