"""Settings resolution: kwargs > GOOSECONNECT_* env vars > .env > config.toml > defaults."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from tomlkit.exceptions import TOMLKitError

from goose_connect.errors import ConfigError

CONFIG_PATH = Path.home() / ".config" / "goose-connect" / "config.toml"

DEFAULT_LABEL = "goose-running"


@lru_cache(maxsize=1)
def _load_toml() -> dict[str, Any]:
    """Load ~/.config/goose-connect/config.toml, returning an empty dict if missing."""
    if not CONFIG_PATH.exists():
        return {}
    try:
        with CONFIG_PATH.open() as f:
            return tomlkit.load(f).unwrap()
    except (OSError, TOMLKitError) as exc:
        raise ConfigError(f"failed to read config file {CONFIG_PATH}: {exc}") from exc


class TomlConfigSource(PydanticBaseSettingsSource):
    """Top-level keys of the optional config file, below env vars in precedence."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return _load_toml().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        config = _load_toml()
        return {name: config[name] for name in self.settings_cls.model_fields if name in config}


class GooseConnectSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GOOSECONNECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    port: int = 8080
    url: str = "http://localhost:8080"

    # Sessions
    base_dir: str = "$HOME/.goose-connect"
    instruction_path: str | None = None  # replaces the built-in instruction preamble
    execute_timeout: float | None = None  # seconds, None waits forever

    # Commit identity used inside the cloned repo
    git_user: str = ""
    git_mail: str = ""

    label: str = DEFAULT_LABEL
    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, dotenv_settings, TomlConfigSource(settings_cls), file_secret_settings

    @field_validator("base_dir")
    @classmethod
    def _expand_base_dir(cls, value: str) -> str:
        # Empty means "fall back to ~/.config/goose-connect" at agent construction.
        if not value:
            return value
        return os.path.expanduser(os.path.expandvars(value))

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def validate_required_values(self) -> None:
        if not self.git_user:
            raise ConfigError("git_user is required")
        if not self.git_mail:
            raise ConfigError("git_mail is required")


def load_settings(**overrides: Any) -> GooseConnectSettings:
    """Build settings from every source and check the required git identity."""
    try:
        settings = GooseConnectSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"failed to parse settings: {exc}") from exc
    settings.validate_required_values()
    return settings
