"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import (
    AudioConstants,
    LogLevels,
    ProviderConstants,
    ResolverConstants,
)
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    CommandPrefixStr,
    RetryCount,
    SocketTimeoutSeconds,
    VolumeFloat,
)
from ..domain.shared.validators import validate_snowflake_list


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        return tuple(validate_snowflake_list(list(v)))


class ResolverSettings(BaseModel):
    """Media tool invocation and per-strategy budgets."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    executable: str = Field(
        default=ResolverConstants.EXECUTABLE,
        min_length=1,
        validation_alias=AliasChoices("executable", "ytdlp_path"),
    )
    format_filter: str = Field(
        default=ResolverConstants.FORMAT_DEFAULT,
        validation_alias=AliasChoices("format_filter", "ytdlp_format"),
    )
    search_prefix: str = ProviderConstants.SEARCH_PREFIX

    direct_retries: RetryCount = ResolverConstants.DIRECT_RETRIES
    direct_socket_timeout: SocketTimeoutSeconds = ResolverConstants.DIRECT_SOCKET_TIMEOUT

    fast_extractor_variant: str = ResolverConstants.FAST_EXTRACTOR_VARIANT
    fast_socket_timeout: SocketTimeoutSeconds = ResolverConstants.FAST_SOCKET_TIMEOUT

    robust_retries: RetryCount = ResolverConstants.ROBUST_RETRIES
    robust_fragment_retries: RetryCount = ResolverConstants.ROBUST_FRAGMENT_RETRIES
    robust_socket_timeout: SocketTimeoutSeconds = ResolverConstants.ROBUST_SOCKET_TIMEOUT

    search_retries: RetryCount = ResolverConstants.SEARCH_RETRIES
    search_socket_timeout: SocketTimeoutSeconds = ResolverConstants.SEARCH_SOCKET_TIMEOUT

    primary_hosts: tuple[str, ...] = ProviderConstants.YOUTUBE_HOSTS
    alternate_hosts: tuple[str, ...] = Field(
        default=ProviderConstants.SOUNDCLOUD_HOSTS,
        validation_alias=AliasChoices("alternate_hosts", "soundcloud_hosts"),
    )

    @field_validator("primary_hosts", "alternate_hosts", mode="before")
    @classmethod
    def normalize_hosts(cls, v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
        """Accept a comma-separated string or a list and lower-case every host."""
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        return tuple(host.strip().lower() for host in v)


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_volume: VolumeFloat = AudioConstants.DEFAULT_VOLUME
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT,
            "options": AudioConstants.FFMPEG_OPTIONS_DEFAULT,
        }
    )
    connect_timeout_seconds: float = Field(
        default=AudioConstants.CONNECT_TIMEOUT_SECONDS,
        gt=0.0,
        le=120.0,
        validation_alias=AliasChoices("connect_timeout_seconds", "connect_timeout"),
    )


class Settings(BaseSettings):
    """Application settings container.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD_TOKEN (top-level shortcut) or DISCORD__TOKEN
    - DISCORD__COMMAND_PREFIX, RESOLVER__SEARCH_RETRIES, AUDIO__DEFAULT_VOLUME, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = LogLevels.INFO

    discord_token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("discord_token")
    )

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        }
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper

    @property
    def bot_token(self) -> str:
        """Nested DISCORD__TOKEN wins over the DISCORD_TOKEN shortcut."""
        return self.discord.token.get_secret_value() or self.discord_token.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
