"""Configuration management for the shapechanger engine.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.

Example:
    >>> from shapechanger.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.flag_key)
    'shapechanger'

Environment Variables:
    SHAPECHANGER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SHAPECHANGER_JSON_LOGS: Emit JSON log lines instead of console output
    SHAPECHANGER_FLAG_KEY: Flag key the transformation snapshot is stored under
    SHAPECHANGER_IMAGE_PATH: Folder searched for form token images
    SHAPECHANGER_DATABASE_PATH: Path to the SQLite character database
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shapechanger.core.exceptions import ConfigurationError


class ImageSettings(BaseSettings):
    """Configuration for token image lookup.

    Attributes:
        image_path: Folder to search for images named after forms. None
            disables token image switching.
        extensions: File extensions accepted as images.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHAPECHANGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    image_path: Path | None = Field(
        default=None,
        description="Folder searched for form token images",
    )
    extensions: tuple[str, ...] = Field(
        default=("apng", "avif", "bmp", "gif", "jpeg", "jpg", "png", "svg", "tiff", "webp"),
        description="Image file extensions",
    )

    @field_validator("extensions", mode="after")
    @classmethod
    def normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Strip leading dots and lowercase the extension list.

        Raises:
            ConfigurationError: If the list is empty.
        """
        normalized = tuple(ext.lower().lstrip(".") for ext in value if ext.strip())
        if not normalized:
            raise ConfigurationError(
                "At least one image extension must be configured",
                config_key="extensions",
            )
        return normalized


class StorageSettings(BaseSettings):
    """Configuration for character persistence.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHAPECHANGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/shapechanger.db"),
        description="Path to SQLite database",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        log_level: Application logging level.
        json_logs: Emit JSON logs for production.
        flag_key: Character flag key holding the transformation snapshot.
        save_dc: Saving throw DC written on every special effect with a save.
        default_attack_icon: Icon used when an attack name has no icon entry.
        images: Token image lookup settings.
        storage: Persistence settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHAPECHANGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="shapechanger", description="Application name")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")
    flag_key: str = Field(
        default="shapechanger",
        min_length=1,
        description="Flag key for the transformation snapshot",
    )
    save_dc: str = Field(default="10", description="Fixed save DC for special effects")
    default_attack_icon: str = Field(
        default="systems/pf1/icons/items/inventory/monster-paw-bear.jpg",
        description="Fallback natural attack icon",
    )

    images: ImageSettings = Field(default_factory=ImageSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("flag_key", mode="after")
    @classmethod
    def validate_flag_key(cls, value: str) -> str:
        """Reject flag keys that would collide with patch path syntax.

        Raises:
            ConfigurationError: If the key contains a dot.
        """
        if "." in value:
            raise ConfigurationError(
                f"flag_key may not contain '.': {value!r}",
                config_key="flag_key",
            )
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "ImageSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
