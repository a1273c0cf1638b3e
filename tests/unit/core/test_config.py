"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from shapechanger.core.config import (
    ImageSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from shapechanger.core.exceptions import ConfigurationError


class TestImageSettings:
    """Tests for ImageSettings configuration."""

    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Image switching is off until a folder is configured."""
        monkeypatch.chdir(tmp_path)

        settings = ImageSettings()

        assert settings.image_path is None
        assert "png" in settings.extensions
        assert "webp" in settings.extensions

    def test_extensions_normalized(self) -> None:
        """Leading dots and case are stripped from extensions."""
        settings = ImageSettings(extensions=(".PNG", "Jpg", "  "))

        assert settings.extensions == ("png", "jpg")

    def test_empty_extensions_rejected(self) -> None:
        """An empty extension list is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            ImageSettings(extensions=())

        assert exc_info.value.details["config_key"] == "extensions"

    def test_image_path_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The image folder is read from SHAPECHANGER_IMAGE_PATH."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHAPECHANGER_IMAGE_PATH", str(tmp_path))

        assert Settings().images.image_path == tmp_path


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_default_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default database path."""
        monkeypatch.chdir(tmp_path)

        settings = StorageSettings()

        assert settings.database_path == Path("data/shapechanger.db")

    def test_custom_path(self, tmp_path: Path) -> None:
        """Test a custom database path."""
        settings = StorageSettings(database_path=tmp_path / "chars.db")

        assert settings.database_path == tmp_path / "chars.db"


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "shapechanger"
        assert settings.log_level == "INFO"
        assert settings.json_logs is False
        assert settings.flag_key == "shapechanger"
        assert settings.save_dc == "10"
        assert settings.default_attack_icon

    def test_flag_key_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the flag key can be overridden from the environment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHAPECHANGER_FLAG_KEY", "polymorph")

        assert Settings().flag_key == "polymorph"

    def test_dotted_flag_key_rejected(self) -> None:
        """A dotted flag key would break patch paths."""
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(flag_key="shape.changer")

        assert "flag_key" in str(exc_info.value)


class TestSettingsCache:
    """Tests for the settings singleton."""

    def test_get_settings_cached(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_settings returns the same instance."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the cache can be cleared to pick up new environment."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()

        monkeypatch.setenv("SHAPECHANGER_FLAG_KEY", "changed")
        clear_settings_cache()
        second = get_settings()

        assert first is not second
        assert second.flag_key == "changed"

    def test_invalid_env_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Invalid environment values surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHAPECHANGER_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "original_error" in exc_info.value.details
