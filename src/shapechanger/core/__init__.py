"""Core module providing configuration, logging, and base exceptions.

This module serves as the foundation for the shapechanger engine,
providing infrastructure components used throughout the package.

Exports:
    Exceptions:
        ShapechangerError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.
        CatalogError: Unknown forms, tags or spell levels.
        SelectionError: Zero or several characters selected.
        AlreadyTransformedError: A snapshot is already present.
        NotTransformedError: Revert without a snapshot.
        TransformationError: Apply failed and was rolled back.
        StorageError: Character store failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.

    Localization:
        Localizer: Protocol for display-text lookup.
        DictLocalizer: Mapping-backed localizer with English defaults.
"""

from __future__ import annotations

from shapechanger.core.config import (
    ImageSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from shapechanger.core.exceptions import (
    AlreadyTransformedError,
    CatalogError,
    CharacterNotFoundError,
    ConfigurationError,
    ImageLookupError,
    NotTransformedError,
    SelectionError,
    ShapechangerError,
    StorageError,
    TransformationDomainError,
    TransformationError,
    ValidationError,
)
from shapechanger.core.i18n import DEFAULT_STRINGS, DictLocalizer, Localizer
from shapechanger.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "ShapechangerError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    "CatalogError",
    # Transformation exceptions
    "TransformationDomainError",
    "SelectionError",
    "AlreadyTransformedError",
    "NotTransformedError",
    "TransformationError",
    # Storage exceptions
    "StorageError",
    "CharacterNotFoundError",
    "ImageLookupError",
    # Configuration
    "Settings",
    "ImageSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Localization
    "Localizer",
    "DictLocalizer",
    "DEFAULT_STRINGS",
]
