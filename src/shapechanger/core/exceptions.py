"""Custom exception hierarchy for the shapechanger engine.

This module defines the exception hierarchy used across the catalog,
the transformation engine and the storage collaborators. All exceptions
inherit from ShapechangerError, enabling unified error handling at the
service boundary while preserving domain-specific context.

Example:
    >>> from shapechanger.core.exceptions import AlreadyTransformedError
    >>> raise AlreadyTransformedError("Valeros", source="Beast Shape")
"""

from __future__ import annotations

from typing import Any


class ShapechangerError(Exception):
    """Base exception for all shapechanger errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(ShapechangerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(ShapechangerError):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class CatalogError(ValidationError):
    """Raised when catalog data or a catalog lookup is invalid.

    This covers unknown form names, unknown special-ability tags and spell
    levels outside the range a spell kind defines.
    """


# =============================================================================
# Transformation Domain Exceptions
# =============================================================================


class TransformationDomainError(ShapechangerError):
    """Base exception for apply/revert errors.

    Carries the id of the character the operation targeted.
    """

    def __init__(
        self,
        message: str,
        *,
        actor_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the targeted actor.

        Args:
            message: Human-readable error description.
            actor_id: Identifier of the character involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if actor_id:
            combined_details["actor_id"] = actor_id
        super().__init__(message, details=combined_details)


class SelectionError(TransformationDomainError):
    """Raised when zero or several characters are selected.

    The engine only ever operates on exactly one character.
    """

    def __init__(self, message: str, *, selected_count: int = 0) -> None:
        """Initialize selection error.

        Args:
            message: Human-readable error description.
            selected_count: How many characters were selected.
        """
        super().__init__(message, details={"selected_count": selected_count})
        self.selected_count = selected_count


class AlreadyTransformedError(TransformationDomainError):
    """Raised when a character already carries a transformation snapshot."""

    def __init__(self, actor_name: str, *, source: str, actor_id: str | None = None) -> None:
        """Initialize with the source of the active transformation.

        Args:
            actor_name: Display name of the character.
            source: Source name recorded in the existing snapshot.
            actor_id: Identifier of the character.
        """
        super().__init__(
            f"{actor_name} is already under the effects of a change from {source}",
            actor_id=actor_id,
            details={"source": source},
        )
        self.actor_name = actor_name
        self.source = source


class NotTransformedError(TransformationDomainError):
    """Raised when reverting a character with no active transformation."""

    def __init__(self, actor_name: str, *, actor_id: str | None = None) -> None:
        """Initialize with the character name.

        Args:
            actor_name: Display name of the character.
            actor_id: Identifier of the character.
        """
        super().__init__(f"{actor_name} is not under any change effects", actor_id=actor_id)
        self.actor_name = actor_name


class TransformationError(TransformationDomainError):
    """Raised when an apply sequence fails part-way.

    By the time this is raised, the completed steps have been undone.
    """


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(ShapechangerError):
    """Raised when a character store operation fails."""


class CharacterNotFoundError(StorageError):
    """Raised when a character id is unknown to the store."""

    def __init__(self, actor_id: str) -> None:
        """Initialize with the missing id.

        Args:
            actor_id: The id that was looked up.
        """
        super().__init__(f"Character not found: {actor_id}", details={"actor_id": actor_id})
        self.actor_id = actor_id


class ImageLookupError(ShapechangerError):
    """Raised when the image folder cannot be browsed.

    Callers log this and carry on without an image change.
    """

    def __init__(
        self,
        message: str,
        *,
        directory: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the directory that failed.

        Args:
            message: Human-readable error description.
            directory: The folder being browsed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if directory:
            combined_details["directory"] = directory
        super().__init__(message, details=combined_details)


__all__ = [
    "ShapechangerError",
    "ConfigurationError",
    "ValidationError",
    "CatalogError",
    "TransformationDomainError",
    "SelectionError",
    "AlreadyTransformedError",
    "NotTransformedError",
    "TransformationError",
    "StorageError",
    "CharacterNotFoundError",
    "ImageLookupError",
]
