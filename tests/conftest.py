"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the shapechanger test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from shapechanger.core.config import Settings
from shapechanger.models import (
    Ability,
    CharacterRecord,
    EquipmentItem,
    EquipmentType,
    FeatItem,
    Size,
)
from shapechanger.storage.store import InMemoryCharacterStore


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from shapechanger.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings isolated from any .env file in the working directory."""
    monkeypatch.chdir(tmp_path)
    return Settings(flag_key="shapechanger")


# =============================================================================
# Character Fixtures
# =============================================================================


def make_character(
    *,
    actor_id: str = "actor-1",
    name: str = "Valeros",
    size: Size = Size.MEDIUM,
    armor: int = 4,
    shield: int = 2,
    **extra: Any,
) -> CharacterRecord:
    """Build a character with one armor and one shield item.

    Args:
        actor_id: Character id.
        name: Display name.
        size: Starting size.
        armor: Armor item rating.
        shield: Shield item rating.
        **extra: Further CharacterRecord fields.

    Returns:
        The character record.
    """
    items: list[Any] = [
        EquipmentItem(
            id="armor-1",
            name="Chain Shirt",
            equipment_type=EquipmentType.ARMOR,
            armor_value=armor,
        ),
        EquipmentItem(
            id="shield-1",
            name="Heavy Wooden Shield",
            equipment_type=EquipmentType.SHIELD,
            armor_value=shield,
        ),
        EquipmentItem(id="rope-1", name="Silk Rope"),
    ]
    items += extra.pop("items", [])
    data: dict[str, Any] = {
        "id": actor_id,
        "name": name,
        "owner": "player-1",
        "abilities": {Ability.STR: 16, Ability.DEX: 14, Ability.CON: 14},
        "traits": {"size": size},
        "items": items,
    }
    data.update(extra)
    return CharacterRecord.model_validate(data)


@pytest.fixture
def actor() -> CharacterRecord:
    """A medium fighter with armor and a shield."""
    return make_character()


@pytest.fixture
def tiny_actor() -> CharacterRecord:
    """A tiny character whose armor ratings are already halved."""
    return make_character(actor_id="actor-tiny", name="Pip", size=Size.TINY, armor=4, shield=1)


@pytest.fixture
def finesse_actor() -> CharacterRecord:
    """A dexterous character with Weapon Finesse."""
    return make_character(
        actor_id="actor-finesse",
        name="Seelah",
        abilities={Ability.STR: 12, Ability.DEX: 18},
        items=[FeatItem(id="feat-1", name="Weapon Finesse")],
    )


@pytest.fixture
def store(actor: CharacterRecord, tiny_actor: CharacterRecord) -> InMemoryCharacterStore:
    """An in-memory store holding the sample characters."""
    return InMemoryCharacterStore([actor, tiny_actor])


# =============================================================================
# Collaborator Fixtures
# =============================================================================


class RecordingNotifier:
    """Notifier that keeps every message for assertions."""

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.infos: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def info(self, message: str) -> None:
        self.infos.append(message)


@pytest.fixture
def notifier() -> RecordingNotifier:
    """A notifier that records messages."""
    return RecordingNotifier()


@pytest.fixture
def character_factory() -> Any:
    """The make_character builder, for tests that need custom characters."""
    return make_character
