"""shapechanger - Shapeshifting effects for Pathfinder 1e style characters.

Applies polymorph spells (beast shape, elemental body, plant shape) and
size-change buffs (enlarge person, reduce person, animal growth, legendary
proportions, frightful aspect) to a character, and reverts them later.

ARCHITECTURE:
- The catalog is static data validated at import
- Planning is pure: form + spell level + character -> TransformationPlan
- Only the applier and revert write to the CharacterStore
- A snapshot flag on the character is the single record of a transformation

Example:
    >>> from shapechanger import InMemoryCharacterStore, ShapechangerService
    >>>
    >>> store = InMemoryCharacterStore([actor])
    >>> service = ShapechangerService(store, selection=lambda: [actor])
    >>>
    >>> result = await service.beast_shape(1, "Wolf")
    >>> print(result.preview_text)
    >>> await service.revert()

Modules:
    core: Configuration, logging, exceptions and display text.
    models: Pydantic V2 schemas for forms, characters and snapshots.
    catalog: Form catalog, change sets and per-level gating tables.
    engine: Resolution, attack synthesis, apply and revert.
    storage: CharacterStore interface, in-memory and SQLite stores, images.
    service: Selection-aware facade with one entry point per spell.
"""

from __future__ import annotations

# Core
from shapechanger.core.config import Settings, get_settings
from shapechanger.core.exceptions import ShapechangerError
from shapechanger.core.logging import configure_logging, get_logger

# Models
from shapechanger.models import (
    CharacterRecord,
    EffectSnapshot,
    FormDefinition,
    Size,
    SpellKind,
    TransformationPlan,
)

# Catalog & engine
from shapechanger.catalog import FORMS, get_form
from shapechanger.engine import (
    apply_transformation,
    buff_plan,
    filter_catalog,
    polymorph_plan,
    resolve_changes,
    revert,
)

# Storage & service
from shapechanger.storage import InMemoryCharacterStore, SQLiteCharacterStore
from shapechanger.service import OperationResult, ShapechangerService


__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "get_settings",
    "ShapechangerError",
    "configure_logging",
    "get_logger",
    # Models
    "CharacterRecord",
    "EffectSnapshot",
    "FormDefinition",
    "Size",
    "SpellKind",
    "TransformationPlan",
    # Catalog & engine
    "FORMS",
    "get_form",
    "filter_catalog",
    "resolve_changes",
    "polymorph_plan",
    "buff_plan",
    "apply_transformation",
    "revert",
    # Storage & service
    "InMemoryCharacterStore",
    "SQLiteCharacterStore",
    "ShapechangerService",
    "OperationResult",
    "__version__",
]
