"""The revert record stored on a transformed character.

An EffectSnapshot captures everything needed to undo one transformation.
It is stored as a single blob under ``flags[<flag key>]``; the presence of
that key is the only signal that a character is transformed.

Serialized layout::

    {
        "source": "Beast Shape",
        "buffName": "Beast Shape",
        "kind": "beast_shape",
        "size": "medium",
        "armor": [{"itemId": "...", "originalArmorRating": 4}],
        "data": {"traits.dr": "", "token.img": "tokens/valeros.png"},
        "itemsCreated": ["..."]
    }

``data`` maps dotted document paths to the values they held before the
transformation overwrote them, so a revert is a single patch.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shapechanger.models.enums import EffectCategory, Size, SpellKind


class ArmorRecord(BaseModel):
    """Original rating of one rescaled armor or shield item."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    item_id: str = Field(alias="itemId", min_length=1)
    original_armor_rating: int = Field(alias="originalArmorRating", ge=0)


class EffectSnapshot(BaseModel):
    """Everything needed to revert one transformation.

    Attributes:
        source: Effect source name, shown in warnings.
        buff_name: Name of the buff item carrying the changes.
        kind: Spell kind applied; selects the revert policy.
        size: Size before the transformation.
        armor: Original ratings of rescaled armor and shields.
        data: Original values of overwritten document paths.
        items_created: Ids of items the transformation created.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    source: str = Field(min_length=1)
    buff_name: str = Field(alias="buffName", min_length=1)
    kind: SpellKind
    size: Size
    armor: tuple[ArmorRecord, ...] = Field(default=())
    data: dict[str, Any] = Field(default_factory=dict)
    items_created: tuple[str, ...] = Field(default=(), alias="itemsCreated")

    @property
    def category(self) -> EffectCategory:
        return self.kind.category

    def to_flag(self) -> dict[str, Any]:
        """Serialize for storage under the flag key."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "ArmorRecord",
    "EffectSnapshot",
]
