"""Transformation requests and the plans built from them.

A request says what the user asked for: a spell kind plus that kind's
configuration. Requests are a discriminated union on ``kind`` so one entry
point can dispatch every effect.

A plan is what the applier executes: the change list, new size, attack
items and document overrides, already resolved against one character.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from shapechanger.models.changes import ChangeRecord
from shapechanger.models.character import AttackItem
from shapechanger.models.enums import Size, SpellKind


# =============================================================================
# Requests
# =============================================================================


class PolymorphRequest(BaseModel):
    """Take the shape of a catalog form.

    Attributes:
        kind: Beast shape, elemental body or plant shape.
        level: Spell level (1-4, or 1-3 for plant shape).
        form_name: Catalog name of the chosen form.
        source: Effect name shown on the buff; defaults to the spell name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[SpellKind.BEAST_SHAPE, SpellKind.ELEMENTAL_BODY, SpellKind.PLANT_SHAPE]
    level: int = Field(ge=1, le=4)
    form_name: str = Field(min_length=1)
    source: str | None = None


class SizeBuffRequest(BaseModel):
    """Apply a fixed size-change buff."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[
        SpellKind.ENLARGE_PERSON,
        SpellKind.REDUCE_PERSON,
        SpellKind.ANIMAL_GROWTH,
        SpellKind.LEGENDARY_PROPORTIONS,
    ]
    source: str | None = None


class FrightfulAspectRequest(BaseModel):
    """Apply frightful aspect, which scales with caster level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[SpellKind.FRIGHTFUL_ASPECT] = SpellKind.FRIGHTFUL_ASPECT
    caster_level: int = Field(ge=1)
    source: str | None = None


TransformationRequest = Annotated[
    PolymorphRequest | SizeBuffRequest | FrightfulAspectRequest,
    Field(discriminator="kind"),
]


# =============================================================================
# Plans
# =============================================================================


class TransformationPlan(BaseModel):
    """Resolved writes for one transformation.

    Attributes:
        kind: Spell kind being applied.
        source: Effect source name.
        buff_name: Name of the buff that carries the changes.
        buff_img: Icon for a newly created buff.
        changes: Stat changes, without carry compensation.
        new_size: Size after the transformation.
        attacks: Attack items to create.
        overrides: Dotted document paths to overwrite, with new values.
        preview_text: Human-readable summary, if one was built.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: SpellKind
    source: str = Field(min_length=1)
    buff_name: str = Field(min_length=1)
    buff_img: str = ""
    changes: tuple[ChangeRecord, ...] = Field(default=())
    new_size: Size
    attacks: tuple[AttackItem, ...] = Field(default=())
    overrides: dict[str, Any] = Field(default_factory=dict)
    preview_text: str = ""


__all__ = [
    "PolymorphRequest",
    "SizeBuffRequest",
    "FrightfulAspectRequest",
    "TransformationRequest",
    "TransformationPlan",
]
