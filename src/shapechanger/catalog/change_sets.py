"""Ability score and natural armor change sets.

Polymorph spells grant changes keyed by the form's family and size, on top
of a base-size adjustment when the caster is not medium. Size-change buffs
carry a fixed change list and a size rule.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from shapechanger.core import constants
from shapechanger.core.exceptions import CatalogError
from shapechanger.models.changes import ChangeRecord
from shapechanger.models.enums import Ability, FormFamily, Size, SpellKind
from shapechanger.models.forms import DamageReduction


def _changes(
    *,
    str_: int = 0,
    dex: int = 0,
    con: int = 0,
    nac: int = 0,
    modifier: str = "size",
) -> tuple[ChangeRecord, ...]:
    """Build a change list, skipping zero entries.

    Ability changes come first in str, dex, con order, natural armor last.
    """
    records = [
        ChangeRecord.ability_change(ability, value, modifier=modifier)
        for ability, value in ((Ability.STR, str_), (Ability.DEX, dex), (Ability.CON, con))
        if value
    ]
    if nac:
        records.append(ChangeRecord.natural_armor(nac))
    return tuple(records)


# =============================================================================
# Polymorph Change Sets
# =============================================================================


POLYMORPH_CHANGES: dict[tuple[SpellKind, FormFamily, Size], tuple[ChangeRecord, ...]] = {
    # Beast shape: animals
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.DIMINUTIVE): _changes(str_=-4, dex=6, nac=1),
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.TINY): _changes(str_=-2, dex=4, nac=1),
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.SMALL): _changes(dex=2, nac=1),
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.MEDIUM): _changes(str_=2, nac=2),
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.LARGE): _changes(str_=4, dex=-2, nac=4),
    (SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.HUGE): _changes(str_=6, dex=-4, nac=6),
    # Beast shape: magical beasts
    (SpellKind.BEAST_SHAPE, FormFamily.MAGICAL_BEAST, Size.TINY): _changes(str_=-2, dex=8, nac=3),
    (SpellKind.BEAST_SHAPE, FormFamily.MAGICAL_BEAST, Size.SMALL): _changes(dex=4, nac=2),
    (SpellKind.BEAST_SHAPE, FormFamily.MAGICAL_BEAST, Size.MEDIUM): _changes(str_=4, nac=4),
    (SpellKind.BEAST_SHAPE, FormFamily.MAGICAL_BEAST, Size.LARGE): _changes(
        str_=6, dex=-2, con=2, nac=6
    ),
    # Elemental body
    (SpellKind.ELEMENTAL_BODY, FormFamily.AIR, Size.SMALL): _changes(dex=2, nac=2),
    (SpellKind.ELEMENTAL_BODY, FormFamily.AIR, Size.MEDIUM): _changes(dex=4, nac=3),
    (SpellKind.ELEMENTAL_BODY, FormFamily.AIR, Size.LARGE): _changes(str_=2, dex=4, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.AIR, Size.HUGE): _changes(str_=4, dex=6, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.EARTH, Size.SMALL): _changes(str_=2, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.EARTH, Size.MEDIUM): _changes(str_=4, nac=5),
    (SpellKind.ELEMENTAL_BODY, FormFamily.EARTH, Size.LARGE): _changes(
        str_=6, dex=-2, con=2, nac=6
    ),
    (SpellKind.ELEMENTAL_BODY, FormFamily.EARTH, Size.HUGE): _changes(
        str_=8, dex=-2, con=4, nac=6
    ),
    (SpellKind.ELEMENTAL_BODY, FormFamily.FIRE, Size.SMALL): _changes(dex=2, nac=2),
    (SpellKind.ELEMENTAL_BODY, FormFamily.FIRE, Size.MEDIUM): _changes(dex=4, nac=3),
    (SpellKind.ELEMENTAL_BODY, FormFamily.FIRE, Size.LARGE): _changes(dex=4, con=2, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.FIRE, Size.HUGE): _changes(dex=6, con=4, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.WATER, Size.SMALL): _changes(con=2, nac=4),
    (SpellKind.ELEMENTAL_BODY, FormFamily.WATER, Size.MEDIUM): _changes(con=4, nac=5),
    (SpellKind.ELEMENTAL_BODY, FormFamily.WATER, Size.LARGE): _changes(
        str_=2, dex=-2, con=6, nac=6
    ),
    (SpellKind.ELEMENTAL_BODY, FormFamily.WATER, Size.HUGE): _changes(
        str_=4, dex=-2, con=8, nac=6
    ),
    # Plant shape
    (SpellKind.PLANT_SHAPE, FormFamily.PLANT, Size.SMALL): _changes(con=2, nac=2),
    (SpellKind.PLANT_SHAPE, FormFamily.PLANT, Size.MEDIUM): _changes(str_=2, con=2, nac=2),
    (SpellKind.PLANT_SHAPE, FormFamily.PLANT, Size.LARGE): _changes(str_=4, con=2, nac=4),
    (SpellKind.PLANT_SHAPE, FormFamily.PLANT, Size.HUGE): _changes(str_=8, dex=-2, con=4, nac=6),
}


# Polymorph change sets assume a medium caster; other sizes first shift
# their physical scores to the medium baseline.
BASE_SIZE_ADJUSTMENTS: dict[Size, tuple[ChangeRecord, ...]] = {
    Size.FINE: _changes(str_=10, dex=-8, con=2, modifier="untyped"),
    Size.DIMINUTIVE: _changes(str_=10, dex=-6, con=2, modifier="untyped"),
    Size.TINY: _changes(str_=8, dex=-4, con=2, modifier="untyped"),
    Size.SMALL: _changes(str_=4, dex=-2, con=2, modifier="untyped"),
    Size.LARGE: _changes(str_=-8, dex=2, con=-4, modifier="untyped"),
    Size.HUGE: _changes(str_=-16, dex=4, con=-8, modifier="untyped"),
    Size.GARGANTUAN: _changes(str_=-24, dex=6, con=-12, modifier="untyped"),
    Size.COLOSSAL: _changes(str_=-32, dex=8, con=-16, modifier="untyped"),
}


def polymorph_changes(kind: SpellKind, family: FormFamily, size: Size) -> tuple[ChangeRecord, ...]:
    """Look up the change set a polymorph spell grants for a form.

    Raises:
        CatalogError: If the spell has no change set for that family and size.
    """
    try:
        return POLYMORPH_CHANGES[(kind, family, size)]
    except KeyError:
        raise CatalogError(
            f"{kind.display_name} has no change set for a {size.value} {family.value} form",
            field_name="size",
            invalid_value=size.value,
        ) from None


def base_size_adjustment(size: Size) -> tuple[ChangeRecord, ...]:
    """Base-size correction for a caster of ``size``; empty when medium."""
    return BASE_SIZE_ADJUSTMENTS.get(size, ())


# =============================================================================
# Size-Change Buffs
# =============================================================================


class BuffDefinition(BaseModel):
    """A fixed size-change buff.

    Exactly one of ``size_steps`` or ``absolute_size`` is set.

    Attributes:
        kind: Spell kind.
        name: Buff and source name.
        img: Buff icon.
        changes: Stat changes the buff carries.
        size_steps: Relative size change.
        absolute_size: Size the buff sets regardless of current size.
        damage_reduction: DR appended to the character's DR text.
    """

    model_config = ConfigDict(frozen=True)

    kind: SpellKind
    name: str
    img: str
    changes: tuple[ChangeRecord, ...]
    size_steps: int = 0
    absolute_size: Size | None = None
    damage_reduction: DamageReduction | None = None


BUFFS: dict[SpellKind, BuffDefinition] = {
    SpellKind.ENLARGE_PERSON: BuffDefinition(
        kind=SpellKind.ENLARGE_PERSON,
        name="Enlarge Person",
        img=constants.ICON_ENLARGE_PERSON,
        changes=_changes(str_=2, dex=-2),
        size_steps=1,
    ),
    SpellKind.REDUCE_PERSON: BuffDefinition(
        kind=SpellKind.REDUCE_PERSON,
        name="Reduce Person",
        img=constants.ICON_REDUCE_PERSON,
        changes=_changes(str_=-2, dex=2),
        size_steps=-1,
    ),
    SpellKind.ANIMAL_GROWTH: BuffDefinition(
        kind=SpellKind.ANIMAL_GROWTH,
        name="Animal Growth",
        img=constants.ICON_ANIMAL_GROWTH,
        changes=_changes(str_=8, dex=-2, con=4, nac=2),
        size_steps=1,
        damage_reduction=DamageReduction(amount=10, bypass="magic"),
    ),
    SpellKind.LEGENDARY_PROPORTIONS: BuffDefinition(
        kind=SpellKind.LEGENDARY_PROPORTIONS,
        name="Legendary Proportions",
        img=constants.ICON_LEGENDARY_PROPORTIONS,
        changes=_changes(str_=6, con=4, nac=2),
        size_steps=1,
        damage_reduction=DamageReduction(amount=10, bypass="adamantine"),
    ),
    SpellKind.FRIGHTFUL_ASPECT: BuffDefinition(
        kind=SpellKind.FRIGHTFUL_ASPECT,
        name="Frightful Aspect",
        img=constants.ICON_FRIGHTFUL_ASPECT,
        changes=_changes(str_=6, con=4, nac=6),
        absolute_size=Size.LARGE,
        damage_reduction=DamageReduction(amount=10, bypass="magic"),
    ),
}


def buff_definition(kind: SpellKind) -> BuffDefinition:
    """Look up a size-change buff.

    Raises:
        CatalogError: If ``kind`` is not a size-change buff.
    """
    try:
        return BUFFS[kind]
    except KeyError:
        raise CatalogError(
            f"{kind.display_name} is not a size-change buff",
            field_name="kind",
            invalid_value=kind.value,
        ) from None


__all__ = [
    "POLYMORPH_CHANGES",
    "BASE_SIZE_ADJUSTMENTS",
    "BuffDefinition",
    "BUFFS",
    "polymorph_changes",
    "base_size_adjustment",
    "buff_definition",
]
