"""Per spell kind, per level allow tables.

Each polymorph spell kind has one SpellGating entry. The resolver consults
it once per category; there is no per-kind override logic anywhere else.

Conventions:
    * ``senses`` maps each allowed sense to its maximum range. None means
      the sense has no range limit (or no range at all).
    * ``speed_caps`` maps a movement mode to its ceiling. A mode absent from
      the map is uncapped; a ceiling of 0 removes the mode.
    * ``thresholds`` gives the lowest level a defensive category appears at.
      None means the spell never grants that category.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shapechanger.core.constants import RESISTANCE_CAP
from shapechanger.core.exceptions import CatalogError
from shapechanger.models.enums import (
    DefenseCategory,
    FormFamily,
    MovementMode,
    SenseKind,
    Size,
    SpecialAbility,
    SpellKind,
)


class LevelGate(BaseModel):
    """What one spell level allows."""

    model_config = ConfigDict(frozen=True)

    forms: dict[FormFamily, frozenset[Size]]
    senses: dict[SenseKind, int | None]
    specials: frozenset[SpecialAbility]
    speed_caps: dict[MovementMode, int] = Field(default_factory=dict)


class SpellGating(BaseModel):
    """Gating policy for one polymorph spell kind.

    Attributes:
        kind: The spell kind.
        levels: Allow table per spell level.
        thresholds: Minimum level per defensive category.
        elemental_resistances_only: Drop non-elemental resistances and
            vulnerabilities.
        fold_immunities: Turn elemental immunities into resistances.
        resistance_cap: Highest resistance granted, if capped.
    """

    model_config = ConfigDict(frozen=True)

    kind: SpellKind
    levels: dict[int, LevelGate]
    thresholds: dict[DefenseCategory, int | None]
    elemental_resistances_only: bool = False
    fold_immunities: bool = False
    resistance_cap: int | None = None

    @property
    def max_level(self) -> int:
        return max(self.levels)

    def gate(self, level: int) -> LevelGate:
        """Allow table for ``level``.

        Raises:
            CatalogError: If the spell has no such level.
        """
        try:
            return self.levels[level]
        except KeyError:
            raise CatalogError(
                f"{self.kind.display_name} has no level {level}",
                field_name="level",
                invalid_value=level,
            ) from None

    def allows(self, category: DefenseCategory, level: int) -> bool:
        """Whether ``category`` is granted at ``level``."""
        threshold = self.thresholds.get(category)
        return threshold is not None and level >= threshold


def _sizes(*sizes: Size) -> frozenset[Size]:
    return frozenset(sizes)


# =============================================================================
# Beast Shape
# =============================================================================


_BEAST_SENSES_1 = {
    SenseKind.LOW_LIGHT_VISION: None,
    SenseKind.DARKVISION: 60,
    SenseKind.SCENT: None,
}
_BEAST_SENSES_3 = {**_BEAST_SENSES_1, SenseKind.BLINDSENSE: 30}
_BEAST_SENSES_4 = {**_BEAST_SENSES_1, SenseKind.BLINDSENSE: 60, SenseKind.TREMORSENSE: 60}

_BEAST_SPECIALS_1 = frozenset({SpecialAbility.GRAB, SpecialAbility.POUNCE, SpecialAbility.TRIP})
_BEAST_SPECIALS_3 = _BEAST_SPECIALS_1 | {
    SpecialAbility.CONSTRICT,
    SpecialAbility.FEROCITY,
    SpecialAbility.JET,
    SpecialAbility.POISON,
    SpecialAbility.RAKE,
    SpecialAbility.TRAMPLE,
    SpecialAbility.WEB,
}
_BEAST_SPECIALS_4 = _BEAST_SPECIALS_3 | {
    SpecialAbility.BREATH_WEAPON,
    SpecialAbility.REND,
    SpecialAbility.ROAR,
    SpecialAbility.SPIKES,
}


def _beast_caps(climb: int, fly: int, swim: int, burrow: int) -> dict[MovementMode, int]:
    return {
        MovementMode.CLIMB: climb,
        MovementMode.FLY: fly,
        MovementMode.SWIM: swim,
        MovementMode.BURROW: burrow,
    }


BEAST_SHAPE = SpellGating(
    kind=SpellKind.BEAST_SHAPE,
    levels={
        1: LevelGate(
            forms={FormFamily.ANIMAL: _sizes(Size.SMALL, Size.MEDIUM)},
            senses=_BEAST_SENSES_1,
            specials=_BEAST_SPECIALS_1,
            speed_caps=_beast_caps(climb=30, fly=30, swim=30, burrow=0),
        ),
        2: LevelGate(
            forms={FormFamily.ANIMAL: _sizes(Size.TINY, Size.SMALL, Size.MEDIUM, Size.LARGE)},
            senses=_BEAST_SENSES_1,
            specials=_BEAST_SPECIALS_1,
            speed_caps=_beast_caps(climb=60, fly=60, swim=60, burrow=0),
        ),
        3: LevelGate(
            forms={
                FormFamily.ANIMAL: _sizes(
                    Size.DIMINUTIVE, Size.TINY, Size.SMALL, Size.MEDIUM, Size.LARGE, Size.HUGE
                ),
                FormFamily.MAGICAL_BEAST: _sizes(Size.SMALL, Size.MEDIUM),
            },
            senses=_BEAST_SENSES_3,
            specials=_BEAST_SPECIALS_3,
            speed_caps=_beast_caps(climb=90, fly=90, swim=90, burrow=30),
        ),
        4: LevelGate(
            forms={
                FormFamily.ANIMAL: _sizes(
                    Size.DIMINUTIVE, Size.TINY, Size.SMALL, Size.MEDIUM, Size.LARGE, Size.HUGE
                ),
                FormFamily.MAGICAL_BEAST: _sizes(Size.TINY, Size.SMALL, Size.MEDIUM, Size.LARGE),
            },
            senses=_BEAST_SENSES_4,
            specials=_BEAST_SPECIALS_4,
            speed_caps=_beast_caps(climb=90, fly=120, swim=120, burrow=60),
        ),
    },
    thresholds={
        DefenseCategory.ENERGY_RESISTANCE: None,
        DefenseCategory.VULNERABILITY: 1,
        DefenseCategory.DAMAGE_IMMUNITY: None,
        DefenseCategory.DAMAGE_REDUCTION: None,
        DefenseCategory.REGENERATION: None,
    },
)


# =============================================================================
# Elemental Body
# =============================================================================


_ELEMENTS = (FormFamily.AIR, FormFamily.EARTH, FormFamily.FIRE, FormFamily.WATER)
_ELEMENTAL_SENSES = {SenseKind.DARKVISION: 60}
# Elemental forms keep every special they list, at every level
_ELEMENTAL_SPECIALS = frozenset(SpecialAbility)
_ELEMENTAL_CAPS_LOW = {MovementMode.SWIM: 60, MovementMode.FLY: 60}
_ELEMENTAL_CAPS_HIGH = {MovementMode.SWIM: 120, MovementMode.FLY: 120}


def _elemental_gate(sizes: frozenset[Size], caps: dict[MovementMode, int]) -> LevelGate:
    return LevelGate(
        forms={element: sizes for element in _ELEMENTS},
        senses=_ELEMENTAL_SENSES,
        specials=_ELEMENTAL_SPECIALS,
        speed_caps=caps,
    )


ELEMENTAL_BODY = SpellGating(
    kind=SpellKind.ELEMENTAL_BODY,
    levels={
        1: _elemental_gate(_sizes(Size.SMALL), _ELEMENTAL_CAPS_LOW),
        2: _elemental_gate(_sizes(Size.SMALL, Size.MEDIUM), _ELEMENTAL_CAPS_LOW),
        3: _elemental_gate(_sizes(Size.SMALL, Size.MEDIUM, Size.LARGE), _ELEMENTAL_CAPS_LOW),
        4: _elemental_gate(
            _sizes(Size.SMALL, Size.MEDIUM, Size.LARGE, Size.HUGE), _ELEMENTAL_CAPS_HIGH
        ),
    },
    thresholds={
        DefenseCategory.ENERGY_RESISTANCE: 1,
        DefenseCategory.VULNERABILITY: 1,
        DefenseCategory.DAMAGE_IMMUNITY: 3,
        DefenseCategory.DAMAGE_REDUCTION: 4,
        DefenseCategory.REGENERATION: None,
    },
)


# =============================================================================
# Plant Shape
# =============================================================================


_PLANT_SENSES = {SenseKind.DARKVISION: 60, SenseKind.LOW_LIGHT_VISION: None}
_PLANT_SPECIALS_1 = frozenset(
    {SpecialAbility.CONSTRICT, SpecialAbility.GRAB, SpecialAbility.POISON}
)
_PLANT_SPECIALS_3 = _PLANT_SPECIALS_1 | {SpecialAbility.TRAMPLE}

PLANT_SHAPE = SpellGating(
    kind=SpellKind.PLANT_SHAPE,
    levels={
        1: LevelGate(
            forms={FormFamily.PLANT: _sizes(Size.SMALL, Size.MEDIUM)},
            senses=_PLANT_SENSES,
            specials=_PLANT_SPECIALS_1,
        ),
        2: LevelGate(
            forms={FormFamily.PLANT: _sizes(Size.SMALL, Size.MEDIUM, Size.LARGE)},
            senses=_PLANT_SENSES,
            specials=_PLANT_SPECIALS_1,
        ),
        3: LevelGate(
            forms={FormFamily.PLANT: _sizes(Size.SMALL, Size.MEDIUM, Size.LARGE, Size.HUGE)},
            senses=_PLANT_SENSES,
            specials=_PLANT_SPECIALS_3,
        ),
    },
    thresholds={
        DefenseCategory.ENERGY_RESISTANCE: 2,
        DefenseCategory.VULNERABILITY: 1,
        DefenseCategory.DAMAGE_IMMUNITY: None,
        DefenseCategory.DAMAGE_REDUCTION: 3,
        DefenseCategory.REGENERATION: 3,
    },
    elemental_resistances_only=True,
    fold_immunities=True,
    resistance_cap=RESISTANCE_CAP,
)


GATING: dict[SpellKind, SpellGating] = {
    SpellKind.BEAST_SHAPE: BEAST_SHAPE,
    SpellKind.ELEMENTAL_BODY: ELEMENTAL_BODY,
    SpellKind.PLANT_SHAPE: PLANT_SHAPE,
}


def gating_for(kind: SpellKind) -> SpellGating:
    """Look up the gating policy for a polymorph spell.

    Raises:
        CatalogError: If ``kind`` is not a polymorph spell.
    """
    try:
        return GATING[kind]
    except KeyError:
        raise CatalogError(
            f"{kind.display_name} has no gating table",
            field_name="kind",
            invalid_value=kind.value,
        ) from None


__all__ = [
    "LevelGate",
    "SpellGating",
    "BEAST_SHAPE",
    "ELEMENTAL_BODY",
    "PLANT_SHAPE",
    "GATING",
    "gating_for",
]
