"""Static catalog data: forms, change sets, gating tables and attack details.

Everything in this package is validated once at import and never mutated.

Exports:
    Forms:
        FORMS, get_form, load_forms, forms_for_kind.

    Change Sets:
        POLYMORPH_CHANGES, BASE_SIZE_ADJUSTMENTS, polymorph_changes,
        base_size_adjustment, BuffDefinition, BUFFS, buff_definition.

    Gating:
        LevelGate, SpellGating, GATING, gating_for.

    Attack Details:
        NATURAL_ATTACKS, SPECIAL_EFFECTS, NaturalAttackInfo, SpecialEffect.
"""

from __future__ import annotations

from shapechanger.catalog.change_sets import (
    BASE_SIZE_ADJUSTMENTS,
    BUFFS,
    POLYMORPH_CHANGES,
    BuffDefinition,
    base_size_adjustment,
    buff_definition,
    polymorph_changes,
)
from shapechanger.catalog.forms import FORMS, forms_for_kind, get_form, load_forms
from shapechanger.catalog.gating import (
    BEAST_SHAPE,
    ELEMENTAL_BODY,
    GATING,
    PLANT_SHAPE,
    LevelGate,
    SpellGating,
    gating_for,
)
from shapechanger.catalog.specials import (
    NATURAL_ATTACKS,
    SPECIAL_EFFECTS,
    NaturalAttackInfo,
    SpecialEffect,
)


__all__ = [
    # Forms
    "FORMS",
    "get_form",
    "load_forms",
    "forms_for_kind",
    # Change sets
    "POLYMORPH_CHANGES",
    "BASE_SIZE_ADJUSTMENTS",
    "BuffDefinition",
    "BUFFS",
    "polymorph_changes",
    "base_size_adjustment",
    "buff_definition",
    # Gating
    "LevelGate",
    "SpellGating",
    "BEAST_SHAPE",
    "ELEMENTAL_BODY",
    "PLANT_SHAPE",
    "GATING",
    "gating_for",
    # Attack details
    "NaturalAttackInfo",
    "SpecialEffect",
    "NATURAL_ATTACKS",
    "SPECIAL_EFFECTS",
]
