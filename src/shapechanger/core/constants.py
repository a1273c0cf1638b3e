"""Application-wide constants for the shapechanger engine.

This module defines the fixed rules tables the engine consults: encumbrance
multipliers, the damage-die progression, carrying capacity, attack defaults
and effect icons.
"""

from __future__ import annotations

# =============================================================================
# Size & Encumbrance
# =============================================================================

ENCUMBRANCE_MULTIPLIERS: tuple[float, ...] = (0.125, 0.25, 0.5, 0.75, 1, 2, 4, 8, 16)
"""Carrying capacity multiplier per size index (fine through colossal)."""

TINY_SIZE_INDEX = 2
"""Index of the tiny size; armor bonuses are halved at this size and below."""

ARMOR_SCALE_FACTOR = 2
"""Factor applied to armor and shield ratings when crossing the tiny boundary."""

# Heavy load (lbs) for strength scores 1 through 10 is 10 x strength
HEAVY_LOAD_TEENS = (115, 130, 150, 175, 200, 230, 260, 300, 350, 400)
"""Heavy load limits for strength 11 through 20."""

# =============================================================================
# Damage Dice
# =============================================================================

DAMAGE_DIE_PROGRESSION: tuple[str, ...] = (
    "1",
    "1d2",
    "1d3",
    "1d4",
    "1d6",
    "1d8",
    "2d6",
    "2d8",
    "3d6",
    "3d8",
    "4d6",
    "4d8",
    "6d6",
    "6d8",
    "8d6",
    "8d8",
    "12d6",
    "12d8",
    "16d6",
    "16d8",
)
"""Ordered damage dice; one size step moves one slot along this list."""

DAMAGE_DIE_ALIASES: dict[str, str] = {
    "1d10": "2d6",
    "1d12": "2d8",
    "2d4": "1d8",
}
"""Dice not on the progression that share a slot with one that is."""

MEDIUM_SIZE_INDEX = 4
"""Size index damage dice are quoted at in catalog data."""

# =============================================================================
# Attack Defaults
# =============================================================================

DEFAULT_CRIT_RANGE = 20
DEFAULT_CRIT_MULTIPLIER = 2

FINESSE_FEAT_NAME = "Weapon Finesse"
"""Feat that lets dexterity replace strength on melee attack rolls."""

ONLY_ATTACK_DAMAGE_MULT = 1.5
PRIMARY_DAMAGE_MULT = 1.0
SECONDARY_DAMAGE_MULT = 0.5

# =============================================================================
# Energy Resistance
# =============================================================================

FOLDED_IMMUNITY_RESISTANCE = 20
"""Resistance value an immunity becomes when a spell folds immunities."""

RESISTANCE_CAP = 20
"""Highest energy resistance a capped spell kind may grant."""

# =============================================================================
# Icons
# =============================================================================

ICON_REDUCE_PERSON = "systems/pf1/icons/races/ratfolk.png"
ICON_ENLARGE_PERSON = "systems/pf1/icons/skills/yellow_36.jpg"
ICON_ANIMAL_GROWTH = "systems/pf1/icons/skills/green_18.jpg"
ICON_LEGENDARY_PROPORTIONS = "systems/pf1/icons/skills/yellow_08.jpg"
ICON_FRIGHTFUL_ASPECT = "systems/pf1/icons/skills/affliction_08.jpg"
ICON_BEAST_SHAPE = "systems/pf1/icons/skills/green_21.jpg"
ICON_ELEMENTAL_BODY = "systems/pf1/icons/skills/fire_06.jpg"
ICON_PLANT_SHAPE = "systems/pf1/icons/skills/green_07.jpg"


__all__ = [
    "ENCUMBRANCE_MULTIPLIERS",
    "TINY_SIZE_INDEX",
    "ARMOR_SCALE_FACTOR",
    "HEAVY_LOAD_TEENS",
    "DAMAGE_DIE_PROGRESSION",
    "DAMAGE_DIE_ALIASES",
    "MEDIUM_SIZE_INDEX",
    "DEFAULT_CRIT_RANGE",
    "DEFAULT_CRIT_MULTIPLIER",
    "FINESSE_FEAT_NAME",
    "ONLY_ATTACK_DAMAGE_MULT",
    "PRIMARY_DAMAGE_MULT",
    "SECONDARY_DAMAGE_MULT",
    "FOLDED_IMMUNITY_RESISTANCE",
    "RESISTANCE_CAP",
    "ICON_REDUCE_PERSON",
    "ICON_ENLARGE_PERSON",
    "ICON_ANIMAL_GROWTH",
    "ICON_LEGENDARY_PROPORTIONS",
    "ICON_FRIGHTFUL_ASPECT",
    "ICON_BEAST_SHAPE",
    "ICON_ELEMENTAL_BODY",
    "ICON_PLANT_SHAPE",
]
