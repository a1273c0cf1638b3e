"""Enumeration types for the shapechanger engine.

This module defines the closed vocabularies the catalog and engine work in:
size categories, spell kinds, senses, energy and damage types, special
abilities and attack classifications. Catalog data is validated against
these at load time, so an unknown tag never reaches the resolver.
"""

from __future__ import annotations

from enum import StrEnum

from shapechanger.core.constants import ENCUMBRANCE_MULTIPLIERS, TINY_SIZE_INDEX


class Size(StrEnum):
    """Creature size categories, smallest first.

    Declaration order is the size scale; ``index`` is the position on it.
    """

    FINE = "fine"
    DIMINUTIVE = "diminutive"
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"
    COLOSSAL = "colossal"

    @property
    def index(self) -> int:
        """Position of this size on the scale (fine is 0)."""
        return list(Size).index(self)

    @classmethod
    def from_index(cls, index: int) -> Size:
        """Get the size at ``index``, clamped to the scale."""
        members = list(cls)
        return members[max(0, min(index, len(members) - 1))]

    @property
    def is_tiny_or_smaller(self) -> bool:
        """Whether armor bonuses are halved at this size."""
        return self.index <= TINY_SIZE_INDEX

    @property
    def encumbrance_multiplier(self) -> float:
        """Carrying capacity multiplier for a biped of this size."""
        return ENCUMBRANCE_MULTIPLIERS[self.index]

    @property
    def label(self) -> str:
        """Title-cased display name."""
        return self.value.capitalize()


class Ability(StrEnum):
    """Ability scores, keyed by their short change sub-target."""

    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        names = {
            Ability.STR: "Strength",
            Ability.DEX: "Dexterity",
            Ability.CON: "Constitution",
            Ability.INT: "Intelligence",
            Ability.WIS: "Wisdom",
            Ability.CHA: "Charisma",
        }
        return names[self]

    @property
    def abbreviation(self) -> str:
        """Capitalized short name used in previews (e.g., 'Str')."""
        return self.value.capitalize()


class EffectCategory(StrEnum):
    """How an effect is reverted."""

    BUFF = "buff"
    POLYMORPH = "polymorph"


class SpellKind(StrEnum):
    """Transformation effects the engine knows how to apply."""

    BEAST_SHAPE = "beast_shape"
    ELEMENTAL_BODY = "elemental_body"
    PLANT_SHAPE = "plant_shape"
    ENLARGE_PERSON = "enlarge_person"
    REDUCE_PERSON = "reduce_person"
    ANIMAL_GROWTH = "animal_growth"
    LEGENDARY_PROPORTIONS = "legendary_proportions"
    FRIGHTFUL_ASPECT = "frightful_aspect"

    @property
    def category(self) -> EffectCategory:
        """Revert policy for this kind."""
        if self in (SpellKind.BEAST_SHAPE, SpellKind.ELEMENTAL_BODY, SpellKind.PLANT_SHAPE):
            return EffectCategory.POLYMORPH
        return EffectCategory.BUFF

    @property
    def display_name(self) -> str:
        """Default effect source name (e.g., 'Beast Shape')."""
        return self.value.replace("_", " ").title()


class FormFamily(StrEnum):
    """Creature family a form belongs to; selects its change set."""

    ANIMAL = "animal"
    MAGICAL_BEAST = "magical_beast"
    AIR = "air"
    EARTH = "earth"
    FIRE = "fire"
    WATER = "water"
    PLANT = "plant"

    @property
    def is_elemental(self) -> bool:
        """Whether this is one of the four elements."""
        return self in (FormFamily.AIR, FormFamily.EARTH, FormFamily.FIRE, FormFamily.WATER)


class SenseKind(StrEnum):
    """Special senses a form can grant."""

    LOW_LIGHT_VISION = "low_light_vision"
    DARKVISION = "darkvision"
    SCENT = "scent"
    BLINDSENSE = "blindsense"
    BLINDSIGHT = "blindsight"
    TREMORSENSE = "tremorsense"

    @property
    def label(self) -> str:
        """Display name (e.g., 'Low-Light Vision')."""
        if self is SenseKind.LOW_LIGHT_VISION:
            return "Low-Light Vision"
        return self.value.capitalize()

    @property
    def is_ranged(self) -> bool:
        """Whether this sense carries a range in feet."""
        return self not in (SenseKind.LOW_LIGHT_VISION, SenseKind.SCENT)


class EnergyType(StrEnum):
    """Energy damage types."""

    ACID = "acid"
    COLD = "cold"
    ELECTRICITY = "electricity"
    FIRE = "fire"
    SONIC = "sonic"

    @property
    def label(self) -> str:
        """Capitalized display name."""
        return self.value.capitalize()


class Immunity(StrEnum):
    """Damage and effect immunities a form can grant."""

    ACID = "acid"
    COLD = "cold"
    ELECTRICITY = "electricity"
    FIRE = "fire"
    SONIC = "sonic"
    BLEED = "bleed"
    CRITICAL_HITS = "critical_hits"
    SNEAK_ATTACKS = "sneak_attacks"
    FLANKING = "flanking"
    PARALYSIS = "paralysis"
    POISON = "poison"
    POLYMORPH = "polymorph"
    SLEEP = "sleep"
    STUN = "stun"

    @property
    def energy_type(self) -> EnergyType | None:
        """The energy type this immunity covers, if it is an energy immunity."""
        try:
            return EnergyType(self.value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Display name (e.g., 'Critical Hits')."""
        return self.value.replace("_", " ").title()


class DamageType(StrEnum):
    """Weapon and bonus damage types used on attack damage parts."""

    BLUDGEONING = "bludgeoning"
    PIERCING = "piercing"
    SLASHING = "slashing"
    ACID = "acid"
    COLD = "cold"
    ELECTRICITY = "electricity"
    FIRE = "fire"
    SONIC = "sonic"
    UNTYPED = "untyped"


class AttackType(StrEnum):
    """Action type of a generated attack."""

    MELEE = "mwak"
    RANGED = "rwak"
    SAVE = "save"
    MANEUVER = "mcman"


class AttackCategory(StrEnum):
    """Sheet grouping for a generated attack item."""

    NATURAL = "natural"
    MISC = "misc"


class SaveType(StrEnum):
    """Saving throws."""

    FORTITUDE = "fort"
    REFLEX = "ref"
    WILL = "will"


class MovementMode(StrEnum):
    """Movement modes a speed set carries."""

    LAND = "land"
    BURROW = "burrow"
    CLIMB = "climb"
    SWIM = "swim"
    FLY = "fly"


class Maneuverability(StrEnum):
    """Flight maneuverability ratings."""

    CLUMSY = "clumsy"
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    PERFECT = "perfect"


class SpecialAbility(StrEnum):
    """Special attack and special quality tags.

    Catalog strings use the spaced form (``"breath weapon"``); a trailing
    parameter such as ``"jet 200ft"`` is carried separately.
    """

    BREATH_WEAPON = "breath_weapon"
    BURN = "burn"
    CONSTRICT = "constrict"
    DRENCH = "drench"
    EARTH_GLIDE = "earth_glide"
    FEROCITY = "ferocity"
    GRAB = "grab"
    JET = "jet"
    POISON = "poison"
    POUNCE = "pounce"
    RAKE = "rake"
    REND = "rend"
    ROAR = "roar"
    SPIKES = "spikes"
    TRAMPLE = "trample"
    TRIP = "trip"
    VORTEX = "vortex"
    WEB = "web"
    WHIRLWIND = "whirlwind"
    AIR_MASTERY = "air_mastery"
    EARTH_MASTERY = "earth_mastery"
    WATER_MASTERY = "water_mastery"

    @property
    def label(self) -> str:
        """Display name (e.g., 'Breath Weapon')."""
        return self.value.replace("_", " ").title()


class ItemType(StrEnum):
    """Embedded item types on a character."""

    BUFF = "buff"
    ATTACK = "attack"
    EQUIPMENT = "equipment"
    FEAT = "feat"


class EquipmentType(StrEnum):
    """Equipment slots relevant to armor rescaling."""

    ARMOR = "armor"
    SHIELD = "shield"
    MISC = "misc"


class ChangeOperator(StrEnum):
    """How a change combines with the running total."""

    ADD = "add"
    SET = "set"


class DefenseCategory(StrEnum):
    """Level-gated defensive trait groups."""

    ENERGY_RESISTANCE = "energy_resistance"
    VULNERABILITY = "vulnerability"
    DAMAGE_IMMUNITY = "damage_immunity"
    DAMAGE_REDUCTION = "damage_reduction"
    REGENERATION = "regeneration"


__all__ = [
    "Size",
    "Ability",
    "EffectCategory",
    "SpellKind",
    "FormFamily",
    "SenseKind",
    "EnergyType",
    "Immunity",
    "DamageType",
    "AttackType",
    "AttackCategory",
    "SaveType",
    "MovementMode",
    "Maneuverability",
    "SpecialAbility",
    "ItemType",
    "EquipmentType",
    "ChangeOperator",
    "DefenseCategory",
]
