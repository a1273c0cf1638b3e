"""Character records and their embedded items.

A CharacterRecord is the engine's view of one character document held by a
CharacterStore. Items are a discriminated union on ``type``. Totals that
depend on active buffs (ability scores, natural armor, carrying capacity)
are derived here rather than stored.

Carrying capacity follows two rules:

* the carry strength bonus is the sum of active ``carryStr`` changes when
  any exist, and the user-entered bonus otherwise;
* the carry multiplier is ``base + user + sum(active carryMult changes)``.

The effective capacity is the heavy load for (strength + carry bonus),
times the carry multiplier, times the size encumbrance multiplier.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from shapechanger.core.constants import FINESSE_FEAT_NAME, HEAVY_LOAD_TEENS
from shapechanger.models.changes import (
    CARRY_MULTIPLIER,
    CARRY_STRENGTH,
    NATURAL_ARMOR,
    ChangeRecord,
)
from shapechanger.models.enums import (
    Ability,
    AttackCategory,
    AttackType,
    ChangeOperator,
    EnergyType,
    EquipmentType,
    Immunity,
    SaveType,
    Size,
)
from shapechanger.models.forms import DamagePart, EnergyResistance, Sense, SpeedSet


# =============================================================================
# Items
# =============================================================================


class _ItemBase(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(default="")
    name: str = Field(min_length=1)
    img: str = Field(default="")


class BuffItem(_ItemBase):
    """A toggleable buff holding stat changes."""

    type: Literal["buff"] = "buff"
    active: bool = False
    changes: list[ChangeRecord] = Field(default_factory=list)


class SaveData(BaseModel):
    """Saving throw attached to an attack action."""

    model_config = ConfigDict(extra="forbid")

    type: SaveType | None = None
    dc: str = ""
    description: str = ""


class AttackAction(BaseModel):
    """The rollable part of an attack item.

    Attributes:
        name: Action name (the bare attack name).
        action_type: Melee, ranged, save or maneuver.
        attack_name: Label of the first attack when there are extras.
        attack_parts: Extra attacks as (bonus formula, label) pairs.
        attack_ability: Ability for the attack roll.
        damage_ability: Ability added to damage; None for ranged attacks.
        damage_mult: Multiplier on the damage ability.
        crit_range: Lowest threatening roll.
        crit_mult: Critical multiplier.
        damage_parts: Damage terms multiplied on a critical.
        non_crit_parts: Damage terms never multiplied.
        effect_notes: Notes shown when the attack hits.
        save: Saving throw, if any special grants one.
        range_value: Range in feet.
        range_units: "ft" for ranged attacks, otherwise "melee".
        max_increments: Maximum range increments.
        uses_per: "day" when the attack has limited charges.
        uses_max: Number of charges.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    img: str = ""
    action_type: AttackType = Field(default=AttackType.MELEE, alias="actionType")
    attack_name: str = Field(default="", alias="attackName")
    attack_parts: list[tuple[str, str]] = Field(default_factory=list, alias="attackParts")
    attack_ability: Ability = Field(default=Ability.STR, alias="attackAbility")
    damage_ability: Ability | None = Field(default=Ability.STR, alias="damageAbility")
    damage_mult: float = Field(default=1.0, alias="damageMult")
    crit_range: int = Field(default=20, alias="critRange")
    crit_mult: int = Field(default=2, alias="critMult")
    damage_parts: list[DamagePart] = Field(default_factory=list, alias="damageParts")
    non_crit_parts: list[DamagePart] = Field(default_factory=list, alias="nonCritParts")
    effect_notes: list[str] = Field(default_factory=list, alias="effectNotes")
    save: SaveData = Field(default_factory=SaveData)
    range_value: str = Field(default="", alias="rangeValue")
    range_units: Literal["ft", "melee"] = Field(default="melee", alias="rangeUnits")
    max_increments: str = Field(default="", alias="maxIncrements")
    uses_per: Literal["day", ""] = Field(default="", alias="usesPer")
    uses_max: int = Field(default=0, alias="usesMax")


class AttackItem(_ItemBase):
    """A generated attack with a single action."""

    type: Literal["attack"] = "attack"
    attack_category: AttackCategory = Field(default=AttackCategory.NATURAL, alias="attackType")
    primary_attack: bool = Field(default=True, alias="primaryAttack")
    enhancement: int | None = Field(default=None, alias="enh")
    description: str = ""
    actions: list[AttackAction] = Field(default_factory=list)


class EquipmentItem(_ItemBase):
    """Worn equipment; armor and shields carry an armor rating."""

    type: Literal["equipment"] = "equipment"
    equipment_type: EquipmentType = Field(default=EquipmentType.MISC, alias="equipmentType")
    armor_value: int = Field(default=0, ge=0, alias="armorValue")

    @property
    def is_armor_or_shield(self) -> bool:
        return self.equipment_type in (EquipmentType.ARMOR, EquipmentType.SHIELD)


class FeatItem(_ItemBase):
    """A feat; only its name matters to the engine."""

    type: Literal["feat"] = "feat"


Item = Annotated[
    BuffItem | AttackItem | EquipmentItem | FeatItem,
    Field(discriminator="type"),
]


# =============================================================================
# Character Blocks
# =============================================================================


class Traits(BaseModel):
    """Overridable trait block.

    Attributes:
        size: Current size category.
        senses: Special senses.
        dr: Damage reduction text, entries separated by "; ".
        eres: Energy resistances.
        dv: Energy vulnerabilities.
        di: Damage immunities.
        regen: Regeneration text.
        sr: Spell resistance formula.
    """

    model_config = ConfigDict(extra="forbid")

    size: Size = Size.MEDIUM
    senses: list[Sense] = Field(default_factory=list)
    dr: str = ""
    eres: list[EnergyResistance] = Field(default_factory=list)
    dv: list[EnergyType] = Field(default_factory=list)
    di: list[Immunity] = Field(default_factory=list)
    regen: str = ""
    sr: str = ""

    @property
    def spell_resistance(self) -> int:
        """Evaluated spell resistance; non-numeric formulas count as 0."""
        try:
            return int(self.sr)
        except ValueError:
            return 0


class CarryCapacity(BaseModel):
    """User-entered carrying capacity adjustments."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    bonus_user: int = Field(default=0, alias="bonusUser")
    multiplier_base: float = Field(default=1.0, alias="multiplierBase")
    multiplier_user: float = Field(default=0.0, alias="multiplierUser")


class Token(BaseModel):
    """Display token settings."""

    model_config = ConfigDict(extra="forbid")

    img: str = ""


def heavy_load(strength: int) -> float:
    """Heavy load limit in pounds for a medium biped.

    Every 10 points of strength above 20 multiplies the limit by 4.
    """
    if strength <= 0:
        return 0.0
    factor = 1
    while strength > 20:
        strength -= 10
        factor *= 4
    if strength <= 10:
        return float(10 * strength * factor)
    return float(HEAVY_LOAD_TEENS[strength - 11] * factor)


# =============================================================================
# Character Record
# =============================================================================


class CharacterRecord(BaseModel):
    """A character document as seen by the engine.

    Example:
        >>> actor = CharacterRecord(id="a1", name="Valeros", abilities={"str": 16})
        >>> actor.ability_total(Ability.STR)
        16
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    owner: str | None = None
    abilities: dict[Ability, int] = Field(default_factory=dict)
    traits: Traits = Field(default_factory=Traits)
    speed: SpeedSet = Field(default_factory=lambda: SpeedSet(land=30))
    carry: CarryCapacity = Field(default_factory=CarryCapacity)
    melee_ability: Ability | None = Field(default=None, alias="meleeAbility")
    token: Token = Field(default_factory=Token)
    items: list[Item] = Field(default_factory=list)
    flags: dict[str, Any] = Field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Item lookups
    # -------------------------------------------------------------------------

    def get_item(self, item_id: str) -> BuffItem | AttackItem | EquipmentItem | FeatItem | None:
        """Find an item by id."""
        return next((item for item in self.items if item.id == item_id), None)

    def find_buff(self, name: str) -> BuffItem | None:
        """Find a buff by name."""
        return next(
            (item for item in self.items if isinstance(item, BuffItem) and item.name == name),
            None,
        )

    @property
    def armor_items(self) -> list[EquipmentItem]:
        """Armor and shield items, in item order."""
        return [i for i in self.items if isinstance(i, EquipmentItem) and i.is_armor_or_shield]

    def has_feat(self, name: str) -> bool:
        return any(isinstance(i, FeatItem) and i.name == name for i in self.items)

    @property
    def has_weapon_finesse(self) -> bool:
        return self.has_feat(FINESSE_FEAT_NAME)

    # -------------------------------------------------------------------------
    # Derived totals
    # -------------------------------------------------------------------------

    @property
    def active_changes(self) -> list[ChangeRecord]:
        """Changes on every active buff, in item order."""
        return [c for i in self.items if isinstance(i, BuffItem) and i.active for c in i.changes]

    def _total(self, sub_target: str, base: float) -> float:
        changes = [c for c in self.active_changes if c.sub_target == sub_target]
        total = base
        for change in sorted(changes, key=lambda c: -c.priority):
            if change.operator is ChangeOperator.SET:
                total = change.value
        return total + sum(c.value for c in changes if c.operator is ChangeOperator.ADD)

    def ability_total(self, ability: Ability) -> int:
        """Ability score with active changes applied."""
        return int(self._total(ability.value, self.abilities.get(ability, 10)))

    @property
    def natural_armor(self) -> int:
        """Natural armor bonus from active changes."""
        return int(self._total(NATURAL_ARMOR, 0))

    @property
    def carry_strength_bonus(self) -> int:
        """Effective carry strength bonus."""
        changes = [c for c in self.active_changes if c.sub_target == CARRY_STRENGTH]
        if not changes:
            return self.carry.bonus_user
        return int(sum(c.value for c in changes))

    @property
    def carry_multiplier(self) -> float:
        """Carry multiplier total."""
        return self._total(CARRY_MULTIPLIER, self.carry.multiplier_base + self.carry.multiplier_user)

    @property
    def carrying_capacity(self) -> float:
        """Effective heavy load in pounds."""
        strength = self.ability_total(Ability.STR) + self.carry_strength_bonus
        return heavy_load(strength) * self.carry_multiplier * self.traits.size.encumbrance_multiplier

    def document(self) -> dict[str, Any]:
        """Serialize to the JSON document form stores keep."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "BuffItem",
    "SaveData",
    "AttackAction",
    "AttackItem",
    "EquipmentItem",
    "FeatItem",
    "Item",
    "Traits",
    "CarryCapacity",
    "Token",
    "heavy_load",
    "CharacterRecord",
]
