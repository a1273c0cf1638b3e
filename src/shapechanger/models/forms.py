"""Form definitions and the attack descriptors they carry.

A FormDefinition is a named creature, elemental or plant shape with its
complete, ungated attribute set. Forms are owned by the catalog and are
never mutated; the resolver produces filtered copies.

Special-ability tags arrive from catalog data as plain strings such as
``"grab"`` or ``"jet 200ft"``. They are parsed into SpecialTag values when
the form is built, and an unknown tag raises CatalogError there.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shapechanger.core.exceptions import CatalogError
from shapechanger.models.enums import (
    Ability,
    AttackType,
    DamageType,
    EnergyType,
    FormFamily,
    Immunity,
    Maneuverability,
    MovementMode,
    SenseKind,
    Size,
    SpecialAbility,
)


# =============================================================================
# Special Tags
# =============================================================================


class SpecialTag(BaseModel):
    """A special ability tag with an optional trailing parameter.

    Attributes:
        ability: The recognized special ability.
        parameter: Free text after the ability name (e.g. "200ft").
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability: SpecialAbility
    parameter: str = ""

    @model_validator(mode="before")
    @classmethod
    def parse_text(cls, data: Any) -> Any:
        """Accept a catalog string like ``"jet 200ft"``.

        The longest leading run of words naming a known ability wins, so
        ``"breath weapon 30ft"`` parses as BREATH_WEAPON with "30ft".

        Raises:
            CatalogError: If no leading words name a known ability.
        """
        if isinstance(data, SpecialAbility):
            return {"ability": data}
        if not isinstance(data, str):
            return data
        words = data.strip().split()
        for cut in range(len(words), 0, -1):
            candidate = "_".join(words[:cut]).lower()
            try:
                ability = SpecialAbility(candidate)
            except ValueError:
                continue
            return {"ability": ability, "parameter": " ".join(words[cut:])}
        raise CatalogError(
            f"Unknown special ability tag: {data!r}",
            field_name="special",
            invalid_value=data,
        )

    @property
    def label(self) -> str:
        """Display text, e.g. 'Jet 200ft'."""
        return f"{self.ability.label} {self.parameter}".strip()

    def __str__(self) -> str:
        return self.label


def _parse_tags(value: Any) -> Any:
    if isinstance(value, (str, SpecialAbility, SpecialTag)):
        value = [value]
    return [v if isinstance(v, SpecialTag) else SpecialTag.model_validate(v) for v in value]


# =============================================================================
# Speeds & Senses
# =============================================================================


class SpeedSet(BaseModel):
    """Movement speeds in feet; 0 means the mode is absent.

    Attributes:
        land: Base land speed.
        burrow: Burrow speed.
        climb: Climb speed.
        swim: Swim speed.
        fly: Fly speed.
        maneuverability: Flight maneuverability rating.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    land: int = Field(default=0, ge=0)
    burrow: int = Field(default=0, ge=0)
    climb: int = Field(default=0, ge=0)
    swim: int = Field(default=0, ge=0)
    fly: int = Field(default=0, ge=0)
    maneuverability: Maneuverability = Field(default=Maneuverability.AVERAGE)

    def get(self, mode: MovementMode) -> int:
        """Speed for ``mode``."""
        return getattr(self, mode.value)

    def capped(self, caps: dict[MovementMode, int]) -> SpeedSet:
        """Copy with each listed mode limited to its cap.

        A cap of 0 removes the mode. Maneuverability is left alone.
        """
        updates = {mode.value: min(self.get(mode), cap) for mode, cap in caps.items()}
        return self.model_copy(update=updates)

    @property
    def modes(self) -> list[MovementMode]:
        """Modes with a nonzero speed, in declaration order."""
        return [mode for mode in MovementMode if self.get(mode) > 0]


class Sense(BaseModel):
    """A special sense, optionally with a range in feet."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: SenseKind
    range: int | None = Field(default=None, ge=0)

    @property
    def label(self) -> str:
        """Display text, e.g. 'Darkvision 60 ft'."""
        if self.range:
            return f"{self.kind.label} {self.range} ft"
        return self.kind.label


# =============================================================================
# Defenses
# =============================================================================


class EnergyResistance(BaseModel):
    """Resistance to one energy type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    energy: EnergyType
    amount: int = Field(gt=0)

    @property
    def label(self) -> str:
        return f"{self.energy.label} {self.amount}"


class DamageReduction(BaseModel):
    """Damage reduction with the material or alignment that bypasses it.

    A bypass of "-" means nothing bypasses it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: int = Field(gt=0)
    bypass: str = Field(default="-")

    def __str__(self) -> str:
        return f"{self.amount}/{self.bypass}"


class Regeneration(BaseModel):
    """Regeneration and the damage types that suppress it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: int = Field(gt=0)
    bypass: tuple[str, ...] = Field(default=())

    def render(self, conjunction: str = "or") -> str:
        """Display text, e.g. '10 (bludgeoning or fire)'."""
        if not self.bypass:
            return str(self.amount)
        return f"{self.amount} ({f' {conjunction} '.join(self.bypass)})"


# =============================================================================
# Attacks
# =============================================================================


class DamagePart(BaseModel):
    """A fixed damage term such as '1d6 fire'."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    formula: str = Field(min_length=1)
    types: tuple[DamageType, ...] = Field(default=())
    custom: str = Field(default="")

    @property
    def label(self) -> str:
        """Display text, e.g. '1d6 fire'."""
        kind = ", ".join(t.value for t in self.types) or self.custom
        return f"{self.formula} {kind}".strip()


class AttackDescriptor(BaseModel):
    """One natural or special attack a form grants.

    Attributes:
        name: Attack name; also keys the natural attack table.
        attack_type: Melee, ranged, save or maneuver.
        dice_count: Number of damage dice at medium size.
        dice_size: Die size at medium size; 0 means no scaling die.
        count: How many attacks of this name the form makes.
        crit_range: Lowest natural roll that threatens.
        crit_multiplier: Critical damage multiplier.
        special: Special ability tags riding on this attack.
        non_crit: Fixed extra damage not multiplied on a critical.
        is_primary: Explicit primary flag; None defers to the attack table.
        damage_types: Explicit damage types; empty defers to the attack table.
        attack_ability: Explicit attack roll ability.
        damage_multiplier: Explicit ability damage multiplier.
        range: Range in feet for ranged attacks.
        increment: Maximum range increments.
        charges: Uses per day, if limited.
        enhancement: Enhancement bonus on the attack.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    attack_type: AttackType = Field(default=AttackType.MELEE)
    dice_count: int = Field(default=1, ge=0)
    dice_size: int = Field(default=0, ge=0)
    count: int = Field(default=1, ge=1)
    crit_range: int | None = Field(default=None, ge=2, le=20)
    crit_multiplier: int | None = Field(default=None, ge=2)
    special: tuple[SpecialTag, ...] = Field(default=())
    non_crit: DamagePart | None = Field(default=None)
    is_primary: bool | None = Field(default=None)
    damage_types: tuple[DamageType, ...] = Field(default=())
    attack_ability: Ability | None = Field(default=None)
    damage_multiplier: float | None = Field(default=None, gt=0)
    range: int | None = Field(default=None, ge=0)
    increment: int | None = Field(default=None, ge=1)
    charges: int | None = Field(default=None, ge=1)
    enhancement: int | None = Field(default=None)

    @field_validator("special", mode="before")
    @classmethod
    def parse_special(cls, value: Any) -> Any:
        """Parse special tag strings."""
        return _parse_tags(value)

    @property
    def dice_label(self) -> str:
        """Medium-size dice text, empty when there is no scaling die."""
        if self.dice_size == 0:
            return ""
        return f"{self.dice_count}d{self.dice_size}"


# =============================================================================
# Form Definition
# =============================================================================


class FormDefinition(BaseModel):
    """A named shape a character can take.

    Example:
        >>> wolf = FormDefinition(
        ...     name="Wolf", family=FormFamily.ANIMAL, size=Size.MEDIUM,
        ...     speed=SpeedSet(land=50),
        ...     attacks=[AttackDescriptor(name="Bite", dice_count=1, dice_size=6, special=["trip"])],
        ...     senses=[Sense(kind=SenseKind.LOW_LIGHT_VISION), Sense(kind=SenseKind.SCENT)],
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    family: FormFamily
    size: Size
    speed: SpeedSet = Field(default_factory=SpeedSet)
    attacks: tuple[AttackDescriptor, ...] = Field(default=())
    special_attacks: tuple[AttackDescriptor, ...] = Field(default=())
    senses: tuple[Sense, ...] = Field(default=())
    special: tuple[SpecialTag, ...] = Field(default=())
    energy_resistances: tuple[EnergyResistance, ...] = Field(default=())
    vulnerabilities: tuple[EnergyType, ...] = Field(default=())
    damage_immunities: tuple[Immunity, ...] = Field(default=())
    damage_reduction: tuple[DamageReduction, ...] = Field(default=())
    regeneration: Regeneration | None = Field(default=None)

    @field_validator("special", mode="before")
    @classmethod
    def parse_special(cls, value: Any) -> Any:
        """Parse special tag strings."""
        return _parse_tags(value)


__all__ = [
    "SpecialTag",
    "SpeedSet",
    "Sense",
    "EnergyResistance",
    "DamageReduction",
    "Regeneration",
    "DamagePart",
    "AttackDescriptor",
    "FormDefinition",
]
