"""Attack item synthesis for polymorph forms.

Each AttackDescriptor on a resolved form becomes one AttackItem with a
single action. Special tags on the descriptor become effect notes, using
the detail table where it has an entry and the tag's own label otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping

from shapechanger.catalog.specials import NATURAL_ATTACKS, SPECIAL_EFFECTS, SpecialEffect
from shapechanger.core.config import Settings, get_settings
from shapechanger.core.constants import (
    DEFAULT_CRIT_MULTIPLIER,
    DEFAULT_CRIT_RANGE,
    ONLY_ATTACK_DAMAGE_MULT,
    PRIMARY_DAMAGE_MULT,
    SECONDARY_DAMAGE_MULT,
)
from shapechanger.engine.damage import size_roll_formula
from shapechanger.models.character import AttackAction, AttackItem, CharacterRecord, SaveData
from shapechanger.models.enums import Ability, AttackCategory, AttackType, Size, SpecialAbility
from shapechanger.models.forms import AttackDescriptor, DamagePart


def _attack_ability(actor: CharacterRecord, descriptor: AttackDescriptor) -> Ability:
    if descriptor.attack_ability is not None:
        return descriptor.attack_ability
    finesse = actor.has_weapon_finesse and (
        actor.ability_total(Ability.DEX) >= actor.ability_total(Ability.STR)
    )
    if finesse or descriptor.attack_type is AttackType.RANGED:
        return Ability.DEX
    return actor.melee_ability or Ability.STR


def _damage_multiplier(descriptor: AttackDescriptor, *, only_attack: bool, primary: bool) -> float:
    if descriptor.damage_multiplier is not None:
        return descriptor.damage_multiplier
    if only_attack:
        return ONLY_ATTACK_DAMAGE_MULT
    return PRIMARY_DAMAGE_MULT if primary else SECONDARY_DAMAGE_MULT


def _damage(
    descriptor: AttackDescriptor, form_size: Size
) -> tuple[list[DamagePart], list[DamagePart]]:
    """Split damage into (critical-multiplied parts, non-crit parts)."""
    if descriptor.dice_size == 0:
        return ([descriptor.non_crit] if descriptor.non_crit else []), []
    info = NATURAL_ATTACKS.get(descriptor.name)
    types = descriptor.damage_types or (info.types if info else ())
    scaled = DamagePart(
        formula=size_roll_formula(descriptor.dice_count, descriptor.dice_size, form_size),
        types=types,
    )
    return [scaled], ([descriptor.non_crit] if descriptor.non_crit else [])


def build_attack(
    actor: CharacterRecord,
    form_size: Size,
    descriptor: AttackDescriptor,
    *,
    only_attack: bool = False,
    source: str = "",
    category: AttackCategory = AttackCategory.NATURAL,
    effects: Mapping[SpecialAbility, SpecialEffect] = SPECIAL_EFFECTS,
    settings: Settings | None = None,
) -> AttackItem:
    """Build the attack item for one descriptor.

    Args:
        actor: Character the attack is for; supplies feats, ability totals
            and the configured melee ability.
        form_size: Size the descriptor's dice are quoted at.
        descriptor: The attack to build.
        only_attack: Whether this is the form's single natural attack.
        source: Effect name appended to the item name in parentheses.
        category: Sheet grouping for the item.
        effects: Special ability detail table.
        settings: Settings supplying the save DC and fallback icon.

    Returns:
        An unsaved AttackItem (its id is assigned by the store).

    Example:
        >>> bite = AttackDescriptor(name="Bite", dice_count=1, dice_size=6)
        >>> item = build_attack(actor, Size.MEDIUM, bite, only_attack=True, source="Beast Shape")
        >>> item.name, item.actions[0].damage_mult
        ('Bite (Beast Shape)', 1.5)
    """
    settings = settings or get_settings()
    info = NATURAL_ATTACKS.get(descriptor.name)
    primary = bool(descriptor.is_primary) or (info is not None and info.primary) or only_attack
    ranged = descriptor.attack_type is AttackType.RANGED
    img = info.img if info else settings.default_attack_icon

    action = AttackAction(
        name=descriptor.name,
        img=img,
        action_type=descriptor.attack_type,
        attack_ability=_attack_ability(actor, descriptor),
        damage_ability=None if ranged else Ability.STR,
        damage_mult=_damage_multiplier(descriptor, only_attack=only_attack, primary=primary),
        crit_range=descriptor.crit_range or DEFAULT_CRIT_RANGE,
        crit_mult=descriptor.crit_multiplier or DEFAULT_CRIT_MULTIPLIER,
        range_value="" if descriptor.range is None else str(descriptor.range),
        range_units="ft" if ranged else "melee",
        max_increments="" if descriptor.increment is None else str(descriptor.increment),
        uses_per="day" if descriptor.charges else "",
        uses_max=descriptor.charges or 0,
    )

    if descriptor.count > 1:
        action.attack_name = f"{descriptor.name} 1"
        action.attack_parts = [("", f"{descriptor.name} {n}") for n in range(2, descriptor.count + 1)]

    action.damage_parts, action.non_crit_parts = _damage(descriptor, form_size)

    description = ""
    for tag in descriptor.special:
        effect = effects.get(tag.ability)
        if effect is None:
            action.effect_notes.append(tag.label)
            continue
        action.effect_notes.append(effect.note)
        if effect.save_description:
            action.save = SaveData(
                type=effect.save_type,
                dc=settings.save_dc,
                description=effect.save_description,
            )
        # Last non-empty description wins; an empty one never clears it
        if effect.description:
            description = effect.description

    name = f"{descriptor.name} ({source})" if source else descriptor.name
    return AttackItem(
        name=name,
        img=img,
        attack_category=category,
        primary_attack=primary,
        enhancement=descriptor.enhancement,
        description=description,
        actions=[action],
    )


def is_only_attack(attacks: tuple[AttackDescriptor, ...]) -> bool:
    """Whether a form makes exactly one natural attack."""
    return len(attacks) == 1 and attacks[0].count == 1


__all__ = [
    "build_attack",
    "is_only_attack",
]
