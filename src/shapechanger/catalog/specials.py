"""Static lookup tables used when synthesizing attacks.

NATURAL_ATTACKS maps a natural attack name to its icon, default damage
types and whether that attack type is normally primary.

SPECIAL_EFFECTS maps a special ability to the effect note written on an
attack carrying it. The table is deliberately partial: a tag with no entry
is written on the attack as its plain label.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from shapechanger.models.enums import DamageType, SaveType, SpecialAbility


class NaturalAttackInfo(BaseModel):
    """Defaults for one natural attack name."""

    model_config = ConfigDict(frozen=True)

    img: str
    types: tuple[DamageType, ...]
    primary: bool


class SpecialEffect(BaseModel):
    """Templated note for a special ability.

    Attributes:
        note: Effect note text.
        save_type: Saving throw the special allows, if any.
        save_description: Save outcome text; a save is only set when present.
        description: Description written on the whole attack.
    """

    model_config = ConfigDict(frozen=True)

    note: str
    save_type: SaveType | None = None
    save_description: str = ""
    description: str = ""


_ICONS = "systems/pf1/icons"

NATURAL_ATTACKS: dict[str, NaturalAttackInfo] = {
    "Bite": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-head.jpg",
        types=(DamageType.BLUDGEONING, DamageType.PIERCING, DamageType.SLASHING),
        primary=True,
    ),
    "Claw": NaturalAttackInfo(
        img=f"{_ICONS}/skills/blood_06.jpg",
        types=(DamageType.BLUDGEONING, DamageType.SLASHING),
        primary=True,
    ),
    "Gore": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-horn.jpg",
        types=(DamageType.PIERCING,),
        primary=True,
    ),
    "Hoof": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-hoof.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=False,
    ),
    "Tentacle": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-octopus.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=False,
    ),
    "Wing": NaturalAttackInfo(
        img=f"{_ICONS}/skills/blue_02.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=False,
    ),
    "Pincers": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-claw.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=False,
    ),
    "Tail Slap": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-tail.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=False,
    ),
    "Slam": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-forearm.jpg",
        types=(DamageType.BLUDGEONING,),
        primary=True,
    ),
    "Sting": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-scorpion.jpg",
        types=(DamageType.PIERCING,),
        primary=True,
    ),
    "Talons": NaturalAttackInfo(
        img=f"{_ICONS}/items/inventory/monster-talon-green.jpg",
        types=(DamageType.SLASHING,),
        primary=True,
    ),
}


SPECIAL_EFFECTS: dict[SpecialAbility, SpecialEffect] = {
    SpecialAbility.GRAB: SpecialEffect(
        note="Grab: free grapple check without provoking on hit",
        description="If this attack hits, you may start a grapple as a free action.",
    ),
    SpecialAbility.TRIP: SpecialEffect(
        note="Trip: free trip attempt on hit",
        description="If this attack hits, you may attempt to trip as a free action.",
    ),
    SpecialAbility.CONSTRICT: SpecialEffect(
        note="Constrict: deal this attack's damage on a successful grapple check",
    ),
    SpecialAbility.RAKE: SpecialEffect(
        note="Rake: two extra claw attacks against a grappled foe",
    ),
    SpecialAbility.REND: SpecialEffect(
        note="Rend: extra damage if both attacks of this type hit",
    ),
    SpecialAbility.POISON: SpecialEffect(
        note="Poison: 1d2 Str damage per round for 6 rounds, cure 1 save",
        save_type=SaveType.FORTITUDE,
        save_description="Fortitude negates",
        description="A creature hit by this attack is exposed to poison.",
    ),
    SpecialAbility.BURN: SpecialEffect(
        note="Burn: target catches fire",
        save_type=SaveType.REFLEX,
        save_description="Reflex negates",
        description="A creature hit by this attack catches fire unless it saves.",
    ),
    SpecialAbility.BREATH_WEAPON: SpecialEffect(
        note="Breath weapon: usable once every 1d4 rounds",
        save_type=SaveType.REFLEX,
        save_description="Reflex half",
    ),
    SpecialAbility.TRAMPLE: SpecialEffect(
        note="Trample: overrun smaller creatures",
        save_type=SaveType.REFLEX,
        save_description="Reflex half",
    ),
    SpecialAbility.WHIRLWIND: SpecialEffect(
        note="Whirlwind: creatures caught may be lifted",
        save_type=SaveType.REFLEX,
        save_description="Reflex negates",
    ),
    SpecialAbility.VORTEX: SpecialEffect(
        note="Vortex: creatures caught may be swept up",
        save_type=SaveType.REFLEX,
        save_description="Reflex negates",
    ),
    SpecialAbility.WEB: SpecialEffect(
        note="Web: target is entangled",
        save_type=SaveType.REFLEX,
        save_description="Reflex negates",
    ),
}


__all__ = [
    "NaturalAttackInfo",
    "SpecialEffect",
    "NATURAL_ATTACKS",
    "SPECIAL_EFFECTS",
]
