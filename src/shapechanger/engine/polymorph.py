"""Plans for polymorph spells (beast shape, elemental body, plant shape).

A polymorph plan combines the resolver's output for one form with the
attack items built for it and the trait overrides the form brings:

* speeds are replaced outright;
* senses merge with the character's own, keeping the longer range;
* energy resistances merge, keeping the higher amount;
* vulnerabilities and immunities are added to the character's;
* damage reduction is appended to the DR text;
* regeneration, when granted, is set;
* the token image is swapped when an image was found for the form.
"""

from __future__ import annotations

from typing import Any

from shapechanger.core import constants
from shapechanger.core.config import Settings, get_settings
from shapechanger.core.i18n import Localizer
from shapechanger.core.logging import get_logger
from shapechanger.engine.attacks import build_attack, is_only_attack
from shapechanger.engine.buffs import append_damage_reduction
from shapechanger.engine.resolver import ResolvedChanges, resolve_changes
from shapechanger.models.character import CharacterRecord, Traits
from shapechanger.models.enums import AttackCategory, EnergyType, SenseKind, SpellKind
from shapechanger.models.forms import EnergyResistance, FormDefinition, Sense
from shapechanger.models.requests import TransformationPlan


logger = get_logger(__name__)

POLYMORPH_ICONS: dict[SpellKind, str] = {
    SpellKind.BEAST_SHAPE: constants.ICON_BEAST_SHAPE,
    SpellKind.ELEMENTAL_BODY: constants.ICON_ELEMENTAL_BODY,
    SpellKind.PLANT_SHAPE: constants.ICON_PLANT_SHAPE,
}


def merge_senses(current: list[Sense], added: tuple[Sense, ...]) -> list[Sense]:
    """Union of two sense lists; a shared kind keeps the longer range."""
    merged: dict[SenseKind, Sense] = {sense.kind: sense for sense in current}
    for sense in added:
        existing = merged.get(sense.kind)
        if existing is None or (sense.range or 0) > (existing.range or 0):
            merged[sense.kind] = sense
    return list(merged.values())


def merge_resistances(
    current: list[EnergyResistance], added: tuple[EnergyResistance, ...]
) -> list[EnergyResistance]:
    """Union of two resistance lists; a shared energy keeps the higher amount."""
    merged: dict[EnergyType, EnergyResistance] = {r.energy: r for r in current}
    for resistance in added:
        existing = merged.get(resistance.energy)
        if existing is None or resistance.amount > existing.amount:
            merged[resistance.energy] = resistance
    return list(merged.values())


def _union(current: list[Any], added: tuple[Any, ...]) -> list[Any]:
    return current + [value for value in added if value not in current]


def trait_overrides(traits: Traits, resolved: ResolvedChanges) -> dict[str, Any]:
    """Document overrides for the traits a resolved form grants.

    Only categories the form actually grants are overridden.
    """
    overrides: dict[str, Any] = {"speed": resolved.speeds.model_dump(mode="json")}
    if resolved.senses:
        overrides["traits.senses"] = [
            s.model_dump(mode="json") for s in merge_senses(traits.senses, resolved.senses)
        ]
    if resolved.energy_resistances:
        overrides["traits.eres"] = [
            r.model_dump(mode="json")
            for r in merge_resistances(traits.eres, resolved.energy_resistances)
        ]
    if resolved.vulnerabilities:
        overrides["traits.dv"] = [v.value for v in _union(traits.dv, resolved.vulnerabilities)]
    if resolved.damage_immunities:
        overrides["traits.di"] = [i.value for i in _union(traits.di, resolved.damage_immunities)]
    if resolved.damage_reduction:
        dr = traits.dr
        for entry in resolved.damage_reduction:
            dr = append_damage_reduction(dr, str(entry))
        overrides["traits.dr"] = dr
    if resolved.regeneration is not None:
        overrides["traits.regen"] = resolved.regeneration.render()
    return overrides


def polymorph_plan(
    actor: CharacterRecord,
    form: FormDefinition,
    kind: SpellKind,
    level: int,
    *,
    source: str | None = None,
    image: str = "",
    localizer: Localizer | None = None,
    settings: Settings | None = None,
) -> TransformationPlan:
    """Build the plan for taking ``form`` with a polymorph spell.

    Args:
        actor: Character taking the form.
        form: Catalog form.
        kind: Polymorph spell kind.
        level: Spell level.
        source: Effect source name; defaults to the spell's display name.
        image: Token image for the form, or "" to leave the token alone.
        localizer: Display text lookup for the preview.
        settings: Settings for attack synthesis.

    Returns:
        The plan to hand to apply_transformation.

    Raises:
        CatalogError: If the spell has no such level or no change set for
            the form.
    """
    settings = settings or get_settings()
    resolved = resolve_changes(form, kind, level, actor.traits.size, localizer=localizer)
    source = source or kind.display_name

    only = is_only_attack(resolved.attacks)
    attacks = [
        build_attack(actor, form.size, d, only_attack=only, source=source, settings=settings)
        for d in resolved.attacks
    ]
    attacks += [
        build_attack(
            actor,
            form.size,
            d,
            source=source,
            category=AttackCategory.MISC,
            settings=settings,
        )
        for d in resolved.special_attacks
    ]

    overrides = trait_overrides(actor.traits, resolved)
    if image:
        overrides["token.img"] = image

    logger.debug(
        "Built polymorph plan",
        form=form.name,
        kind=kind.value,
        level=level,
        attacks=len(attacks),
        overrides=sorted(overrides),
    )
    return TransformationPlan(
        kind=kind,
        source=source,
        buff_name=source,
        buff_img=POLYMORPH_ICONS.get(kind, ""),
        changes=resolved.all_changes,
        new_size=form.size,
        attacks=tuple(attacks),
        overrides=overrides,
        preview_text=resolved.preview_text,
    )


__all__ = [
    "POLYMORPH_ICONS",
    "merge_senses",
    "merge_resistances",
    "trait_overrides",
    "polymorph_plan",
]
