"""Level-gated change resolution for polymorph spells.

The resolver takes a catalog form and trims it to what a spell kind allows
at a given level, using the kind's SpellGating entry. Every category is
gated by a single table lookup; nothing here branches on the spell kind.

Resolution is a pure function of (form, kind, level, actor size): the same
inputs always produce the same ResolvedChanges, and raising the level never
removes anything a lower level exposed.

Example:
    >>> from shapechanger.catalog import get_form
    >>> resolved = resolve_changes(get_form("Wolf"), SpellKind.BEAST_SHAPE, 1, Size.MEDIUM)
    >>> print(resolved.preview_text.splitlines()[0])
    Ability Scores: Str +2, Natural AC +2
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shapechanger.catalog.change_sets import base_size_adjustment, polymorph_changes
from shapechanger.catalog.forms import FORMS
from shapechanger.catalog.gating import LevelGate, SpellGating, gating_for
from shapechanger.core.constants import FOLDED_IMMUNITY_RESISTANCE
from shapechanger.core.i18n import DictLocalizer, Localizer
from shapechanger.core.logging import get_logger
from shapechanger.models.changes import NATURAL_ARMOR, ChangeRecord
from shapechanger.models.enums import (
    DefenseCategory,
    EnergyType,
    Immunity,
    MovementMode,
    Size,
    SpellKind,
)
from shapechanger.models.forms import (
    AttackDescriptor,
    DamageReduction,
    EnergyResistance,
    FormDefinition,
    Regeneration,
    Sense,
    SpecialTag,
    SpeedSet,
)


logger = get_logger(__name__)

_ELEMENTAL_ENERGIES = frozenset(
    {
        EnergyType.ACID,
        EnergyType.COLD,
        EnergyType.ELECTRICITY,
        EnergyType.FIRE,
        EnergyType.SONIC,
    }
)


class ResolvedChanges(BaseModel):
    """A form trimmed to what one spell level allows.

    Attributes:
        form_name: Name of the resolved form.
        size: The form's size.
        changes: Ability and natural armor changes for the form.
        base_size_changes: Adjustment for a non-medium caster.
        attacks: Natural attacks with disallowed tags stripped.
        special_attacks: Special attacks whose tags are all allowed.
        speeds: Capped movement speeds.
        senses: Allowed senses with clamped ranges.
        special: Allowed special qualities.
        energy_resistances: Granted energy resistances.
        vulnerabilities: Energy vulnerabilities.
        damage_immunities: Damage immunities.
        damage_reduction: Damage reduction entries.
        regeneration: Regeneration, if granted.
        preview_text: One "Label: value" line per section.
    """

    model_config = ConfigDict(frozen=True)

    form_name: str
    size: Size
    changes: tuple[ChangeRecord, ...] = Field(default=())
    base_size_changes: tuple[ChangeRecord, ...] = Field(default=())
    attacks: tuple[AttackDescriptor, ...] = Field(default=())
    special_attacks: tuple[AttackDescriptor, ...] = Field(default=())
    speeds: SpeedSet = Field(default_factory=SpeedSet)
    senses: tuple[Sense, ...] = Field(default=())
    special: tuple[SpecialTag, ...] = Field(default=())
    energy_resistances: tuple[EnergyResistance, ...] = Field(default=())
    vulnerabilities: tuple[EnergyType, ...] = Field(default=())
    damage_immunities: tuple[Immunity, ...] = Field(default=())
    damage_reduction: tuple[DamageReduction, ...] = Field(default=())
    regeneration: Regeneration | None = None
    preview_text: str = ""

    @property
    def all_changes(self) -> tuple[ChangeRecord, ...]:
        """Base-size adjustment followed by the form's own changes."""
        return self.base_size_changes + self.changes


# =============================================================================
# Category Filters
# =============================================================================


def _gate_senses(senses: tuple[Sense, ...], gate: LevelGate) -> tuple[Sense, ...]:
    resolved = []
    for sense in senses:
        if sense.kind not in gate.senses:
            continue
        limit = gate.senses[sense.kind]
        if limit is not None and sense.range is not None and sense.range > limit:
            sense = sense.model_copy(update={"range": limit})
        resolved.append(sense)
    return tuple(resolved)


def _gate_attack(attack: AttackDescriptor, gate: LevelGate) -> AttackDescriptor:
    allowed = tuple(tag for tag in attack.special if tag.ability in gate.specials)
    if len(allowed) == len(attack.special):
        return attack
    return attack.model_copy(update={"special": allowed})


def _gate_special_attacks(
    attacks: tuple[AttackDescriptor, ...], gate: LevelGate
) -> tuple[AttackDescriptor, ...]:
    return tuple(
        attack
        for attack in attacks
        if all(tag.ability in gate.specials for tag in attack.special)
    )


def _merge_resistance(merged: dict[EnergyType, int], energy: EnergyType, amount: int) -> None:
    merged[energy] = max(merged.get(energy, 0), amount)


def _gate_resistances(
    form: FormDefinition, gating: SpellGating, level: int
) -> tuple[EnergyResistance, ...]:
    if not gating.allows(DefenseCategory.ENERGY_RESISTANCE, level):
        return ()
    merged: dict[EnergyType, int] = {}
    for resistance in form.energy_resistances:
        if gating.elemental_resistances_only and resistance.energy not in _ELEMENTAL_ENERGIES:
            continue
        _merge_resistance(merged, resistance.energy, resistance.amount)
    if gating.fold_immunities:
        for immunity in form.damage_immunities:
            energy = immunity.energy_type
            if energy in _ELEMENTAL_ENERGIES:
                _merge_resistance(merged, energy, FOLDED_IMMUNITY_RESISTANCE)
    cap = gating.resistance_cap
    return tuple(
        EnergyResistance(energy=energy, amount=amount if cap is None else min(amount, cap))
        for energy, amount in merged.items()
    )


def _gate_vulnerabilities(
    form: FormDefinition, gating: SpellGating, level: int
) -> tuple[EnergyType, ...]:
    if not gating.allows(DefenseCategory.VULNERABILITY, level):
        return ()
    if gating.elemental_resistances_only:
        return tuple(v for v in form.vulnerabilities if v in _ELEMENTAL_ENERGIES)
    return form.vulnerabilities


# =============================================================================
# Preview
# =============================================================================


def _signed(value: float) -> str:
    number = int(value) if float(value).is_integer() else value
    return f"+{number}" if value >= 0 else str(number)


def _change_label(change: ChangeRecord, localizer: Localizer) -> str:
    if change.sub_target == NATURAL_ARMOR:
        name = localizer.localize("UI.NaturalAC")
    elif change.ability is not None:
        name = change.ability.abbreviation
    else:
        name = change.sub_target
    return f"{name} {_signed(change.value)}"


def describe_changes(changes: tuple[ChangeRecord, ...], localizer: Localizer) -> list[str]:
    """Changes as preview entries, e.g. ['Str +2', 'Natural AC +2']."""
    return [_change_label(change, localizer) for change in changes]


def describe_attack(attack: AttackDescriptor, localizer: Localizer) -> str:
    """One attack as preview text, e.g. '2 Claw (1d4 plus Grab)'."""
    plus = f" {localizer.localize('UI.Plus')} "
    parts = [attack.dice_label] if attack.dice_label else []
    if attack.non_crit is not None:
        parts.append(attack.non_crit.label)
    elif not parts:
        parts.append("0")
    if attack.special:
        parts.append(", ".join(tag.label for tag in attack.special))
    prefix = f"{attack.count} " if attack.count > 1 else ""
    return f"{prefix}{attack.name} ({plus.join(parts)})"


def _describe_speeds(speeds: SpeedSet, localizer: Localizer) -> list[str]:
    ft = localizer.localize("UI.ft")
    entries = []
    for mode in speeds.modes:
        text = f"{mode.value.capitalize()} {speeds.get(mode)} {ft}"
        if mode is MovementMode.FLY:
            text += f" ({speeds.maneuverability.value})"
        entries.append(text)
    return entries


def render_preview(
    resolved: ResolvedChanges,
    localizer: Localizer | None = None,
) -> str:
    """Render the preview text for resolved changes.

    Sections always appear in the same order. Empty sections read as the
    localized "none"; the base-size line only appears when non-empty.
    """
    localizer = localizer or DictLocalizer()
    none = localizer.localize("UI.None")
    conjunction = localizer.localize("UI.or")

    sections: list[tuple[str, list[str]]] = []
    if resolved.base_size_changes:
        sections.append(
            (
                "UI.BaseSizeAdjust",
                describe_changes(resolved.base_size_changes, localizer),
            )
        )
    sections += [
        ("UI.AbilityScores", describe_changes(resolved.changes, localizer)),
        ("UI.Attacks", [describe_attack(a, localizer) for a in resolved.attacks]),
        ("UI.SpecialAttacks", [describe_attack(a, localizer) for a in resolved.special_attacks]),
        ("UI.Speeds", _describe_speeds(resolved.speeds, localizer)),
        ("UI.Senses", [s.label for s in resolved.senses]),
        ("UI.SpecialAbilities", [t.label for t in resolved.special]),
        ("UI.EnergyResistances", [r.label for r in resolved.energy_resistances]),
        ("UI.Vulnerabilities", [v.label for v in resolved.vulnerabilities]),
        ("UI.DamageImmunities", [i.label for i in resolved.damage_immunities]),
        ("UI.DamageResistances", [str(dr) for dr in resolved.damage_reduction]),
        (
            "UI.Regeneration",
            [resolved.regeneration.render(conjunction)] if resolved.regeneration else [],
        ),
    ]
    return "\n".join(
        f"{localizer.localize(key)}: {', '.join(values) or none}" for key, values in sections
    )


# =============================================================================
# Entry Points
# =============================================================================


def resolve_changes(
    form: FormDefinition,
    kind: SpellKind,
    level: int,
    actor_size: Size,
    *,
    localizer: Localizer | None = None,
) -> ResolvedChanges:
    """Trim a form to what ``kind`` allows at ``level``.

    Args:
        form: Catalog form the character is taking.
        kind: Polymorph spell kind.
        level: Spell level.
        actor_size: The caster's current size, for the base-size adjustment.
        localizer: Display text lookup for the preview.

    Returns:
        The resolved changes, including preview text.

    Raises:
        CatalogError: If the kind has no such level or no change set for
            the form's family and size.
    """
    gating = gating_for(kind)
    gate = gating.gate(level)

    resolved = ResolvedChanges(
        form_name=form.name,
        size=form.size,
        changes=polymorph_changes(kind, form.family, form.size),
        base_size_changes=base_size_adjustment(actor_size),
        attacks=tuple(_gate_attack(attack, gate) for attack in form.attacks),
        special_attacks=_gate_special_attacks(form.special_attacks, gate),
        speeds=form.speed.capped(gate.speed_caps),
        senses=_gate_senses(form.senses, gate),
        special=tuple(tag for tag in form.special if tag.ability in gate.specials),
        energy_resistances=_gate_resistances(form, gating, level),
        vulnerabilities=_gate_vulnerabilities(form, gating, level),
        damage_immunities=(
            form.damage_immunities
            if gating.allows(DefenseCategory.DAMAGE_IMMUNITY, level)
            else ()
        ),
        damage_reduction=(
            form.damage_reduction
            if gating.allows(DefenseCategory.DAMAGE_REDUCTION, level)
            else ()
        ),
        regeneration=(
            form.regeneration if gating.allows(DefenseCategory.REGENERATION, level) else None
        ),
    )
    logger.debug("Resolved form", form=form.name, kind=kind.value, level=level)
    return resolved.model_copy(update={"preview_text": render_preview(resolved, localizer)})


def filter_catalog(
    kind: SpellKind,
    level: int,
    forms: tuple[FormDefinition, ...] = FORMS,
) -> list[FormDefinition]:
    """Forms a spell level may choose from, sorted by name.

    Raises:
        CatalogError: If the kind is not a polymorph spell or has no such level.
    """
    gate = gating_for(kind).gate(level)
    return sorted(
        (form for form in forms if form.size in gate.forms.get(form.family, frozenset())),
        key=lambda form: form.name,
    )


__all__ = [
    "ResolvedChanges",
    "resolve_changes",
    "render_preview",
    "describe_changes",
    "describe_attack",
    "filter_catalog",
]
