"""Plans for fixed size-change buffs.

Enlarge person, reduce person, animal growth, legendary proportions and
frightful aspect all change size by a fixed rule and carry a fixed change
list. Some also append damage reduction; frightful aspect grants spell
resistance that scales with caster level.
"""

from __future__ import annotations

from shapechanger.catalog.change_sets import buff_definition
from shapechanger.core.exceptions import ValidationError
from shapechanger.core.i18n import DictLocalizer, Localizer
from shapechanger.engine.resolver import describe_changes
from shapechanger.engine.size import new_size
from shapechanger.models.character import CharacterRecord
from shapechanger.models.enums import SpellKind
from shapechanger.models.requests import TransformationPlan


def frightful_aspect_sr(caster_level: int) -> int:
    """Spell resistance frightful aspect grants: 10 + half caster level."""
    return 10 + caster_level // 2


def append_damage_reduction(current: str, added: str) -> str:
    """Append a DR entry to a character's DR text."""
    return f"{current}; {added}" if current else added


def buff_plan(
    actor: CharacterRecord,
    kind: SpellKind,
    *,
    caster_level: int | None = None,
    source: str | None = None,
    localizer: Localizer | None = None,
) -> TransformationPlan:
    """Build the plan for a size-change buff on ``actor``.

    Args:
        actor: Character receiving the buff.
        kind: Which buff.
        caster_level: Caster level; required for frightful aspect.
        source: Effect source name; defaults to the buff name.
        localizer: Display text lookup for the preview.

    Returns:
        The plan to hand to apply_transformation.

    Raises:
        CatalogError: If ``kind`` is not a size-change buff.
        ValidationError: If frightful aspect is requested without a
            caster level.
    """
    localizer = localizer or DictLocalizer()
    definition = buff_definition(kind)
    target = definition.absolute_size or new_size(actor.traits.size, definition.size_steps)

    overrides: dict[str, str] = {}
    lines = [
        f"{localizer.localize('UI.Size')}: {target.label}",
        f"{localizer.localize('UI.AbilityScores')}: "
        + ", ".join(describe_changes(definition.changes, localizer)),
    ]

    if definition.damage_reduction is not None:
        added = str(definition.damage_reduction)
        overrides["traits.dr"] = append_damage_reduction(actor.traits.dr, added)
        lines.append(f"{localizer.localize('UI.DamageResistances')}: {added}")

    if kind is SpellKind.FRIGHTFUL_ASPECT:
        if caster_level is None:
            raise ValidationError(
                "Frightful aspect needs a caster level",
                field_name="caster_level",
            )
        granted = frightful_aspect_sr(caster_level)
        keep = actor.traits.spell_resistance > granted
        overrides["traits.sr"] = actor.traits.sr if keep else str(granted)
        lines.append(f"{localizer.localize('UI.SpellResistance')}: {overrides['traits.sr']}")

    return TransformationPlan(
        kind=kind,
        source=source or definition.name,
        buff_name=definition.name,
        buff_img=definition.img,
        changes=definition.changes,
        new_size=target,
        overrides=overrides,
        preview_text="\n".join(lines),
    )


__all__ = [
    "buff_plan",
    "frightful_aspect_sr",
    "append_damage_reduction",
]
