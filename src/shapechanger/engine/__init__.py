"""Transformation engine for shapechanger.

This module turns catalog data into store writes and back again. Planning
is pure; only the applier and revert touch the character store.

Submodules:
    size: Size stepping along the size scale
    capacity: Carry compensation for size changes
    damage: Size-scaled damage dice
    resolver: Level-gated change resolution and preview text
    attacks: Attack item synthesis
    buffs: Size-change buff plans
    polymorph: Polymorph spell plans
    applier: Apply a plan with undo on failure
    revert: Revert a transformation from its snapshot

Example:
    >>> from shapechanger.engine import polymorph_plan, apply_transformation
    >>>
    >>> plan = polymorph_plan(actor, get_form("Wolf"), SpellKind.BEAST_SHAPE, 1)
    >>> snapshot = await apply_transformation(store, actor.id, plan)
"""

from __future__ import annotations

from shapechanger.engine.applier import (
    apply_transformation,
    existing_source,
    rescaled_armor_rating,
)
from shapechanger.engine.attacks import build_attack, is_only_attack
from shapechanger.engine.buffs import append_damage_reduction, buff_plan, frightful_aspect_sr
from shapechanger.engine.capacity import capacity_changes, strip_capacity_changes
from shapechanger.engine.damage import size_roll, size_roll_formula
from shapechanger.engine.polymorph import (
    POLYMORPH_ICONS,
    merge_resistances,
    merge_senses,
    polymorph_plan,
    trait_overrides,
)
from shapechanger.engine.resolver import (
    ResolvedChanges,
    describe_attack,
    describe_changes,
    filter_catalog,
    render_preview,
    resolve_changes,
)
from shapechanger.engine.revert import read_snapshot, revert
from shapechanger.engine.size import crosses_tiny_threshold, new_size


__all__ = [
    # Size & capacity
    "new_size",
    "crosses_tiny_threshold",
    "capacity_changes",
    "strip_capacity_changes",
    # Damage & attacks
    "size_roll",
    "size_roll_formula",
    "build_attack",
    "is_only_attack",
    # Resolution
    "ResolvedChanges",
    "resolve_changes",
    "render_preview",
    "describe_changes",
    "describe_attack",
    "filter_catalog",
    # Plans
    "buff_plan",
    "frightful_aspect_sr",
    "append_damage_reduction",
    "polymorph_plan",
    "trait_overrides",
    "merge_senses",
    "merge_resistances",
    "POLYMORPH_ICONS",
    # Apply & revert
    "apply_transformation",
    "rescaled_armor_rating",
    "existing_source",
    "revert",
    "read_snapshot",
]
