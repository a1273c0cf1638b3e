"""Pydantic models for forms, characters, changes and snapshots.

This package holds the data the engine reads and writes. Models here carry
no persistence or rules logic beyond derived totals and parsing.

Exports:
    Enums:
        Size, SpellKind, EffectCategory, FormFamily, SenseKind, EnergyType,
        Immunity, DamageType, AttackType, AttackCategory, SpecialAbility...

    Forms:
        FormDefinition, AttackDescriptor, SpecialTag, SpeedSet, Sense,
        EnergyResistance, DamageReduction, Regeneration, DamagePart.

    Characters:
        CharacterRecord, BuffItem, AttackItem, AttackAction, EquipmentItem,
        FeatItem, Item.

    Changes & Snapshots:
        ChangeRecord, EffectSnapshot, ArmorRecord.

    Requests:
        TransformationRequest, PolymorphRequest, SizeBuffRequest,
        FrightfulAspectRequest, TransformationPlan.
"""

from __future__ import annotations

from shapechanger.models.changes import (
    CARRY_MULTIPLIER,
    CARRY_STRENGTH,
    NATURAL_ARMOR,
    ChangeRecord,
    strength_delta,
)
from shapechanger.models.character import (
    AttackAction,
    AttackItem,
    BuffItem,
    CarryCapacity,
    CharacterRecord,
    EquipmentItem,
    FeatItem,
    Item,
    SaveData,
    Token,
    Traits,
    heavy_load,
)
from shapechanger.models.enums import (
    Ability,
    AttackCategory,
    AttackType,
    ChangeOperator,
    DamageType,
    DefenseCategory,
    EffectCategory,
    EnergyType,
    EquipmentType,
    FormFamily,
    Immunity,
    ItemType,
    Maneuverability,
    MovementMode,
    SaveType,
    SenseKind,
    Size,
    SpecialAbility,
    SpellKind,
)
from shapechanger.models.forms import (
    AttackDescriptor,
    DamagePart,
    DamageReduction,
    EnergyResistance,
    FormDefinition,
    Regeneration,
    Sense,
    SpecialTag,
    SpeedSet,
)
from shapechanger.models.requests import (
    FrightfulAspectRequest,
    PolymorphRequest,
    SizeBuffRequest,
    TransformationPlan,
    TransformationRequest,
)
from shapechanger.models.snapshot import ArmorRecord, EffectSnapshot


__all__ = [
    # Enums
    "Ability",
    "AttackCategory",
    "AttackType",
    "ChangeOperator",
    "DamageType",
    "DefenseCategory",
    "EffectCategory",
    "EnergyType",
    "EquipmentType",
    "FormFamily",
    "Immunity",
    "ItemType",
    "Maneuverability",
    "MovementMode",
    "SaveType",
    "SenseKind",
    "Size",
    "SpecialAbility",
    "SpellKind",
    # Forms
    "AttackDescriptor",
    "DamagePart",
    "DamageReduction",
    "EnergyResistance",
    "FormDefinition",
    "Regeneration",
    "Sense",
    "SpecialTag",
    "SpeedSet",
    # Characters
    "AttackAction",
    "AttackItem",
    "BuffItem",
    "CarryCapacity",
    "CharacterRecord",
    "EquipmentItem",
    "FeatItem",
    "Item",
    "SaveData",
    "Token",
    "Traits",
    "heavy_load",
    # Changes
    "CARRY_MULTIPLIER",
    "CARRY_STRENGTH",
    "NATURAL_ARMOR",
    "ChangeRecord",
    "strength_delta",
    # Snapshots
    "ArmorRecord",
    "EffectSnapshot",
    # Requests
    "FrightfulAspectRequest",
    "PolymorphRequest",
    "SizeBuffRequest",
    "TransformationPlan",
    "TransformationRequest",
]
