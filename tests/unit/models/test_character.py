"""Tests for character records, change records, snapshots and requests."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import TypeAdapter, ValidationError

from shapechanger.models import (
    Ability,
    ArmorRecord,
    BuffItem,
    CarryCapacity,
    CharacterRecord,
    ChangeRecord,
    EffectCategory,
    EffectSnapshot,
    FrightfulAspectRequest,
    PolymorphRequest,
    SizeBuffRequest,
    Size,
    SpellKind,
    TransformationRequest,
    heavy_load,
    strength_delta,
)
from shapechanger.models.changes import CARRY_MULTIPLIER, CARRY_STRENGTH


# =============================================================================
# Change Records
# =============================================================================


class TestChangeRecord:
    """Tests for ChangeRecord."""

    def test_formula_defaults_to_value(self) -> None:
        assert ChangeRecord(sub_target="str", value=2).formula == "2"
        assert ChangeRecord(sub_target=CARRY_MULTIPLIER, value=-0.5).formula == "-0.5"

    def test_explicit_formula_kept(self) -> None:
        change = ChangeRecord(sub_target="str", value=2, formula="2 + 0")
        assert change.formula == "2 + 0"

    def test_serializes_with_aliases(self) -> None:
        dumped = ChangeRecord.ability_change(Ability.STR, 2).model_dump(by_alias=True)
        assert dumped["subTarget"] == "str"
        assert dumped["target"] == "ability"
        assert dumped["modifier"] == "size"

    def test_ability(self) -> None:
        assert ChangeRecord.ability_change(Ability.DEX, -2).ability is Ability.DEX
        assert ChangeRecord.natural_armor(2).ability is None

    def test_capacity_term(self) -> None:
        assert ChangeRecord(sub_target=CARRY_STRENGTH, value=2).is_capacity_term
        assert not ChangeRecord.natural_armor(2).is_capacity_term

    def test_strength_delta(self) -> None:
        changes = [
            ChangeRecord.ability_change(Ability.STR, 4),
            ChangeRecord.ability_change(Ability.DEX, -2),
            ChangeRecord.ability_change(Ability.STR, -8, modifier="untyped"),
        ]
        assert strength_delta(changes) == -4


# =============================================================================
# Character Records
# =============================================================================


def _buff(*changes: ChangeRecord, active: bool = True) -> BuffItem:
    return BuffItem(id="buff-1", name="Test Buff", active=active, changes=list(changes))


class TestHeavyLoad:
    """Tests for the carrying capacity table."""

    @pytest.mark.parametrize(
        "strength,expected",
        [(0, 0.0), (1, 10.0), (10, 100.0), (11, 115.0), (16, 230.0), (20, 400.0), (25, 800.0)],
    )
    def test_table(self, strength: int, expected: float) -> None:
        assert heavy_load(strength) == expected

    def test_every_ten_points_quadruples(self) -> None:
        assert heavy_load(30) == 4 * heavy_load(20)


class TestCharacterRecord:
    """Tests for derived character totals."""

    def test_ability_totals(self, actor: CharacterRecord) -> None:
        assert actor.ability_total(Ability.STR) == 16
        assert actor.ability_total(Ability.WIS) == 10

    def test_active_buff_changes_apply(self, actor: CharacterRecord) -> None:
        buffed = actor.model_copy(
            update={
                "items": [
                    *actor.items,
                    _buff(ChangeRecord.ability_change(Ability.STR, 4), ChangeRecord.natural_armor(2)),
                ]
            }
        )
        assert buffed.ability_total(Ability.STR) == 20
        assert buffed.natural_armor == 2

    def test_inactive_buff_ignored(self, actor: CharacterRecord) -> None:
        buffed = actor.model_copy(
            update={
                "items": [
                    *actor.items,
                    _buff(ChangeRecord.ability_change(Ability.STR, 4), active=False),
                ]
            }
        )
        assert buffed.ability_total(Ability.STR) == 16

    def test_carry_bonus_superseded_by_changes(self, actor: CharacterRecord) -> None:
        """Active carryStr changes replace the user bonus."""
        carrying = actor.model_copy(update={"carry": CarryCapacity(bonus_user=3)})
        assert carrying.carry_strength_bonus == 3

        compensated = carrying.model_copy(
            update={"items": [_buff(ChangeRecord(sub_target=CARRY_STRENGTH, value=1))]}
        )
        assert compensated.carry_strength_bonus == 1

    def test_carry_multiplier_adds(self, actor: CharacterRecord) -> None:
        carrying = actor.model_copy(
            update={
                "carry": CarryCapacity(multiplier_user=0.5),
                "items": [_buff(ChangeRecord(sub_target=CARRY_MULTIPLIER, value=-0.25))],
            }
        )
        assert carrying.carry_multiplier == pytest.approx(1.25)

    def test_carrying_capacity_uses_size(self, character_factory: Any) -> None:
        medium = character_factory(size=Size.MEDIUM)
        large = character_factory(size=Size.LARGE)

        assert medium.carrying_capacity == 230.0
        assert large.carrying_capacity == 460.0

    def test_item_lookups(self, actor: CharacterRecord) -> None:
        assert actor.get_item("armor-1") is not None
        assert actor.get_item("nope") is None
        assert [i.id for i in actor.armor_items] == ["armor-1", "shield-1"]
        assert actor.find_buff("Test Buff") is None

    def test_weapon_finesse(self, actor: CharacterRecord, finesse_actor: CharacterRecord) -> None:
        assert finesse_actor.has_weapon_finesse
        assert not actor.has_weapon_finesse

    def test_document_round_trip(self, actor: CharacterRecord) -> None:
        """The stored document form validates back to an equal record."""
        document = actor.document()

        assert document["items"][0]["armorValue"] == 4
        assert CharacterRecord.model_validate(document) == actor

    def test_items_discriminated(self) -> None:
        record = CharacterRecord.model_validate(
            {
                "id": "a1",
                "name": "Ezren",
                "items": [{"type": "buff", "id": "b1", "name": "Haste", "active": True}],
            }
        )
        assert isinstance(record.items[0], BuffItem)

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CharacterRecord(id="a1", name="Ezren", hit_points=12)


# =============================================================================
# Snapshots
# =============================================================================


class TestEffectSnapshot:
    """Tests for the stored revert record."""

    def test_flag_layout(self) -> None:
        snapshot = EffectSnapshot(
            source="Beast Shape",
            buff_name="Beast Shape",
            kind=SpellKind.BEAST_SHAPE,
            size=Size.MEDIUM,
            armor=(ArmorRecord(item_id="armor-1", original_armor_rating=4),),
            data={"traits.dr": ""},
            items_created=("attack-1",),
        )

        flag = snapshot.to_flag()

        assert flag == {
            "source": "Beast Shape",
            "buffName": "Beast Shape",
            "kind": "beast_shape",
            "size": "medium",
            "armor": [{"itemId": "armor-1", "originalArmorRating": 4}],
            "data": {"traits.dr": ""},
            "itemsCreated": ["attack-1"],
        }
        assert EffectSnapshot.model_validate(flag) == snapshot
        assert snapshot.category is EffectCategory.POLYMORPH


# =============================================================================
# Requests
# =============================================================================


class TestTransformationRequest:
    """Tests for the request union."""

    adapter: TypeAdapter[Any] = TypeAdapter(TransformationRequest)

    def test_dispatches_polymorph(self) -> None:
        request = self.adapter.validate_python(
            {"kind": SpellKind.BEAST_SHAPE, "level": 2, "form_name": "Wolf"}
        )
        assert isinstance(request, PolymorphRequest)

    def test_dispatches_size_buff(self) -> None:
        request = self.adapter.validate_python({"kind": SpellKind.REDUCE_PERSON})
        assert isinstance(request, SizeBuffRequest)

    def test_dispatches_frightful_aspect(self) -> None:
        request = self.adapter.validate_python(
            {"kind": SpellKind.FRIGHTFUL_ASPECT, "caster_level": 9}
        )
        assert isinstance(request, FrightfulAspectRequest)
        assert request.caster_level == 9

    def test_level_range(self) -> None:
        with pytest.raises(ValidationError):
            PolymorphRequest(kind=SpellKind.BEAST_SHAPE, level=5, form_name="Wolf")

    def test_buff_kind_not_polymorph(self) -> None:
        with pytest.raises(ValidationError):
            PolymorphRequest(kind=SpellKind.ENLARGE_PERSON, level=1, form_name="Wolf")
