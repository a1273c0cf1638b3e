"""Tests for applying transformation plans."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from shapechanger.catalog import get_form
from shapechanger.core.config import Settings
from shapechanger.core.exceptions import (
    AlreadyTransformedError,
    StorageError,
    TransformationError,
)
from shapechanger.engine.applier import (
    apply_transformation,
    existing_source,
    rescaled_armor_rating,
)
from shapechanger.engine.buffs import buff_plan
from shapechanger.engine.polymorph import polymorph_plan
from shapechanger.engine.revert import revert
from shapechanger.models import Ability, BuffItem, CharacterRecord
from shapechanger.models.changes import CARRY_MULTIPLIER, CARRY_STRENGTH
from shapechanger.models.character import AttackItem
from shapechanger.models.enums import Size, SpellKind
from shapechanger.storage.store import InMemoryCharacterStore


class FailingFlagStore(InMemoryCharacterStore):
    """Store whose snapshot write always fails."""

    async def update(self, actor_id: str, patch: Mapping[str, Any]) -> CharacterRecord:
        if any(path.startswith("flags.") for path in patch):
            raise StorageError("Flag write rejected", details={"actor_id": actor_id})
        return await super().update(actor_id, patch)


def _armor_values(record: CharacterRecord) -> dict[str, int]:
    return {item.id: item.armor_value for item in record.armor_items}


# =============================================================================
# Helpers
# =============================================================================


class TestRescaledArmorRating:
    """Tests for the armor rescale rule."""

    @pytest.mark.parametrize(
        "rating,current,target,expected",
        [
            (4, Size.TINY, Size.SMALL, 8),
            (3, Size.SMALL, Size.TINY, 1),
            (4, Size.MEDIUM, Size.LARGE, 4),
            (4, Size.MEDIUM, Size.SMALL, 4),
            (2, Size.TINY, Size.DIMINUTIVE, 2),
        ],
    )
    def test_rule(self, rating: int, current: Size, target: Size, expected: int) -> None:
        assert rescaled_armor_rating(rating, current, target) == expected


class TestExistingSource:
    """Tests for reading the active source from flags."""

    def test_clean(self, actor: CharacterRecord) -> None:
        assert existing_source(actor, "shapechanger") is None

    def test_snapshot(self, actor: CharacterRecord) -> None:
        flagged = actor.model_copy(update={"flags": {"shapechanger": {"source": "Enlarge Person"}}})
        assert existing_source(flagged, "shapechanger") == "Enlarge Person"

    def test_unreadable_flag_still_counts(self, actor: CharacterRecord) -> None:
        flagged = actor.model_copy(update={"flags": {"shapechanger": "garbage"}})
        assert existing_source(flagged, "shapechanger") == "shapechanger"


# =============================================================================
# Apply
# =============================================================================


class TestApplyBuff:
    """Tests for applying size-change buffs."""

    @pytest.mark.asyncio
    async def test_reduce_person(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(actor, SpellKind.REDUCE_PERSON)

        snapshot = await apply_transformation(store, actor.id, plan, settings=settings)
        record = await store.get(actor.id)

        assert record.traits.size is Size.SMALL
        buff = record.find_buff("Reduce Person")
        assert buff is not None and buff.active
        assert [(c.sub_target, c.value) for c in buff.changes] == [
            ("str", -2),
            ("dex", 2),
            (CARRY_STRENGTH, 2),
            (CARRY_MULTIPLIER, pytest.approx(1 / 3)),
        ]
        assert record.ability_total(Ability.STR) == 14
        assert record.carrying_capacity == pytest.approx(actor.carrying_capacity)
        assert record.flags["shapechanger"] == {
            "source": "Reduce Person",
            "buffName": "Reduce Person",
            "kind": "reduce_person",
            "size": "medium",
            "armor": [],
            "data": {},
            "itemsCreated": [],
        }
        assert snapshot.to_flag() == record.flags["shapechanger"]

    @pytest.mark.asyncio
    async def test_tiny_actor_armor_doubles(
        self, store: InMemoryCharacterStore, tiny_actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(tiny_actor, SpellKind.ENLARGE_PERSON)

        snapshot = await apply_transformation(store, tiny_actor.id, plan, settings=settings)
        record = await store.get(tiny_actor.id)

        assert record.traits.size is Size.SMALL
        assert _armor_values(record) == {"armor-1": 8, "shield-1": 2}
        assert [(a.item_id, a.original_armor_rating) for a in snapshot.armor] == [
            ("armor-1", 4),
            ("shield-1", 1),
        ]

    @pytest.mark.asyncio
    async def test_shrinking_into_tiny_halves_armor(
        self, store: InMemoryCharacterStore, character_factory: Any, settings: Settings
    ) -> None:
        gnome = character_factory(actor_id="actor-small", size=Size.SMALL, armor=5, shield=3)
        store.add(gnome)

        await apply_transformation(
            store, gnome.id, buff_plan(gnome, SpellKind.REDUCE_PERSON), settings=settings
        )
        record = await store.get(gnome.id)

        assert record.traits.size is Size.TINY
        assert _armor_values(record) == {"armor-1": 2, "shield-1": 1}

    @pytest.mark.asyncio
    async def test_medium_actor_armor_untouched(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(actor, SpellKind.ENLARGE_PERSON)

        snapshot = await apply_transformation(store, actor.id, plan, settings=settings)
        record = await store.get(actor.id)

        assert snapshot.armor == ()
        assert _armor_values(record) == {"armor-1": 4, "shield-1": 2}

    @pytest.mark.asyncio
    async def test_overrides_recorded(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(actor, SpellKind.ANIMAL_GROWTH)

        snapshot = await apply_transformation(store, actor.id, plan, settings=settings)
        record = await store.get(actor.id)

        assert record.traits.dr == "10/magic"
        assert snapshot.data == {"traits.dr": ""}

    @pytest.mark.asyncio
    async def test_already_transformed(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        await apply_transformation(
            store, actor.id, buff_plan(actor, SpellKind.ENLARGE_PERSON), settings=settings
        )
        before = store.document(actor.id)

        with pytest.raises(AlreadyTransformedError) as exc_info:
            await apply_transformation(
                store, actor.id, buff_plan(actor, SpellKind.REDUCE_PERSON), settings=settings
            )

        assert exc_info.value.source == "Enlarge Person"
        assert exc_info.value.actor_name == "Valeros"
        assert store.document(actor.id) == before

    @pytest.mark.asyncio
    async def test_buff_reused_on_reapply(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(actor, SpellKind.ENLARGE_PERSON)
        await apply_transformation(store, actor.id, plan, settings=settings)
        first = (await store.get(actor.id)).find_buff("Enlarge Person")
        await revert(store, actor.id, settings=settings)

        await apply_transformation(store, actor.id, plan, settings=settings)
        record = await store.get(actor.id)

        buffs = [item for item in record.items if isinstance(item, BuffItem)]
        assert len(buffs) == 1
        assert first is not None and buffs[0].id == first.id
        assert buffs[0].active
        assert len(buffs[0].changes) == 4


class TestApplyPolymorph:
    """Tests for applying polymorph plans."""

    @pytest.mark.asyncio
    async def test_wolf(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = polymorph_plan(actor, get_form("Wolf"), SpellKind.BEAST_SHAPE, 1, settings=settings)

        snapshot = await apply_transformation(store, actor.id, plan, settings=settings)
        record = await store.get(actor.id)

        attacks = [item for item in record.items if isinstance(item, AttackItem)]
        assert [a.name for a in attacks] == ["Bite (Beast Shape)"]
        assert snapshot.items_created == (attacks[0].id,)
        assert record.speed.land == 50
        assert [s.kind.value for s in record.traits.senses] == ["low_light_vision", "scent"]
        assert snapshot.data["speed"]["land"] == 30
        assert snapshot.data["traits.senses"] == []
        assert record.ability_total(Ability.STR) == 18
        assert record.natural_armor == 2

    @pytest.mark.asyncio
    async def test_snapshot_written_last_on_failure(
        self, actor: CharacterRecord, settings: Settings
    ) -> None:
        store = FailingFlagStore([actor])
        original = store.document(actor.id)
        plan = polymorph_plan(
            actor, get_form("Leopard"), SpellKind.BEAST_SHAPE, 3, settings=settings
        )

        with pytest.raises(TransformationError) as exc_info:
            await apply_transformation(store, actor.id, plan, settings=settings)

        assert isinstance(exc_info.value.__cause__, StorageError)
        assert exc_info.value.details["actor_id"] == actor.id
        assert store.document(actor.id) == original

    @pytest.mark.asyncio
    async def test_rollback_restores_rescaled_armor(
        self, tiny_actor: CharacterRecord, settings: Settings
    ) -> None:
        store = FailingFlagStore([tiny_actor])
        original = store.document(tiny_actor.id)

        with pytest.raises(TransformationError):
            await apply_transformation(
                store,
                tiny_actor.id,
                buff_plan(tiny_actor, SpellKind.ENLARGE_PERSON),
                settings=settings,
            )

        record = await store.get(tiny_actor.id)
        assert _armor_values(record) == {"armor-1": 4, "shield-1": 1}
        assert not any(isinstance(item, BuffItem) for item in record.items)
        assert store.document(tiny_actor.id) == original

    @pytest.mark.asyncio
    async def test_unknown_actor(
        self, store: InMemoryCharacterStore, actor: CharacterRecord, settings: Settings
    ) -> None:
        plan = buff_plan(actor, SpellKind.ENLARGE_PERSON)

        with pytest.raises(StorageError):
            await apply_transformation(store, "nobody", plan, settings=settings)

