"""Integration tests for apply and revert across the whole catalog.

Every form a spell level offers is applied to a stored character and then
reverted; the character must come back exactly as it was, apart from the
deactivated buff left behind for reuse.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from shapechanger.catalog import get_form
from shapechanger.catalog.gating import GATING
from shapechanger.core.config import Settings
from shapechanger.engine.applier import apply_transformation
from shapechanger.engine.buffs import buff_plan
from shapechanger.engine.polymorph import polymorph_plan
from shapechanger.engine.resolver import filter_catalog
from shapechanger.engine.revert import revert
from shapechanger.models import BuffItem, CharacterRecord
from shapechanger.models.enums import Size, SpellKind
from shapechanger.models.forms import FormDefinition
from shapechanger.service import ShapechangerService
from shapechanger.storage.database import SQLiteCharacterStore
from shapechanger.storage.store import InMemoryCharacterStore


SIZE_BUFFS = [
    SpellKind.ENLARGE_PERSON,
    SpellKind.REDUCE_PERSON,
    SpellKind.ANIMAL_GROWTH,
    SpellKind.LEGENDARY_PROPORTIONS,
    SpellKind.FRIGHTFUL_ASPECT,
]

POLYMORPH_CASES = [
    pytest.param(kind, level, form, id=f"{kind.value}-{level}-{form.name}")
    for kind, gating in GATING.items()
    for level in sorted(gating.levels)
    for form in filter_catalog(kind, level)
]


def _without_buffs(document: dict[str, Any]) -> dict[str, Any]:
    result = dict(document)
    result["items"] = [item for item in document["items"] if item.get("type") != "buff"]
    return result


async def _round_trip(
    store: InMemoryCharacterStore,
    actor: CharacterRecord,
    plan: Any,
    settings: Settings,
) -> None:
    original = store.document(actor.id)

    await apply_transformation(store, actor.id, plan, settings=settings)
    transformed = await store.get(actor.id)
    assert transformed.traits.size is plan.new_size
    assert transformed.carrying_capacity == pytest.approx(actor.carrying_capacity)

    await revert(store, actor.id, settings=settings)
    restored = store.document(actor.id)
    assert _without_buffs(restored) == original
    buffs = [i for i in (await store.get(actor.id)).items if isinstance(i, BuffItem)]
    assert len(buffs) == 1 and not buffs[0].active


# =============================================================================
# Round Trips
# =============================================================================


class TestRoundTrip:
    """Apply then revert leaves the character unchanged."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", SIZE_BUFFS)
    @pytest.mark.parametrize("who", ["actor", "tiny_actor"])
    async def test_size_buffs(
        self,
        kind: SpellKind,
        who: str,
        store: InMemoryCharacterStore,
        settings: Settings,
        request: pytest.FixtureRequest,
    ) -> None:
        target: CharacterRecord = request.getfixturevalue(who)
        plan = buff_plan(target, kind, caster_level=9)

        await _round_trip(store, target, plan, settings)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind,level,form", POLYMORPH_CASES)
    async def test_polymorph_forms(
        self,
        kind: SpellKind,
        level: int,
        form: FormDefinition,
        store: InMemoryCharacterStore,
        actor: CharacterRecord,
        settings: Settings,
    ) -> None:
        plan = polymorph_plan(actor, form, kind, level, image="forms/x.png", settings=settings)

        await _round_trip(store, actor, plan, settings)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("form_name", ["Small Air Elemental", "Medium Fire Elemental"])
    async def test_tiny_caster_armor(
        self,
        form_name: str,
        store: InMemoryCharacterStore,
        tiny_actor: CharacterRecord,
        settings: Settings,
    ) -> None:
        level = 1 if form_name.startswith("Small") else 2
        plan = polymorph_plan(
            tiny_actor, get_form(form_name), SpellKind.ELEMENTAL_BODY, level, settings=settings
        )

        await apply_transformation(store, tiny_actor.id, plan, settings=settings)
        record = await store.get(tiny_actor.id)
        assert {i.id: i.armor_value for i in record.armor_items} == {"armor-1": 8, "shield-1": 2}

        await revert(store, tiny_actor.id, settings=settings)
        record = await store.get(tiny_actor.id)
        assert {i.id: i.armor_value for i in record.armor_items} == {"armor-1": 4, "shield-1": 1}


# =============================================================================
# Invariants
# =============================================================================


class TestInvariants:
    """Whole-system properties of the engine."""

    @pytest.mark.parametrize("kind,level,form", POLYMORPH_CASES)
    def test_plans_deterministic(
        self,
        kind: SpellKind,
        level: int,
        form: FormDefinition,
        actor: CharacterRecord,
        settings: Settings,
    ) -> None:
        first = polymorph_plan(actor, form, kind, level, settings=settings)
        second = polymorph_plan(actor, form, kind, level, settings=settings)

        assert first == second

    @pytest.mark.parametrize(
        "size,kind,expected",
        [
            (Size.COLOSSAL, SpellKind.ENLARGE_PERSON, Size.COLOSSAL),
            (Size.FINE, SpellKind.REDUCE_PERSON, Size.FINE),
            (Size.GARGANTUAN, SpellKind.LEGENDARY_PROPORTIONS, Size.COLOSSAL),
        ],
    )
    def test_size_clamped(
        self, size: Size, kind: SpellKind, expected: Size, character_factory: Any
    ) -> None:
        plan = buff_plan(character_factory(size=size), kind)

        assert plan.new_size is expected

    @pytest.mark.asyncio
    async def test_one_transformation_at_a_time(
        self,
        store: InMemoryCharacterStore,
        actor: CharacterRecord,
        settings: Settings,
        notifier: Any,
    ) -> None:
        service = ShapechangerService(
            store, selection=lambda: [actor], notifier=notifier, settings=settings
        )
        assert (await service.plant_shape(1, "Myceloid")).success

        refusals = [
            await service.enlarge_person(),
            await service.beast_shape(1, "Wolf"),
            await service.frightful_aspect(10),
            await service.elemental_body(1, "Small Earth Elemental"),
        ]

        assert not any(result.success for result in refusals)
        record = await store.get(actor.id)
        assert sum(isinstance(i, BuffItem) and i.active for i in record.items) == 1
        assert record.flags["shapechanger"]["source"] == "Plant Shape"


# =============================================================================
# Persistence
# =============================================================================


class TestSQLiteRoundTrip:
    """Full service flow over the SQLite store."""

    @pytest.mark.asyncio
    async def test_beast_shape_survives_reopen(
        self,
        tmp_path: Path,
        actor: CharacterRecord,
        settings: Settings,
        notifier: Any,
    ) -> None:
        db_path = tmp_path / "characters.db"
        store = SQLiteCharacterStore(db_path)
        store.add(actor)
        service = ShapechangerService(
            store, selection=lambda: [actor], notifier=notifier, settings=settings
        )

        assert (await service.beast_shape(3, "Leopard")).success

        reopened = SQLiteCharacterStore(db_path)
        transformed = await reopened.get(actor.id)
        assert transformed.flags["shapechanger"]["source"] == "Beast Shape"

        service.store = reopened
        assert (await service.revert()).success
        restored = await SQLiteCharacterStore(db_path).get(actor.id)
        assert restored.speed == actor.speed
        assert restored.traits == actor.traits
        assert restored.flags == {}
