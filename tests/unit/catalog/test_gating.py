"""Tests for the per-level gating tables."""

from __future__ import annotations

import pytest

from shapechanger.catalog.gating import (
    BEAST_SHAPE,
    ELEMENTAL_BODY,
    GATING,
    PLANT_SHAPE,
    gating_for,
)
from shapechanger.core.exceptions import CatalogError
from shapechanger.models.enums import (
    DefenseCategory,
    FormFamily,
    MovementMode,
    SenseKind,
    Size,
    SpecialAbility,
    SpellKind,
)


class TestSpellGating:
    """Tests for SpellGating lookups."""

    def test_max_levels(self) -> None:
        assert BEAST_SHAPE.max_level == 4
        assert ELEMENTAL_BODY.max_level == 4
        assert PLANT_SHAPE.max_level == 3

    def test_unknown_level(self) -> None:
        with pytest.raises(CatalogError) as exc_info:
            PLANT_SHAPE.gate(4)
        assert exc_info.value.details["invalid_value"] == 4

    def test_gating_for_buff(self) -> None:
        with pytest.raises(CatalogError):
            gating_for(SpellKind.ENLARGE_PERSON)

    @pytest.mark.parametrize(
        "category,level,expected",
        [
            (DefenseCategory.ENERGY_RESISTANCE, 1, False),
            (DefenseCategory.ENERGY_RESISTANCE, 2, True),
            (DefenseCategory.DAMAGE_REDUCTION, 2, False),
            (DefenseCategory.DAMAGE_REDUCTION, 3, True),
            (DefenseCategory.REGENERATION, 3, True),
            (DefenseCategory.DAMAGE_IMMUNITY, 3, False),
        ],
    )
    def test_plant_thresholds(
        self, category: DefenseCategory, level: int, expected: bool
    ) -> None:
        assert PLANT_SHAPE.allows(category, level) is expected

    def test_beast_shape_never_grants_resistance(self) -> None:
        assert not any(
            BEAST_SHAPE.allows(DefenseCategory.ENERGY_RESISTANCE, level) for level in range(1, 5)
        )


class TestLevelGates:
    """Tests for what individual levels allow."""

    def test_beast_shape_1(self) -> None:
        gate = BEAST_SHAPE.gate(1)
        assert gate.forms == {FormFamily.ANIMAL: frozenset({Size.SMALL, Size.MEDIUM})}
        assert gate.senses[SenseKind.DARKVISION] == 60
        assert SenseKind.BLINDSENSE not in gate.senses
        assert gate.speed_caps[MovementMode.BURROW] == 0

    def test_elemental_caps_rise_at_four(self) -> None:
        assert ELEMENTAL_BODY.gate(3).speed_caps[MovementMode.FLY] == 60
        assert ELEMENTAL_BODY.gate(4).speed_caps[MovementMode.FLY] == 120

    def test_plant_shape_uncapped(self) -> None:
        assert PLANT_SHAPE.gate(3).speed_caps == {}

    @pytest.mark.parametrize("kind", list(GATING))
    def test_levels_only_add(self, kind: SpellKind) -> None:
        """Each level allows at least what the previous level did."""
        gating = GATING[kind]
        levels = sorted(gating.levels)
        for lower, higher in zip(levels, levels[1:]):
            low, high = gating.gate(lower), gating.gate(higher)
            assert low.specials <= high.specials
            assert set(low.senses) <= set(high.senses)
            for family, sizes in low.forms.items():
                assert sizes <= high.forms[family]
            for mode, cap in low.speed_caps.items():
                assert high.speed_caps.get(mode, cap) >= cap

    def test_trample_needs_plant_shape_3(self) -> None:
        assert SpecialAbility.TRAMPLE not in PLANT_SHAPE.gate(2).specials
        assert SpecialAbility.TRAMPLE in PLANT_SHAPE.gate(3).specials

    def test_elemental_body_allows_every_special(self) -> None:
        assert ELEMENTAL_BODY.gate(1).specials == frozenset(SpecialAbility)
