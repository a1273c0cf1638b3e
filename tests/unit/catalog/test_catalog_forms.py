"""Tests for the static form catalog and change sets."""

from __future__ import annotations

import pytest

from shapechanger.catalog import (
    BASE_SIZE_ADJUSTMENTS,
    FORMS,
    GATING,
    buff_definition,
    forms_for_kind,
    get_form,
    load_forms,
    polymorph_changes,
)
from shapechanger.catalog.change_sets import base_size_adjustment
from shapechanger.core.exceptions import CatalogError
from shapechanger.models.enums import Ability, FormFamily, Size, SpellKind


class TestFormCatalog:
    """Tests for the loaded catalog."""

    def test_names_unique(self) -> None:
        names = [form.name for form in FORMS]
        assert len(names) == len(set(names))

    def test_get_form(self) -> None:
        wolf = get_form("Wolf")
        assert wolf.family is FormFamily.ANIMAL
        assert wolf.size is Size.MEDIUM
        assert wolf.attacks[0].name == "Bite"

    def test_get_unknown_form(self) -> None:
        with pytest.raises(CatalogError) as exc_info:
            get_form("Tarrasque")
        assert exc_info.value.details["invalid_value"] == "Tarrasque"

    def test_elementals_named_by_size(self) -> None:
        air = get_form("Huge Air Elemental")
        assert air.family is FormFamily.AIR
        assert air.size is Size.HUGE
        assert air.attacks[0].count == 2

    def test_forms_for_kind(self) -> None:
        plants = forms_for_kind(SpellKind.PLANT_SHAPE)
        assert plants
        assert all(form.family is FormFamily.PLANT for form in plants)

        beasts = forms_for_kind(SpellKind.BEAST_SHAPE)
        assert {form.family for form in beasts} == {FormFamily.ANIMAL, FormFamily.MAGICAL_BEAST}

    def test_every_offered_form_has_a_change_set(self) -> None:
        """No catalog form fails at resolve time for lack of a change set."""
        for kind in GATING:
            for form in forms_for_kind(kind):
                assert polymorph_changes(kind, form.family, form.size)


class TestLoadForms:
    """Tests for catalog validation at load time."""

    def test_family_default(self) -> None:
        (form,) = load_forms([{"name": "Boar", "size": "medium"}], family=FormFamily.ANIMAL)
        assert form.family is FormFamily.ANIMAL

    def test_unknown_tag_fails_loudly(self) -> None:
        entry = {"name": "Boar", "size": "medium", "special": ["gore charge"]}
        with pytest.raises(CatalogError):
            load_forms([entry], family=FormFamily.ANIMAL)

    def test_malformed_entry(self) -> None:
        with pytest.raises(CatalogError) as exc_info:
            load_forms([{"name": "Boar"}], family=FormFamily.ANIMAL)
        assert exc_info.value.details["invalid_value"] == "Boar"
        assert exc_info.value.details["errors"]

    def test_duplicate_name(self) -> None:
        entry = {"name": "Boar", "size": "medium"}
        with pytest.raises(CatalogError):
            load_forms([entry, entry], family=FormFamily.ANIMAL)


class TestChangeSets:
    """Tests for polymorph change sets and buff definitions."""

    def test_beast_shape_medium_animal(self) -> None:
        changes = polymorph_changes(SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.MEDIUM)
        assert [(c.sub_target, c.value) for c in changes] == [("str", 2), ("nac", 2)]

    def test_missing_change_set(self) -> None:
        with pytest.raises(CatalogError):
            polymorph_changes(SpellKind.BEAST_SHAPE, FormFamily.ANIMAL, Size.COLOSSAL)

    def test_base_size_adjustment(self) -> None:
        """Medium casters need no adjustment; others shift to the medium baseline."""
        assert base_size_adjustment(Size.MEDIUM) == ()
        small = base_size_adjustment(Size.SMALL)
        assert [(c.ability, c.value) for c in small] == [
            (Ability.STR, 4),
            (Ability.DEX, -2),
            (Ability.CON, 2),
        ]
        assert all(c.modifier == "untyped" for c in small)
        assert Size.MEDIUM not in BASE_SIZE_ADJUSTMENTS

    def test_buff_definitions(self) -> None:
        enlarge = buff_definition(SpellKind.ENLARGE_PERSON)
        assert enlarge.size_steps == 1
        assert enlarge.absolute_size is None

        frightful = buff_definition(SpellKind.FRIGHTFUL_ASPECT)
        assert frightful.absolute_size is Size.LARGE
        assert str(frightful.damage_reduction) == "10/magic"

        legendary = buff_definition(SpellKind.LEGENDARY_PROPORTIONS)
        assert str(legendary.damage_reduction) == "10/adamantine"

    def test_polymorph_is_not_a_buff(self) -> None:
        with pytest.raises(CatalogError):
            buff_definition(SpellKind.BEAST_SHAPE)
