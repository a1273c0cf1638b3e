"""Tests for display text lookup."""

from __future__ import annotations

from shapechanger.core.i18n import DEFAULT_STRINGS, DictLocalizer, Localizer


class TestDictLocalizer:
    """Tests for the mapping-backed localizer."""

    def test_default_lookup(self) -> None:
        assert DictLocalizer().localize("UI.Senses") == "Senses"

    def test_formats_placeholders(self) -> None:
        text = DictLocalizer().localize("Warn.NotTransformed", name="Valeros")
        assert text == "Valeros is not under any change effects"

    def test_unknown_key_falls_back_to_last_segment(self) -> None:
        assert DictLocalizer().localize("UI.Tremorsense") == "Tremorsense"

    def test_overrides_layer_over_defaults(self) -> None:
        """Overrides replace single entries; other defaults stay."""
        localizer = DictLocalizer({"UI.None": "aucun"})

        assert localizer.localize("UI.None") == "aucun"
        assert localizer.localize("UI.Senses") == DEFAULT_STRINGS["UI.Senses"]

    def test_satisfies_protocol(self) -> None:
        assert isinstance(DictLocalizer(), Localizer)

