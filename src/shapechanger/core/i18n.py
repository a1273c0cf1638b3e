"""String lookup for preview text and user-facing warnings.

Display text is looked up by symbolic key so a host can supply its own
translations. Nothing in the engine branches on the returned text.

Example:
    >>> localizer = DictLocalizer()
    >>> localizer.localize("UI.Senses")
    'Senses'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


DEFAULT_STRINGS: dict[str, str] = {
    # Preview section labels
    "UI.BaseSizeAdjust": "Base Size Adjustment",
    "UI.AbilityScores": "Ability Scores",
    "UI.Attacks": "Attacks",
    "UI.SpecialAttacks": "Special Attacks",
    "UI.Speeds": "Speeds",
    "UI.Senses": "Senses",
    "UI.SpecialAbilities": "Special Abilities",
    "UI.EnergyResistances": "Energy Resistances",
    "UI.Vulnerabilities": "Vulnerabilities",
    "UI.DamageImmunities": "Damage Immunities",
    "UI.DamageResistances": "Damage Reduction",
    "UI.Regeneration": "Regeneration",
    "UI.Size": "Size",
    "UI.SpellResistance": "Spell Resistance",
    # Fragments
    "UI.None": "none",
    "UI.Plus": "plus",
    "UI.or": "or",
    "UI.ft": "ft",
    "UI.NaturalAC": "Natural AC",
    # Warnings
    "Warn.NoSelection": "No token selected",
    "Warn.TooManySelected": "Too many actors selected. Choose one token.",
    "Warn.NotTransformed": "{name} is not under any change effects",
    "Warn.AlreadyTransformed": "{name} is already under the effects of a change from {source}",
    "Warn.ImagePermission": (
        "To enable token image switching, the user must be allowed to browse the image folder"
    ),
    # Results
    "Info.Applied": "{name} is now under the effects of {source}",
    "Info.Reverted": "{name} has returned to normal",
}
"""English display text keyed by symbolic name."""


@runtime_checkable
class Localizer(Protocol):
    """Maps a symbolic key to display text."""

    def localize(self, key: str, **kwargs: object) -> str:
        """Return display text for ``key`` with ``kwargs`` substituted."""
        ...


class DictLocalizer:
    """Localizer backed by a plain mapping.

    Unknown keys fall back to the last dotted segment of the key itself so a
    missing translation degrades to readable text rather than an error.

    Attributes:
        strings: The lookup table in use.
    """

    def __init__(self, strings: Mapping[str, str] | None = None) -> None:
        """Initialize with an optional override table.

        Args:
            strings: Entries layered over the English defaults.
        """
        self.strings: dict[str, str] = {**DEFAULT_STRINGS, **(strings or {})}

    def localize(self, key: str, **kwargs: object) -> str:
        """Look up ``key`` and format it with ``kwargs``.

        Args:
            key: Symbolic string key, e.g. ``UI.Senses``.
            **kwargs: Values for ``{placeholder}`` fields.

        Returns:
            The display text.
        """
        template = self.strings.get(key, key.rsplit(".", 1)[-1])
        return template.format(**kwargs) if kwargs else template


__all__ = [
    "DEFAULT_STRINGS",
    "Localizer",
    "DictLocalizer",
]
